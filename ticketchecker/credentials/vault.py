"""Single-slot credential vault gated behind device authentication.

Usage::

    from ticketchecker.credentials import CredentialVault, MemorySecureStore

    vault = CredentialVault(store, authenticator)
    vault.save("user@example.com", "hunter2")
    result = await vault.authenticated_read()
    if result.ok:
        credential = result.value
    vault.clear()

The stored bytes are decoded *before* the user is asked to authenticate:
an empty or corrupt vault fails fast without a prompt, and authentication
failures are never reported as storage failures.
"""

import logging
from typing import TYPE_CHECKING, Optional

from pydantic import ValidationError

from ticketchecker.credentials.interfaces import DeviceAuthenticator, SecureStore
from ticketchecker.credentials.models import Credential
from ticketchecker.errors import ErrorCode, Result

if TYPE_CHECKING:
    from ticketchecker.config.schema_models import VaultSettings

logger = logging.getLogger(__name__)


def _redacted_summary(exc: ValidationError) -> str:
    """Describe decode errors by location and type only; never echo stored input."""
    parts = []
    for err in exc.errors(include_input=False, include_url=False):
        loc = ".".join(str(p) for p in err["loc"]) or "root"
        parts.append(f"{loc}: {err['msg']} [type={err['type']}]")
    return "; ".join(parts) or f"{exc.error_count()} validation error(s)"


class CredentialVault:
    """Stores exactly one :class:`Credential` under a fixed service/account key."""

    def __init__(
        self,
        store: SecureStore,
        authenticator: DeviceAuthenticator,
        settings: Optional["VaultSettings"] = None,
    ):
        if settings is None:
            from ticketchecker.config.schema_models import VaultSettings

            settings = VaultSettings()
        self._store = store
        self._authenticator = authenticator
        self.settings = settings

    @property
    def service_name(self) -> str:
        return self.settings.service_name

    @property
    def account(self) -> str:
        return self.settings.account

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------
    def save(self, email: str, password: str) -> bool:
        """Replace the stored credential.  Returns ``False`` on any failure."""
        try:
            data = Credential(email=email, password=password).to_bytes()
        except ValidationError as e:
            logger.error(f"Failed to encode credentials: {_redacted_summary(e)}")
            return False

        try:
            self._store.delete(self.service_name, self.account)
            stored = self._store.write(
                self.service_name, self.account, self.settings.access_policy, data
            )
        except Exception as e:
            logger.error(f"Error saving credentials to secure store: {e}")
            return False

        if stored:
            logger.info(f"Stored credentials for service '{self.service_name}'")
        else:
            logger.error(f"Secure store rejected credentials for '{self.service_name}'")
        return bool(stored)

    async def authenticated_read(self) -> Result[Credential]:
        """Load the stored credential and disclose it after authentication."""
        loaded = self.try_load_raw()
        if not loaded.ok:
            return loaded
        return await self.authenticate_and_disclose(loaded.unwrap())

    def clear(self) -> bool:
        """Delete the stored credential.  Deleting nothing still succeeds."""
        try:
            deleted = self._store.delete(self.service_name, self.account)
        except Exception as e:
            logger.error(f"Error clearing credentials from secure store: {e}")
            return False
        if deleted:
            logger.info(f"Cleared credentials for service '{self.service_name}'")
        return bool(deleted)

    # ------------------------------------------------------------------
    # Building blocks of authenticated_read
    # ------------------------------------------------------------------
    def try_load_raw(self) -> Result[Credential]:
        """Read and decode the stored entry without authenticating."""
        try:
            raw = self._store.read(self.service_name, self.account)
        except Exception as e:
            logger.error(f"Error reading credentials from secure store: {e}")
            return Result.fail(
                "Keychain error", error_code=ErrorCode.KEYCHAIN_ERROR, details=str(e)
            )

        if raw is None:
            return Result.fail("Keychain error", error_code=ErrorCode.KEYCHAIN_ERROR)

        try:
            return Result.success(Credential.from_bytes(raw))
        except ValidationError as e:
            logger.error("Stored credentials could not be decoded")
            return Result.fail(
                "Stored credentials could not be decoded",
                error_code=ErrorCode.DECODING_ERROR,
                details=_redacted_summary(e),
            )

    async def authenticate_and_disclose(self, credential: Credential) -> Result[Credential]:
        """Run the device challenge and return *credential* only if it passes."""
        policy = self.settings.auth_policy
        if not self._authenticator.can_evaluate(policy):
            return Result.fail(
                "Biometric authentication not available",
                error_code=ErrorCode.BIOMETRIC_NOT_AVAILABLE,
            )

        try:
            success, message = await self._authenticator.evaluate(
                policy, self.settings.auth_reason
            )
        except Exception as e:
            logger.info(f"Device authentication raised: {e}")
            success, message = False, str(e) or None

        if success:
            return Result.success(credential)
        if message:
            return Result.fail(message)
        return Result.fail("Authentication failed", error_code=ErrorCode.AUTH_FAILED)


def build_credential_vault(
    store: Optional[SecureStore] = None,
    authenticator: Optional[DeviceAuthenticator] = None,
    settings: Optional["VaultSettings"] = None,
) -> CredentialVault:
    """Wire a :class:`CredentialVault` from configuration.

    Without an explicit *store*, ``vault.store_path`` selects an
    :class:`EncryptedFileSecureStore` (keyed by ``vault.master_key``) and
    otherwise an in-memory store; both honour ``vault.passcode_set``.
    Without an *authenticator* the device is treated as having no
    evaluable policy.
    """
    from ticketchecker.credentials.authenticator import UnavailableAuthenticator
    from ticketchecker.credentials.secure_store import (
        EncryptedFileSecureStore,
        MemorySecureStore,
    )

    if settings is None:
        from ticketchecker.config.config_loader import config_loader

        settings = config_loader.get_vault_config()

    if store is None:
        if settings.store_path:
            store = EncryptedFileSecureStore(
                settings.store_path,
                settings.master_key,
                passcode_set=settings.passcode_set,
            )
        else:
            store = MemorySecureStore(passcode_set=settings.passcode_set)

    if authenticator is None:
        logger.warning("No device authenticator configured; reads will be refused")
        authenticator = UnavailableAuthenticator()

    return CredentialVault(store, authenticator, settings)
