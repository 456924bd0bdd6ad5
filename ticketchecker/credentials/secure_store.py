"""Bundled :class:`~ticketchecker.credentials.interfaces.SecureStore` backends.

``MemorySecureStore`` keeps entries in process memory and is what tests and
ephemeral sessions use.  ``EncryptedFileSecureStore`` persists each entry as
a Fernet-encrypted file::

    store = EncryptedFileSecureStore("~/.ticketchecker/vault", master_key)
    store.write("svc", "acct", AccessPolicy.WHEN_PASSCODE_SET_THIS_DEVICE_ONLY, b"...")
    store.read("svc", "acct")
    store.delete("svc", "acct")

Both honour the passcode access policy: a passcode-gated write fails when
the device has no passcode, and a passcode-gated entry reads as missing
once the passcode has been removed.
"""

import base64
import hashlib
import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Callable, Dict, Optional, Tuple, Union

from cryptography.fernet import InvalidToken

from ticketchecker.credentials.crypto import PBKDF2_ITERATIONS, decrypt, encrypt
from ticketchecker.credentials.interfaces import AccessPolicy

logger = logging.getLogger(__name__)

PasscodeState = Union[bool, Callable[[], bool]]

_FORMAT_VERSION = 1


def _passcode_is_set(state: PasscodeState) -> bool:
    return state() if callable(state) else bool(state)


class MemorySecureStore:
    """In-process secure store guarded by a lock."""

    def __init__(self, passcode_set: PasscodeState = True):
        self._passcode_set = passcode_set
        self._entries: Dict[Tuple[str, str], Tuple[AccessPolicy, bytes]] = {}
        self._lock = threading.Lock()

    def write(
        self, service: str, account: str, access_policy: AccessPolicy, data: bytes
    ) -> bool:
        if access_policy.requires_passcode and not _passcode_is_set(self._passcode_set):
            logger.warning(
                "Refusing passcode-gated write for %s/%s: no device passcode set",
                service,
                account,
            )
            return False
        with self._lock:
            if (service, account) in self._entries:
                # Writes never overwrite; replacement is delete-then-write.
                logger.error("Duplicate secure store entry for %s/%s", service, account)
                return False
            self._entries[(service, account)] = (access_policy, bytes(data))
        return True

    def delete(self, service: str, account: str) -> bool:
        with self._lock:
            self._entries.pop((service, account), None)
        return True

    def read(self, service: str, account: str) -> Optional[bytes]:
        with self._lock:
            entry = self._entries.get((service, account))
        if entry is None:
            return None
        policy, data = entry
        if policy.requires_passcode and not _passcode_is_set(self._passcode_set):
            return None
        return data


class EncryptedFileSecureStore:
    """One Fernet-encrypted file per ``(service, account)`` entry."""

    def __init__(
        self,
        directory: Union[str, Path],
        master_key: Optional[str],
        passcode_set: PasscodeState = True,
        iterations: int = PBKDF2_ITERATIONS,
    ):
        self.directory = Path(directory).expanduser()
        self._master_key = master_key or ""
        self._passcode_set = passcode_set
        self._iterations = iterations
        if not self._master_key:
            logger.warning(
                "Secure store master key not set: encrypted file store will be unavailable"
            )

    @property
    def available(self) -> bool:
        """True when the master key is configured."""
        return bool(self._master_key)

    def _entry_path(self, service: str, account: str) -> Path:
        digest = hashlib.sha256(f"{service}\0{account}".encode("utf-8")).hexdigest()
        return self.directory / f"{digest}.entry"

    def write(
        self, service: str, account: str, access_policy: AccessPolicy, data: bytes
    ) -> bool:
        if not self.available:
            logger.error("Secure store unavailable: master key not set")
            return False
        if access_policy.requires_passcode and not _passcode_is_set(self._passcode_set):
            logger.warning(
                "Refusing passcode-gated write for %s/%s: no device passcode set",
                service,
                account,
            )
            return False

        path = self._entry_path(service, account)
        if path.exists():
            logger.error("Duplicate secure store entry for %s/%s", service, account)
            return False

        token, salt = encrypt(data, self._master_key, self._iterations)
        payload = {
            "version": _FORMAT_VERSION,
            "access_policy": access_policy.value,
            "salt": base64.b64encode(salt).decode("ascii"),
            "token": token.decode("ascii"),
        }
        try:
            self.directory.mkdir(parents=True, exist_ok=True, mode=0o700)
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(payload, f)
                os.chmod(tmp_name, 0o600)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            logger.error(f"Error writing secure store entry {service}/{account}: {e}")
            return False
        return True

    def delete(self, service: str, account: str) -> bool:
        try:
            self._entry_path(service, account).unlink(missing_ok=True)
        except OSError as e:
            logger.error(f"Error deleting secure store entry {service}/{account}: {e}")
            return False
        return True

    def read(self, service: str, account: str) -> Optional[bytes]:
        """Return the decrypted bytes, or ``None`` if missing or unreadable."""
        if not self.available:
            return None
        path = self._entry_path(service, account)
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            logger.error(f"Error reading secure store entry {service}/{account}: {e}")
            return None

        try:
            policy = AccessPolicy(payload["access_policy"])
            salt = base64.b64decode(payload["salt"])
            token = payload["token"].encode("ascii")
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.error(f"Malformed secure store entry {service}/{account}: {e}")
            return None

        if policy.requires_passcode and not _passcode_is_set(self._passcode_set):
            logger.info(
                "Secure store entry %s/%s is inaccessible: no device passcode set",
                service,
                account,
            )
            return None

        try:
            return decrypt(token, salt, self._master_key, self._iterations)
        except InvalidToken:
            logger.error(
                f"Failed to decrypt secure store entry {service}/{account}; "
                "master key may have changed"
            )
            return None
