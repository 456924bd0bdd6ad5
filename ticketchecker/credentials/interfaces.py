"""Capabilities the credential vault depends on.

The vault never talks to a platform API directly; it is handed a
:class:`SecureStore` and a :class:`DeviceAuthenticator`.  Bundled
implementations live in :mod:`ticketchecker.credentials.secure_store` and
:mod:`ticketchecker.credentials.authenticator`.
"""

from enum import Enum
from typing import Optional, Protocol, Tuple, runtime_checkable


class AccessPolicy(str, Enum):
    """When a stored secret may be decrypted."""

    WHEN_UNLOCKED = "when_unlocked"
    WHEN_UNLOCKED_THIS_DEVICE_ONLY = "when_unlocked_this_device_only"
    # Only readable while the device has a passcode/PIN; writes fail without one.
    WHEN_PASSCODE_SET_THIS_DEVICE_ONLY = "when_passcode_set_this_device_only"

    @property
    def requires_passcode(self) -> bool:
        return self is AccessPolicy.WHEN_PASSCODE_SET_THIS_DEVICE_ONLY


class AuthPolicy(str, Enum):
    """Which device-owner challenge to run."""

    # Biometrics, falling back to the device passcode.
    DEVICE_OWNER_AUTHENTICATION = "device_owner_authentication"
    DEVICE_OWNER_AUTHENTICATION_WITH_BIOMETRICS = (
        "device_owner_authentication_with_biometrics"
    )


@runtime_checkable
class SecureStore(Protocol):
    """Encrypted key/value storage addressed by ``(service, account)``."""

    def write(
        self, service: str, account: str, access_policy: AccessPolicy, data: bytes
    ) -> bool:
        ...

    def delete(self, service: str, account: str) -> bool:
        """Remove an entry.  Removing a missing entry counts as success."""
        ...

    def read(self, service: str, account: str) -> Optional[bytes]:
        ...


@runtime_checkable
class DeviceAuthenticator(Protocol):
    """Device-owner authentication (biometrics or passcode)."""

    def can_evaluate(self, policy: AuthPolicy) -> bool:
        ...

    async def evaluate(
        self, policy: AuthPolicy, reason: str
    ) -> Tuple[bool, Optional[str]]:
        """Run the challenge; returns ``(success, error_message)``."""
        ...
