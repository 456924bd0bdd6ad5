"""Single-slot credential vault.

Stores one email/password pair in an encrypted, access-controlled secure
store and only discloses it after a device-owner authentication challenge.
"""

from ticketchecker.credentials.authenticator import (
    PasscodeAuthenticator,
    UnavailableAuthenticator,
)
from ticketchecker.credentials.interfaces import (
    AccessPolicy,
    AuthPolicy,
    DeviceAuthenticator,
    SecureStore,
)
from ticketchecker.credentials.models import Credential
from ticketchecker.credentials.secure_store import (
    EncryptedFileSecureStore,
    MemorySecureStore,
)
from ticketchecker.credentials.vault import CredentialVault, build_credential_vault

__all__ = [
    "AccessPolicy",
    "AuthPolicy",
    "Credential",
    "CredentialVault",
    "DeviceAuthenticator",
    "EncryptedFileSecureStore",
    "MemorySecureStore",
    "PasscodeAuthenticator",
    "SecureStore",
    "UnavailableAuthenticator",
    "build_credential_vault",
]
