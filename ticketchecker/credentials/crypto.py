"""
Encryption helpers for the on-disk secure store and the passcode check.

Uses Fernet symmetric encryption with PBKDF2 key derivation.
Each entry gets a unique random salt so that even with a shared
master key, derived keys differ per entry.
"""

import base64
import hmac
import logging
import os

from cryptography.fernet import Fernet
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

logger = logging.getLogger(__name__)

PBKDF2_ITERATIONS = 480_000
SALT_BYTES = 16


def _pbkdf2(secret: str, salt: bytes, iterations: int) -> bytes:
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=32,
        salt=salt,
        iterations=iterations,
    )
    return kdf.derive(secret.encode("utf-8"))


def derive_key(master_key: str, salt: bytes, iterations: int = PBKDF2_ITERATIONS) -> bytes:
    """Derive a Fernet-compatible key from *master_key* and *salt*.

    Args:
        master_key: The master key string (typically from config ``vault.master_key``).
        salt: A random 16-byte salt unique to each entry.

    Returns:
        A 32-byte URL-safe base64-encoded key suitable for ``Fernet()``.
    """
    return base64.urlsafe_b64encode(_pbkdf2(master_key, salt, iterations))


def encrypt(data: bytes, master_key: str, iterations: int = PBKDF2_ITERATIONS) -> tuple[bytes, bytes]:
    """Encrypt *data* and return ``(token, salt)``.

    A fresh 16-byte salt is generated for each call.
    """
    salt = os.urandom(SALT_BYTES)
    key = derive_key(master_key, salt, iterations)
    return Fernet(key).encrypt(data), salt


def decrypt(token: bytes, salt: bytes, master_key: str, iterations: int = PBKDF2_ITERATIONS) -> bytes:
    """Decrypt *token* using *salt* and *master_key*.

    Raises:
        cryptography.fernet.InvalidToken: If the key is wrong or data is corrupt.
    """
    key = derive_key(master_key, salt, iterations)
    return Fernet(key).decrypt(token)


def hash_passcode(passcode: str, iterations: int = PBKDF2_ITERATIONS) -> str:
    """Return ``"<iterations>$<salt_b64>$<hash_b64>"`` for *passcode*."""
    salt = os.urandom(SALT_BYTES)
    digest = _pbkdf2(passcode, salt, iterations)
    return "$".join(
        [
            str(iterations),
            base64.urlsafe_b64encode(salt).decode("ascii"),
            base64.urlsafe_b64encode(digest).decode("ascii"),
        ]
    )


def verify_passcode(passcode: str, encoded: str) -> bool:
    """Constant-time check of *passcode* against a :func:`hash_passcode` value."""
    try:
        iterations_str, salt_b64, digest_b64 = encoded.split("$")
        iterations = int(iterations_str)
        salt = base64.urlsafe_b64decode(salt_b64)
        expected = base64.urlsafe_b64decode(digest_b64)
    except ValueError:
        logger.error("Malformed passcode hash; refusing to verify")
        return False
    return hmac.compare_digest(_pbkdf2(passcode, salt, iterations), expected)
