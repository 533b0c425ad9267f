"""At-rest encryption for the response cache.

The cache is wrapped in a Fernet token (AES-128-CBC with HMAC-SHA256). The key
is derived from a passphrase with PBKDF2-HMAC-SHA256, so the same passphrase
always opens the same file.
"""

import base64
import platform
from functools import lru_cache

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from public_ip_lookup.config import APP_NAME
from public_ip_lookup.errors import CacheEncryptionError

KDF_SALT = b"public-ip-lookup/response-cache"
KDF_ITERATIONS = 200_000


def default_passphrase() -> str:
    """Passphrase used when none is configured: the application and host names."""
    return f"{APP_NAME}@{platform.node()}"


@lru_cache(maxsize=8)
def _fernet(passphrase: str) -> Fernet:
    kdf = PBKDF2HMAC(algorithm=hashes.SHA256(), length=32, salt=KDF_SALT, iterations=KDF_ITERATIONS)
    return Fernet(base64.urlsafe_b64encode(kdf.derive(passphrase.encode("utf-8"))))


def encrypt(data: bytes, passphrase: str) -> bytes:
    return _fernet(passphrase).encrypt(data)


def decrypt(token: bytes, passphrase: str) -> bytes:
    try:
        return _fernet(passphrase).decrypt(token)
    except InvalidToken as exc:
        raise CacheEncryptionError("Cache file could not be decrypted (wrong passphrase or corrupted file)") from exc
