"""Fernet encryption for Shopify access tokens stored on the stores table."""

import base64
import hashlib
from functools import lru_cache

from cryptography.fernet import Fernet, InvalidToken

from shopmetrics.core.config import settings


@lru_cache(maxsize=1)
def _get_fernet() -> Fernet:
    """Build a Fernet instance from a SHA-256 digest of the configured key.

    Rotating encryption_key makes previously stored tokens unreadable.
    """
    key_bytes = hashlib.sha256(settings.encryption_key.encode()).digest()
    return Fernet(base64.urlsafe_b64encode(key_bytes))


def encrypt_token(token: str) -> str:
    """Encrypt an access token for storage."""
    return _get_fernet().encrypt(token.encode()).decode()


def decrypt_token(encrypted: str) -> str:
    """Decrypt a stored access token.

    Raises:
        ValueError: If the value was not produced by encrypt_token with the
            current key.
    """
    try:
        return _get_fernet().decrypt(encrypted.encode()).decode()
    except InvalidToken as e:
        raise ValueError("Stored access token cannot be decrypted") from e
