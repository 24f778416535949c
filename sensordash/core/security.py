# sensordash/core/security.py
"""
Password hashing and access-key generation.

Passwords are hashed with argon2id (argon2-cffi defaults). The stored
digest embeds its own parameters and salt, so verification needs nothing
but the digest and the candidate password.
"""
import base64
import secrets

from argon2 import PasswordHasher
from argon2.exceptions import (
    HashingError as Argon2HashingError,
    InvalidHashError,
    VerificationError,
)

from sensordash.core.config import get_settings
from sensordash.core.errors import HashingError

_hasher = PasswordHasher()


def hash_password(password: str) -> str:
    """
    Hash a plaintext password.

    Raises:
        HashingError: if argon2 fails internally.
    """
    try:
        return _hasher.hash(password)
    except Argon2HashingError as e:
        raise HashingError("Unable to hash password") from e


def verify_password(digest: str | None, password: str) -> bool:
    """
    Check a plaintext password against a stored digest.

    Missing or malformed digests count as "no match".
    """
    if not digest or password is None:
        return False
    try:
        return _hasher.verify(digest, password)
    except (VerificationError, InvalidHashError):
        return False


def check_needs_rehash(digest: str) -> bool:
    """True if the digest was produced with outdated argon2 parameters."""
    try:
        return _hasher.check_needs_rehash(digest)
    except InvalidHashError:
        return True


def create_access_key(length: int | None = None) -> str:
    """
    Generate an opaque access key: `length` base64 characters drawn
    from cryptographically secure random bytes.
    """
    if length is None:
        length = get_settings().ACCESS_KEY_LENGTH
    return base64.b64encode(secrets.token_bytes(length)).decode("ascii")[:length]
