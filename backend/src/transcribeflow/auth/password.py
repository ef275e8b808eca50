"""Password hashing and verification using Argon2id

This module provides secure password hashing using Argon2id with OWASP-recommended
parameters and a global PASSWORD_PEPPER for additional security.

OWASP Parameters:
- Memory cost: 65536 KB (64 MB)
- Time cost: 3 iterations
- Parallelism: 4 threads
"""

from argon2 import PasswordHasher, Type
from argon2.exceptions import VerifyMismatchError, VerificationError, InvalidHashError

from ..config import get_settings


# OWASP recommended parameters for Argon2id
_hasher = PasswordHasher(
    memory_cost=65536,  # 64 MB
    time_cost=3,
    parallelism=4,
    hash_len=32,
    salt_len=16,
    type=Type.ID  # Argon2id variant
)


def _get_pepper() -> str:
    """Get PASSWORD_PEPPER from settings.

    Raises:
        ValueError: If PASSWORD_PEPPER is empty
    """
    pepper = get_settings().PASSWORD_PEPPER
    if not pepper:
        raise ValueError("PASSWORD_PEPPER is not set")
    return pepper


def hash_password(password: str) -> str:
    """Hash a password using Argon2id with global pepper.

    The password is combined with PASSWORD_PEPPER before hashing. The pepper
    is server-side only and not stored in the database.

    Args:
        password: Plain text password to hash

    Returns:
        str: Argon2id hash string (format: $argon2id$v=19$m=65536,t=3,p=4$...$...)

    Raises:
        ValueError: If PASSWORD_PEPPER is not set or password is empty
    """
    if not password:
        raise ValueError("Password cannot be empty")

    peppered_password = password + _get_pepper()
    return _hasher.hash(peppered_password)


def verify_password(password: str, hash: str) -> bool:
    """Verify a password against an Argon2id hash.

    Args:
        password: Plain text password to verify
        hash: Argon2id hash to verify against

    Returns:
        bool: True if password matches hash, False otherwise
    """
    if not password or not hash:
        return False

    peppered_password = password + _get_pepper()

    try:
        _hasher.verify(hash, peppered_password)
        return True
    except (VerifyMismatchError, VerificationError, InvalidHashError):
        return False
