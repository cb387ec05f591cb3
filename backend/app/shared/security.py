"""
Password hashing for generated temporary passwords.

Raw passwords are returned to the caller once and never stored or logged.
"""

import secrets
import string

from passlib.context import CryptContext

pwd_context = CryptContext(
    schemes=["pbkdf2_sha256"],
    deprecated="auto",
)

TEMP_PASSWORD_ALPHABET = string.ascii_lowercase + string.digits


def generate_temporary_password(length: int = 10) -> str:
    """Random lowercase alphanumeric password."""
    return "".join(secrets.choice(TEMP_PASSWORD_ALPHABET) for _ in range(length))


def hash_password(password: str) -> str:
    """
    Hash a password.

    Raises:
        ValueError: If password is empty
    """
    if not password:
        raise ValueError("Password cannot be empty")
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    """Verify a password against a hash."""
    if not plain or not hashed:
        return False
    return pwd_context.verify(plain, hashed)
