"""
Password Storage
================

bcrypt hashes for the passwords of locally registered profiles.
"""

from passlib.context import CryptContext

from shared.config import settings


# bcrypt ignores everything past 72 bytes; sign-up rejects longer passwords
MAX_PASSWORD_BYTES = 72

_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=4 if settings.is_testing else 12,
)


def hash_password(password: str) -> str:
    """Hash a password for storage on a profile."""
    return _context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Check a login attempt against a stored hash.

    Args:
        plain_password: Password as typed
        hashed_password: Hash from the profile

    Returns:
        True on a match
    """
    return _context.verify(plain_password, hashed_password)


def needs_rehash(hashed_password: str) -> bool:
    """Whether a stored hash uses a cost other than the configured one."""
    return _context.needs_update(hashed_password)
