"""
Password Utilities - bcrypt hashing and verification.

Passwords are never stored or logged in plain text; only the bcrypt hash
(which embeds its own salt and work factor) is persisted.
"""

import logging
from typing import Optional

import bcrypt

from config.settings import get_auth_settings

logger = logging.getLogger(__name__)

# bcrypt ignores input past 72 bytes and newer releases reject it outright
MAX_PASSWORD_BYTES = 72

_dummy_hash: Optional[str] = None


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: Plain text password
        rounds: Work factor; defaults to AUTH_BCRYPT_ROUNDS

    Returns:
        Hashed password string

    Raises:
        ValueError: If password is empty or too long
    """
    if not password:
        raise ValueError("Password cannot be empty")

    encoded = password.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password exceeds maximum length of {MAX_PASSWORD_BYTES} bytes")

    if rounds is None:
        rounds = get_auth_settings().bcrypt_rounds

    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(encoded, salt).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """
    Verify a password against its hash.

    Returns False for empty input, over-long input or a malformed hash.
    """
    if not password or not hashed:
        return False

    encoded = password.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        return False

    try:
        return bcrypt.checkpw(encoded, hashed.encode("utf-8"))
    except ValueError as e:
        logger.error(f"Password verification error: {e}")
        return False


def burn_password_check(password: str) -> None:
    """
    Spend the same work as a real verification.

    Called when the account does not exist so that "no such user" and
    "wrong password" take comparable time.
    """
    global _dummy_hash
    if _dummy_hash is None:
        _dummy_hash = hash_password("dummy-password-for-timing")
    verify_password(password or "x", _dummy_hash)
