"""
Security module for the task manager.

Provides password hashing, JWT access tokens and the standardized
API error responses.
"""

from .password import hash_password, verify_password, burn_password_check
from .jwt import (
    TokenError,
    TokenExpiredError,
    create_access_token,
    decode_access_token,
    get_jwt_secret,
)
from .api_errors import APIError, ErrorCode, register_exception_handlers

__all__ = [
    # Passwords
    "hash_password",
    "verify_password",
    "burn_password_check",
    # Tokens
    "TokenError",
    "TokenExpiredError",
    "create_access_token",
    "decode_access_token",
    "get_jwt_secret",
    # Errors
    "APIError",
    "ErrorCode",
    "register_exception_handlers",
]
