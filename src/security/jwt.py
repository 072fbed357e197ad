"""
JWT Token Handling

Access tokens are HS256 JWTs carrying the user ID as ``sub``. They are
verified purely by signature and expiry; nothing is looked up per request,
so a token outlives its user until it expires.
"""

import logging
import secrets
import warnings
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt

from config.settings import (
    AuthSettings,
    MIN_JWT_SECRET_LENGTH,
    get_auth_settings,
    get_settings,
)

logger = logging.getLogger(__name__)

TOKEN_TYPE_ACCESS = "access"


class TokenError(Exception):
    """Token could not be decoded, has a bad signature or bad claims."""


class TokenExpiredError(TokenError):
    """Token signature is valid but ``exp`` has passed."""


# =============================================================================
# SECRET
# =============================================================================

_dev_secret_cache: Optional[str] = None


def get_jwt_secret(auth_settings: Optional[AuthSettings] = None) -> str:
    """
    Get the JWT signing secret.

    SECURITY: In production JWT_SECRET must be set. In development a random
    per-process secret is generated with a warning, so tokens do not survive
    a restart.
    """
    global _dev_secret_cache
    auth_settings = auth_settings or get_auth_settings()
    secret = auth_settings.jwt_secret

    if secret:
        if len(secret) < MIN_JWT_SECRET_LENGTH:
            raise ValueError(f"JWT_SECRET must be at least {MIN_JWT_SECRET_LENGTH} characters")
        return secret

    if get_settings().is_production:
        raise RuntimeError(
            "CRITICAL SECURITY ERROR: JWT_SECRET environment variable is required in production. "
            "Generate with: python -c \"import secrets; print(secrets.token_hex(32))\""
        )

    if _dev_secret_cache is None:
        warnings.warn(
            "JWT_SECRET not set - using generated development secret. "
            "Set JWT_SECRET environment variable for production.",
            UserWarning
        )
        _dev_secret_cache = f"DEV-ONLY-{secrets.token_hex(32)}"
    return _dev_secret_cache


# =============================================================================
# TOKEN CREATION
# =============================================================================

def create_access_token(
    user_id: str,
    expires_delta: Optional[timedelta] = None,
    auth_settings: Optional[AuthSettings] = None,
) -> str:
    """
    Create a signed access token for a user.

    Args:
        user_id: Identifier embedded as the ``sub`` claim
        expires_delta: Custom lifetime; defaults to AUTH_ACCESS_TOKEN_EXPIRE_MINUTES
        auth_settings: Settings override (tests)

    Returns:
        JWT token string
    """
    auth_settings = auth_settings or get_auth_settings()
    if expires_delta is None:
        expires_delta = timedelta(minutes=auth_settings.access_token_expire_minutes)

    issued_at = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "iat": issued_at,
        "exp": issued_at + expires_delta,
        "type": TOKEN_TYPE_ACCESS,
    }

    return jwt.encode(
        payload,
        get_jwt_secret(auth_settings),
        algorithm=auth_settings.jwt_algorithm,
    )


# =============================================================================
# TOKEN DECODING
# =============================================================================

def decode_access_token(
    token: str,
    auth_settings: Optional[AuthSettings] = None,
) -> Dict[str, Any]:
    """
    Decode and validate an access token.

    Returns:
        Token payload as dictionary

    Raises:
        TokenExpiredError: If the token has expired
        TokenError: If the token is malformed, forged or not an access token
    """
    auth_settings = auth_settings or get_auth_settings()

    try:
        payload = jwt.decode(
            token,
            get_jwt_secret(auth_settings),
            algorithms=[auth_settings.jwt_algorithm],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise TokenExpiredError("Token expired") from e
    except jwt.InvalidTokenError as e:
        raise TokenError(str(e)) from e

    if payload.get("type") != TOKEN_TYPE_ACCESS:
        raise TokenError("Not an access token")
    if not isinstance(payload.get("sub"), str) or not payload["sub"]:
        raise TokenError("Token subject is missing")

    return payload


def get_token_expiry(payload: Dict[str, Any]) -> Optional[datetime]:
    """Expiration time of a decoded payload (UTC)."""
    return _claim_time(payload, "exp")


def get_token_issued_at(payload: Dict[str, Any]) -> Optional[datetime]:
    """Issue time of a decoded payload (UTC)."""
    return _claim_time(payload, "iat")


def _claim_time(payload: Dict[str, Any], claim: str) -> Optional[datetime]:
    if claim in payload:
        return datetime.fromtimestamp(payload[claim], tz=timezone.utc)
    return None
