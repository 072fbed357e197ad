"""
Core Authentication Service

- Registration with bcrypt password hashing
- Email/password login issuing a signed access token
- Stateless access-token validation (the auth gate)
- Profile lookup for the token subject

Login failures never reveal whether the email exists.
"""

import logging
from typing import Optional

from config.settings import AuthSettings, get_auth_settings
from core.models.user import (
    AuthResponse,
    LoginRequest,
    ProfileResponse,
    RegisterRequest,
    User,
    UserContext,
)
from database.repositories.user_repository import DuplicateEmailError, UserRepository
from security.api_errors import APIError, ErrorCode
from security.jwt import (
    TokenError,
    TokenExpiredError,
    create_access_token,
    decode_access_token,
    get_token_expiry,
    get_token_issued_at,
)
from security.password import burn_password_check, hash_password, verify_password

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid credentials"
INVALID_TOKEN_MESSAGE = "Invalid Token"
ACCESS_DENIED_MESSAGE = "Access Denied"


def extract_bearer_token(authorization: Optional[str]) -> str:
    """
    Pull the token out of an ``Authorization`` header value.

    Raises:
        APIError: AUTH_REQUIRED if the header is absent or empty,
            AUTH_INVALID_TOKEN if it is not ``Bearer <token>``.
    """
    if not authorization or not authorization.strip():
        raise APIError(
            ErrorCode.AUTH_REQUIRED,
            ACCESS_DENIED_MESSAGE,
            headers={"WWW-Authenticate": "Bearer"},
        )

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise APIError(ErrorCode.AUTH_INVALID_TOKEN, INVALID_TOKEN_MESSAGE)

    return parts[1]


def validate_access_token(token: str, auth_settings: Optional[AuthSettings] = None) -> UserContext:
    """
    Verify signature and expiry and return the caller's identity.

    No database lookup is performed.

    Raises:
        APIError: AUTH_TOKEN_EXPIRED or AUTH_INVALID_TOKEN
    """
    try:
        payload = decode_access_token(token, auth_settings)
    except TokenExpiredError:
        raise APIError(ErrorCode.AUTH_TOKEN_EXPIRED, "Token expired")
    except TokenError as e:
        logger.info(f"Rejected access token: {e}")
        raise APIError(ErrorCode.AUTH_INVALID_TOKEN, INVALID_TOKEN_MESSAGE)

    return UserContext(
        user_id=payload["sub"],
        issued_at=get_token_issued_at(payload),
        expires_at=get_token_expiry(payload),
    )


class CoreAuthService:
    """
    Account registration, login and profile lookup.

    Token verification itself is stateless and lives in
    ``validate_access_token``; this class is only needed where the
    credential store is involved.
    """

    def __init__(self, users: UserRepository, auth_settings: Optional[AuthSettings] = None):
        self._users = users
        self.auth_settings = auth_settings or get_auth_settings()

    async def register(self, request: RegisterRequest) -> User:
        """
        Create an account.

        Raises:
            APIError: RESOURCE_ALREADY_EXISTS if the email is taken.
        """
        password_hash = hash_password(request.password, rounds=self.auth_settings.bcrypt_rounds)

        try:
            record = await self._users.create(
                username=request.username,
                email=request.email,
                password_hash=password_hash,
            )
        except DuplicateEmailError:
            logger.info("Registration rejected: email already registered")
            raise APIError(ErrorCode.RESOURCE_ALREADY_EXISTS, "User already exists")

        logger.info(f"Registered user {record['id']}")
        return User(**record)

    async def login(self, request: LoginRequest) -> AuthResponse:
        """
        Exchange email and password for an access token.

        Raises:
            APIError: AUTH_INVALID_CREDENTIALS for an unknown email or a
                wrong password alike.
        """
        record = await self._users.get_by_email(request.email)

        if record is None:
            burn_password_check(request.password)
            logger.info("Login failed")
            raise APIError(ErrorCode.AUTH_INVALID_CREDENTIALS, INVALID_CREDENTIALS_MESSAGE)

        if not verify_password(request.password, record["password_hash"]):
            logger.info(f"Login failed for user {record['id']}")
            raise APIError(ErrorCode.AUTH_INVALID_CREDENTIALS, INVALID_CREDENTIALS_MESSAGE)

        token = create_access_token(record["id"], auth_settings=self.auth_settings)
        user = User(**{k: v for k, v in record.items() if k != "password_hash"})

        logger.info(f"User {user.id} logged in")
        return AuthResponse(
            token=token,
            expires_in=self.auth_settings.access_token_expire_seconds,
            user=user.public_dict(),
        )

    async def get_profile(self, context: UserContext) -> ProfileResponse:
        """
        Profile of the token subject.

        Raises:
            APIError: RESOURCE_NOT_FOUND if the user was deleted after the
                token was issued.
        """
        record = await self._users.get_by_id(context.user_id)
        if record is None:
            raise APIError(ErrorCode.RESOURCE_NOT_FOUND, "User not found")
        return ProfileResponse(username=record["username"], email=record["email"])
