"""
User Models

Pydantic models for the account side of the API:
- RegisterRequest / LoginRequest: inbound payloads
- User: a stored account without its password hash
- UserContext: the identity the auth gate attaches to a request
- AuthResponse: login result carrying the bearer token
"""

import re
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


EMAIL_PATTERN = re.compile(r"^\w+([.-]?\w+)*@\w+([.-]?\w+)*(\.\w{2,3})+$")

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 6
# bcrypt only looks at the first 72 bytes
MAX_PASSWORD_LENGTH = 72


def normalize_email(email: str) -> str:
    return email.strip().lower()


class RegisterRequest(BaseModel):
    """User registration request."""
    username: str = Field(..., max_length=100)
    email: str = Field(..., max_length=255)
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH)

    @field_validator("username")
    @classmethod
    def _check_username(cls, value: str) -> str:
        value = value.strip()
        if len(value) < MIN_USERNAME_LENGTH:
            raise ValueError(f"Username must be at least {MIN_USERNAME_LENGTH} characters")
        return value

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        value = normalize_email(value)
        if not EMAIL_PATTERN.match(value):
            raise ValueError("Please enter a valid email")
        return value

    @field_validator("password")
    @classmethod
    def _check_password_bytes(cls, value: str) -> str:
        if len(value.encode("utf-8")) > MAX_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at most {MAX_PASSWORD_LENGTH} bytes")
        return value


class LoginRequest(BaseModel):
    """Email/password login request."""
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def _normalize(cls, value: str) -> str:
        return normalize_email(value)


class User(BaseModel):
    """A registered account as exposed by the API."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    email: str
    created_at: Optional[datetime] = None

    def public_dict(self) -> dict:
        return {"id": self.id, "username": self.username, "email": self.email}


class UserContext(BaseModel):
    """
    Identity resolved from a verified bearer token.

    Only the token subject is trusted; no lookup confirms the user still
    exists.
    """
    user_id: str
    issued_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None


class AuthResponse(BaseModel):
    """Successful login."""
    token: str
    token_type: str = "Bearer"
    expires_in: int
    user: dict


class ProfileResponse(BaseModel):
    username: str
    email: str
