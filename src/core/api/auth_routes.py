"""
Core Authentication API Routes

- POST /register: create an account
- POST /login: exchange email/password for a bearer token
- GET  /profile: the authenticated user's username and email
"""

import logging

from fastapi import APIRouter, Depends, status

from core.models.user import (
    AuthResponse,
    LoginRequest,
    ProfileResponse,
    RegisterRequest,
    UserContext,
)
from core.services.auth_service import CoreAuthService
from web.dependencies import get_auth_service, get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Authentication"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    auth_service: CoreAuthService = Depends(get_auth_service),
):
    """
    Register a new user.

    Returns 400 if the email is already registered or the payload is invalid.
    """
    user = await auth_service.register(request)
    return {"message": "User created successfully", "user": user.public_dict()}


@router.post("/login", response_model=AuthResponse)
async def login(
    request: LoginRequest,
    auth_service: CoreAuthService = Depends(get_auth_service),
):
    """
    Authenticate with email and password.

    Returns:
    - token: JWT for the Authorization header, valid for one hour
    - user: id, username and email
    """
    return await auth_service.login(request)


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(
    user: UserContext = Depends(get_current_user),
    auth_service: CoreAuthService = Depends(get_auth_service),
):
    """Get the authenticated user's profile."""
    return await auth_service.get_profile(user)
