# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# API endpoints for registration, login and session checks.
#
# Endpoints:
#   POST /api/auth/register  - Create an account, returns user + token
#   POST /api/auth/login     - Username or email + password, returns user + token
#   GET  /api/auth/me        - Current user
#   GET  /api/auth/status    - Token check that never errors
# =============================================================================

import logging
from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.auth.dependencies import get_current_user, get_current_user_optional
from app.auth.models import AuthStatus
from core.models.user import AuthResponse, LoginRequest, RegisterRequest, UserResponse
from core.services.user_service import UserService
from lib.database import get_db
from lib.orm import User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    request: RegisterRequest,
    db: Session = Depends(get_db),
) -> AuthResponse:
    """
    Create a customer account.

    Returns:
        AuthResponse: The new user and a bearer token

    Raises:
        409: If the username or email is already taken
        422: If the payload is invalid (e.g. password under 6 characters)
    """
    user = UserService.register(db, request)
    return UserService.to_auth_response(user)


@router.post("/login", response_model=AuthResponse)
def login(
    request: LoginRequest,
    db: Session = Depends(get_db),
) -> AuthResponse:
    """
    Log in with a username or an email address.

    Raises:
        401: If the credentials don't match
    """
    user = UserService.authenticate(db, request.username, request.password)
    logger.info(f"User {user.id} logged in")
    return UserService.to_auth_response(user)


@router.get("/me", response_model=UserResponse)
def get_current_user_info(
    user: User = Depends(get_current_user),
) -> UserResponse:
    """
    Get the current authenticated user's profile.

    Raises:
        401: If not authenticated
    """
    return UserResponse.model_validate(user)


@router.get("/status", response_model=AuthStatus)
def auth_status(
    user: Optional[User] = Depends(get_current_user_optional),
) -> AuthStatus:
    """
    Report whether the stored token is still valid.

    Useful for the client to decide whether to show the login screen.
    """
    if user is None:
        return AuthStatus(authenticated=False)
    return AuthStatus(authenticated=True, user=UserResponse.model_validate(user))
