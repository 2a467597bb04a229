# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Provides dependency injection for authentication.
#
# Customer and admin tokens are both HS256 JWTs signed with SECRET_KEY; the
# `type` claim keeps them apart, so a customer token is rejected by the
# admin dependency and vice versa.
#
# Usage:
#   from app.auth import get_current_user
#
#   @router.get("/protected")
#   def protected(user: User = Depends(get_current_user)):
#       return {"user_id": user.id}
# =============================================================================

import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from lib.database import get_db
from lib.orm import Admin, User
from lib.security import TokenError, decode_access_token

logger = logging.getLogger(__name__)

# HTTP Bearer token extractor
security = HTTPBearer()
security_optional = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """
    Extract and validate the customer from a bearer token.

    This dependency:
    1. Extracts the Bearer token from the Authorization header
    2. Verifies signature, expiry and that it is a customer token
    3. Loads the user row

    Returns:
        User: The authenticated user

    Raises:
        HTTPException: 401 if token is invalid, expired or the user is gone
    """
    try:
        user_id = decode_access_token(credentials.credentials, "user")
    except TokenError as e:
        logger.warning(f"User token rejected: {e.message}")
        raise _unauthorized(e.message)

    user = db.get(User, user_id)
    if user is None:
        logger.warning(f"Token for unknown user {user_id}")
        raise _unauthorized("Invalid token: user not found")

    return user


def get_current_user_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_optional),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """
    Optionally get the current user from a bearer token.

    Returns None if no token is provided or the token is invalid,
    instead of raising an error.
    """
    if credentials is None:
        return None

    try:
        return get_current_user(credentials, db)
    except HTTPException:
        # If token is invalid, treat as no auth rather than error
        return None


def get_current_admin(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> Admin:
    """
    Extract and validate an admin from a bearer token.

    Raises:
        HTTPException: 401 if token is not a valid admin token or the
            admin is unknown or deactivated
    """
    try:
        admin_id = decode_access_token(credentials.credentials, "admin")
    except TokenError as e:
        logger.warning(f"Admin token rejected: {e.message}")
        raise _unauthorized(e.message)

    admin = db.get(Admin, admin_id)
    if admin is None or not admin.is_active:
        logger.warning(f"Admin token for unknown or inactive admin {admin_id}")
        raise _unauthorized("Invalid token: admin not found or inactive")

    return admin
