# =============================================================================
# app/routers/account.py - Self-service Account Endpoints
# =============================================================================
# Endpoints:
#   PUT  /api/profile          - Update name, email or phone
#   POST /api/change-password  - Change password (current password required)
# =============================================================================

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.auth import get_current_user
from app.dependencies import DbDep
from core.models.user import PasswordChangeRequest, ProfileUpdate, UserResponse
from core.services.user_service import UserService
from lib.orm import User

logger = logging.getLogger(__name__)

router = APIRouter()


class MessageResponse(BaseModel):
    message: str


@router.put("/profile", response_model=UserResponse)
def update_profile(
    request: ProfileUpdate,
    db: DbDep,
    user: User = Depends(get_current_user),
) -> UserResponse:
    """
    Update the current user's profile.

    Only the fields present in the body are changed.

    Raises:
        409: If the new email belongs to another account
    """
    updated = UserService.update_profile(db, user, request)
    return UserResponse.model_validate(updated)


@router.post("/change-password", response_model=MessageResponse)
def change_password(
    request: PasswordChangeRequest,
    db: DbDep,
    user: User = Depends(get_current_user),
) -> MessageResponse:
    """
    Change the current user's password.

    Raises:
        400: Missing field, confirmation mismatch, new password too short,
            or current password wrong
    """
    UserService.change_password(db, user, request)
    return MessageResponse(message="Password changed successfully")
