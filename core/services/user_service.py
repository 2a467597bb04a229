# =============================================================================
# core/services/user_service.py - Account Business Logic
# =============================================================================
# Registration, login and self-service profile edits.
# Separates HTTP concerns from database/business logic.
# =============================================================================

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.exceptions import (
    DuplicateUserError,
    InvalidCredentialsError,
    PasswordChangeError,
    ResourceNotFoundError,
)
from core.models.user import (
    MAX_PASSWORD_BYTES,
    MIN_PASSWORD_LENGTH,
    AuthResponse,
    PasswordChangeRequest,
    ProfileUpdate,
    RegisterRequest,
    UserResponse,
    password_too_long,
)
from lib.orm import User
from lib.security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)


class UserService:
    """
    Service for customer account operations.

    Provides a clean interface between API routes and database.
    """

    @staticmethod
    def _find_by_email(db: Session, email: str) -> User | None:
        return db.scalar(select(User).where(func.lower(User.email) == email.lower()))

    @staticmethod
    def _find_by_username(db: Session, username: str) -> User | None:
        return db.scalar(select(User).where(User.username == username))

    @staticmethod
    def register(db: Session, data: RegisterRequest) -> User:
        """
        Create a customer account.

        Args:
            db: Database session
            data: Validated registration payload

        Returns:
            The new User row

        Raises:
            DuplicateUserError: If the username or email is already taken
        """
        if UserService._find_by_username(db, data.username):
            raise DuplicateUserError("username", data.username)
        if UserService._find_by_email(db, data.email):
            raise DuplicateUserError("email", data.email)

        user = User(
            username=data.username,
            email=data.email,
            password=hash_password(data.password),
            first_name=data.first_name,
            last_name=data.last_name,
            phone=data.phone,
            role="user",
        )
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration
            db.rollback()
            raise DuplicateUserError("username or email", data.username) from None

        db.refresh(user)
        logger.info(f"Registered user {user.id} ({user.username})")
        return user

    @staticmethod
    def authenticate(db: Session, identifier: str, password: str) -> User:
        """
        Check credentials. The identifier may be an email or a username.

        Raises:
            InvalidCredentialsError: On any mismatch (same error either way)
        """
        user = UserService._find_by_email(db, identifier) or UserService._find_by_username(db, identifier)

        if user is None or not verify_password(password, user.password):
            logger.info(f"Failed login for '{identifier}'")
            raise InvalidCredentialsError()

        return user

    @staticmethod
    def get_user(db: Session, user_id: int) -> User:
        user = db.get(User, user_id)
        if user is None:
            raise ResourceNotFoundError("user", user_id)
        return user

    @staticmethod
    def update_profile(db: Session, user: User, data: ProfileUpdate) -> User:
        """
        Apply the provided profile fields.

        Raises:
            DuplicateUserError: If the new email belongs to another account
        """
        changes = data.model_dump(exclude_unset=True)

        new_email = changes.get("email")
        if new_email and new_email.lower() != user.email.lower():
            existing = UserService._find_by_email(db, new_email)
            if existing and existing.id != user.id:
                raise DuplicateUserError("email", new_email)

        for field, value in changes.items():
            if value is None and field != "phone":
                continue
            setattr(user, field, value)

        db.commit()
        db.refresh(user)
        logger.info(f"Updated profile of user {user.id}: {sorted(changes)}")
        return user

    @staticmethod
    def change_password(db: Session, user: User, data: PasswordChangeRequest) -> None:
        """
        Replace the user's password after checking the current one.

        Raises:
            PasswordChangeError: Missing field, mismatch, too short or wrong current password
        """
        if not data.current_password or not data.new_password or not data.confirm_password:
            raise PasswordChangeError("All fields are required")
        if data.new_password != data.confirm_password:
            raise PasswordChangeError("New passwords do not match")
        if len(data.new_password) < MIN_PASSWORD_LENGTH:
            raise PasswordChangeError(
                f"New password must be at least {MIN_PASSWORD_LENGTH} characters"
            )
        if password_too_long(data.new_password):
            raise PasswordChangeError(f"New password must be at most {MAX_PASSWORD_BYTES} bytes")
        if not verify_password(data.current_password, user.password):
            raise PasswordChangeError("Current password is incorrect")

        user.password = hash_password(data.new_password)
        db.commit()
        logger.info(f"Password changed for user {user.id}")

    @staticmethod
    def to_auth_response(user: User) -> AuthResponse:
        """User summary plus a fresh bearer token."""
        token = create_access_token(
            user.id,
            "user",
            extra_claims={"username": user.username, "role": user.role},
        )
        return AuthResponse(user=UserResponse.model_validate(user), token=token)
