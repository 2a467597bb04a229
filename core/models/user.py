# =============================================================================
# core/models/user.py - Account Schemas
# =============================================================================
# These models define the API contract for account operations:
# - RegisterRequest / LoginRequest: Credentials in
# - AuthResponse: User summary + bearer token out
# - ProfileUpdate / PasswordChangeRequest: Self-service account edits
# =============================================================================

from datetime import datetime

from pydantic import EmailStr, Field, field_validator

from .base import CamelModel

MIN_PASSWORD_LENGTH = 6
# bcrypt only hashes the first 72 bytes and rejects longer input
MAX_PASSWORD_BYTES = 72


def password_too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES


class RegisterRequest(CamelModel):
    """
    Schema for creating a customer account.

    Example:
        {
            "username": "+15145550100",
            "email": "jean@example.com",
            "password": "secret1",
            "firstName": "Jean",
            "lastName": "Niyonzima"
        }
    """
    username: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)
    first_name: str = Field(..., min_length=1, max_length=255)
    last_name: str = Field(..., min_length=1, max_length=255)
    phone: str | None = Field(default=None, max_length=64)

    @field_validator("password")
    @classmethod
    def _password_fits_bcrypt(cls, v: str) -> str:
        if password_too_long(v):
            raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
        return v


class LoginRequest(CamelModel):
    """The username field accepts either a username or an email address."""
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserResponse(CamelModel):
    """Public view of a user. Never includes the password hash."""
    id: int
    username: str
    email: str
    first_name: str
    last_name: str
    phone: str | None = None
    role: str = "user"
    created_at: datetime | None = None


class AuthResponse(CamelModel):
    user: UserResponse
    token: str


class ProfileUpdate(CamelModel):
    """Only the provided fields are changed."""
    first_name: str | None = Field(default=None, min_length=1, max_length=255)
    last_name: str | None = Field(default=None, min_length=1, max_length=255)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=64)


class PasswordChangeRequest(CamelModel):
    current_password: str = ""
    new_password: str = ""
    confirm_password: str = ""
