# =============================================================================
# lib/security.py - Password Hashing and Token Signing
# =============================================================================
# - Passwords are stored as bcrypt hashes (cost 10, as the legacy data).
# - Session tokens are HS256 JWTs with a `type` claim so a customer token
#   can never be replayed against the admin API (and vice versa).
# =============================================================================

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Literal

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt

from app.config import settings

logger = logging.getLogger(__name__)

TokenType = Literal["user", "admin"]

BCRYPT_ROUNDS = 10


class TokenError(Exception):
    """Raised when a token cannot be trusted."""

    def __init__(self, message: str, expired: bool = False):
        super().__init__(message)
        self.message = message
        self.expired = expired


# =============================================================================
# Passwords
# =============================================================================

def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """Constant-time check; a malformed stored hash counts as a mismatch."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is not a valid bcrypt hash")
        return False


# =============================================================================
# Tokens
# =============================================================================

def create_access_token(
    subject: int | str,
    token_type: TokenType,
    expires_delta: timedelta | None = None,
    extra_claims: dict[str, Any] | None = None,
) -> str:
    """
    Sign a JWT for a user or an admin.

    Args:
        subject: Row ID of the user/admin (stored as `sub`)
        token_type: "user" or "admin"
        expires_delta: Lifetime; defaults to the configured lifetime for the type
        extra_claims: Additional non-reserved claims (e.g. username, role)

    Returns:
        Encoded JWT string
    """
    if expires_delta is None:
        if token_type == "admin":
            expires_delta = timedelta(hours=settings.ADMIN_TOKEN_EXPIRE_HOURS)
        else:
            expires_delta = timedelta(days=settings.USER_TOKEN_EXPIRE_DAYS)

    now = datetime.now(timezone.utc)
    payload: dict[str, Any] = {
        **(extra_claims or {}),
        "sub": str(subject),
        "type": token_type,
        "iat": int(now.timestamp()),
        "exp": int((now + expires_delta).timestamp()),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str, expected_type: TokenType) -> int:
    """
    Verify a JWT and return the subject ID.

    Raises:
        TokenError: If the signature, expiry, type or subject is invalid
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise TokenError("Token has expired", expired=True)
    except JWTError as e:
        raise TokenError(f"Invalid token: {e}")

    if payload.get("type") != expected_type:
        raise TokenError("Invalid token: wrong token type")

    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        raise TokenError("Invalid token: missing subject")
