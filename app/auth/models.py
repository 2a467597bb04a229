# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Response models specific to the auth routes. Account payloads shared with
# the rest of the API live in core/models/user.py.
# =============================================================================

from typing import Optional

from core.models.base import CamelModel
from core.models.user import UserResponse


class AuthStatus(CamelModel):
    """
    Whether the caller holds a valid customer token.

    Never errors: an invalid token simply reports authenticated=False.
    """
    authenticated: bool
    user: Optional[UserResponse] = None
