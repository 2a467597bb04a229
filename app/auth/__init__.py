# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Provides bearer-token authentication for customers and admins.
#
# Usage:
#   from app.auth import get_current_user
#
#   @router.get("/protected")
#   def protected(user: User = Depends(get_current_user)):
#       return {"user_id": user.id}
# =============================================================================

from app.auth.dependencies import get_current_admin, get_current_user, get_current_user_optional
from app.auth.models import AuthStatus

__all__ = [
    "get_current_admin",
    "get_current_user",
    "get_current_user_optional",
    "AuthStatus",
]
