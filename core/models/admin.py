# =============================================================================
# core/models/admin.py - Admin Schemas
# =============================================================================

from datetime import datetime

from pydantic import Field

from .base import CamelModel


class AdminLoginRequest(CamelModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class AdminResponse(CamelModel):
    id: int
    username: str
    email: str
    first_name: str
    last_name: str
    role: str
    is_active: bool
    last_login: datetime | None = None


class AdminAuthResponse(CamelModel):
    token: str
    admin: AdminResponse


class ImageUploadResponse(CamelModel):
    image_url: str


class BootstrapResponse(CamelModel):
    message: str
    admin_created: bool
    categories_created: int
