# =============================================================================
# core/models/catalog.py - Catalog Schemas
# =============================================================================
# Categories, products and services.
#
# Public endpoints return *localized* views (one name/description chosen by
# the `lang` query param); admin endpoints read and write both languages.
# =============================================================================

from datetime import datetime
from decimal import Decimal

from pydantic import Field

from .base import CamelModel


class CategoryResponse(CamelModel):
    id: int
    name: str
    slug: str
    icon: str
    color: str


# =============================================================================
# Products
# =============================================================================

class LocalizedProduct(CamelModel):
    """Product as shown in the marketplace, in one language."""
    id: int
    name: str
    description: str
    price: Decimal = Field(..., description="Listed minimum price")
    currency: str
    category_id: int
    image_url: str | None = None
    in_stock: bool
    created_at: datetime | None = None


class ProductWrite(CamelModel):
    """Admin input for creating or replacing a product."""
    name_fr: str = Field(..., min_length=1)
    name_en: str = Field(..., min_length=1)
    description_fr: str
    description_en: str
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    currency: str = Field(default="CAD", min_length=3, max_length=3)
    category_id: int
    image_url: str | None = None
    in_stock: bool = True


class ProductResponse(ProductWrite):
    """Full bilingual product."""
    id: int
    created_at: datetime | None = None


# =============================================================================
# Services
# =============================================================================

class LocalizedService(CamelModel):
    id: int
    name: str
    slug: str
    short_description: str
    full_description: str
    image_url: str | None = None
    is_active: bool


class ServiceWrite(CamelModel):
    name_fr: str = Field(..., min_length=1)
    name_en: str = Field(..., min_length=1)
    slug: str = Field(..., min_length=1, pattern=r"^[a-z0-9-]+$")
    short_description_fr: str
    short_description_en: str
    full_description_fr: str
    full_description_en: str
    image_url: str | None = None
    is_active: bool = True


class ServiceResponse(ServiceWrite):
    id: int
    created_at: datetime | None = None
    updated_at: datetime | None = None
