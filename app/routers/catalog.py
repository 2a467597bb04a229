# =============================================================================
# app/routers/catalog.py - Public Catalog Endpoints
# =============================================================================
# Endpoints:
#   GET /api/categories                    - All categories
#   GET /api/products?categoryId=&lang=    - Products, localized
#   GET /api/products/{product_id}?lang=   - One product, localized
#   GET /api/services?lang=                - Active services, localized
# =============================================================================

from typing import Optional

from fastapi import APIRouter, Query

from app.dependencies import DbDep
from core.models.catalog import CategoryResponse, LocalizedProduct, LocalizedService
from core.services.catalog_service import CatalogService

router = APIRouter()

LANG_QUERY = Query(default="fr", description="Language of names and descriptions: fr or en")


@router.get("/categories", response_model=list[CategoryResponse])
def list_categories(db: DbDep) -> list[CategoryResponse]:
    return CatalogService.list_categories(db)


@router.get("/products", response_model=list[LocalizedProduct])
def list_products(
    db: DbDep,
    category_id: Optional[int] = Query(default=None, alias="categoryId"),
    lang: str = LANG_QUERY,
) -> list[LocalizedProduct]:
    """
    List marketplace products.

    Each product's `price` is its listed minimum.
    """
    return CatalogService.list_products(db, category_id=category_id, lang=lang)


@router.get("/products/{product_id}", response_model=LocalizedProduct)
def get_product(
    product_id: int,
    db: DbDep,
    lang: str = LANG_QUERY,
) -> LocalizedProduct:
    """
    Raises:
        404: If the product doesn't exist
    """
    product = CatalogService.get_product(db, product_id)
    return CatalogService.localize_product(product, lang)


@router.get("/services", response_model=list[LocalizedService])
def list_services(db: DbDep, lang: str = LANG_QUERY) -> list[LocalizedService]:
    return CatalogService.list_active_services(db, lang=lang)
