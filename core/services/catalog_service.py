# =============================================================================
# core/services/catalog_service.py - Public Catalog Reads
# =============================================================================
# Categories, products and services as shown on the site. Bilingual columns
# are collapsed to the requested language here so routers stay thin.
# =============================================================================

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.exceptions import ResourceNotFoundError
from core.models.catalog import CategoryResponse, LocalizedProduct, LocalizedService
from lib.orm import Category, Product, Service
from lib.utils import localized

logger = logging.getLogger(__name__)


class CatalogService:
    """Read-only catalog queries."""

    @staticmethod
    def list_categories(db: Session) -> list[CategoryResponse]:
        rows = db.scalars(select(Category).order_by(Category.id)).all()
        return [CategoryResponse.model_validate(row) for row in rows]

    @staticmethod
    def localize_product(product: Product, lang: str | None) -> LocalizedProduct:
        return LocalizedProduct(
            id=product.id,
            name=localized(product, "name", lang),
            description=localized(product, "description", lang),
            price=product.price,
            currency=product.currency,
            category_id=product.category_id,
            image_url=product.image_url,
            in_stock=product.in_stock,
            created_at=product.created_at,
        )

    @staticmethod
    def list_products(
        db: Session,
        category_id: int | None = None,
        lang: str | None = None,
    ) -> list[LocalizedProduct]:
        """
        List products, optionally filtered by category.

        Args:
            db: Database session
            category_id: Only products of this category
            lang: "fr" (default) or "en"
        """
        query = select(Product).order_by(Product.id)
        if category_id is not None:
            query = query.where(Product.category_id == category_id)

        return [CatalogService.localize_product(p, lang) for p in db.scalars(query).all()]

    @staticmethod
    def get_product(db: Session, product_id: int) -> Product:
        product = db.get(Product, product_id)
        if product is None:
            raise ResourceNotFoundError("product", product_id)
        return product

    @staticmethod
    def localize_service(service: Service, lang: str | None) -> LocalizedService:
        return LocalizedService(
            id=service.id,
            name=localized(service, "name", lang),
            slug=service.slug,
            short_description=localized(service, "short_description", lang),
            full_description=localized(service, "full_description", lang),
            image_url=service.image_url,
            is_active=service.is_active,
        )

    @staticmethod
    def list_active_services(db: Session, lang: str | None = None) -> list[LocalizedService]:
        rows = db.scalars(
            select(Service).where(Service.is_active.is_(True)).order_by(Service.id)
        ).all()
        return [CatalogService.localize_service(s, lang) for s in rows]
