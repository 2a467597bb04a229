# =============================================================================
# core/services/admin_service.py - Back-office Business Logic
# =============================================================================
# Admin login, catalog maintenance (products, services), image uploads and
# the first-run bootstrap. Exchange rate maintenance lives in
# ExchangeRateService and is shared with the public calculator.
# =============================================================================

import base64
import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import settings
from app.exceptions import (
    ConflictError,
    FileTooLargeError,
    InvalidCredentialsError,
    InvalidFileTypeError,
    ResourceNotFoundError,
)
from core.models.admin import AdminAuthResponse, AdminResponse, BootstrapResponse
from core.models.catalog import ProductWrite, ServiceWrite
from lib.orm import Admin, Category, Product, Service
from lib.security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)


# name, slug, icon, color
DEFAULT_CATEGORIES: list[tuple[str, str, str, str]] = [
    ("Alimentation", "food", "fas fa-seedling", "green"),
    ("Viande & Poisson", "meat", "fas fa-fish", "red"),
    ("Épices & Condiments", "spices", "fas fa-pepper-hot", "orange"),
    ("Éducation", "education", "fas fa-graduation-cap", "blue"),
    ("Téléphonie", "telecom", "fas fa-mobile-alt", "purple"),
    ("Transport", "transport", "fas fa-bus", "yellow"),
]


class AdminService:
    """
    Service for admin panel operations.

    Provides a clean interface between API routes and database.
    """

    # -------------------------------------------------------------------------
    # Authentication
    # -------------------------------------------------------------------------

    @staticmethod
    def authenticate(db: Session, username: str, password: str) -> Admin:
        """
        Check admin credentials and stamp last_login.

        Raises:
            InvalidCredentialsError: Unknown admin, wrong password or deactivated account
        """
        admin = db.scalar(select(Admin).where(Admin.username == username))

        if admin is None or not verify_password(password, admin.password):
            logger.warning(f"Failed admin login for '{username}'")
            raise InvalidCredentialsError()
        if not admin.is_active:
            logger.warning(f"Login attempt on deactivated admin '{username}'")
            raise InvalidCredentialsError("Admin account is deactivated")

        admin.last_login = datetime.now(timezone.utc)
        db.commit()
        db.refresh(admin)
        logger.info(f"Admin {admin.id} ({admin.username}) logged in")
        return admin

    @staticmethod
    def get_admin(db: Session, admin_id: int) -> Admin | None:
        return db.get(Admin, admin_id)

    @staticmethod
    def to_auth_response(admin: Admin) -> AdminAuthResponse:
        token = create_access_token(
            admin.id,
            "admin",
            extra_claims={"username": admin.username, "role": admin.role},
        )
        return AdminAuthResponse(token=token, admin=AdminResponse.model_validate(admin))

    # -------------------------------------------------------------------------
    # Products
    # -------------------------------------------------------------------------

    @staticmethod
    def list_products(db: Session) -> list[Product]:
        return list(db.scalars(select(Product).order_by(Product.id)).all())

    @staticmethod
    def get_product(db: Session, product_id: int) -> Product:
        product = db.get(Product, product_id)
        if product is None:
            raise ResourceNotFoundError("product", product_id)
        return product

    @staticmethod
    def _check_category(db: Session, category_id: int) -> None:
        if db.get(Category, category_id) is None:
            raise ResourceNotFoundError("category", category_id, status_code=400)

    @staticmethod
    def create_product(db: Session, data: ProductWrite) -> Product:
        AdminService._check_category(db, data.category_id)

        product = Product(**data.model_dump())
        db.add(product)
        db.commit()
        db.refresh(product)
        logger.info(f"Created product {product.id} ({product.name_fr})")
        return product

    @staticmethod
    def update_product(db: Session, product_id: int, data: ProductWrite) -> Product:
        product = AdminService.get_product(db, product_id)
        AdminService._check_category(db, data.category_id)

        for field, value in data.model_dump().items():
            setattr(product, field, value)
        db.commit()
        db.refresh(product)
        logger.info(f"Updated product {product.id}")
        return product

    @staticmethod
    def delete_product(db: Session, product_id: int) -> None:
        """
        Raises:
            ConflictError: If existing orders still reference the product
        """
        product = AdminService.get_product(db, product_id)
        db.delete(product)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ConflictError(
                message="Product is referenced by existing orders; mark it out of stock instead",
                field="product",
                value=product_id,
            ) from None
        logger.info(f"Deleted product {product_id}")

    # -------------------------------------------------------------------------
    # Services
    # -------------------------------------------------------------------------

    @staticmethod
    def list_services(db: Session) -> list[Service]:
        return list(db.scalars(select(Service).order_by(Service.id)).all())

    @staticmethod
    def get_service(db: Session, service_id: int) -> Service:
        service = db.get(Service, service_id)
        if service is None:
            raise ResourceNotFoundError("service", service_id)
        return service

    @staticmethod
    def _slug_conflict(slug: str) -> ConflictError:
        return ConflictError(
            message=f"A service already exists with slug '{slug}'",
            field="slug",
            value=slug,
        )

    @staticmethod
    def create_service(db: Session, data: ServiceWrite) -> Service:
        if db.scalar(select(Service).where(Service.slug == data.slug)):
            raise AdminService._slug_conflict(data.slug)

        service = Service(**data.model_dump())
        db.add(service)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise AdminService._slug_conflict(data.slug) from None

        db.refresh(service)
        logger.info(f"Created service {service.id} ({service.slug})")
        return service

    @staticmethod
    def update_service(db: Session, service_id: int, data: ServiceWrite) -> Service:
        service = AdminService.get_service(db, service_id)

        existing = db.scalar(select(Service).where(Service.slug == data.slug))
        if existing and existing.id != service.id:
            raise AdminService._slug_conflict(data.slug)

        for field, value in data.model_dump().items():
            setattr(service, field, value)
        db.commit()
        db.refresh(service)
        logger.info(f"Updated service {service.id}")
        return service

    @staticmethod
    def delete_service(db: Session, service_id: int) -> None:
        service = AdminService.get_service(db, service_id)
        db.delete(service)
        db.commit()
        logger.info(f"Deleted service {service_id}")

    # -------------------------------------------------------------------------
    # Uploads
    # -------------------------------------------------------------------------

    @staticmethod
    def image_data_url(content: bytes, filename: str, content_type: str | None) -> str:
        """
        Encode an uploaded image as a data URL stored inline on the row.

        Raises:
            InvalidFileTypeError: If the upload is not an image
            FileTooLargeError: If it exceeds MAX_IMAGE_SIZE_MB
        """
        if not content_type or not content_type.startswith("image/"):
            raise InvalidFileTypeError(filename, content_type)

        if len(content) > settings.max_image_size_bytes:
            raise FileTooLargeError(len(content) / (1024 * 1024), settings.MAX_IMAGE_SIZE_MB)

        encoded = base64.b64encode(content).decode("ascii")
        logger.info(f"Encoded image {filename} ({len(content)} bytes)")
        return f"data:{content_type};base64,{encoded}"

    # -------------------------------------------------------------------------
    # Bootstrap
    # -------------------------------------------------------------------------

    @staticmethod
    def bootstrap(db: Session) -> BootstrapResponse:
        """
        Create the default admin and categories if they are missing.

        Safe to call repeatedly: existing rows are left alone.
        """
        admin_created = False
        if db.scalar(select(Admin).where(Admin.username == settings.ADMIN_BOOTSTRAP_USERNAME)) is None:
            db.add(
                Admin(
                    username=settings.ADMIN_BOOTSTRAP_USERNAME,
                    email=settings.ADMIN_BOOTSTRAP_EMAIL,
                    password=hash_password(settings.ADMIN_BOOTSTRAP_PASSWORD),
                    first_name="Admin",
                    last_name="Gisabo",
                    role="super_admin",
                    is_active=True,
                )
            )
            admin_created = True

        existing_slugs = set(db.scalars(select(Category.slug)).all())
        categories_created = 0
        for name, slug, icon, color in DEFAULT_CATEGORIES:
            if slug in existing_slugs:
                continue
            db.add(Category(name=name, slug=slug, icon=icon, color=color))
            categories_created += 1

        db.commit()
        logger.info(
            f"Bootstrap done: admin_created={admin_created}, categories_created={categories_created}"
        )

        if admin_created or categories_created:
            message = "Database initialized successfully"
        else:
            message = "Database already initialized"

        return BootstrapResponse(
            message=message,
            admin_created=admin_created,
            categories_created=categories_created,
        )
