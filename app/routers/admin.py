# =============================================================================
# app/routers/admin.py - Admin Panel Endpoints
# =============================================================================
# Endpoints (mounted under /api/admin, admin token required except login):
#   POST   /login                       - Admin login, returns a 24h admin token
#   GET    /me                          - Current admin
#   GET    /exchange-rates              - List rates
#   POST   /exchange-rates              - Create a rate (409 on duplicate pair)
#   PUT    /exchange-rates/{id}         - Replace a rate
#   DELETE /exchange-rates/{id}         - Delete a rate
#   GET|POST|PUT|DELETE /services[/{id}]  - Service CRUD (409 on duplicate slug)
#   GET|POST|PUT|DELETE /products[/{id}]  - Product CRUD
#   POST   /upload-image                - Image -> data URL
#
# Bootstrap (mounted under /api):
#   POST   /init                        - Default admin + categories, idempotent
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile, status

from app.auth import get_current_admin
from app.dependencies import DbDep
from core.models.admin import (
    AdminAuthResponse,
    AdminLoginRequest,
    AdminResponse,
    BootstrapResponse,
    ImageUploadResponse,
)
from core.models.catalog import ProductResponse, ProductWrite, ServiceResponse, ServiceWrite
from core.models.exchange_rate import ExchangeRateResponse, ExchangeRateWrite
from core.services.admin_service import AdminService
from core.services.exchange_rate_service import ExchangeRateService
from lib.orm import Admin

logger = logging.getLogger(__name__)

router = APIRouter()
bootstrap_router = APIRouter()

AdminDep = Annotated[Admin, Depends(get_current_admin)]


# =============================================================================
# Authentication
# =============================================================================

@router.post("/login", response_model=AdminAuthResponse)
def admin_login(request: AdminLoginRequest, db: DbDep) -> AdminAuthResponse:
    """
    Log in to the admin panel.

    Raises:
        401: Wrong credentials or deactivated account
    """
    admin = AdminService.authenticate(db, request.username, request.password)
    return AdminService.to_auth_response(admin)


@router.get("/me", response_model=AdminResponse)
def admin_me(admin: AdminDep) -> AdminResponse:
    return AdminResponse.model_validate(admin)


# =============================================================================
# Exchange Rates
# =============================================================================

@router.get("/exchange-rates", response_model=list[ExchangeRateResponse])
def list_exchange_rates(db: DbDep, admin: AdminDep) -> list[ExchangeRateResponse]:
    return [ExchangeRateResponse.model_validate(r) for r in ExchangeRateService.list_rates(db)]


@router.post(
    "/exchange-rates",
    response_model=ExchangeRateResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_exchange_rate(
    request: ExchangeRateWrite,
    db: DbDep,
    admin: AdminDep,
) -> ExchangeRateResponse:
    """
    Raises:
        409: If the currency pair already has a rate
    """
    row = ExchangeRateService.create(db, request)
    logger.info(f"Admin {admin.id} created exchange rate {row.id}")
    return ExchangeRateResponse.model_validate(row)


@router.put("/exchange-rates/{rate_id}", response_model=ExchangeRateResponse)
def update_exchange_rate(
    rate_id: int,
    request: ExchangeRateWrite,
    db: DbDep,
    admin: AdminDep,
) -> ExchangeRateResponse:
    row = ExchangeRateService.update(db, rate_id, request)
    logger.info(f"Admin {admin.id} updated exchange rate {row.id}")
    return ExchangeRateResponse.model_validate(row)


@router.delete("/exchange-rates/{rate_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_exchange_rate(rate_id: int, db: DbDep, admin: AdminDep) -> None:
    ExchangeRateService.delete(db, rate_id)
    logger.info(f"Admin {admin.id} deleted exchange rate {rate_id}")


# =============================================================================
# Services
# =============================================================================

@router.get("/services", response_model=list[ServiceResponse])
def list_services(db: DbDep, admin: AdminDep) -> list[ServiceResponse]:
    """All services, active or not, with both languages."""
    return [ServiceResponse.model_validate(s) for s in AdminService.list_services(db)]


@router.post("/services", response_model=ServiceResponse, status_code=status.HTTP_201_CREATED)
def create_service(request: ServiceWrite, db: DbDep, admin: AdminDep) -> ServiceResponse:
    """
    Raises:
        409: If the slug is taken
    """
    return ServiceResponse.model_validate(AdminService.create_service(db, request))


@router.put("/services/{service_id}", response_model=ServiceResponse)
def update_service(
    service_id: int,
    request: ServiceWrite,
    db: DbDep,
    admin: AdminDep,
) -> ServiceResponse:
    return ServiceResponse.model_validate(AdminService.update_service(db, service_id, request))


@router.delete("/services/{service_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_service(service_id: int, db: DbDep, admin: AdminDep) -> None:
    AdminService.delete_service(db, service_id)


# =============================================================================
# Products
# =============================================================================

@router.get("/products", response_model=list[ProductResponse])
def list_products(db: DbDep, admin: AdminDep) -> list[ProductResponse]:
    return [ProductResponse.model_validate(p) for p in AdminService.list_products(db)]


@router.post("/products", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create_product(request: ProductWrite, db: DbDep, admin: AdminDep) -> ProductResponse:
    """
    Raises:
        400: If the category doesn't exist
    """
    return ProductResponse.model_validate(AdminService.create_product(db, request))


@router.put("/products/{product_id}", response_model=ProductResponse)
def update_product(
    product_id: int,
    request: ProductWrite,
    db: DbDep,
    admin: AdminDep,
) -> ProductResponse:
    return ProductResponse.model_validate(AdminService.update_product(db, product_id, request))


@router.delete("/products/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(product_id: int, db: DbDep, admin: AdminDep) -> None:
    """
    Raises:
        409: If orders still reference the product
    """
    AdminService.delete_product(db, product_id)


# =============================================================================
# Uploads
# =============================================================================

@router.post("/upload-image", response_model=ImageUploadResponse)
@router.post("/upload-service-image", response_model=ImageUploadResponse)
async def upload_image(
    image: Annotated[UploadFile, File(description="Product or service image")],
    admin: AdminDep,
) -> ImageUploadResponse:
    """
    Upload a product or service image.

    The image is returned as a base64 data URL, ready to be stored in the
    row's imageUrl field.

    Raises:
        400: Not an image
        413: Larger than MAX_IMAGE_SIZE_MB
    """
    content = await image.read()
    image_url = AdminService.image_data_url(
        content,
        image.filename or "upload",
        image.content_type,
    )
    return ImageUploadResponse(image_url=image_url)


# =============================================================================
# Bootstrap
# =============================================================================

@bootstrap_router.post("/init", response_model=BootstrapResponse)
def initialize(db: DbDep) -> BootstrapResponse:
    """
    Create the default admin account and categories.

    Safe to call repeatedly; existing rows are kept.
    """
    return AdminService.bootstrap(db)
