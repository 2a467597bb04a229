# =============================================================================
# app/routers/payments.py - Client Payment Configuration
# =============================================================================
# Endpoints:
#   GET /api/square-config - Public identifiers for Square card tokenization
#
# Only public identifiers are exposed; the access token stays server-side.
# =============================================================================

from typing import Optional

from fastapi import APIRouter

from app.config import settings
from core.models.base import CamelModel

router = APIRouter()


class SquareConfigResponse(CamelModel):
    application_id: Optional[str] = None
    location_id: Optional[str] = None
    environment: str


@router.get("/square-config", response_model=SquareConfigResponse)
def square_config() -> SquareConfigResponse:
    return SquareConfigResponse(
        application_id=settings.SQUARE_APPLICATION_ID,
        location_id=settings.SQUARE_LOCATION_ID,
        environment=settings.SQUARE_ENVIRONMENT,
    )
