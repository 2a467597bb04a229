# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Provides health check endpoints for monitoring and load balancers.
# Mounted both at the root (/health) and under /api (/api/health).
# =============================================================================

from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from app.config import settings
from lib.database import check_database

router = APIRouter()

API_VERSION = "1.0.0"


# =============================================================================
# Response Models
# =============================================================================

class ChecksResponse(BaseModel):
    """Individual service checks."""
    database: str


class EnvironmentFlags(BaseModel):
    """Which credentials are present. Values are never exposed."""
    database_url: bool
    square_access_token: bool
    square_application_id: bool
    square_location_id: bool
    openai_api_key: bool
    smtp_host: bool


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    timestamp: str
    environment: str
    version: str
    checks: ChecksResponse
    env: EnvironmentFlags


class LivenessResponse(BaseModel):
    """Liveness check response."""
    status: str
    timestamp: str


# =============================================================================
# Endpoints
# =============================================================================

@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse, "description": "A dependency is down"}},
)
def health_check():
    """
    Health check endpoint.

    Runs a trivial database query and reports which credentials are
    configured. Returns 503 with status "degraded" when the database
    is unreachable.
    """
    database_ok = check_database()

    body = HealthResponse(
        status="healthy" if database_ok else "degraded",
        timestamp=datetime.now(timezone.utc).isoformat(),
        environment=settings.ENVIRONMENT,
        version=API_VERSION,
        checks=ChecksResponse(database="healthy" if database_ok else "unhealthy"),
        env=EnvironmentFlags(
            database_url=bool(settings.DATABASE_URL),
            square_access_token=bool(settings.SQUARE_ACCESS_TOKEN),
            square_application_id=bool(settings.SQUARE_APPLICATION_ID),
            square_location_id=bool(settings.SQUARE_LOCATION_ID),
            openai_api_key=bool(settings.OPENAI_API_KEY),
            smtp_host=bool(settings.SMTP_HOST),
        ),
    )

    return JSONResponse(
        status_code=200 if database_ok else 503,
        content=body.model_dump(),
    )


@router.get("/health/live", response_model=LivenessResponse)
async def liveness_check():
    """
    Liveness check endpoint.

    Returns whether the service process is alive.
    Used by Kubernetes/Docker for restart decisions.
    """
    return LivenessResponse(
        status="alive",
        timestamp=datetime.now(timezone.utc).isoformat(),
    )
