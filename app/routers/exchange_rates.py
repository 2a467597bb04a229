# =============================================================================
# app/routers/exchange_rates.py - Public Rate Lookup
# =============================================================================
# Endpoints:
#   GET /api/exchange-rates?from=CAD&to=BIF - Stored rate for a pair
# =============================================================================

from fastapi import APIRouter, Query

from app.dependencies import DbDep
from core.models.exchange_rate import RateLookupResponse
from core.services.exchange_rate_service import ExchangeRateService

router = APIRouter()


@router.get("/exchange-rates", response_model=RateLookupResponse)
def get_exchange_rate(
    db: DbDep,
    from_currency: str = Query(..., alias="from", min_length=3, max_length=3),
    to_currency: str = Query(..., alias="to", min_length=3, max_length=3),
) -> RateLookupResponse:
    """
    Look up the stored rate for a currency pair.

    Codes are case-insensitive.

    Raises:
        404: If no rate is stored for the pair
        422: If `from` or `to` is missing
    """
    return ExchangeRateService.lookup(db, from_currency, to_currency)
