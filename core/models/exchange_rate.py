# =============================================================================
# core/models/exchange_rate.py - Exchange Rate Schemas
# =============================================================================

from datetime import datetime
from decimal import Decimal

from pydantic import Field, field_validator

from lib.utils import normalize_currency

from .base import CamelModel


class ExchangeRateWrite(CamelModel):
    """
    Admin input: 1 unit of fromCurrency = rate units of toCurrency.

    Example:
        {"fromCurrency": "CAD", "toCurrency": "BIF", "rate": 2150.5}
    """
    from_currency: str = Field(..., min_length=3, max_length=3)
    to_currency: str = Field(..., min_length=3, max_length=3)
    rate: Decimal = Field(..., gt=0, decimal_places=6)

    @field_validator("from_currency", "to_currency")
    @classmethod
    def _upper(cls, v: str) -> str:
        return normalize_currency(v)


class ExchangeRateResponse(ExchangeRateWrite):
    id: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


class RateLookupResponse(CamelModel):
    """Public rate lookup, shaped for the transfer calculator."""
    rate: float
    from_: str = Field(..., alias="from")
    to: str
    id: int
    updated_at: datetime | None = None
