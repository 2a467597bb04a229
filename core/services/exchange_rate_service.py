# =============================================================================
# core/services/exchange_rate_service.py - Exchange Rate Business Logic
# =============================================================================
# Stored conversion factors between currency pairs. Admins maintain them;
# the transfer calculator and transfer creation read them.
# =============================================================================

import logging
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.exceptions import ConflictError, ExchangeRateNotFoundError, ResourceNotFoundError
from core.models.exchange_rate import ExchangeRateWrite, RateLookupResponse
from lib.orm import ExchangeRate
from lib.utils import normalize_currency

logger = logging.getLogger(__name__)


class ExchangeRateService:
    """Service for exchange rate reads and admin maintenance."""

    @staticmethod
    def find(db: Session, from_currency: str, to_currency: str) -> ExchangeRate | None:
        return db.scalar(
            select(ExchangeRate).where(
                ExchangeRate.from_currency == normalize_currency(from_currency),
                ExchangeRate.to_currency == normalize_currency(to_currency),
            )
        )

    @staticmethod
    def get_rate(db: Session, from_currency: str, to_currency: str) -> Decimal:
        """
        Units of to_currency bought by one unit of from_currency.

        A currency converts to itself at 1 without a stored row.

        Raises:
            ExchangeRateNotFoundError: If no rate is stored for the pair
        """
        source = normalize_currency(from_currency)
        target = normalize_currency(to_currency)
        if source == target:
            return Decimal("1")

        row = ExchangeRateService.find(db, source, target)
        if row is None:
            raise ExchangeRateNotFoundError(source, target)
        return Decimal(row.rate)

    @staticmethod
    def lookup(db: Session, from_currency: str, to_currency: str) -> RateLookupResponse:
        """Public rate lookup for the transfer calculator."""
        source = normalize_currency(from_currency)
        target = normalize_currency(to_currency)

        row = ExchangeRateService.find(db, source, target)
        if row is None:
            raise ExchangeRateNotFoundError(source, target)

        return RateLookupResponse(
            rate=float(row.rate),
            from_=row.from_currency,
            to=row.to_currency,
            id=row.id,
            updated_at=row.updated_at,
        )

    # -------------------------------------------------------------------------
    # Admin maintenance
    # -------------------------------------------------------------------------

    @staticmethod
    def list_rates(db: Session) -> list[ExchangeRate]:
        return list(
            db.scalars(
                select(ExchangeRate).order_by(ExchangeRate.from_currency, ExchangeRate.to_currency)
            ).all()
        )

    @staticmethod
    def get(db: Session, rate_id: int) -> ExchangeRate:
        row = db.get(ExchangeRate, rate_id)
        if row is None:
            raise ResourceNotFoundError("exchange rate", rate_id)
        return row

    @staticmethod
    def _pair_conflict(data: ExchangeRateWrite) -> ConflictError:
        pair = f"{data.from_currency}/{data.to_currency}"
        return ConflictError(
            message=f"An exchange rate already exists for {pair}",
            field="currency pair",
            value=pair,
        )

    @staticmethod
    def create(db: Session, data: ExchangeRateWrite) -> ExchangeRate:
        """
        Raises:
            ConflictError: If the pair already has a rate
        """
        if ExchangeRateService.find(db, data.from_currency, data.to_currency):
            raise ExchangeRateService._pair_conflict(data)

        row = ExchangeRate(
            from_currency=data.from_currency,
            to_currency=data.to_currency,
            rate=data.rate,
        )
        db.add(row)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ExchangeRateService._pair_conflict(data) from None

        db.refresh(row)
        logger.info(f"Created exchange rate {row.from_currency}->{row.to_currency} = {row.rate}")
        return row

    @staticmethod
    def update(db: Session, rate_id: int, data: ExchangeRateWrite) -> ExchangeRate:
        row = ExchangeRateService.get(db, rate_id)

        existing = ExchangeRateService.find(db, data.from_currency, data.to_currency)
        if existing and existing.id != row.id:
            raise ExchangeRateService._pair_conflict(data)

        row.from_currency = data.from_currency
        row.to_currency = data.to_currency
        row.rate = data.rate
        db.commit()
        db.refresh(row)
        logger.info(f"Updated exchange rate {row.id}: {row.from_currency}->{row.to_currency} = {row.rate}")
        return row

    @staticmethod
    def delete(db: Session, rate_id: int) -> None:
        row = ExchangeRateService.get(db, rate_id)
        db.delete(row)
        db.commit()
        logger.info(f"Deleted exchange rate {rate_id}")
