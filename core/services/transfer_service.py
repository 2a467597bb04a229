# =============================================================================
# core/services/transfer_service.py - Transfer Business Logic
# =============================================================================
# Quotes, creates and pays money transfers.
#
# The server is the only source of truth for rate, fees and received amount:
# they are recomputed from the stored exchange rate on every quote and every
# creation, whatever the client displayed.
# =============================================================================

import logging
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.config import settings
from app.exceptions import AlreadyPaidError, InvalidAmountError, ResourceNotFoundError
from core.models.transfer import TransferCreate, TransferQuoteResponse, TransferStatus
from core.pricing import TransferQuote, calculate_transfer_quote
from core.services.exchange_rate_service import ExchangeRateService
from lib.mailer import Mailer
from lib.orm import Transfer, User
from lib.square_client import MAX_CHARGE_AMOUNT, PaymentResult, SquareClient, build_idempotency_key
from lib.utils import normalize_currency

logger = logging.getLogger(__name__)


class TransferService:
    """
    Service for money transfer operations.

    Provides a clean interface between API routes and database.
    """

    @staticmethod
    def _price(db: Session, amount: Decimal, from_currency: str, to_currency: str) -> TransferQuote:
        rate = ExchangeRateService.get_rate(db, from_currency, to_currency)
        return calculate_transfer_quote(
            amount,
            rate,
            fee_percent=settings.TRANSFER_FEE_PERCENT,
            minimum_fee=settings.TRANSFER_MINIMUM_FEE,
        )

    @staticmethod
    def _check_amount(amount: Decimal, allow_zero: bool = False) -> None:
        too_small = amount < 0 if allow_zero else amount <= 0
        if too_small or amount > settings.MAX_TRANSFER_AMOUNT:
            raise InvalidAmountError(amount, settings.MAX_TRANSFER_AMOUNT)

    @staticmethod
    def _check_chargeable(quote: TransferQuote) -> None:
        # The card is charged amount + fee, which must stay within the gateway limit
        if quote.total_to_pay > MAX_CHARGE_AMOUNT:
            raise InvalidAmountError(quote.send_amount, MAX_CHARGE_AMOUNT - quote.fee)

    @staticmethod
    def quote(
        db: Session,
        amount: Decimal,
        from_currency: str,
        to_currency: str,
    ) -> TransferQuoteResponse:
        """
        Price a transfer at the stored rate without persisting anything.

        Raises:
            InvalidAmountError: If amount is negative or above the maximum
            ExchangeRateNotFoundError: If the pair has no stored rate
        """
        TransferService._check_amount(amount, allow_zero=True)
        source = normalize_currency(from_currency)
        target = normalize_currency(to_currency)

        quote = TransferService._price(db, amount, source, target)
        TransferService._check_chargeable(quote)

        return TransferQuoteResponse(
            send_amount=quote.send_amount,
            currency=source,
            destination_currency=target,
            fee=quote.fee,
            fee_percent=settings.TRANSFER_FEE_PERCENT,
            rate=quote.rate,
            converted_amount=quote.converted_amount,
            received_amount=quote.received_amount,
            total_to_pay=quote.total_to_pay,
        )

    @staticmethod
    def create(db: Session, user: User, data: TransferCreate) -> Transfer:
        """
        Record a pending transfer priced at the stored rate.

        Args:
            db: Database session
            user: Sender
            data: Recipient, destination and amount

        Returns:
            The new Transfer row (status pending)

        Raises:
            InvalidAmountError: If amount is not in (0, MAX_TRANSFER_AMOUNT] or the
                total to pay exceeds the card charge limit
            ExchangeRateNotFoundError: If the pair has no stored rate
        """
        TransferService._check_amount(data.amount)
        quote = TransferService._price(db, data.amount, data.currency, data.destination_currency)
        TransferService._check_chargeable(quote)

        transfer = Transfer(
            user_id=user.id,
            amount=quote.send_amount,
            currency=data.currency,
            recipient_name=data.recipient_name,
            recipient_phone=data.recipient_phone,
            destination_country=data.destination_country,
            destination_currency=data.destination_currency,
            exchange_rate=quote.rate,
            fees=quote.fee,
            received_amount=quote.received_amount,
            delivery_method=data.delivery_method.value,
            bank_name=data.bank_name,
            account_number=data.account_number,
            status=TransferStatus.PENDING.value,
        )
        db.add(transfer)
        db.commit()
        db.refresh(transfer)

        logger.info(
            f"Created transfer {transfer.id} for user {user.id}: "
            f"{transfer.amount} {transfer.currency} -> {transfer.received_amount} {transfer.destination_currency}"
        )
        return transfer

    @staticmethod
    def list_for_user(db: Session, user: User) -> list[Transfer]:
        """The user's transfers, newest first."""
        return list(
            db.scalars(
                select(Transfer)
                .where(Transfer.user_id == user.id)
                .order_by(Transfer.created_at.desc(), Transfer.id.desc())
            ).all()
        )

    @staticmethod
    def get_for_user(db: Session, user: User, transfer_id: int) -> Transfer:
        """
        Raises:
            ResourceNotFoundError: If the transfer doesn't exist or belongs to someone else
        """
        transfer = db.get(Transfer, transfer_id)
        # Don't reveal that another user's transfer exists
        if transfer is None or transfer.user_id != user.id:
            raise ResourceNotFoundError("transfer", transfer_id)
        return transfer

    @staticmethod
    def pay(
        db: Session,
        user: User,
        transfer_id: int,
        payment_token: str,
        gateway: SquareClient,
        mailer: Mailer | None = None,
    ) -> tuple[Transfer, PaymentResult]:
        """
        Charge the card token for a transfer and mark it completed.

        The charged amount is the transfer's total to pay (amount + fees).
        If the gateway refuses the charge, the transfer is left untouched and
        the payment error propagates.

        Raises:
            ResourceNotFoundError: Unknown transfer or not the user's
            AlreadyPaidError: Transfer already completed
            PaymentError: Any gateway failure
        """
        transfer = TransferService.get_for_user(db, user, transfer_id)
        if transfer.status == TransferStatus.COMPLETED.value:
            raise AlreadyPaidError("transfer", transfer.id)

        result = gateway.create_payment(
            source_id=payment_token,
            amount=transfer.total_to_pay,
            currency=transfer.currency,
            idempotency_key=build_idempotency_key("transfer", transfer.id, payment_token),
            reference_id=f"transfer_{transfer.id}",
            note=f"Gisabo transfer to {transfer.recipient_name} ({transfer.destination_country})",
            buyer_email=user.email,
        )

        transfer.status = TransferStatus.COMPLETED.value
        transfer.square_payment_id = result.payment_id
        db.commit()
        db.refresh(transfer)
        logger.info(f"Transfer {transfer.id} paid with payment {result.payment_id}")

        if mailer is not None:
            mailer.send_transfer_confirmation(transfer, user, result.payment_id)

        return transfer, result
