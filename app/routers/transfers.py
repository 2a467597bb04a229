# =============================================================================
# app/routers/transfers.py - Money Transfer Endpoints
# =============================================================================
# Endpoints:
#   GET  /api/transfers/quote?amount=&from=&to=  - Price a transfer (public)
#   POST /api/transfers                          - Create a pending transfer
#   GET  /api/transfers                          - Current user's transfers
#   GET  /api/transfers/{transfer_id}            - One of the user's transfers
#   POST /api/transfers/{transfer_id}/pay        - Pay with a card token
# =============================================================================

import logging
from datetime import datetime, timezone
from decimal import Decimal

from fastapi import APIRouter, Depends, Query, status

from app.auth import get_current_user
from app.dependencies import DbDep, MailerDep, SquareDep
from core.models.transfer import (
    PaymentRequest,
    TransferCreate,
    TransferPaymentResponse,
    TransferQuoteResponse,
    TransferResponse,
)
from core.services.transfer_service import TransferService
from lib.orm import User

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/quote", response_model=TransferQuoteResponse)
def quote_transfer(
    db: DbDep,
    amount: Decimal = Query(..., ge=0),
    from_currency: str = Query(..., alias="from", min_length=3, max_length=3),
    to_currency: str = Query(..., alias="to", min_length=3, max_length=3),
) -> TransferQuoteResponse:
    """
    Price a transfer at the stored exchange rate.

    Nothing is persisted. The figures are the ones POST /api/transfers
    will record for the same amount and pair.

    Raises:
        404: If no rate is stored for the pair
    """
    return TransferService.quote(db, amount, from_currency, to_currency)


@router.post("", response_model=TransferResponse, status_code=status.HTTP_201_CREATED)
def create_transfer(
    request: TransferCreate,
    db: DbDep,
    user: User = Depends(get_current_user),
) -> TransferResponse:
    """
    Create a pending transfer.

    Rate, fees and received amount are computed server-side.

    Raises:
        400: If the amount is out of range
        404: If no rate is stored for the pair
    """
    transfer = TransferService.create(db, user, request)
    return TransferResponse.model_validate(transfer)


@router.get("", response_model=list[TransferResponse])
def list_transfers(
    db: DbDep,
    user: User = Depends(get_current_user),
) -> list[TransferResponse]:
    """List the current user's transfers, newest first."""
    return [TransferResponse.model_validate(t) for t in TransferService.list_for_user(db, user)]


@router.get("/{transfer_id}", response_model=TransferResponse)
def get_transfer(
    transfer_id: int,
    db: DbDep,
    user: User = Depends(get_current_user),
) -> TransferResponse:
    """
    Raises:
        404: If the transfer doesn't exist or belongs to another user
    """
    return TransferResponse.model_validate(TransferService.get_for_user(db, user, transfer_id))


@router.post("/{transfer_id}/pay", response_model=TransferPaymentResponse)
def pay_transfer(
    transfer_id: int,
    request: PaymentRequest,
    db: DbDep,
    gateway: SquareDep,
    mailer: MailerDep,
    user: User = Depends(get_current_user),
) -> TransferPaymentResponse:
    """
    Charge the transfer's total (amount + fees) to a card token.

    On success the transfer is completed and a confirmation email is sent.

    Raises:
        400: Already paid
        402: Card declined (transfer left unchanged)
        404: Unknown transfer
        502: Payment processor unreachable
    """
    transfer, result = TransferService.pay(
        db,
        user,
        transfer_id,
        request.payment_token,
        gateway=gateway,
        mailer=mailer,
    )

    return TransferPaymentResponse(
        transfer=TransferResponse.model_validate(transfer),
        payment_id=result.payment_id,
        timestamp=datetime.now(timezone.utc),
    )
