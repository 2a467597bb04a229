# =============================================================================
# core/models/transfer.py - Transfer & Quote Schemas
# =============================================================================
# - TransferQuoteResponse: What a send amount costs at the stored rate
# - TransferCreate: What the client asks for (the server does the math)
# - TransferResponse: The persisted transfer
# - PaymentRequest / TransferPaymentResponse: Paying with a card token
#
# Rate, fees and received amount sent by the client are ignored; they are
# recomputed from the stored exchange rate.
# =============================================================================

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import Field, field_validator

from lib.utils import normalize_currency

from .base import CamelModel


class TransferStatus(str, Enum):
    """
    Lifecycle of a transfer.

    Flow: pending -> completed (payment captured)
                  or -> failed
    """
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class DeliveryMethod(str, Enum):
    MOBILE_MONEY = "Mobile Money"
    BANK_ACCOUNT = "Bank Account"
    CASH = "cash"


class TransferQuoteResponse(CamelModel):
    send_amount: Decimal
    currency: str
    destination_currency: str
    fee: Decimal
    fee_percent: Decimal
    rate: Decimal
    converted_amount: Decimal
    received_amount: Decimal
    total_to_pay: Decimal


class TransferCreate(CamelModel):
    """
    Example:
        {
            "amount": 100,
            "currency": "CAD",
            "recipientName": "Aline Uwimana",
            "recipientPhone": "+25779000000",
            "destinationCountry": "Burundi",
            "destinationCurrency": "BIF",
            "deliveryMethod": "Mobile Money"
        }
    """
    amount: Decimal = Field(..., gt=0, decimal_places=2)
    currency: str = Field(..., min_length=3, max_length=3)
    recipient_name: str = Field(..., min_length=1, max_length=255)
    recipient_phone: str = Field(..., min_length=1, max_length=64)
    destination_country: str = Field(..., min_length=1, max_length=255)
    destination_currency: str = Field(..., min_length=3, max_length=3)
    delivery_method: DeliveryMethod
    bank_name: str | None = Field(default=None, max_length=255)
    account_number: str | None = Field(default=None, max_length=255)

    @field_validator("currency", "destination_currency")
    @classmethod
    def _upper(cls, v: str) -> str:
        return normalize_currency(v)


class TransferResponse(CamelModel):
    id: int
    user_id: int
    amount: Decimal
    currency: str
    recipient_name: str
    recipient_phone: str
    destination_country: str
    destination_currency: str
    exchange_rate: Decimal
    fees: Decimal
    received_amount: Decimal
    total_to_pay: Decimal
    delivery_method: str
    bank_name: str | None = None
    account_number: str | None = None
    status: TransferStatus
    square_payment_id: str | None = None
    created_at: datetime | None = None


class PaymentRequest(CamelModel):
    """Single-use card token produced by the Square Web Payments SDK."""
    payment_token: str = Field(..., min_length=1)


class TransferPaymentResponse(CamelModel):
    success: bool = True
    message: str = "Payment processed successfully"
    transfer: TransferResponse
    payment_id: str
    timestamp: datetime
