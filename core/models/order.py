# =============================================================================
# core/models/order.py - Cart & Order Schemas
# =============================================================================
# - CartItem: One client-side cart line (product, quantity, optional price)
# - OrderCreate: Checkout request (cart + contact details + idempotency key)
# - OrderResponse: The persisted order with its line items
# =============================================================================

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import Field

from .base import CamelModel


class OrderStatus(str, Enum):
    """
    Lifecycle of an order.

    Flow: pending -> processing (paid) -> shipped -> delivered
                  or -> cancelled
    """
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class CartItem(CamelModel):
    product_id: int
    quantity: int = Field(..., ge=1, le=1000)
    custom_price: Decimal | None = Field(
        default=None,
        ge=0,
        decimal_places=2,
        description="Price the customer chose to pay; must be >= the listed price",
    )


class CustomerInfo(CamelModel):
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    note: str = ""


class OrderCreate(CamelModel):
    """
    Example:
        {
            "items": [{"productId": 3, "quantity": 2, "customPrice": 25}],
            "customerInfo": {"firstName": "Jean", "lastName": "N.", "phone": "+1514..."},
            "idempotencyKey": "8b8c1f7e-...",
            "paymentToken": "cnon:card-nonce-ok"
        }
    """
    items: list[CartItem] = Field(..., min_length=1)
    customer_info: CustomerInfo | None = None
    shipping_address: dict[str, Any] | None = Field(
        default=None,
        description="Legacy alias of customerInfo",
    )
    idempotency_key: str | None = Field(default=None, min_length=1, max_length=255)
    payment_token: str | None = None


class OrderItemResponse(CamelModel):
    id: int
    product_id: int
    quantity: int
    price: Decimal
    line_total: Decimal
    product_name: str | None = None


class OrderResponse(CamelModel):
    id: int
    user_id: int
    total: Decimal
    currency: str
    status: OrderStatus
    shipping_address: dict[str, Any]
    square_payment_id: str | None = None
    idempotency_key: str | None = None
    created_at: datetime | None = None
    items: list[OrderItemResponse] = Field(default_factory=list)


class OrderPaymentResponse(CamelModel):
    success: bool = True
    message: str = "Payment processed successfully"
    order: OrderResponse
    payment_id: str
    timestamp: datetime
