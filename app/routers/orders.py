# =============================================================================
# app/routers/orders.py - Marketplace Order Endpoints
# =============================================================================
# Endpoints:
#   POST /api/orders                    - Checkout a cart (optionally pays it)
#   GET  /api/orders                    - Current user's orders
#   GET  /api/orders/{order_id}         - One order with its items
#   GET  /api/orders/{order_id}/items   - Items of one order
#   POST /api/orders/{order_id}/pay     - Pay a pending order
# =============================================================================

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query, status

from app.auth import get_current_user
from app.dependencies import DbDep, MailerDep, SquareDep
from core.models.order import (
    OrderCreate,
    OrderItemResponse,
    OrderPaymentResponse,
    OrderResponse,
)
from core.models.transfer import PaymentRequest
from core.services.order_service import OrderService
from lib.orm import User

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def create_order(
    request: OrderCreate,
    db: DbDep,
    gateway: SquareDep,
    mailer: MailerDep,
    user: User = Depends(get_current_user),
) -> OrderResponse:
    """
    Create an order from a cart.

    - Each line's price is re-checked against the product's listed minimum.
    - Resending the same `idempotencyKey` returns the first order; its cart
      is never rewritten.
    - With a `paymentToken` the order is charged right away; if the charge
      fails the order stays pending and can be paid later, through `/pay` or
      by resending the request with a new token.

    Raises:
        400: Unknown or out-of-stock product, or a price below the minimum
        402: Card declined
    """
    order = OrderService.create_order(
        db,
        user,
        request.items,
        customer_info=request.customer_info,
        shipping_address=request.shipping_address,
        idempotency_key=request.idempotency_key,
        payment_token=request.payment_token,
        gateway=gateway,
        mailer=mailer,
    )
    return OrderService.to_response(order)


@router.get("", response_model=list[OrderResponse])
def list_orders(
    db: DbDep,
    user: User = Depends(get_current_user),
    lang: str = Query(default="fr"),
) -> list[OrderResponse]:
    """List the current user's orders, newest first."""
    return [OrderService.to_response(o, lang) for o in OrderService.list_for_user(db, user)]


@router.get("/{order_id}", response_model=OrderResponse)
def get_order(
    order_id: int,
    db: DbDep,
    user: User = Depends(get_current_user),
    lang: str = Query(default="fr"),
) -> OrderResponse:
    """
    Raises:
        404: If the order doesn't exist or belongs to another user
    """
    return OrderService.to_response(OrderService.get_for_user(db, user, order_id), lang)


@router.get("/{order_id}/items", response_model=list[OrderItemResponse])
def get_order_items(
    order_id: int,
    db: DbDep,
    user: User = Depends(get_current_user),
    lang: str = Query(default="fr"),
) -> list[OrderItemResponse]:
    order = OrderService.get_for_user(db, user, order_id)
    return OrderService.to_response(order, lang).items


@router.post("/{order_id}/pay", response_model=OrderPaymentResponse)
def pay_order(
    order_id: int,
    request: PaymentRequest,
    db: DbDep,
    gateway: SquareDep,
    mailer: MailerDep,
    user: User = Depends(get_current_user),
) -> OrderPaymentResponse:
    """
    Charge a pending order's total to a card token.

    Raises:
        400: Order already paid
        402: Card declined (order stays pending)
        404: Unknown order
    """
    order, result = OrderService.pay_order(
        db,
        user,
        order_id,
        request.payment_token,
        gateway=gateway,
        mailer=mailer,
    )

    return OrderPaymentResponse(
        order=OrderService.to_response(order),
        payment_id=result.payment_id,
        timestamp=datetime.now(timezone.utc),
    )
