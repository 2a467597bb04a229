# =============================================================================
# core/services/order_service.py - Checkout Business Logic
# =============================================================================
# Turns a client cart into a persisted order and (optionally) charges it.
#
# Checkout rules:
# - An idempotency key replays: the same user + key returns the first order
#   and never writes it twice. A paid order is never charged again; one left
#   pending by a decline is charged with the replay's token.
# - Every line price is re-validated against the product's listed minimum;
#   the client's figures are never trusted.
# - The order and its items are written in one transaction, before any
#   charge, so a failed payment leaves a pending order the user can retry.
# =============================================================================

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import settings
from app.exceptions import (
    AlreadyPaidError,
    PaymentError,
    PriceBelowMinimumError,
    ProductUnavailableError,
    ResourceNotFoundError,
)
from core.models.order import (
    CartItem,
    CustomerInfo,
    OrderItemResponse,
    OrderResponse,
    OrderStatus,
)
from core.pricing import CartLine, cart_total, resolve_line_price
from lib.mailer import Mailer
from lib.orm import Order, OrderItem, Product, User
from lib.square_client import PaymentResult, SquareClient, build_idempotency_key
from lib.utils import localized

logger = logging.getLogger(__name__)


class OrderService:
    """
    Service for marketplace orders.

    Provides a clean interface between API routes and database.
    """

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @staticmethod
    def find_by_idempotency_key(db: Session, user: User, idempotency_key: str) -> Order | None:
        return db.scalar(
            select(Order).where(
                Order.user_id == user.id,
                Order.idempotency_key == idempotency_key,
            )
        )

    @staticmethod
    def list_for_user(db: Session, user: User) -> list[Order]:
        """The user's orders, newest first."""
        return list(
            db.scalars(
                select(Order)
                .where(Order.user_id == user.id)
                .order_by(Order.created_at.desc(), Order.id.desc())
            ).all()
        )

    @staticmethod
    def get_for_user(db: Session, user: User, order_id: int) -> Order:
        """
        Raises:
            ResourceNotFoundError: If the order doesn't exist or belongs to someone else
        """
        order = db.get(Order, order_id)
        if order is None or order.user_id != user.id:
            raise ResourceNotFoundError("order", order_id)
        return order

    # -------------------------------------------------------------------------
    # Checkout
    # -------------------------------------------------------------------------

    @staticmethod
    def resolve_lines(db: Session, items: list[CartItem]) -> list[CartLine]:
        """
        Load every product in the cart and fix the unit price charged.

        Raises:
            ResourceNotFoundError: Unknown product (400, it's a bad cart)
            ProductUnavailableError: Product out of stock
            PriceBelowMinimumError: Custom price under the listed price
        """
        lines = []
        for item in items:
            product = db.get(Product, item.product_id)
            if product is None:
                raise ResourceNotFoundError("product", item.product_id, status_code=400)
            if not product.in_stock:
                raise ProductUnavailableError(product.id)

            try:
                price = resolve_line_price(product.price, item.custom_price)
            except ValueError:
                raise PriceBelowMinimumError(product.id, item.custom_price, product.price) from None

            lines.append(CartLine(product_id=product.id, quantity=item.quantity, price=price))
        return lines

    @staticmethod
    def _contact_details(
        customer_info: CustomerInfo | None,
        shipping_address: dict[str, Any] | None,
    ) -> dict[str, Any]:
        if customer_info is not None:
            return customer_info.model_dump(by_alias=True)
        return dict(shipping_address or {})

    @staticmethod
    def create_order(
        db: Session,
        user: User,
        items: list[CartItem],
        customer_info: CustomerInfo | None = None,
        shipping_address: dict[str, Any] | None = None,
        idempotency_key: str | None = None,
        payment_token: str | None = None,
        gateway: SquareClient | None = None,
        mailer: Mailer | None = None,
    ) -> Order:
        """
        Create an order from a cart and charge it when a token is given.

        Args:
            db: Database session
            user: Buyer
            items: Cart lines
            customer_info: Contact details for delivery
            shipping_address: Legacy free-form contact details
            idempotency_key: Client-generated key; replays return the first order
            payment_token: Card token; when set the order is charged right away
            gateway: Payment client used with payment_token
            mailer: Confirmation sender (best effort)

        Returns:
            The order (status processing if charged, pending otherwise)

        Raises:
            ResourceNotFoundError / ProductUnavailableError / PriceBelowMinimumError:
                Invalid cart, nothing is written
            PaymentError: Charge failed, the pending order is kept
        """
        if idempotency_key:
            existing = OrderService.find_by_idempotency_key(db, user, idempotency_key)
            if existing is not None:
                return OrderService._replay(db, user, existing, payment_token, gateway, mailer)

        lines = OrderService.resolve_lines(db, items)

        order = Order(
            user_id=user.id,
            total=cart_total(lines),
            currency=settings.ORDER_CURRENCY,
            status=OrderStatus.PENDING.value,
            shipping_address=OrderService._contact_details(customer_info, shipping_address),
            idempotency_key=idempotency_key,
            items=[
                OrderItem(product_id=line.product_id, quantity=line.quantity, price=line.price)
                for line in lines
            ],
        )
        db.add(order)
        try:
            db.commit()
        except IntegrityError:
            # A concurrent request with the same key won the insert
            db.rollback()
            existing = OrderService.find_by_idempotency_key(db, user, idempotency_key or "")
            if existing is None:
                raise
            return OrderService._replay(db, user, existing, payment_token, gateway, mailer)

        db.refresh(order)
        logger.info(f"Created order {order.id} for user {user.id}: {order.total} {order.currency}")

        if payment_token and gateway is not None:
            OrderService._charge(db, user, order, payment_token, gateway, mailer)

        return order

    @staticmethod
    def _replay(
        db: Session,
        user: User,
        order: Order,
        payment_token: str | None,
        gateway: SquareClient | None,
        mailer: Mailer | None,
    ) -> Order:
        """
        Answer a request that reuses an idempotency key.

        The stored order is returned as is. A still-pending order (its first
        charge was declined) is charged with the new token; a paid one never is.
        """
        logger.info(f"Idempotent replay of order {order.id} for user {user.id}")
        if payment_token and gateway is not None and order.status == OrderStatus.PENDING.value:
            OrderService._charge(db, user, order, payment_token, gateway, mailer)
        return order

    @staticmethod
    def pay_order(
        db: Session,
        user: User,
        order_id: int,
        payment_token: str,
        gateway: SquareClient,
        mailer: Mailer | None = None,
    ) -> tuple[Order, PaymentResult]:
        """
        Charge an existing pending order.

        Raises:
            ResourceNotFoundError: Unknown order or not the user's
            AlreadyPaidError: Order no longer pending
            PaymentError: Any gateway failure
        """
        order = OrderService.get_for_user(db, user, order_id)
        if order.status != OrderStatus.PENDING.value:
            raise AlreadyPaidError("order", order.id)

        result = OrderService._charge(db, user, order, payment_token, gateway, mailer)
        return order, result

    @staticmethod
    def _charge(
        db: Session,
        user: User,
        order: Order,
        payment_token: str,
        gateway: SquareClient,
        mailer: Mailer | None,
    ) -> PaymentResult:
        try:
            result = gateway.create_payment(
                source_id=payment_token,
                amount=order.total,
                currency=order.currency,
                idempotency_key=build_idempotency_key("order", order.id, payment_token),
                reference_id=f"order_{order.id}",
                note=f"Gisabo marketplace order {order.id}",
                buyer_email=user.email,
            )
        except PaymentError as e:
            # The order is kept pending; tell the client which one to pay later
            e.details["order_id"] = order.id
            raise

        order.status = OrderStatus.PROCESSING.value
        order.square_payment_id = result.payment_id
        db.commit()
        db.refresh(order)
        logger.info(f"Order {order.id} paid with payment {result.payment_id}")

        if mailer is not None:
            mailer.send_order_confirmation(order, user, order.items, result.payment_id)

        return result

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    @staticmethod
    def to_response(order: Order, lang: str | None = None) -> OrderResponse:
        """OrderResponse with item lines and localized product names."""
        items = [
            OrderItemResponse(
                id=item.id,
                product_id=item.product_id,
                quantity=item.quantity,
                price=item.price,
                line_total=item.line_total,
                product_name=localized(item.product, "name", lang) if item.product else None,
            )
            for item in order.items
        ]
        return OrderResponse(
            id=order.id,
            user_id=order.user_id,
            total=order.total,
            currency=order.currency,
            status=OrderStatus(order.status),
            shipping_address=order.shipping_address,
            square_payment_id=order.square_payment_id,
            idempotency_key=order.idempotency_key,
            created_at=order.created_at,
            items=items,
        )
