# =============================================================================
# tests/test_orders_api.py - Checkout Endpoint Tests
# =============================================================================
# This module contains tests for:
# - Order totals and custom prices
# - Price-floor re-validation (nothing persisted on failure)
# - Idempotent order creation
# - Charging at checkout and paying a pending order later
# =============================================================================

from decimal import Decimal

import pytest

from app.exceptions import PaymentDeclinedError, PriceBelowMinimumError
from core.models.order import CartItem
from core.services.order_service import OrderService
from lib.orm import Order, OrderItem


CUSTOMER = {"firstName": "Jean", "lastName": "Niyonzima", "phone": "+15145550100"}


def _cart(catalog, **overrides):
    payload = {
        "items": [
            {"productId": catalog["rice"].id, "quantity": 2},
            {"productId": catalog["pepper"].id, "quantity": 3, "customPrice": "6.00"},
        ],
        "customerInfo": CUSTOMER,
    }
    payload.update(overrides)
    return payload


# =============================================================================
# Creation Tests
# =============================================================================

class TestCreateOrder:
    """Test POST /api/orders without payment."""

    def test_total_is_sum_of_lines(self, client, auth_headers, catalog):
        response = client.post("/api/orders", json=_cart(catalog), headers=auth_headers)

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "pending"
        assert body["currency"] == "CAD"
        # 2 x 20.00 + 3 x 6.00
        assert Decimal(body["total"]) == Decimal("58.00")
        assert Decimal(body["total"]) == sum(Decimal(i["lineTotal"]) for i in body["items"])

    def test_items_are_persisted_with_charged_price(self, client, db, auth_headers, catalog):
        body = client.post("/api/orders", json=_cart(catalog), headers=auth_headers).json()

        items = db.query(OrderItem).filter(OrderItem.order_id == body["id"]).order_by(OrderItem.id).all()
        assert [(i.product_id, i.quantity, i.price) for i in items] == [
            (catalog["rice"].id, 2, Decimal("20.00")),
            (catalog["pepper"].id, 3, Decimal("6.00")),
        ]

    def test_customer_info_is_stored(self, client, auth_headers, catalog):
        body = client.post("/api/orders", json=_cart(catalog), headers=auth_headers).json()
        assert body["shippingAddress"]["firstName"] == "Jean"

    def test_legacy_shipping_address(self, client, auth_headers, catalog):
        payload = _cart(catalog, customerInfo=None, shippingAddress={"city": "Montréal"})
        body = client.post("/api/orders", json=payload, headers=auth_headers).json()
        assert body["shippingAddress"] == {"city": "Montréal"}

    def test_price_below_minimum_never_persists(self, client, db, auth_headers, catalog):
        payload = _cart(
            catalog,
            items=[
                {"productId": catalog["rice"].id, "quantity": 1},
                {"productId": catalog["pepper"].id, "quantity": 1, "customPrice": "5.49"},
            ],
        )

        response = client.post("/api/orders", json=payload, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["code"] == "PRICE_BELOW_MINIMUM"
        assert db.query(Order).count() == 0
        assert db.query(OrderItem).count() == 0

    def test_price_error_hides_internal_value_error(self, db, catalog):
        item = CartItem.model_validate(
            {"productId": catalog["pepper"].id, "quantity": 1, "customPrice": "5.49"}
        )

        with pytest.raises(PriceBelowMinimumError) as exc_info:
            OrderService.resolve_lines(db, [item])

        assert exc_info.value.__cause__ is None
        assert exc_info.value.__suppress_context__ is True

    def test_unknown_product(self, client, db, auth_headers, catalog):
        payload = _cart(catalog, items=[{"productId": 9999, "quantity": 1}])

        response = client.post("/api/orders", json=payload, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["code"] == "PRODUCT_NOT_FOUND"
        assert db.query(Order).count() == 0

    def test_out_of_stock(self, client, auth_headers, catalog):
        payload = _cart(catalog, items=[{"productId": catalog["fish"].id, "quantity": 1}])

        response = client.post("/api/orders", json=payload, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["code"] == "PRODUCT_UNAVAILABLE"

    def test_empty_cart(self, client, auth_headers, catalog):
        response = client.post("/api/orders", json=_cart(catalog, items=[]), headers=auth_headers)
        assert response.status_code == 422

    def test_zero_quantity(self, client, auth_headers, catalog):
        payload = _cart(catalog, items=[{"productId": catalog["rice"].id, "quantity": 0}])
        response = client.post("/api/orders", json=payload, headers=auth_headers)
        assert response.status_code == 422


# =============================================================================
# Idempotency Tests
# =============================================================================

class TestIdempotency:
    """Test replays carrying the same idempotency key."""

    def test_replay_returns_first_order(self, client, db, auth_headers, catalog):
        payload = _cart(catalog, idempotencyKey="checkout-1")

        first = client.post("/api/orders", json=payload, headers=auth_headers).json()
        second = client.post("/api/orders", json=payload, headers=auth_headers).json()

        assert second["id"] == first["id"]
        assert db.query(Order).count() == 1
        assert db.query(OrderItem).count() == 2

    def test_replay_is_not_charged_twice(self, client, auth_headers, catalog, gateway):
        payload = _cart(catalog, idempotencyKey="checkout-2", paymentToken="tok")

        first = client.post("/api/orders", json=payload, headers=auth_headers).json()
        second = client.post("/api/orders", json=payload, headers=auth_headers).json()

        assert second["id"] == first["id"]
        assert second["status"] == "processing"
        assert len(gateway.calls) == 1

    def test_replay_charges_order_left_pending_by_decline(self, client, db, auth_headers, catalog, gateway):
        gateway.decline = PaymentDeclinedError("Your card was declined.", "card_declined")
        declined = client.post(
            "/api/orders",
            json=_cart(catalog, idempotencyKey="checkout-3", paymentToken="tok-declined"),
            headers=auth_headers,
        )
        assert declined.status_code == 402

        gateway.decline = None
        response = client.post(
            "/api/orders",
            json=_cart(catalog, idempotencyKey="checkout-3", paymentToken="tok-new-card"),
            headers=auth_headers,
        )

        body = response.json()
        assert body["id"] == declined.json()["details"]["order_id"]
        assert body["status"] == "processing"
        assert body["squarePaymentId"] == "pay_2"
        assert len(gateway.calls) == 2
        assert db.query(Order).count() == 1

    def test_replay_without_token_leaves_pending_order(self, client, auth_headers, catalog, gateway):
        payload = _cart(catalog, idempotencyKey="checkout-4")

        client.post("/api/orders", json=payload, headers=auth_headers)
        body = client.post("/api/orders", json=payload, headers=auth_headers).json()

        assert body["status"] == "pending"
        assert gateway.calls == []

    def test_replay_ignores_changed_cart(self, client, db, auth_headers, catalog):
        client.post("/api/orders", json=_cart(catalog, idempotencyKey="k"), headers=auth_headers)
        changed = _cart(catalog, idempotencyKey="k", items=[{"productId": catalog["rice"].id, "quantity": 9}])

        body = client.post("/api/orders", json=changed, headers=auth_headers).json()

        assert Decimal(body["total"]) == Decimal("58.00")
        assert db.query(Order).count() == 1

    def test_key_is_scoped_per_user(self, client, db, auth_headers, other_auth_headers, catalog):
        payload = _cart(catalog, idempotencyKey="shared-key")

        mine = client.post("/api/orders", json=payload, headers=auth_headers).json()
        theirs = client.post("/api/orders", json=payload, headers=other_auth_headers).json()

        assert mine["id"] != theirs["id"]
        assert db.query(Order).count() == 2

    def test_without_key_every_request_creates_an_order(self, client, db, auth_headers, catalog):
        client.post("/api/orders", json=_cart(catalog), headers=auth_headers)
        client.post("/api/orders", json=_cart(catalog), headers=auth_headers)
        assert db.query(Order).count() == 2


# =============================================================================
# Payment Tests
# =============================================================================

class TestCheckoutPayment:
    """Test charging at checkout and paying later."""

    def test_charge_at_checkout(self, client, auth_headers, catalog, gateway, mailer):
        response = client.post(
            "/api/orders",
            json=_cart(catalog, paymentToken="cnon:card-nonce-ok"),
            headers=auth_headers,
        )

        body = response.json()
        assert response.status_code == 201
        assert body["status"] == "processing"
        assert body["squarePaymentId"] == "pay_1"

        call = gateway.calls[0]
        assert call["amount"] == Decimal("58.00")
        assert call["currency"] == "CAD"
        assert call["reference_id"] == f"order_{body['id']}"
        assert mailer.orders == [(body["id"], body["userId"], "pay_1", 2)]

    def test_decline_keeps_pending_order(self, client, db, auth_headers, catalog, gateway, mailer):
        gateway.decline = PaymentDeclinedError("Your card was declined.", "card_declined")

        response = client.post(
            "/api/orders",
            json=_cart(catalog, paymentToken="tok"),
            headers=auth_headers,
        )

        assert response.status_code == 402
        assert response.json()["code"] == "PAYMENT_DECLINED"
        assert mailer.orders == []

        orders = db.query(Order).all()
        assert len(orders) == 1
        assert orders[0].status == "pending"
        assert response.json()["details"]["order_id"] == orders[0].id

    def test_pay_pending_order(self, client, db, auth_headers, catalog, gateway):
        order = client.post("/api/orders", json=_cart(catalog), headers=auth_headers).json()

        response = client.post(
            f"/api/orders/{order['id']}/pay",
            json={"paymentToken": "tok"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["order"]["status"] == "processing"
        assert response.json()["paymentId"] == "pay_1"

        db.expire_all()
        assert db.get(Order, order["id"]).square_payment_id == "pay_1"

    def test_pay_twice(self, client, auth_headers, catalog, gateway):
        order = client.post(
            "/api/orders", json=_cart(catalog, paymentToken="tok"), headers=auth_headers
        ).json()

        response = client.post(
            f"/api/orders/{order['id']}/pay",
            json={"paymentToken": "tok"},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["code"] == "ALREADY_PAID"
        assert len(gateway.calls) == 1

    def test_pay_other_users_order(self, client, auth_headers, other_auth_headers, catalog, gateway):
        order = client.post("/api/orders", json=_cart(catalog), headers=auth_headers).json()

        response = client.post(
            f"/api/orders/{order['id']}/pay",
            json={"paymentToken": "tok"},
            headers=other_auth_headers,
        )

        assert response.status_code == 404
        assert gateway.calls == []


# =============================================================================
# Read Tests
# =============================================================================

class TestReadOrders:
    """Test GET /api/orders and its items."""

    def test_list_own_orders(self, client, auth_headers, other_auth_headers, catalog):
        mine = client.post("/api/orders", json=_cart(catalog), headers=auth_headers).json()
        client.post("/api/orders", json=_cart(catalog), headers=other_auth_headers)

        response = client.get("/api/orders", headers=auth_headers)

        assert response.status_code == 200
        assert [o["id"] for o in response.json()] == [mine["id"]]

    def test_items_with_localized_names(self, client, auth_headers, catalog):
        order = client.post("/api/orders", json=_cart(catalog), headers=auth_headers).json()

        response = client.get(f"/api/orders/{order['id']}/items", params={"lang": "en"}, headers=auth_headers)

        assert response.status_code == 200
        assert [i["productName"] for i in response.json()] == ["Rice", "Chili pepper"]

    def test_other_users_order_is_hidden(self, client, auth_headers, other_auth_headers, catalog):
        order = client.post("/api/orders", json=_cart(catalog), headers=auth_headers).json()

        response = client.get(f"/api/orders/{order['id']}", headers=other_auth_headers)
        assert response.status_code == 404
