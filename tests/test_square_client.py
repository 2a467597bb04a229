# =============================================================================
# tests/test_square_client.py - Square Payments Client Tests
# =============================================================================
# The client is exercised against httpx.MockTransport, so no request ever
# leaves the process.
# =============================================================================

import json
from decimal import Decimal

import httpx
import pytest

from app.exceptions import (
    PaymentConfigurationError,
    PaymentDeclinedError,
    PaymentError,
    PaymentGatewayError,
)
from lib.square_client import (
    PaymentResult,
    SquareClient,
    build_idempotency_key,
    to_cents,
)


SANDBOX_URL = "https://connect.squareupsandbox.com"


def make_client(handler, access_token="sq-token", location_id="LOC-1") -> SquareClient:
    return SquareClient(
        access_token=access_token,
        location_id=location_id,
        base_url=SANDBOX_URL,
        api_version="2024-01-18",
        http_client=httpx.Client(transport=httpx.MockTransport(handler)),
    )


def charge(client: SquareClient, amount="103.00", **kwargs) -> PaymentResult:
    params = {
        "source_id": "cnon:card-nonce-ok",
        "amount": Decimal(amount),
        "currency": "CAD",
        "idempotency_key": "transfer_1_1_abc",
        "reference_id": "transfer_1",
    }
    params.update(kwargs)
    return client.create_payment(**params)


# =============================================================================
# Success Tests
# =============================================================================

class TestCreatePayment:
    """Test a captured payment."""

    def test_request_shape(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["headers"] = request.headers
            seen["body"] = json.loads(request.content)
            return httpx.Response(
                200,
                json={"payment": {"id": "sq_pay_1", "status": "COMPLETED", "source_type": "CARD"}},
            )

        result = charge(make_client(handler), note="Transfer to Aline", buyer_email="jean@example.com")

        assert result == PaymentResult("sq_pay_1", "COMPLETED", "CARD")
        assert seen["url"] == f"{SANDBOX_URL}/v2/payments"
        assert seen["headers"]["authorization"] == "Bearer sq-token"
        assert seen["headers"]["square-version"] == "2024-01-18"

        body = seen["body"]
        assert body["amount_money"] == {"amount": 10300, "currency": "CAD"}
        assert body["location_id"] == "LOC-1"
        assert body["autocomplete"] is True
        assert body["reference_id"] == "transfer_1"
        assert body["idempotency_key"] == "transfer_1_1_abc"
        assert body["note"] == "Transfer to Aline"
        assert body["buyer_email_address"] == "jean@example.com"

    def test_optional_fields_omitted(self):
        seen = {}

        def handler(request):
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"payment": {"id": "p", "status": "COMPLETED"}})

        charge(make_client(handler, location_id=None))

        assert "location_id" not in seen["body"]
        assert "note" not in seen["body"]
        assert "buyer_email_address" not in seen["body"]

    def test_afterpay_payment_method(self):
        def handler(request):
            return httpx.Response(
                200,
                json={"payment": {"id": "p", "status": "COMPLETED", "source_type": "BUY_NOW_PAY_LATER"}},
            )

        assert charge(make_client(handler)).payment_method == "afterpay"


# =============================================================================
# Failure Tests
# =============================================================================

class TestPaymentFailures:
    """Test declines, transport errors and local validation."""

    def test_known_decline_code(self):
        def handler(request):
            return httpx.Response(
                402,
                json={"errors": [{"code": "INSUFFICIENT_FUNDS", "detail": "Authorization error"}]},
            )

        with pytest.raises(PaymentDeclinedError) as exc_info:
            charge(make_client(handler))

        assert exc_info.value.status_code == 402
        assert exc_info.value.message == "Insufficient funds on your card."
        assert exc_info.value.details == {"type": "insufficient_funds", "square_code": "INSUFFICIENT_FUNDS"}

    def test_unknown_code_uses_square_detail(self):
        def handler(request):
            return httpx.Response(
                400,
                json={"errors": [{"code": "SOMETHING_NEW", "detail": "Card not supported"}]},
            )

        with pytest.raises(PaymentDeclinedError) as exc_info:
            charge(make_client(handler))

        assert exc_info.value.message == "Card not supported"
        assert exc_info.value.error_type == "payment_error"

    def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(PaymentGatewayError) as exc_info:
            charge(make_client(handler))

        assert exc_info.value.status_code == 502

    def test_non_json_response(self):
        def handler(request):
            return httpx.Response(503, text="<html>Service Unavailable</html>")

        with pytest.raises(PaymentGatewayError):
            charge(make_client(handler))

    @pytest.mark.parametrize("amount", ["0", "-5", "1000000.01"])
    def test_invalid_amount_never_calls_square(self, amount):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json={})

        with pytest.raises(PaymentError) as exc_info:
            charge(make_client(handler), amount=amount)

        assert exc_info.value.code == "INVALID_AMOUNT"
        assert calls == []

    def test_missing_access_token(self):
        def handler(request):
            return httpx.Response(200, json={})

        with pytest.raises(PaymentConfigurationError) as exc_info:
            charge(make_client(handler, access_token=None))

        assert exc_info.value.status_code == 500


# =============================================================================
# Helper Tests
# =============================================================================

class TestHelpers:
    """Test module-level helpers."""

    def test_idempotency_key_is_stable_per_token(self):
        key = build_idempotency_key("order", 12, "cnon:card-nonce-ok")

        assert key.startswith("order_12_")
        assert key == build_idempotency_key("order", 12, "cnon:card-nonce-ok")
        assert key != build_idempotency_key("order", 12, "cnon:other-card")
        assert key != build_idempotency_key("transfer", 12, "cnon:card-nonce-ok")

    def test_idempotency_key_fits_square_limit(self):
        key = build_idempotency_key("transfer", 9_999_999_999, "cnon:" + "x" * 200)
        assert len(key) <= 45

    def test_to_cents(self):
        assert to_cents(Decimal("103.00")) == 10300
        assert to_cents(Decimal("0.1")) == 10
        assert to_cents(Decimal("19.999")) == 2000

    def test_base_url_strips_trailing_slash(self):
        client = SquareClient("t", None, SANDBOX_URL + "/", "2024-01-18")
        try:
            assert client.base_url == SANDBOX_URL
        finally:
            client.close()
