# =============================================================================
# lib/square_client.py - Square Payments Client
# =============================================================================
# Thin wrapper around Square's REST Payments API. Cards are tokenized in the
# browser by the Square Web SDK; the server only ever sees the single-use
# token (`source_id`) and turns it into a captured payment.
#
# Usage:
#   client = SquareClient.from_settings()
#   result = client.create_payment(
#       source_id=token,
#       amount=Decimal("103.00"),
#       currency="CAD",
#       idempotency_key=build_idempotency_key("transfer", 42, token),
#       reference_id="transfer_42",
#   )
#   result.payment_id
# =============================================================================

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

import httpx

from app.config import Settings, settings as default_settings
from app.exceptions import (
    PaymentConfigurationError,
    PaymentDeclinedError,
    PaymentError,
    PaymentGatewayError,
)

logger = logging.getLogger(__name__)

# Square rejects anything above this per charge for our account tier
MAX_CHARGE_AMOUNT = Decimal("1000000")

# Square error code -> (customer message, error type)
DECLINE_MESSAGES: dict[str, tuple[str, str]] = {
    "CARD_DECLINED": (
        "Your card was declined. Check your details or use another card.",
        "card_declined",
    ),
    "INSUFFICIENT_FUNDS": (
        "Insufficient funds on your card.",
        "insufficient_funds",
    ),
    "CVV_FAILURE": (
        "Incorrect security code (CVV).",
        "cvv_failure",
    ),
    "ADDRESS_VERIFICATION_FAILURE": (
        "The billing address does not match.",
        "address_verification_failure",
    ),
    "INVALID_EXPIRATION": (
        "Invalid card expiration date.",
        "invalid_expiration",
    ),
    "GENERIC_DECLINE": (
        "Transaction refused by your bank. Contact your bank for more information.",
        "generic_decline",
    ),
}


@dataclass(frozen=True)
class PaymentResult:
    """The fields of a Square Payment object we persist or branch on."""
    payment_id: str
    status: str
    source_type: str | None = None

    @property
    def payment_method(self) -> str:
        return "afterpay" if self.source_type == "BUY_NOW_PAY_LATER" else "card"


def build_idempotency_key(kind: str, resource_id: int, source_id: str) -> str:
    """
    Key for charging `source_id` against one transfer or order.

    Card tokens are single-use, so a retry of the same attempt (e.g. after a
    timeout) carries the same key and Square returns the original payment
    instead of charging again. Square caps keys at 45 characters, hence the
    digest of the token rather than the token itself.
    """
    digest = hashlib.sha256(source_id.encode("utf-8")).hexdigest()[:24]
    return f"{kind}_{resource_id}_{digest}"


def to_cents(amount: Decimal) -> int:
    return int((amount * 100).to_integral_value())


class SquareClient:
    """
    Square Payments API client.

    One instance wraps one httpx.Client; pass `http_client` to inject a
    transport (tests use httpx.MockTransport).
    """

    def __init__(
        self,
        access_token: str | None,
        location_id: str | None,
        base_url: str,
        api_version: str,
        http_client: httpx.Client | None = None,
        timeout: float = 30.0,
    ):
        self.access_token = access_token
        self.location_id = location_id
        self.base_url = base_url.rstrip("/")
        self.api_version = api_version
        self._http = http_client or httpx.Client(timeout=timeout)

    @classmethod
    def from_settings(cls, config: Settings | None = None) -> SquareClient:
        config = config or default_settings
        return cls(
            access_token=config.SQUARE_ACCESS_TOKEN,
            location_id=config.SQUARE_LOCATION_ID,
            base_url=config.square_base_url,
            api_version=config.SQUARE_API_VERSION,
        )

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.access_token}",
            "Content-Type": "application/json",
            "Square-Version": self.api_version,
        }

    def create_payment(
        self,
        source_id: str,
        amount: Decimal,
        currency: str,
        idempotency_key: str,
        reference_id: str,
        note: str | None = None,
        buyer_email: str | None = None,
    ) -> PaymentResult:
        """
        Charge a tokenized card and capture immediately.

        Args:
            source_id: Payment token from the Web Payments SDK
            amount: Amount in major units (e.g. dollars)
            currency: ISO currency code
            idempotency_key: Key from build_idempotency_key()
            reference_id: Our reference (e.g. "order_12")
            note: Free text shown in the Square dashboard
            buyer_email: Receipt address

        Returns:
            PaymentResult for the captured payment

        Raises:
            PaymentConfigurationError: Access token missing
            PaymentError: Amount outside the accepted range
            PaymentDeclinedError: Square refused the charge
            PaymentGatewayError: Square unreachable or malformed response
        """
        if not self.access_token:
            logger.error("SQUARE_ACCESS_TOKEN is not configured")
            raise PaymentConfigurationError("SQUARE_ACCESS_TOKEN")

        amount_cents = to_cents(amount)
        if amount_cents <= 0 or amount > MAX_CHARGE_AMOUNT:
            raise PaymentError(
                message="Invalid payment amount",
                code="INVALID_AMOUNT",
                error_type="amount_validation_error",
                details={"amount": str(amount)},
            )

        body: dict[str, Any] = {
            "source_id": source_id,
            "idempotency_key": idempotency_key,
            "amount_money": {"amount": amount_cents, "currency": currency},
            "autocomplete": True,
            "reference_id": reference_id,
        }
        if self.location_id:
            body["location_id"] = self.location_id
        if note:
            body["note"] = note
        if buyer_email:
            body["buyer_email_address"] = buyer_email

        logger.info(f"Charging {amount} {currency} for {reference_id}")

        try:
            response = self._http.post(
                f"{self.base_url}/v2/payments",
                json=body,
                headers=self._headers(),
            )
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Square request failed for {reference_id}: {e}")
            raise PaymentGatewayError(str(e))

        payment = data.get("payment") if isinstance(data, dict) else None
        if response.is_success and payment:
            logger.info(f"Payment {payment['id']} captured for {reference_id}")
            return PaymentResult(
                payment_id=payment["id"],
                status=payment.get("status", "COMPLETED"),
                source_type=payment.get("source_type"),
            )

        errors = (data.get("errors") or []) if isinstance(data, dict) else []
        logger.warning(f"Square refused payment for {reference_id}: {errors}")
        raise self._decline_from_errors(errors)

    @staticmethod
    def _decline_from_errors(errors: list[dict[str, Any]]) -> PaymentDeclinedError:
        first = errors[0] if errors else {}
        code = first.get("code", "")
        message, error_type = DECLINE_MESSAGES.get(
            code,
            (first.get("detail") or "The payment could not be processed", "payment_error"),
        )
        return PaymentDeclinedError(
            message=message,
            error_type=error_type,
            details={"square_code": code} if code else None,
        )

    def close(self) -> None:
        self._http.close()
