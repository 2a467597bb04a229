# =============================================================================
# core/pricing.py - Transfer Quotes and Cart Arithmetic
# =============================================================================
# Pure functions shared by the transfer and checkout flows. Every amount is a
# Decimal rounded half-up to cents so the server reproduces exactly what the
# client displays.
#
# Usage:
#   quote = calculate_transfer_quote(Decimal("100"), Decimal("2150.5"))
#   quote.fee              # Decimal("3.00")
#   quote.received_amount  # Decimal("215050.00")
# =============================================================================

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

CENT = Decimal("0.01")

DEFAULT_FEE_PERCENT = Decimal("3")


def to_money(value: Decimal | int | float | str) -> Decimal:
    """Round to cents, half-up. Floats go through str() to avoid binary noise."""
    if isinstance(value, float):
        value = str(value)
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


# =============================================================================
# Transfer Quote
# =============================================================================

@dataclass(frozen=True)
class TransferQuote:
    """
    Cost breakdown of a transfer.

    The fee is charged on top of the send amount, so the recipient gets the
    full converted amount and the sender pays `total_to_pay`.
    """
    send_amount: Decimal
    fee: Decimal
    rate: Decimal
    converted_amount: Decimal
    received_amount: Decimal
    total_to_pay: Decimal


def calculate_fee(
    amount: Decimal,
    fee_percent: Decimal = DEFAULT_FEE_PERCENT,
    minimum_fee: Decimal = Decimal("0"),
) -> Decimal:
    """
    Fee for sending `amount`.

    A percentage of the amount, floored at `minimum_fee` for any non-zero
    amount. Sending nothing costs nothing.
    """
    if amount < 0:
        raise ValueError(f"amount must be non-negative, got {amount}")
    if amount == 0:
        return to_money(0)

    fee = to_money(amount * fee_percent / Decimal(100))
    return max(fee, to_money(minimum_fee))


def calculate_transfer_quote(
    amount: Decimal,
    rate: Decimal,
    fee_percent: Decimal = DEFAULT_FEE_PERCENT,
    minimum_fee: Decimal = Decimal("0"),
) -> TransferQuote:
    """
    Price a transfer at a given exchange rate.

    Args:
        amount: Send amount in the source currency (>= 0)
        rate: Units of destination currency per unit of source currency (> 0)
        fee_percent: Fee percentage of the send amount
        minimum_fee: Floor for the fee of a non-zero transfer

    Returns:
        TransferQuote with fee, converted/received amount and total to pay

    Raises:
        ValueError: If amount is negative or rate is not positive
    """
    if rate <= 0:
        raise ValueError(f"rate must be positive, got {rate}")

    send_amount = to_money(amount)
    fee = calculate_fee(send_amount, fee_percent, minimum_fee)
    converted = to_money(send_amount * rate)

    return TransferQuote(
        send_amount=send_amount,
        fee=fee,
        rate=rate,
        converted_amount=converted,
        received_amount=converted,
        total_to_pay=send_amount + fee,
    )


# =============================================================================
# Cart
# =============================================================================

@dataclass(frozen=True)
class CartLine:
    """A resolved cart line: the unit price actually charged and a quantity."""
    product_id: int
    quantity: int
    price: Decimal

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity


def resolve_line_price(listed_price: Decimal, custom_price: Decimal | None = None) -> Decimal:
    """
    Unit price charged for a product.

    Customers may choose to pay more than the listed price, never less.

    Raises:
        ValueError: If custom_price is below listed_price
    """
    listed = to_money(listed_price)
    if custom_price is None:
        return listed

    offered = to_money(custom_price)
    if offered < listed:
        raise ValueError(f"custom price {offered} is below the minimum {listed}")
    return offered


def cart_total(lines: Iterable[CartLine]) -> Decimal:
    """Sum of price x quantity over all lines."""
    return to_money(sum((line.line_total for line in lines), Decimal("0")))
