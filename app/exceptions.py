# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Errors tell the client HOW to fix the request, not just WHAT failed.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse


class GisaboException(Exception):
    """
    Base exception for the Gisabo API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "GISABO_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Generic Lookup Exceptions
# =============================================================================

class ResourceNotFoundError(GisaboException):
    """Raised when a row addressed by ID doesn't exist (or isn't visible)."""

    def __init__(self, resource: str, resource_id: Any, status_code: int = 404):
        super().__init__(
            message=f"{resource.capitalize()} not found: {resource_id}",
            code=f"{resource.upper().replace(' ', '_')}_NOT_FOUND",
            status_code=status_code,
            suggestion=f"Check that the {resource} id is correct",
            details={f"{resource.replace(' ', '_')}_id": resource_id},
        )


class ConflictError(GisaboException):
    """Raised when a write would break a uniqueness constraint."""

    def __init__(self, message: str, field: str, value: Any):
        super().__init__(
            message=message,
            code="CONFLICT",
            status_code=409,
            suggestion=f"Choose a different {field}",
            details={"field": field, "value": value},
        )


# =============================================================================
# Account Exceptions
# =============================================================================

class DuplicateUserError(ConflictError):
    """Raised when registering with a username or email that is taken."""

    def __init__(self, field: str, value: str):
        super().__init__(
            message=f"A user already exists with this {field}",
            field=field,
            value=value,
        )
        self.code = "USER_ALREADY_EXISTS"


class InvalidCredentialsError(GisaboException):
    """Raised when a login fails. Never reveals which part was wrong."""

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(
            message=message,
            code="INVALID_CREDENTIALS",
            status_code=401,
            suggestion="Check your username/email and password",
        )


class PasswordChangeError(GisaboException):
    """Raised when a password change request is rejected."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="PASSWORD_CHANGE_REJECTED",
            status_code=400,
        )


# =============================================================================
# Pricing / Catalog Exceptions
# =============================================================================

class ExchangeRateNotFoundError(GisaboException):
    """Raised when no rate is stored for a currency pair."""

    def __init__(self, from_currency: str, to_currency: str):
        super().__init__(
            message=f"Exchange rate not found for {from_currency} to {to_currency}",
            code="EXCHANGE_RATE_NOT_FOUND",
            status_code=404,
            suggestion="Ask an administrator to configure this currency pair",
            details={"from": from_currency, "to": to_currency},
        )


class PriceBelowMinimumError(GisaboException):
    """Raised when a cart line offers less than the product's listed price."""

    def __init__(self, product_id: int, offered: Any, minimum: Any):
        super().__init__(
            message=f"Price {offered} is below the minimum price {minimum} for product {product_id}",
            code="PRICE_BELOW_MINIMUM",
            status_code=400,
            suggestion=f"Offer at least {minimum}",
            details={"product_id": product_id, "offered": str(offered), "minimum": str(minimum)},
        )


class ProductUnavailableError(GisaboException):
    """Raised when checking out a product that is out of stock."""

    def __init__(self, product_id: int):
        super().__init__(
            message=f"Product is out of stock: {product_id}",
            code="PRODUCT_UNAVAILABLE",
            status_code=400,
            suggestion="Remove this product from your cart",
            details={"product_id": product_id},
        )


class InvalidAmountError(GisaboException):
    """Raised when a transfer amount is outside the accepted range."""

    def __init__(self, amount: Any, maximum: Any):
        super().__init__(
            message=f"Invalid transfer amount: {amount}",
            code="INVALID_AMOUNT",
            status_code=400,
            suggestion=f"Send an amount greater than 0 and at most {maximum}",
            details={"amount": str(amount), "maximum": str(maximum)},
        )


# =============================================================================
# Payment Exceptions
# =============================================================================

class PaymentError(GisaboException):
    """Base class for payment failures."""

    def __init__(
        self,
        message: str,
        code: str = "PAYMENT_ERROR",
        status_code: int = 400,
        error_type: str = "payment_error",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message=message,
            code=code,
            status_code=status_code,
            details={"type": error_type, **(details or {})},
        )
        self.error_type = error_type


class PaymentDeclinedError(PaymentError):
    """Raised when the processor refuses the charge."""

    def __init__(self, message: str, error_type: str, details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            code="PAYMENT_DECLINED",
            status_code=402,
            error_type=error_type,
            details=details,
        )


class PaymentGatewayError(PaymentError):
    """Raised when the processor cannot be reached or answers garbage."""

    def __init__(self, error: str):
        super().__init__(
            message="Payment processor is unavailable, please try again",
            code="PAYMENT_GATEWAY_ERROR",
            status_code=502,
            error_type="payment_processing_error",
            details={"error": error},
        )


class PaymentConfigurationError(PaymentError):
    """Raised when Square credentials are missing."""

    def __init__(self, missing: str):
        super().__init__(
            message="Payment configuration is missing",
            code="PAYMENT_NOT_CONFIGURED",
            status_code=500,
            error_type="configuration_error",
            details={"missing": missing},
        )


class AlreadyPaidError(GisaboException):
    """Raised when paying for a transfer or order twice."""

    def __init__(self, resource: str, resource_id: int):
        super().__init__(
            message=f"This {resource} has already been paid",
            code="ALREADY_PAID",
            status_code=400,
            details={f"{resource}_id": resource_id, "type": "already_processed_error"},
        )


# =============================================================================
# Upload Exceptions
# =============================================================================

class InvalidFileTypeError(GisaboException):
    """Raised when uploaded file type is not allowed."""

    def __init__(self, filename: str, content_type: str | None):
        super().__init__(
            message=f"Invalid file type: {filename}",
            code="INVALID_FILE_TYPE",
            status_code=400,
            suggestion="Only image files are supported",
            details={"filename": filename, "content_type": content_type},
        )


class FileTooLargeError(GisaboException):
    """Raised when uploaded file exceeds size limit."""

    def __init__(self, size_mb: float, max_mb: int):
        super().__init__(
            message=f"File too large: {size_mb:.1f}MB (max: {max_mb}MB)",
            code="FILE_TOO_LARGE",
            status_code=413,
            suggestion=f"Upload a file smaller than {max_mb}MB",
            details={"size_mb": size_mb, "max_mb": max_mb},
        )


# =============================================================================
# Assistant Exceptions
# =============================================================================

class AssistantUnavailableError(GisaboException):
    """Raised when the chat assistant cannot answer."""

    def __init__(self, error: str):
        super().__init__(
            message="The assistant could not process your message",
            code="ASSISTANT_UNAVAILABLE",
            status_code=503,
            suggestion="Try again later or contact customer support",
            details={"error": error},
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def gisabo_exception_handler(
    request: Request,
    exc: GisaboException
) -> JSONResponse:
    """
    Convert GisaboException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )
