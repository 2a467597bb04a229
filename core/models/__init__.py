# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - user.py: Registration, login, profile schemas
# - catalog.py: Category, product and service schemas
# - transfer.py: Transfer, quote and payment schemas
# - order.py: Cart and order schemas
# - exchange_rate.py: Exchange rate schemas
# - admin.py: Admin login and back-office schemas
# - chat.py: Chat assistant schemas
#
# These models define the "contract" between API and clients.
# =============================================================================

from .base import CamelModel

# -----------------------------------------------------------------------------
# Account Models
# -----------------------------------------------------------------------------
from .user import (
    AuthResponse,
    LoginRequest,
    PasswordChangeRequest,
    ProfileUpdate,
    RegisterRequest,
    UserResponse,
)

# -----------------------------------------------------------------------------
# Catalog Models
# -----------------------------------------------------------------------------
from .catalog import (
    CategoryResponse,
    LocalizedProduct,
    LocalizedService,
    ProductResponse,
    ProductWrite,
    ServiceResponse,
    ServiceWrite,
)

# -----------------------------------------------------------------------------
# Transfer Models
# -----------------------------------------------------------------------------
from .transfer import (
    DeliveryMethod,
    PaymentRequest,
    TransferCreate,
    TransferPaymentResponse,
    TransferQuoteResponse,
    TransferResponse,
    TransferStatus,
)

# -----------------------------------------------------------------------------
# Order Models
# -----------------------------------------------------------------------------
from .order import (
    CartItem,
    CustomerInfo,
    OrderCreate,
    OrderItemResponse,
    OrderPaymentResponse,
    OrderResponse,
    OrderStatus,
)

# -----------------------------------------------------------------------------
# Exchange Rate / Admin / Chat Models
# -----------------------------------------------------------------------------
from .exchange_rate import ExchangeRateResponse, ExchangeRateWrite, RateLookupResponse
from .admin import (
    AdminAuthResponse,
    AdminLoginRequest,
    AdminResponse,
    BootstrapResponse,
    ImageUploadResponse,
)
from .chat import ChatMessage, ChatRequest, ChatResponse, MessageRole, SuggestionsResponse

__all__ = [
    "CamelModel",
    # Account
    "AuthResponse",
    "LoginRequest",
    "PasswordChangeRequest",
    "ProfileUpdate",
    "RegisterRequest",
    "UserResponse",
    # Catalog
    "CategoryResponse",
    "LocalizedProduct",
    "LocalizedService",
    "ProductResponse",
    "ProductWrite",
    "ServiceResponse",
    "ServiceWrite",
    # Transfer
    "DeliveryMethod",
    "PaymentRequest",
    "TransferCreate",
    "TransferPaymentResponse",
    "TransferQuoteResponse",
    "TransferResponse",
    "TransferStatus",
    # Order
    "CartItem",
    "CustomerInfo",
    "OrderCreate",
    "OrderItemResponse",
    "OrderPaymentResponse",
    "OrderResponse",
    "OrderStatus",
    # Exchange rate
    "ExchangeRateResponse",
    "ExchangeRateWrite",
    "RateLookupResponse",
    # Admin
    "AdminAuthResponse",
    "AdminLoginRequest",
    "AdminResponse",
    "BootstrapResponse",
    "ImageUploadResponse",
    # Chat
    "ChatMessage",
    "ChatRequest",
    "ChatResponse",
    "MessageRole",
    "SuggestionsResponse",
]
