# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .user_service import UserService
from .catalog_service import CatalogService
from .exchange_rate_service import ExchangeRateService
from .transfer_service import TransferService
from .order_service import OrderService
from .admin_service import AdminService, DEFAULT_CATEGORIES

__all__ = [
    "UserService",
    "CatalogService",
    "ExchangeRateService",
    "TransferService",
    "OrderService",
    "AdminService",
    "DEFAULT_CATEGORIES",
]
