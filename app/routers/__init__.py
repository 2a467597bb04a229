# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - account.py: Profile and password endpoints
# - catalog.py: Categories, products and services
# - exchange_rates.py: Public rate lookup
# - transfers.py: Transfer quote, creation and payment
# - orders.py: Checkout and order payment
# - payments.py: Square client configuration
# - chat.py: Support assistant
# - admin.py: Admin panel and bootstrap
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import account
from . import catalog
from . import exchange_rates
from . import transfers
from . import orders
from . import payments
from . import chat
from . import admin

__all__ = [
    "health",
    "account",
    "catalog",
    "exchange_rates",
    "transfers",
    "orders",
    "payments",
    "chat",
    "admin",
]
