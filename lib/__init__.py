# =============================================================================
# lib/ - Infrastructure Adapters
# =============================================================================
# This package contains reusable adapters around external systems:
# - database.py: SQLAlchemy engine, sessions and schema creation
# - orm.py: SQLAlchemy table definitions
# - security.py: bcrypt password hashing and JWT signing
# - square_client.py: Square Payments REST client
# - mailer.py: SMTP confirmation emails
# - utils.py: Shared utilities (currency codes, localization)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.utils import localized, normalize_currency, normalize_language

__all__ = [
    "localized",
    "normalize_currency",
    "normalize_language",
]
