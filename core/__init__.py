# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains framework-agnostic business logic:
# - models/: Pydantic schemas for data validation
# - services/: Service classes over a SQLAlchemy session
# - pricing.py: Transfer quotes and cart arithmetic
#
# Services raise app.exceptions errors but never touch FastAPI request
# objects. This keeps the logic testable and reusable.
# =============================================================================
