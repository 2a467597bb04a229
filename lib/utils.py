# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================

from typing import Any, Literal

Language = Literal["fr", "en"]

DEFAULT_LANGUAGE: Language = "fr"


# =============================================================================
# Currency Utilities
# =============================================================================

def normalize_currency(code: str) -> str:
    """
    Normalize an ISO currency code.

    Example:
        normalize_currency(" cad ")  # "CAD"
    """
    return code.strip().upper()


# =============================================================================
# Localization Utilities
# =============================================================================

def normalize_language(lang: str | None) -> Language:
    """Anything other than English falls back to French, the site default."""
    return "en" if (lang or "").lower().startswith("en") else DEFAULT_LANGUAGE


def localized(row: Any, field: str, lang: str | None) -> Any:
    """
    Read the language variant of a bilingual column.

    Example:
        localized(product, "name", "en")  # product.name_en
    """
    return getattr(row, f"{field}_{normalize_language(lang)}")
