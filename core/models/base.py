# =============================================================================
# core/models/base.py - Shared Schema Base
# =============================================================================
# The web and mobile clients speak camelCase JSON (firstName, paymentToken),
# Python code uses snake_case. CamelModel maps between the two and can be
# built straight from ORM rows.
# =============================================================================

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
