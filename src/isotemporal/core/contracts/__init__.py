"""
Contract Validation Module

JSON Schema contracts for inbound field bags.
"""

from .validators import (
    ContractValidator,
    SchemaLoader,
    get_validator,
    validate_date_fields,
    validate_duration_like,
    validate_month_day_fields,
    validate_partial_time,
    validate_year_month_fields,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    # Functions
    "get_validator",
    "validate_date_fields",
    "validate_year_month_fields",
    "validate_month_day_fields",
    "validate_partial_time",
    "validate_duration_like",
]
