# aurora/utils/__init__.py
"""
Utilities Module for Aurora Risk Lab

Validation:
- parse_timestamp: Parse date-like input to epoch milliseconds
- validate_date_range: Validate date range order
- validate_asset_ids: Validate the asset basket and its base asset
- validate_weights_length: Validate weights against their series/assets

Formatting:
- format_fixed: Fixed-decimal string rendering
- format_number: Compact number rendering for messages
- format_currency: Currency rendering

Exceptions:
- AuroraError, ValidationError, InvalidInputError
"""

from aurora.utils.exceptions import AuroraError, InvalidInputError, ValidationError
from aurora.utils.formatting import format_currency, format_fixed, format_number
from aurora.utils.validation import (
    parse_timestamp,
    validate_asset_ids,
    validate_date_range,
    validate_non_negative,
    validate_weights_length,
)

__all__ = [
    # Exceptions
    "AuroraError",
    "ValidationError",
    "InvalidInputError",
    # Validation
    "parse_timestamp",
    "validate_asset_ids",
    "validate_date_range",
    "validate_non_negative",
    "validate_weights_length",
    # Formatting
    "format_fixed",
    "format_number",
    "format_currency",
]
