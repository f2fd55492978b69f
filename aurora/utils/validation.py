# aurora/utils/validation.py
"""
Input validation utilities for Aurora Risk Lab

Provides consistent validation across modules.
"""

import math
from datetime import date, datetime, time, timezone
from typing import Any

from aurora.utils.exceptions import InvalidInputError, ValidationError


def parse_timestamp(value: Any, field_name: str = "date") -> int:
    """
    Parse a date-like value to epoch milliseconds (UTC).

    Accepts ISO-8601 strings (a trailing ``Z`` is allowed), ``datetime``,
    ``date`` and numeric epoch milliseconds. Naive datetimes are read as UTC.

    Raises:
        InvalidInputError: If the value is missing or cannot be parsed
    """
    if value is None or value == "":
        raise InvalidInputError(f"{field_name} is required")

    if isinstance(value, bool):
        raise InvalidInputError(f"Invalid {field_name}: {value!r}")

    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            raise InvalidInputError(f"Invalid {field_name}: {value!r}")
        return int(value)

    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError as e:
            raise InvalidInputError(f"Invalid {field_name} format: {e}") from e

    if isinstance(value, date) and not isinstance(value, datetime):
        value = datetime.combine(value, time.min)

    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return int(value.timestamp() * 1000)

    raise InvalidInputError(f"Unsupported {field_name} type: {type(value).__name__}")


def validate_date_range(start_date: Any, end_date: Any) -> tuple[int, int]:
    """
    Validate a date range.

    Returns:
        Tuple of (start_ms, end_ms) as epoch milliseconds

    Raises:
        InvalidInputError: If either date is invalid or start is not before end
    """
    start_ms = parse_timestamp(start_date, "startDate")
    end_ms = parse_timestamp(end_date, "endDate")

    if start_ms >= end_ms:
        raise InvalidInputError("startDate must be before endDate")

    return start_ms, end_ms


def validate_asset_ids(assets: Any) -> list[str]:
    """
    Validate a list of asset identifiers (e.g. CoinGecko coin ids).

    Raises:
        InvalidInputError: If the list is missing or the base asset is undefined
    """
    if not assets or not isinstance(assets, (list, tuple)):
        raise InvalidInputError("Assets and weights are required and must match in length.")

    base_asset = assets[0]
    if not isinstance(base_asset, str) or not base_asset.strip():
        raise InvalidInputError("Base asset is undefined.")

    return list(assets)


def validate_weights_length(weights: Any, expected: int, label: str = "assets") -> list[float]:
    """
    Validate that a weight vector is numeric and matches ``expected`` in length.

    Raises:
        InvalidInputError: On a missing, non-numeric or mismatched weight vector
    """
    if weights is None or not isinstance(weights, (list, tuple)):
        raise InvalidInputError(f"weights are required and must match {label} in length")

    if len(weights) != expected:
        raise InvalidInputError(f"weights length must equal number of {label}")

    for w in weights:
        if isinstance(w, bool) or not isinstance(w, (int, float)):
            raise InvalidInputError(f"Weight {w!r} must be numeric")

    return [float(w) for w in weights]


def validate_non_negative(value: float, field_name: str) -> float:
    """
    Validate that a monetary amount is a finite non-negative number.

    Raises:
        ValidationError: If the value is negative or not finite
    """
    if not math.isfinite(value) or value < 0:
        raise ValidationError(f"{field_name} must be a non-negative number, got {value!r}")
    return value
