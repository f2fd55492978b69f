# aurora/utils/formatting.py
"""
Output formatting utilities for Aurora Risk Lab

Keeps numbers rendered the same way the dashboard and API clients expect.
"""


def format_fixed(value: float, decimal_places: int = 2) -> str:
    """
    Format a number with a fixed number of decimals.

    Examples:
        format_fixed(12.3456) -> "12.35"
        format_fixed(0) -> "0.00"
    """
    return f"{value:.{decimal_places}f}"


def format_number(value: float) -> str:
    """
    Render a number without a trailing ``.0`` for integral values.

    Examples:
        format_number(95.0) -> "95"
        format_number(97.5) -> "97.5"
    """
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def format_currency(value: float, currency: str = "$", decimal_places: int = 2) -> str:
    """
    Format a number as currency without thousands separators.

    Examples:
        format_currency(50) -> "$50.00"
    """
    return f"{currency}{format_fixed(value, decimal_places)}"
