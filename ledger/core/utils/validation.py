"""
Validation utilities for core domain models.

Provides consistent validation across the application.
"""

import math
import re
from datetime import date, datetime
from typing import Any

from ledger.core.exceptions.ledger import ValidationError

_YEAR_MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")


def validate_symbol(symbol: Any, param_name: str = "symbol") -> str:
    """Validate and normalize an instrument symbol.

    Symbols are stored upper-cased and stripped, e.g. ``"00919"`` or
    ``"00981A"``.

    Args:
        symbol: Value to validate
        param_name: Parameter name for error messages

    Returns:
        The normalized symbol

    Raises:
        ValidationError: If symbol is not a non-empty string
    """
    if not isinstance(symbol, str):
        raise ValidationError(f"{param_name} must be a string, got {type(symbol).__name__}")
    normalized = symbol.strip().upper()
    if not normalized:
        raise ValidationError(f"{param_name} cannot be empty")
    return normalized


def validate_positive(value: float, param_name: str) -> float:
    """Validate that a numeric value is positive.

    Raises:
        ValidationError: If value is not a finite positive number
    """
    if not math.isfinite(value) or value <= 0:
        raise ValidationError(f"{param_name} must be positive, got {value}")
    return value


def validate_non_negative(value: float, param_name: str) -> float:
    """Validate that a numeric value is zero or positive.

    Raises:
        ValidationError: If value is negative or not finite
    """
    if not math.isfinite(value) or value < 0:
        raise ValidationError(f"{param_name} must be non-negative, got {value}")
    return value


def validate_month(month: int, param_name: str = "month") -> int:
    """Validate a calendar month number (1-12).

    Raises:
        ValidationError: If month is outside 1-12
    """
    if not isinstance(month, int) or isinstance(month, bool) or not 1 <= month <= 12:
        raise ValidationError(f"{param_name} must be between 1 and 12, got {month}")
    return month


def validate_months(months: Any, param_name: str = "months") -> tuple[int, ...]:
    """Validate a collection of month numbers, returning them sorted and unique."""
    return tuple(sorted({validate_month(m, param_name) for m in months}))


def validate_year_month(key: str) -> str:
    """Validate a canonical ``YYYY-MM`` snapshot key.

    Args:
        key: Year-month key to validate

    Returns:
        The validated key

    Raises:
        ValidationError: If the key is not well formed
    """
    match = _YEAR_MONTH_PATTERN.match(key) if isinstance(key, str) else None
    if match is None:
        raise ValidationError(f"Year-month key must look like YYYY-MM, got {key!r}")
    validate_month(int(match.group(2)), "month of year-month key")
    return key


def parse_trade_date(value: Any, param_name: str = "date") -> date:
    """Parse a day-resolution date.

    Accepts ``date`` objects and ISO ``YYYY-MM-DD`` strings. A ``datetime``
    is truncated to its date.

    Raises:
        ValidationError: If the value cannot be parsed
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError as e:
            raise ValidationError(f"Invalid {param_name}: {value!r}") from e
    raise ValidationError(f"{param_name} must be a date, got {type(value).__name__}")
