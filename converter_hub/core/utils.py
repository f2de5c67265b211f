"""Utility helpers for the converter: code normalization, search, formatting."""

from __future__ import annotations

import math
from typing import Any

from .exceptions import ConverterError

DISPLAY_DECIMALS = 2


def normalize_code(code: str) -> str:
    """Normalize currency code to uppercase trimmed string."""
    return (code or "").strip().upper()


def matches_search(code: str, country: str, text: str) -> bool:
    """Return True if ``text`` is empty or found in the code or country.

    The code is matched against the upper-cased text; the country name is
    matched case-insensitively.
    """
    if not text:
        return True
    return text.upper() in code or text.casefold() in country.casefold()


def parse_value(value: Any) -> float:
    """Parse a user-entered amount into a finite float.

    Raises:
        ConverterError: when parsing fails or the value is NaN/infinite
    """
    try:
        val = float(value)
    except (TypeError, ValueError) as exc:
        raise ConverterError(f"'{value}' is not a number") from exc
    if not math.isfinite(val):
        raise ConverterError("value must be a finite number")
    return val


def round_half_away(value: float, decimals: int = DISPLAY_DECIMALS) -> float:
    """Round to ``decimals`` places, halves away from zero."""
    factor = 10**decimals
    if abs(value) >= 2**52:
        # Already integral at this magnitude; scaling could overflow
        return value
    return math.copysign(math.floor(abs(value) * factor + 0.5), value) / factor


def format_value(value: float, decimals: int = DISPLAY_DECIMALS) -> str:
    """Format a display value for a table cell.

    >>> format_value(5.0)
    '5'
    >>> format_value(5.25)
    '5.25'
    >>> format_value(2.199)
    '2.2'
    """
    rounded = round_half_away(value, decimals)
    if rounded.is_integer():
        return str(int(rounded))
    return repr(rounded)
