"""
Display-value formatting primitives shared by the vertical formatters.

Operators compare these strings against the browser console they already know, so
number rendering follows browser conventions rather than Python's:

  - integral floats render without a trailing ``.0``  (``1.0 -> "1"``)
  - fixed-decimal rounding is half-up on the exact binary value
    (``to_fixed(0.125, 2) -> "0.13"``), not round-half-even
  - currency uses ``,`` thousands separators

No third-party dependencies; pure functions only.
"""

from __future__ import annotations

import math
import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

PLACEHOLDER = "—"

_ISO_DATE_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}")
_TIME_SEPARATOR = re.compile(r"\dT\d")


def is_number(value: Any) -> bool:
    """True for int/float values (booleans excluded)."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def js_str(value: Any) -> str:
    """Stringify a scalar the way the operator console renders it.

    >>> js_str(700.0)
    '700'
    >>> js_str(0.25)
    '0.25'
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if value != value:
            return "NaN"
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


def to_fixed(value: float, digits: int) -> str:
    """Fixed-decimal rendering with half-up rounding."""
    quantum = Decimal(1).scaleb(-digits)
    rounded = Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP)
    return f"{rounded:.{digits}f}"


def format_grouped(value: float, min_fraction: int = 0, max_fraction: int = 3) -> str:
    """Thousands-separated number with a bounded fraction part.

    Trailing zeros are dropped down to ``min_fraction`` digits::

        format_grouped(1652.0)           -> "1,652"
        format_grouped(1234.5678)        -> "1,234.568"
        format_grouped(1234.5, 2, 2)     -> "1,234.50"
    """
    quantum = Decimal(1).scaleb(-max_fraction)
    rounded = Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP)
    text = f"{rounded:,.{max_fraction}f}"
    if max_fraction > min_fraction:
        whole, _, frac = text.partition(".")
        frac = frac.rstrip("0")
        if len(frac) < min_fraction:
            frac = frac.ljust(min_fraction, "0")
        text = f"{whole}.{frac}" if frac else whole
    return text


def format_currency(value: Any, min_fraction: int = 0, max_fraction: int = 3) -> str:
    """``$`` + grouped number; placeholder when ``value`` is not numeric."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return PLACEHOLDER
    if not math.isfinite(number):
        return PLACEHOLDER
    return f"${format_grouped(number, min_fraction, max_fraction)}"


def format_whole_percent(ratio: Any) -> str:
    """Ratio in [0, 1] → whole percent string (``0.87 -> "87%"``)."""
    try:
        number = float(ratio)
    except (TypeError, ValueError):
        return PLACEHOLDER
    if not math.isfinite(number):
        return PLACEHOLDER
    return f"{to_fixed(number * 100, 0)}%"


def truncate_text(text: str, budget: int) -> str:
    """Cut ``text`` to ``budget`` characters plus ``...`` when longer."""
    if len(text) > budget:
        return text[:budget] + "..."
    return text


def is_date_like(value: Any) -> bool:
    """True for ISO dates (``2026-02-11``) and datetimes (``...T18:00:40``)."""
    if not isinstance(value, str):
        return False
    return bool(_ISO_DATE_PREFIX.match(value) or _TIME_SEPARATOR.search(value))


def date_part(value: str) -> str:
    """Drop the time-of-day from an ISO datetime string."""
    return value.split("T", 1)[0]
