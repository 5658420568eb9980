"""Money / rounding helpers.

Centralized so the conversion quote, the rate endpoints and amount formatting
use identical rounding semantics (ROUND_HALF_UP on the decimal string form).
"""

from __future__ import annotations
from decimal import Decimal, ROUND_HALF_UP


def _quantize(value: float, exp: str) -> Decimal:
    return Decimal(str(value)).quantize(Decimal(exp), rounding=ROUND_HALF_UP)


def round2(value: float) -> float:
    return float(_quantize(value, "0.01"))


def round4(value: float) -> float:
    return float(_quantize(value, "0.0001"))


def format_grouped(value: float) -> str:
    """Two fractional digits with comma thousands separators: 1234.5 -> '1,234.50'."""
    return f"{_quantize(value, '0.01'):,.2f}"


def plain_number(value: float) -> str:
    """Render a number without a trailing '.0' for integral floats (10.0 -> '10')."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
