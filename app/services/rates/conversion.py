from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from app.services.money import round2, round4

"""Conversion quote utility.

Builds the payload the convert endpoint returns. Rounding happens here and
only here: the provider returns unrounded values, the quote carries the rate
at 4 decimals and the converted amount at 2.
"""


class SupportsConversion(Protocol):
    def convert(self, amount: float, from_code: str, to_code: str) -> float: ...

    def get_exchange_rate(self, from_code: str, to_code: str) -> float: ...

    def format_amount(self, amount: float, code: str) -> str: ...


@dataclass(frozen=True)
class ConversionQuote:
    original_amount: float
    from_currency: str
    to_currency: str
    rate: float
    converted_amount: float
    formatted_original: str
    formatted_converted: str


def quote_conversion(
    amount: float, from_code: str, to_code: str, provider: SupportsConversion
) -> ConversionQuote:
    converted = provider.convert(amount, from_code, to_code)
    rate = provider.get_exchange_rate(from_code, to_code)
    return ConversionQuote(
        original_amount=amount,
        from_currency=from_code,
        to_currency=to_code,
        rate=round4(rate),
        converted_amount=round2(converted),
        formatted_original=provider.format_amount(amount, from_code),
        formatted_converted=provider.format_amount(converted, to_code),
    )
