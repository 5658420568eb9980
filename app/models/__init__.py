"""Pydantic domain models for the currency service."""

from .constants import (
    BASE_CURRENCY,
    FALLBACK_RATES,
    SUPPORTED_CURRENCIES,
)  # re-export
from .currency import CURRENCY_INDEX, CURRENCY_TABLE, CurrencyInfo, RateSnapshot

__all__ = [
    "BASE_CURRENCY",
    "FALLBACK_RATES",
    "SUPPORTED_CURRENCIES",
    "CURRENCY_INDEX",
    "CURRENCY_TABLE",
    "CurrencyInfo",
    "RateSnapshot",
]
