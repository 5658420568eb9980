from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from .constants import SUPPORTED_CURRENCIES


class CurrencyInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str
    name: str
    symbol: str

    @field_validator("code")
    def iso_code(cls, v: str) -> str:
        if len(v) != 3 or not v.isalpha() or not v.isupper():
            raise ValueError("currency code must be 3 uppercase letters")
        return v


class RateSnapshot(BaseModel):
    """One consistent set of rates against ``base_currency``.

    ``rates[code]`` is the number of ``code`` units worth 1 unit of the base.
    The base entry is always present with value 1.0.
    """

    model_config = ConfigDict(frozen=True)

    base_currency: str
    rates: Dict[str, float]
    fetched_at: datetime
    last_updated_at: datetime
    is_fallback: bool = False

    @model_validator(mode="before")
    @classmethod
    def base_is_one(cls, data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("rates"), dict):
            base = data.get("base_currency")
            if base:
                data = {**data, "rates": {**data["rates"], base: 1.0}}
        return data

    @field_validator("rates")
    def positive_finite(cls, v: Dict[str, float]) -> Dict[str, float]:
        for code, rate in v.items():
            if not math.isfinite(rate) or rate <= 0:
                raise ValueError(f"rate for {code} must be positive and finite")
        return v


CURRENCY_TABLE: List[CurrencyInfo] = [
    CurrencyInfo(code=code, name=name, symbol=symbol)
    for code, name, symbol in SUPPORTED_CURRENCIES
]
CURRENCY_INDEX: Dict[str, CurrencyInfo] = {c.code: c for c in CURRENCY_TABLE}
