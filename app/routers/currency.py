from __future__ import annotations

import secrets
from datetime import datetime
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request
from pydantic import BaseModel, ConfigDict, Field

from app.core.config import Settings
from app.models.currency import CurrencyInfo, RateSnapshot
from app.services.rates.cache_service import RateProvider
from app.services.money import round4
from app.services.rates.conversion import quote_conversion

"""Currency router: thin pass-throughs to the RateProvider on app.state.

Endpoints:
    - GET  /currency/supported          -> catalog in fixed order
    - GET  /currency/rates?base=CODE    -> current snapshot, optionally rebased
    - POST /currency/convert            -> {amount, fromCurrency, toCurrency}
    - GET  /currency/rate/{from}/{to}   -> single rate, 4 decimals
    - POST /currency/refresh            -> admin only (X-Admin-Token)
    - GET  /currency/info/{code}        -> catalog entry or 404
    - POST /currency/format             -> {amount, currencyCode}
"""

router = APIRouter(prefix="/currency", tags=["currency"])


def get_rate_provider(request: Request) -> RateProvider:
    return request.app.state.rate_provider


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def require_admin(
    x_admin_token: Optional[str] = Header(None),
    settings: Settings = Depends(get_app_settings),
) -> bool:
    if not settings.admin_token:
        raise HTTPException(status_code=403, detail="rate refresh disabled")
    if not x_admin_token or not secrets.compare_digest(
        x_admin_token, settings.admin_token
    ):
        raise HTTPException(status_code=403, detail="admin token required")
    return True


class RatesOut(BaseModel):
    base_currency: str
    rates: Dict[str, float]
    fetched_at: datetime
    last_updated_at: datetime
    is_fallback: bool

    @classmethod
    def from_snapshot(
        cls, snapshot: RateSnapshot, rates: Optional[Dict[str, float]] = None, base: Optional[str] = None
    ) -> "RatesOut":
        return cls(
            base_currency=base or snapshot.base_currency,
            rates=rates if rates is not None else dict(snapshot.rates),
            fetched_at=snapshot.fetched_at,
            last_updated_at=snapshot.last_updated_at,
            is_fallback=snapshot.is_fallback,
        )


class ConvertPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    amount: Optional[float] = Field(None, allow_inf_nan=False)
    from_currency: Optional[str] = Field(None, alias="fromCurrency")
    to_currency: Optional[str] = Field(None, alias="toCurrency")


class ConvertOut(BaseModel):
    amount: float
    from_currency: str
    to_currency: str
    rate: float
    converted_amount: float
    formatted_amount: str
    formatted_converted_amount: str


class RateOut(BaseModel):
    from_currency: str
    to_currency: str
    rate: float


class FormatPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    amount: Optional[float] = Field(None, allow_inf_nan=False)
    currency_code: Optional[str] = Field(None, alias="currencyCode")


class FormatOut(BaseModel):
    amount: float
    currency_code: str
    formatted: str


@router.get(
    "/supported",
    response_model=List[CurrencyInfo],
    summary="List supported currencies",
)
async def list_supported(provider: RateProvider = Depends(get_rate_provider)):
    return provider.list_supported_currencies()


@router.get("/rates", response_model=RatesOut, summary="Current exchange rates")
def get_rates(
    base: Optional[str] = Query(
        None, description="Express rates relative to this currency (default USD)"
    ),
    provider: RateProvider = Depends(get_rate_provider),
):
    snapshot = provider.get_rates()
    if base is None or base == snapshot.base_currency:
        return RatesOut.from_snapshot(snapshot)
    # unknown base -> RateNotFoundError -> 400
    rebased = provider.rebase_rates(snapshot, base)
    return RatesOut.from_snapshot(snapshot, rates=rebased, base=base)


@router.post("/convert", response_model=ConvertOut, summary="Convert an amount")
def convert(
    payload: Optional[ConvertPayload] = None,
    provider: RateProvider = Depends(get_rate_provider),
):
    payload = payload or ConvertPayload()
    if payload.amount is None or not payload.from_currency or not payload.to_currency:
        raise HTTPException(
            status_code=400,
            detail="amount, fromCurrency and toCurrency are required",
        )
    quote = quote_conversion(
        payload.amount, payload.from_currency, payload.to_currency, provider
    )
    return ConvertOut(
        amount=quote.original_amount,
        from_currency=quote.from_currency,
        to_currency=quote.to_currency,
        rate=quote.rate,
        converted_amount=quote.converted_amount,
        formatted_amount=quote.formatted_original,
        formatted_converted_amount=quote.formatted_converted,
    )


@router.get(
    "/rate/{from_code}/{to_code}",
    response_model=RateOut,
    summary="Exchange rate between two currencies",
)
def get_rate(
    from_code: str, to_code: str, provider: RateProvider = Depends(get_rate_provider)
):
    rate = provider.get_exchange_rate(from_code, to_code)
    return RateOut(from_currency=from_code, to_currency=to_code, rate=round4(rate))


@router.post("/refresh", response_model=RatesOut, summary="Force a rate refresh")
def refresh(
    _: bool = Depends(require_admin),
    provider: RateProvider = Depends(get_rate_provider),
):
    return RatesOut.from_snapshot(provider.refresh_rates())


@router.get(
    "/info/{code}", response_model=CurrencyInfo, summary="Currency catalog entry"
)
async def currency_info(code: str, provider: RateProvider = Depends(get_rate_provider)):
    info = provider.get_currency_info(code)
    if info is None:
        raise HTTPException(status_code=404, detail=f"Currency {code} not supported")
    return info


@router.post("/format", response_model=FormatOut, summary="Format an amount")
async def format_amount(
    payload: Optional[FormatPayload] = None,
    provider: RateProvider = Depends(get_rate_provider),
):
    payload = payload or FormatPayload()
    if payload.amount is None or not payload.currency_code:
        raise HTTPException(
            status_code=400, detail="amount and currencyCode are required"
        )
    return FormatOut(
        amount=payload.amount,
        currency_code=payload.currency_code,
        formatted=provider.format_amount(payload.amount, payload.currency_code),
    )
