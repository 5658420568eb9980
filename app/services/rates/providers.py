from __future__ import annotations

"""Concrete rate source and the static fallback snapshot.

OpenExchangeRatesSource queries an exchangeratesapi.io style endpoint:

    GET {url}?access_key=KEY&base=USD&symbols=USD,EUR,...
    -> {"success": true, "timestamp": 1700000000, "base": "USD",
        "rates": {"EUR": 0.92, ...}}

Free tier is roughly 1000 calls/month, which is why results are cached for a
day by RateProvider.
"""
import logging
import math
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Mapping, Optional, Sequence

from pydantic import ValidationError

from app.models.constants import BASE_CURRENCY, FALLBACK_RATES
from app.models.currency import RateSnapshot
from app.services.http_client import HttpError, get_json
from .base import MalformedUpstreamResponse, RateSource, UpstreamFetchError

logger = logging.getLogger("app.rates.providers")

DEFAULT_API_URL = "https://open.exchangeratesapi.io/v1/latest"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def build_fallback_snapshot(now: Optional[datetime] = None) -> RateSnapshot:
    now = now or utcnow()
    return RateSnapshot(
        base_currency=BASE_CURRENCY,
        rates=dict(FALLBACK_RATES),
        fetched_at=now,
        last_updated_at=now,
        is_fallback=True,
    )


def _valid_rate(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        as_float = float(value)
    except OverflowError:
        return False
    return math.isfinite(as_float) and as_float > 0


def _reported_time(raw: Any, default: datetime) -> datetime:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return default
    try:
        return datetime.fromtimestamp(raw, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return default


def parse_rates_payload(
    payload: Mapping[str, Any], base_currency: str, now: datetime
) -> RateSnapshot:
    """Validate an upstream payload into a live snapshot.

    The whole payload is rejected when ``rates`` is missing or any value is
    not a positive finite number.
    """
    rates = payload.get("rates")
    if not isinstance(rates, dict) or not rates:
        err = payload.get("error")
        detail = f" (error={err!r})" if err else ""
        raise MalformedUpstreamResponse(f"response has no rates mapping{detail}")
    reported_base = payload.get("base")
    if reported_base and reported_base != base_currency:
        raise MalformedUpstreamResponse(
            f"expected base {base_currency}, got {reported_base}"
        )
    bad = sorted(str(k) for k, v in rates.items() if not _valid_rate(v))
    if bad:
        raise MalformedUpstreamResponse(f"invalid rate values for {', '.join(bad)}")
    clean: Dict[str, float] = {str(k): float(v) for k, v in rates.items()}
    try:
        return RateSnapshot(
            base_currency=base_currency,
            rates=clean,
            fetched_at=_reported_time(payload.get("timestamp"), now),
            last_updated_at=now,
            is_fallback=False,
        )
    except ValidationError as e:
        raise MalformedUpstreamResponse(str(e)) from e


class OpenExchangeRatesSource(RateSource):
    name = "external-http"

    def __init__(
        self,
        api_key: str,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 5.0,
        retries: int = 0,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._api_key = api_key
        self._api_url = api_url
        self._timeout = timeout
        self._retries = retries
        self._clock = clock

    def fetch(self, base_currency: str, symbols: Sequence[str]) -> RateSnapshot:  # type: ignore[override]
        params = {
            "access_key": self._api_key,
            "base": base_currency,
            "symbols": ",".join(symbols),
        }
        try:
            payload = get_json(
                self._api_url,
                params=params,
                timeout=self._timeout,
                retries=self._retries,
            )
        except HttpError as e:
            raise UpstreamFetchError(str(e)) from e
        snapshot = parse_rates_payload(payload, base_currency, self._clock())
        logger.debug(
            "parsed upstream rates",
            extra={"source": self.name, "count": len(snapshot.rates)},
        )
        return snapshot
