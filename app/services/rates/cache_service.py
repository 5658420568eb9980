from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Callable, Dict, List, Optional

from app.models.constants import BASE_CURRENCY
from app.models.currency import CURRENCY_INDEX, CURRENCY_TABLE, CurrencyInfo, RateSnapshot
from app.services.money import format_grouped, plain_number
from .base import RateNotFoundError, RateSource, UpstreamFetchError
from .providers import OpenExchangeRatesSource, build_fallback_snapshot, utcnow

if TYPE_CHECKING:  # pragma: no cover
    from app.core.config import Settings

"""Central rate cache service.

Purpose:
    Own the process-wide exchange rate snapshot (USD based) and answer every
    currency question the back office asks: catalog lookups, conversions,
    cross rates and display formatting.

Design:
    - Wraps an optional RateSource. No source (no API key) means fallback-only
      mode: the static table is served and the cache is never populated, so
      supplying a key later takes effect on the next provider build.
    - RateCache holds one (snapshot, cached_at) entry replaced as a whole;
      concurrent refreshes may both hit upstream, last writer wins.
    - resolve_rates() returns a tagged FetchOutcome instead of raising, so
      the degrade path (stale cache, then static table) is visible to callers
      and tests. Upstream errors are logged and never propagate.
"""

logger = logging.getLogger("app.rates")

DEFAULT_TTL = timedelta(hours=24)


class OutcomeKind(str, enum.Enum):
    CACHED = "cached"
    LIVE = "live"
    STALE = "stale"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class FetchOutcome:
    kind: OutcomeKind
    snapshot: RateSnapshot


@dataclass(frozen=True)
class _CacheEntry:
    snapshot: RateSnapshot
    cached_at: datetime


class RateCache:
    """Two-state holder: empty, or one snapshot with the time it was stored."""

    def __init__(self) -> None:
        self._entry: Optional[_CacheEntry] = None

    @property
    def snapshot(self) -> Optional[RateSnapshot]:
        entry = self._entry
        return entry.snapshot if entry else None

    @property
    def cached_at(self) -> Optional[datetime]:
        entry = self._entry
        return entry.cached_at if entry else None

    def is_fresh(self, now: datetime, ttl: timedelta) -> bool:
        return self.fresh_snapshot(now, ttl) is not None

    def fresh_snapshot(self, now: datetime, ttl: timedelta) -> Optional[RateSnapshot]:
        entry = self._entry
        if entry is not None and now - entry.cached_at < ttl:
            return entry.snapshot
        return None

    def store(self, snapshot: RateSnapshot, now: datetime) -> None:
        self._entry = _CacheEntry(snapshot=snapshot, cached_at=now)

    def clear(self) -> None:
        self._entry = None


class RateProvider:
    """Cached, fallback-aware exchange rate service."""

    def __init__(
        self,
        source: Optional[RateSource] = None,
        *,
        ttl: timedelta = DEFAULT_TTL,
        cache: Optional[RateCache] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.base_currency = BASE_CURRENCY
        self._source = source
        self._ttl = ttl
        self.cache = cache if cache is not None else RateCache()
        self._clock = clock

    @property
    def live_enabled(self) -> bool:
        return self._source is not None

    # Catalog ---------------------------------------------------
    def list_supported_currencies(self) -> List[CurrencyInfo]:
        return list(CURRENCY_TABLE)

    def get_currency_info(self, code: str) -> Optional[CurrencyInfo]:
        return CURRENCY_INDEX.get(code)

    # Fetch-with-fallback ---------------------------------------
    def _fetch_with_fallback(self, now: datetime) -> FetchOutcome:
        if self._source is None:
            logger.warning("no exchange rate API key configured, using fallback rates")
            return FetchOutcome(OutcomeKind.FALLBACK, build_fallback_snapshot(now))

        symbols = [c.code for c in CURRENCY_TABLE]
        try:
            fetched = self._source.fetch(self.base_currency, symbols)
        except UpstreamFetchError as e:
            logger.error(
                "exchange rate fetch failed: %s",
                e,
                extra={"source": self._source.name},
            )
            previous = self.cache.snapshot
            if previous is not None:
                logger.warning(
                    "serving expired cached rates",
                    extra={"cached_at": self.cache.cached_at.isoformat()},  # type: ignore[union-attr]
                )
                return FetchOutcome(OutcomeKind.STALE, previous)
            logger.warning("serving fallback rates")
            return FetchOutcome(OutcomeKind.FALLBACK, build_fallback_snapshot(now))

        snapshot = fetched.model_copy(update={"last_updated_at": now})
        self.cache.store(snapshot, now)
        logger.info(
            "exchange rates updated",
            extra={"source": self._source.name, "count": len(snapshot.rates)},
        )
        return FetchOutcome(OutcomeKind.LIVE, snapshot)

    def resolve_rates(self) -> FetchOutcome:
        now = self._clock()
        cached = self.cache.fresh_snapshot(now, self._ttl)
        if cached is not None:
            logger.debug("using cached exchange rates")
            return FetchOutcome(OutcomeKind.CACHED, cached)
        return self._fetch_with_fallback(now)

    def get_rates(self) -> RateSnapshot:
        return self.resolve_rates().snapshot

    def refresh_rates(self) -> RateSnapshot:
        self.cache.clear()
        return self._fetch_with_fallback(self._clock()).snapshot

    # Derived operations ----------------------------------------
    def _rate_for(self, snapshot: RateSnapshot, code: str) -> float:
        if code == snapshot.base_currency:
            return 1.0
        rate = snapshot.rates.get(code)
        if rate is None:
            raise RateNotFoundError(code)
        return rate

    def convert(self, amount: float, from_code: str, to_code: str) -> float:
        if from_code == to_code:
            return amount
        snapshot = self.get_rates()
        amount_in_base = amount / self._rate_for(snapshot, from_code)
        return amount_in_base * self._rate_for(snapshot, to_code)

    def get_exchange_rate(self, from_code: str, to_code: str) -> float:
        if from_code == to_code:
            return 1.0
        snapshot = self.get_rates()
        from_rate = self._rate_for(snapshot, from_code)
        to_rate = self._rate_for(snapshot, to_code)
        return to_rate / from_rate

    def rebase_rates(self, snapshot: RateSnapshot, base: str) -> Dict[str, float]:
        """Re-express ``snapshot.rates`` relative to ``base`` instead of USD."""
        pivot = self._rate_for(snapshot, base)
        return {code: rate / pivot for code, rate in snapshot.rates.items()}

    def format_amount(self, amount: float, code: str) -> str:
        info = self.get_currency_info(code)
        if info is None:
            return f"{plain_number(amount)} {code}"
        return f"{info.symbol}{format_grouped(amount)}"


def build_rate_provider(settings: "Settings") -> RateProvider:
    source: Optional[RateSource] = None
    if settings.exchange_rate_api_key:
        source = OpenExchangeRatesSource(
            api_key=settings.exchange_rate_api_key,
            api_url=str(settings.exchange_rate_api_url),
            timeout=settings.http_timeout_seconds,
            retries=settings.http_retries,
        )
    return RateProvider(
        source, ttl=timedelta(seconds=settings.rates_cache_ttl_seconds)
    )
