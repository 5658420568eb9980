from __future__ import annotations

import itertools
from datetime import timedelta

import pytest

from app.models.constants import FALLBACK_RATES
from app.models.currency import CURRENCY_TABLE
from app.services.money import round4
from app.services.rates.base import MalformedUpstreamResponse, RateNotFoundError
from app.services.rates.cache_service import OutcomeKind, RateCache, RateProvider

from conftest import LIVE_RATES, START, FakeSource

CODES = [c.code for c in CURRENCY_TABLE]


# Catalog -----------------------------------------------------------
def test_supported_currencies_fixed_order(fallback_provider: RateProvider):
    currencies = fallback_provider.list_supported_currencies()
    assert len(currencies) == 50
    assert [c.code for c in currencies[:4]] == ["USD", "EUR", "GBP", "JPY"]
    assert currencies[-1].code == "GHS"
    assert len({c.code for c in currencies}) == len(currencies)


def test_currency_info_is_case_sensitive(fallback_provider: RateProvider):
    info = fallback_provider.get_currency_info("INR")
    assert info is not None
    assert info.symbol == "₹"
    assert fallback_provider.get_currency_info("inr") is None
    assert fallback_provider.get_currency_info("ZZZ") is None


# Cache behaviour ---------------------------------------------------
def test_same_currency_convert_never_fetches(provider: RateProvider, source: FakeSource):
    for code in ("USD", "EUR", "INR", "ZZZ"):
        assert provider.convert(123.45, code, code) == 123.45
        assert provider.get_exchange_rate(code, code) == 1
    assert source.calls == 0
    assert provider.cache.cached_at is None


def test_second_call_within_ttl_hits_cache(provider: RateProvider, source: FakeSource, clock):
    first = provider.resolve_rates()
    clock.advance(hours=23, minutes=59)
    second = provider.resolve_rates()

    assert source.calls == 1
    assert first.kind is OutcomeKind.LIVE
    assert second.kind is OutcomeKind.CACHED
    assert second.snapshot is first.snapshot
    assert provider.cache.cached_at == START


def test_expired_cache_triggers_refetch(provider: RateProvider, source: FakeSource, clock):
    provider.get_rates()
    clock.advance(hours=24)
    outcome = provider.resolve_rates()

    assert source.calls == 2
    assert outcome.kind is OutcomeKind.LIVE
    assert provider.cache.cached_at == clock.now


def test_live_snapshot_metadata(provider: RateProvider, source: FakeSource):
    snapshot = provider.get_rates()
    assert snapshot.is_fallback is False
    assert snapshot.base_currency == "USD"
    assert snapshot.rates["USD"] == 1.0
    assert snapshot.fetched_at == source.reported_at
    assert snapshot.last_updated_at == START
    assert source.last_symbols == CODES


def test_refresh_refetches_then_serves_cached(provider: RateProvider, source: FakeSource, clock):
    provider.get_rates()
    clock.advance(minutes=10)
    refreshed = provider.refresh_rates()

    assert source.calls == 2
    assert refreshed.last_updated_at >= clock.now
    assert provider.get_rates() is refreshed
    assert source.calls == 2


def test_missing_key_never_populates_cache(fallback_provider: RateProvider, clock):
    seen = []
    for _ in range(3):
        outcome = fallback_provider.resolve_rates()
        assert outcome.kind is OutcomeKind.FALLBACK
        assert outcome.snapshot.is_fallback is True
        seen.append(outcome.snapshot.last_updated_at)
        clock.advance(seconds=1)

    assert fallback_provider.cache.cached_at is None
    assert fallback_provider.cache.snapshot is None
    assert len(set(seen)) == 3


def test_refresh_without_key_returns_fallback(fallback_provider: RateProvider, clock):
    snapshot = fallback_provider.refresh_rates()
    assert snapshot.is_fallback is True
    assert snapshot.last_updated_at == clock.now
    assert fallback_provider.cache.cached_at is None


def test_failure_with_expired_cache_serves_stale(provider: RateProvider, source: FakeSource, clock):
    original = provider.get_rates()
    clock.advance(hours=30)
    source.fail_with = MalformedUpstreamResponse("no rates")

    outcome = provider.resolve_rates()

    assert outcome.kind is OutcomeKind.STALE
    assert outcome.snapshot is original
    assert outcome.snapshot.is_fallback is False
    assert provider.cache.cached_at == START


def test_failure_without_cache_serves_fallback_uncached(clock, failing_source: FakeSource):
    provider = RateProvider(failing_source, clock=clock)

    outcome = provider.resolve_rates()

    assert outcome.kind is OutcomeKind.FALLBACK
    assert outcome.snapshot.rates["EUR"] == FALLBACK_RATES["EUR"]
    assert provider.cache.snapshot is None
    # next call tries upstream again
    provider.get_rates()
    assert failing_source.calls == 2


def test_refresh_failure_drops_previous_snapshot(provider: RateProvider, source: FakeSource):
    provider.get_rates()
    source.fail_with = MalformedUpstreamResponse("bad payload")

    snapshot = provider.refresh_rates()

    assert snapshot.is_fallback is True
    assert provider.cache.snapshot is None


def test_cache_entry_replaced_as_a_whole(clock):
    cache = RateCache()
    assert not cache.is_fresh(clock(), timedelta(hours=24))
    provider = RateProvider(FakeSource(), clock=clock, cache=cache)
    snapshot = provider.get_rates()
    assert cache.snapshot is snapshot
    cache.clear()
    assert cache.snapshot is None and cache.cached_at is None


# Rates and conversion ----------------------------------------------
def test_fallback_usd_eur_rates(fallback_provider: RateProvider):
    assert fallback_provider.get_exchange_rate("USD", "EUR") == 0.92
    assert fallback_provider.get_exchange_rate("EUR", "USD") == pytest.approx(1 / 0.92)
    assert round4(fallback_provider.get_exchange_rate("EUR", "USD")) == 1.087


def test_fallback_inr_to_usd(fallback_provider: RateProvider):
    result = fallback_provider.convert(100, "INR", "USD")
    assert result == pytest.approx(100 / 83.12)
    assert round4(result) == 1.2031


def test_cross_rate(fallback_provider: RateProvider):
    rate = fallback_provider.get_exchange_rate("EUR", "INR")
    assert rate == pytest.approx(83.12 / 0.92)
    assert fallback_provider.convert(10, "EUR", "INR") == pytest.approx(10 / 0.92 * 83.12)


def test_inverse_rates_multiply_to_one(fallback_provider: RateProvider):
    for a, b in itertools.combinations(CODES, 2):
        forward = fallback_provider.get_exchange_rate(a, b)
        backward = fallback_provider.get_exchange_rate(b, a)
        assert forward * backward == pytest.approx(1.0, abs=1e-9)


def test_convert_round_trip_on_fixed_snapshot(provider: RateProvider, source: FakeSource):
    for a, b in itertools.permutations(["USD", *LIVE_RATES], 2):
        there = provider.convert(250.75, a, b)
        back = provider.convert(there, b, a)
        assert back == pytest.approx(250.75, rel=1e-12)
    assert source.calls == 1


def test_convert_does_not_round(fallback_provider: RateProvider):
    result = fallback_provider.convert(1, "USD", "EUR")
    assert result == 0.92
    assert fallback_provider.convert(1, "EUR", "GBP") == pytest.approx(0.79 / 0.92)


def test_unknown_codes_raise_rate_not_found(provider: RateProvider):
    # the live fake snapshot only carries a handful of codes
    with pytest.raises(RateNotFoundError) as exc:
        provider.convert(5, "CAD", "USD")
    assert exc.value.code == "CAD"
    assert str(exc.value) == "Exchange rate not found for CAD"

    with pytest.raises(RateNotFoundError) as exc:
        provider.convert(5, "EUR", "XYZ")
    assert exc.value.code == "XYZ"

    with pytest.raises(RateNotFoundError) as exc:
        provider.get_exchange_rate("USD", "NOK")
    assert exc.value.code == "NOK"

    with pytest.raises(RateNotFoundError) as exc:
        provider.get_exchange_rate("ABC", "EUR")
    assert exc.value.code == "ABC"


def test_rebase_rates(fallback_provider: RateProvider):
    snapshot = fallback_provider.get_rates()
    rebased = fallback_provider.rebase_rates(snapshot, "EUR")
    assert rebased["EUR"] == 1.0
    assert rebased["USD"] == pytest.approx(1 / 0.92)
    assert rebased["INR"] == pytest.approx(83.12 / 0.92)
    with pytest.raises(RateNotFoundError):
        fallback_provider.rebase_rates(snapshot, "ZZZ")


# Formatting --------------------------------------------------------
@pytest.mark.parametrize(
    "amount, code, expected",
    [
        (1234.5, "USD", "$1,234.50"),
        (1234.56, "EUR", "€1,234.56"),
        (1234567.891, "INR", "₹1,234,567.89"),
        (0.005, "GBP", "£0.01"),
        (-1234.5, "USD", "$-1,234.50"),
        (12, "CHF", "CHF12.00"),
        (10, "ZZZ", "10 ZZZ"),
        (10.0, "ZZZ", "10 ZZZ"),
        (10.25, "usd", "10.25 usd"),
    ],
)
def test_format_amount(fallback_provider: RateProvider, amount, code, expected):
    assert fallback_provider.format_amount(amount, code) == expected
