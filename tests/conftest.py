from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Sequence

import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.main import create_app
from app.models.currency import RateSnapshot
from app.services.rates.base import RateSource, UpstreamFetchError
from app.services.rates.cache_service import RateProvider

START = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

LIVE_RATES: Dict[str, float] = {
    "EUR": 0.9,
    "GBP": 0.8,
    "INR": 84.0,
    "JPY": 150.0,
    "SGD": 1.35,
}


class FakeClock:
    def __init__(self, now: datetime = START):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


class FakeSource(RateSource):
    """In-memory upstream that counts calls and can be switched to fail."""

    name = "fake"

    def __init__(self, rates: Optional[Dict[str, float]] = None):
        self.rates = dict(rates if rates is not None else LIVE_RATES)
        self.calls = 0
        self.fail_with: Optional[Exception] = None
        self.last_symbols: List[str] = []
        self.reported_at = START - timedelta(minutes=30)

    def fetch(self, base_currency: str, symbols: Sequence[str]) -> RateSnapshot:
        self.calls += 1
        self.last_symbols = list(symbols)
        if self.fail_with is not None:
            raise self.fail_with
        return RateSnapshot(
            base_currency=base_currency,
            rates=dict(self.rates),
            fetched_at=self.reported_at,
            last_updated_at=self.reported_at,
        )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def source() -> FakeSource:
    return FakeSource()


@pytest.fixture()
def provider(source: FakeSource, clock: FakeClock) -> RateProvider:
    return RateProvider(source, clock=clock)


@pytest.fixture()
def fallback_provider(clock: FakeClock) -> RateProvider:
    return RateProvider(None, clock=clock)


@pytest.fixture()
def failing_source() -> FakeSource:
    src = FakeSource()
    src.fail_with = UpstreamFetchError("connection refused")
    return src


def make_client(provider: RateProvider, **settings_kwargs) -> TestClient:
    settings_kwargs.setdefault("exchange_rate_api_key", None)
    settings_kwargs.setdefault("admin_token", "s3cret")
    settings = Settings(**settings_kwargs)
    return TestClient(create_app(settings_override=settings, rate_provider=provider))


@pytest.fixture()
def client(fallback_provider: RateProvider) -> TestClient:
    return make_client(fallback_provider)


@pytest.fixture()
def live_client(provider: RateProvider) -> TestClient:
    return make_client(provider)
