"""Smoke script for the central rate cache.

Demonstrates:
 1. First access resolves rates (live if EXCHANGE_RATE_API_KEY is set, fallback otherwise).
 2. Second access within TTL reuses the cached snapshot (same cached_at).
 3. Forced refresh clears the cache and resolves again.

NOTE: This is a lightweight diagnostic and not a formal test. With a key set it
spends two calls of the upstream monthly quota.
"""

from pprint import pprint

from app.core.config import get_settings
from app.services.rates.cache_service import build_rate_provider


def _describe(provider, outcome) -> dict:
    cached_at = provider.cache.cached_at
    return {
        "outcome": outcome.kind.value,
        "is_fallback": outcome.snapshot.is_fallback,
        "fetched_at": outcome.snapshot.fetched_at.isoformat(),
        "cached_at": cached_at.isoformat() if cached_at else None,
        "USD->EUR": provider.get_exchange_rate("USD", "EUR"),
        "100 INR": provider.format_amount(provider.convert(100, "INR", "USD"), "USD"),
    }


def run():
    provider = build_rate_provider(get_settings())
    out = {}
    out["initial"] = _describe(provider, provider.resolve_rates())
    out["second"] = _describe(provider, provider.resolve_rates())

    provider.refresh_rates()
    out["forced_refresh"] = _describe(provider, provider.resolve_rates())

    pprint(out)


if __name__ == "__main__":
    run()
