from __future__ import annotations

"""Rate source abstraction and the rate error taxonomy.

A RateSource talks to one upstream and either returns a validated
RateSnapshot or raises UpstreamFetchError. It never falls back on its own;
absorbing failures is the job of RateProvider (cache_service).
"""
from abc import ABC, abstractmethod
from typing import Sequence

from app.models.currency import RateSnapshot


class RateNotFoundError(LookupError):
    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Exchange rate not found for {code}")


class UpstreamFetchError(Exception):
    """Network error, timeout or non-2xx response from the rate source."""


class MalformedUpstreamResponse(UpstreamFetchError):
    """Payload arrived but has no usable ``rates`` mapping."""


class RateSource(ABC):
    name: str = "abstract"

    @abstractmethod
    def fetch(self, base_currency: str, symbols: Sequence[str]) -> RateSnapshot:
        """Return a live snapshot for ``symbols`` against ``base_currency``."""
        raise NotImplementedError
