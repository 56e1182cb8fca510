"""Shared fixtures for backend tests.

No test touches the network: upstream providers are replaced with
in-memory stubs, and random sources are seeded or fixed.
"""

from __future__ import annotations

import asyncio
import random
from datetime import date, timedelta
from typing import Any, Optional

import pytest

from app.core.config import Settings
from app.schemas.market import Quote, TimeSeriesPoint
from app.services.data_ingestion.interface import MarketDataProvider

FIXED_TODAY = date(2024, 3, 1)


class FixedRandom(random.Random):
    """Random source whose random() always returns the same value."""

    def __init__(self, value: float = 0.5):
        super().__init__(0)
        self.value = value

    def random(self) -> float:
        return self.value


class StubProvider(MarketDataProvider[Any]):
    """Provider returning a fixed value (or raising) and recording calls.

    Args:
        name: Provider name reported in outcomes
        result: Value to return, or an exception instance to raise
        delay: Seconds to sleep before answering
        events: Shared list that receives ("start"|"end", name) tuples
    """

    def __init__(
        self,
        name: str,
        result: Any = None,
        delay: float = 0.0,
        events: Optional[list] = None,
    ):
        self._name = name
        self._result = result
        self._delay = delay
        self._events = events if events is not None else []
        self.calls: list[str] = []
        self.closed = False

    @property
    def name(self) -> str:
        return self._name

    async def fetch(self, symbol: str) -> Any:
        self.calls.append(symbol)
        self._events.append(("start", self._name))
        try:
            if self._delay:
                await asyncio.sleep(self._delay)
            if isinstance(self._result, BaseException):
                raise self._result
            return self._result
        finally:
            self._events.append(("end", self._name))

    async def close(self) -> None:
        self.closed = True


def make_quote(symbol: str = "AAPL", price: float = 150.0, **overrides) -> Quote:
    fields = {
        "symbol": symbol,
        "name": "Apple Inc.",
        "price": price,
        "change": 1.5,
        "change_percent": 1.0,
        "volume": 1_000_000,
        "market_cap": 2.5e12,
    }
    fields.update(overrides)
    return Quote(**fields)


def make_series(
    values: list[float], end: date = FIXED_TODAY
) -> list[TimeSeriesPoint]:
    """Consecutive daily points ending at `end`."""
    start = end - timedelta(days=len(values) - 1)
    return [
        TimeSeriesPoint(time=start + timedelta(days=i), value=v)
        for i, v in enumerate(values)
    ]


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the developer's environment and .env file."""
    return Settings(
        _env_file=None,
        alpha_vantage_api_key="test-key",
        quote_timeout_seconds=1.0,
        history_timeout_seconds=1.0,
    )


@pytest.fixture
def seeded_rng_factory():
    """Factory returning identically seeded random sources."""
    return lambda: random.Random(1234)


@pytest.fixture
def rising_series() -> list[TimeSeriesPoint]:
    """30 strictly increasing daily closes."""
    return make_series([100.0 + 2 * i for i in range(30)])
