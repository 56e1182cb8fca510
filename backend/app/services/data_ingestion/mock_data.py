"""
Synthetic Data Generator

Terminal step of every provider chain. Produces a plausible quote and
31-day daily series from a random base price. Has no failure mode.
"""

import random
from datetime import date, timedelta
from typing import Callable, Optional, TypeVar

from app.schemas.market import Quote, TimeSeries, TimeSeriesPoint
from app.services.data_ingestion.interface import MarketDataProvider
from app.services.data_ingestion.stock_list import get_company_name

SYNTHETIC_SOURCE = "Synthetic"

BASE_PRICE_MIN = 50.0
BASE_PRICE_SPAN = 200.0  # base ~ U[50, 250)
SERIES_DAYS = 30  # today-30 .. today inclusive -> 31 points
SERIES_VARIATION = 20.0  # value ~ base + U(-10, 10)
SERIES_FLOOR = 10.0
CHANGE_SPAN = 10.0  # change ~ U(-5, 5)
MAX_VOLUME = 10_000_000
MAX_MARKET_CAP = 1e12

T = TypeVar("T")

RngFactory = Callable[[], random.Random]
Clock = Callable[[], date]


def _base_price(rng: random.Random) -> float:
    return rng.random() * BASE_PRICE_SPAN + BASE_PRICE_MIN


def generate_synthetic_series(
    base_price: float,
    rng: random.Random,
    today: date,
) -> TimeSeries:
    """31 daily points around base_price, never below 10."""
    series = []
    for days_ago in range(SERIES_DAYS, -1, -1):
        variation = (rng.random() - 0.5) * SERIES_VARIATION
        series.append(
            TimeSeriesPoint(
                time=today - timedelta(days=days_ago),
                value=max(base_price + variation, SERIES_FLOOR),
            )
        )
    return series


def generate_synthetic_quote(
    symbol: str,
    base_price: float,
    rng: random.Random,
) -> Quote:
    """Quote at base_price with a random daily change."""
    change = (rng.random() - 0.5) * CHANGE_SPAN
    return Quote(
        symbol=symbol,
        name=get_company_name(symbol),
        price=base_price,
        change=change,
        change_percent=change / base_price * 100,
        volume=rng.randrange(MAX_VOLUME),
        market_cap=rng.random() * MAX_MARKET_CAP,
    )


class SyntheticMarketData:
    """
    One synthetic draw for a symbol: quote and series share a base price.

    Everything is generated up front, so the order in which the quote and
    the series are read does not change the values.
    """

    def __init__(self, symbol: str, rng: random.Random, today: date):
        self.symbol = symbol.upper()
        self.base_price = _base_price(rng)
        self.series = generate_synthetic_series(self.base_price, rng, today)
        self.quote = generate_synthetic_quote(self.symbol, self.base_price, rng)


class _SyntheticProvider(MarketDataProvider[T]):
    """
    Always-succeeding source.

    With `data`, answers from that draw (one request's shared base price);
    otherwise makes a fresh draw per fetch.
    """

    def __init__(
        self,
        rng_factory: RngFactory = random.Random,
        clock: Clock = date.today,
        data: Optional[SyntheticMarketData] = None,
    ):
        self._rng_factory = rng_factory
        self._clock = clock
        self._data = data

    @property
    def name(self) -> str:
        return SYNTHETIC_SOURCE

    def _draw(self, symbol: str) -> SyntheticMarketData:
        if self._data is not None and self._data.symbol == symbol.upper():
            return self._data
        return SyntheticMarketData(symbol, self._rng_factory(), self._clock())


class SyntheticQuoteProvider(_SyntheticProvider[Quote]):
    """Synthetic quote source."""

    async def fetch(self, symbol: str) -> Quote:
        return self._draw(symbol).quote


class SyntheticHistoryProvider(_SyntheticProvider[TimeSeries]):
    """Synthetic 31-day series source."""

    async def fetch(self, symbol: str) -> TimeSeries:
        return self._draw(symbol).series
