"""
Yahoo Finance Data Adapter

Secondary quote source (yfinance, run in a worker thread) and the
daily history source (chart endpoint, parallel timestamp/close arrays).
"""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from urllib.parse import quote as url_quote

import yfinance as yf

from app.core.config import Settings
from app.schemas.market import Quote, TimeSeries, TimeSeriesPoint
from app.services.base import (
    MalformedResponseError,
    NetworkError,
    NoDataError,
    RateLimitError,
)
from app.services.data_ingestion.http_provider import HttpMarketDataProvider
from app.services.data_ingestion.interface import MarketDataProvider
from app.services.data_ingestion.normalize import (
    derive_change_percent,
    normalize_series,
    to_float,
)
from app.services.data_ingestion.stock_list import get_company_name

logger = logging.getLogger(__name__)

SOURCE_NAME = "Yahoo Finance"


# =============================================================================
# QUOTE (yfinance)
# =============================================================================


def _fetch_ticker_info(symbol: str) -> dict:
    """Fetch ticker info synchronously (to be run in a thread)."""
    return yf.Ticker(symbol).info


def parse_ticker_info(info: object, symbol: str) -> Quote:
    """
    Convert a yfinance info dict into a Quote.

    Raises:
        NoDataError: empty info or zero/missing price
        MalformedResponseError: info is not a mapping
    """
    if not isinstance(info, dict):
        raise MalformedResponseError(SOURCE_NAME, "Ticker info is not a mapping")
    if not info:
        raise NoDataError(SOURCE_NAME, f"No ticker info for {symbol}")

    price = to_float(info.get("regularMarketPrice")) or to_float(info.get("currentPrice"))
    if not price or price <= 0:
        raise NoDataError(SOURCE_NAME, f"Missing or zero price for {symbol}")

    change = to_float(info.get("regularMarketChange"))
    if change is None:
        prev_close = to_float(info.get("regularMarketPreviousClose")) or to_float(
            info.get("previousClose")
        )
        change = price - prev_close if prev_close else 0.0

    change_percent = to_float(info.get("regularMarketChangePercent"))
    if change_percent is None:
        change_percent = derive_change_percent(price, change)

    volume = to_float(info.get("regularMarketVolume")) or to_float(info.get("volume"))
    market_cap = to_float(info.get("marketCap"))

    return Quote(
        symbol=symbol,
        name=info.get("longName") or info.get("shortName") or get_company_name(symbol),
        price=price,
        change=change,
        change_percent=change_percent,
        volume=int(volume) if volume and volume > 0 else 0,
        market_cap=market_cap if market_cap and market_cap > 0 else None,
    )


class YahooQuoteProvider(MarketDataProvider[Quote]):
    """Quote via yfinance. The blocking call runs in a thread."""

    @property
    def name(self) -> str:
        return SOURCE_NAME

    async def fetch(self, symbol: str) -> Quote:
        logger.debug(f"Fetching {symbol} quote from Yahoo Finance...")
        try:
            info = await asyncio.to_thread(_fetch_ticker_info, symbol)
        except Exception as e:
            message = str(e) or type(e).__name__
            if "rate limit" in message.lower() or "too many requests" in message.lower():
                raise RateLimitError(self.name, message) from e
            raise NetworkError(self.name, message) from e
        return parse_ticker_info(info, symbol)


# =============================================================================
# HISTORY (chart endpoint)
# =============================================================================


def parse_chart(payload: object, symbol: str, max_points: int = 30) -> TimeSeries:
    """
    Convert a chart payload into an ascending daily series.

    Points with missing, zero, negative or non-numeric closes are dropped.
    Dates are taken in the exchange's local time (meta.gmtoffset).

    Raises:
        NoDataError: chart error, or no usable points
        MalformedResponseError: missing/misaligned arrays
    """
    if not isinstance(payload, dict) or not isinstance(payload.get("chart"), dict):
        raise MalformedResponseError(SOURCE_NAME, "Missing chart object")

    chart = payload["chart"]
    if chart.get("error"):
        error = chart["error"]
        description = error.get("description") if isinstance(error, dict) else error
        raise NoDataError(SOURCE_NAME, str(description)[:200])

    results = chart.get("result")
    if not results:
        raise NoDataError(SOURCE_NAME, f"No chart result for {symbol}")

    try:
        result = results[0]
        timestamps = result.get("timestamp") or []
        closes = result["indicators"]["quote"][0].get("close") or []
        gmt_offset = int((result.get("meta") or {}).get("gmtoffset") or 0)
    except (KeyError, IndexError, TypeError, AttributeError, ValueError) as e:
        raise MalformedResponseError(SOURCE_NAME, f"Unexpected chart layout: {e}") from e

    if len(timestamps) != len(closes):
        raise MalformedResponseError(
            SOURCE_NAME,
            f"timestamp/close length mismatch ({len(timestamps)} vs {len(closes)})",
        )

    points = []
    for ts, close in zip(timestamps, closes):
        value = to_float(close)
        if value is None or value <= 0 or not isinstance(ts, (int, float)):
            continue
        local_time = datetime.fromtimestamp(ts, tz=timezone.utc) + timedelta(
            seconds=gmt_offset
        )
        points.append(TimeSeriesPoint(time=local_time.date(), value=value))

    series = normalize_series(points, max_points)
    if not series:
        raise NoDataError(SOURCE_NAME, f"No positive closes for {symbol}")
    return series


class YahooHistoryProvider(HttpMarketDataProvider[TimeSeries]):
    """Daily closes from the Yahoo chart endpoint."""

    def __init__(self, settings: Settings):
        super().__init__()
        self._base_url = settings.yahoo_chart_base_url.rstrip("/")
        self._range = settings.history_range
        self._interval = settings.history_interval
        self._max_points = settings.history_max_points

    @property
    def name(self) -> str:
        return SOURCE_NAME

    async def fetch(self, symbol: str) -> TimeSeries:
        logger.debug(f"Fetching {symbol} history from Yahoo Finance...")
        payload = await self._get_json(
            f"{self._base_url}/{url_quote(symbol, safe='^.-=')}",
            params={"range": self._range, "interval": self._interval},
        )
        return parse_chart(payload, symbol, self._max_points)
