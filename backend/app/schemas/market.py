"""
CONTRACT 1: Market Data Layer

Input: symbol (str)
Output: Quote, TimeSeries

These are the shapes every market data provider normalizes into,
whether the data came from an upstream API or the synthetic generator.
"""

from datetime import date
from typing import Optional
from pydantic import BaseModel, Field


# =============================================================================
# QUOTE
# =============================================================================


class Quote(BaseModel):
    """Snapshot of a symbol's current trading price and daily change."""

    symbol: str = Field(..., min_length=1, description="Uppercase ticker")
    name: str = Field(..., description="Company display name")
    price: float = Field(..., gt=0)
    change: float = Field(..., description="Absolute change vs previous close")
    change_percent: float = Field(..., description="Percent change vs previous close")
    volume: int = Field(default=0, ge=0)
    market_cap: Optional[float] = Field(default=None, ge=0)

    model_config = {
        "json_schema_extra": {
            "example": {
                "symbol": "AAPL",
                "name": "Apple Inc.",
                "price": 189.84,
                "change": 1.26,
                "change_percent": 0.67,
                "volume": 48_273_100,
                "market_cap": 2.95e12,
            }
        }
    }


# =============================================================================
# TIME SERIES
# =============================================================================


class TimeSeriesPoint(BaseModel):
    """Single daily close."""

    time: date
    value: float = Field(..., gt=0, allow_inf_nan=False)


# A TimeSeries is a list[TimeSeriesPoint], strictly ascending by date.
TimeSeries = list[TimeSeriesPoint]


def is_strictly_ascending(series: TimeSeries) -> bool:
    """True when dates strictly increase (no duplicates)."""
    return all(a.time < b.time for a, b in zip(series, series[1:]))


# =============================================================================
# SYMBOL DIRECTORY
# =============================================================================


class StockInfo(BaseModel):
    """Symbol with its display name."""

    symbol: str
    name: str
