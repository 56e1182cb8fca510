"""
CONTRACT 2: Prediction Layer

Input: price history (list[float] or TimeSeries)
Output: PredictionResult, projected TimeSeries, StockAnalysis

The forecast is a heuristic built from technical indicators,
not a trained model. Confidence is a score, not a probability.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Optional
from pydantic import BaseModel, Field, field_validator

from app.schemas.market import Quote, TimeSeriesPoint, is_strictly_ascending


class Trend(str, Enum):
    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


class PredictionResult(BaseModel):
    """Next-price estimate with confidence and trend label."""

    next_price: float = Field(..., ge=0)
    confidence: float = Field(..., ge=0, le=1)
    trend: Trend


# =============================================================================
# REQUESTS
# =============================================================================


class ForecastRequest(BaseModel):
    """Price history for a one-step forecast, oldest first."""

    prices: list[Annotated[float, Field(allow_inf_nan=False)]] = Field(
        default_factory=list, max_length=5000
    )
    seed: Optional[int] = Field(
        default=None,
        description="Fix the random source for a reproducible composite forecast",
    )


class ProjectionRequest(BaseModel):
    """Daily series to extrapolate forward."""

    series: list[TimeSeriesPoint] = Field(default_factory=list, max_length=5000)
    seed: Optional[int] = None

    @field_validator("series")
    @classmethod
    def _dates_ascending(cls, value: list[TimeSeriesPoint]) -> list[TimeSeriesPoint]:
        if not is_strictly_ascending(value):
            raise ValueError("series dates must be strictly ascending")
        return value


# =============================================================================
# OUTPUT: StockAnalysis (Complete Response)
# =============================================================================


class StockAnalysis(BaseModel):
    """
    Everything the front end needs for one symbol.
    Returned by: MarketDataService.analyze
    """

    symbol: str
    quote: Quote
    history: list[TimeSeriesPoint]
    prediction: PredictionResult
    prediction_change: float = Field(
        ..., description="prediction.next_price minus quote.price"
    )
    projection: list[TimeSeriesPoint]
    quote_source: str
    history_source: str
    is_synthetic: bool = Field(
        ..., description="True when either chain fell back to synthetic data"
    )
    generated_at: datetime
