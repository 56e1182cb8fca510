"""
StockCast Schema Contracts

This module defines all JSON contracts between system components.
These are the authoritative interfaces - all modules must conform to these schemas.
"""

from app.schemas.market import (
    Quote,
    TimeSeries,
    TimeSeriesPoint,
    StockInfo,
)
from app.schemas.prediction import (
    Trend,
    PredictionResult,
    ForecastRequest,
    ProjectionRequest,
    StockAnalysis,
)

__all__ = [
    # Market
    "Quote",
    "TimeSeries",
    "TimeSeriesPoint",
    "StockInfo",
    # Prediction
    "Trend",
    "PredictionResult",
    "ForecastRequest",
    "ProjectionRequest",
    "StockAnalysis",
]
