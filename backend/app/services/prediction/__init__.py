"""
Prediction Service

CONTRACT:
    Input:  price history (list[float] / TimeSeries)
    Output: PredictionResult, projected TimeSeries

RESPONSIBILITIES:
    - One-step next-price forecast with confidence and trend label
    - Seven-day forward projection for charting

NO ML MODEL - Heuristics over the indicator library.
Synchronous, CPU-only, side-effect free. Randomness is injected.
"""

from app.services.prediction.forecast import forecast
from app.services.prediction.projection import project

__all__ = [
    "forecast",
    "project",
]
