"""
Indicator Library

RESPONSIBILITIES:
    - Moving average and momentum
    - Log-return volatility and weekly seasonality
    - Support/resistance proxy levels

PURE PYTHON - Uses NumPy for calculations.
All functions are stateless, deterministic and never raise.
"""

from app.services.indicators.calculations import (
    moving_average,
    momentum,
    volatility,
    seasonality,
    support_level,
    resistance_level,
)

__all__ = [
    "moving_average",
    "momentum",
    "volatility",
    "seasonality",
    "support_level",
    "resistance_level",
]
