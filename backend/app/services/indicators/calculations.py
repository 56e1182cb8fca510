"""
Technical Indicator Calculations

Pure NumPy implementations of the indicators behind the price forecast.
All functions take prices ordered oldest -> newest, return plain floats,
and are total: any sequence, including an empty one, yields a number.
"""

from typing import Sequence

import numpy as np

# Returned by volatility() when there are too few returns to measure.
# Non-zero so downstream confidence/noise terms never collapse to zero.
DEFAULT_VOLATILITY = 0.1

MOMENTUM_WINDOW = 3
SEASONALITY_WINDOW = 7
SEASONALITY_WEIGHT = 0.1
LEVELS_LOOKBACK = 20
LEVELS_MIN_POINTS = 5
LEVELS_EXTREMES = 3


def _as_array(prices: Sequence[float]) -> np.ndarray:
    return np.asarray(prices, dtype=float)


# =============================================================================
# TREND
# =============================================================================


def moving_average(prices: Sequence[float], period: int) -> float:
    """Mean of the last min(period, len) prices; last price (or 0) if that window is empty."""
    data = _as_array(prices)
    if len(data) == 0:
        return 0.0

    window = min(period, len(data))
    if window < 1:
        return float(data[-1])
    return float(np.mean(data[-window:]))


def momentum(prices: Sequence[float]) -> float:
    """Relative change across the last three prices."""
    data = _as_array(prices)
    if len(data) < 2:
        return 0.0

    recent = data[-MOMENTUM_WINDOW:]
    first = recent[0]
    if first == 0:
        return 0.0
    return float((recent[-1] - first) / first)


# =============================================================================
# VOLATILITY
# =============================================================================


def volatility(prices: Sequence[float]) -> float:
    """Population standard deviation of consecutive log-returns."""
    data = _as_array(prices)
    if len(data) < 2:
        return DEFAULT_VOLATILITY

    with np.errstate(divide="ignore", invalid="ignore"):
        ratios = data[1:] / data[:-1]
    ratios = ratios[np.isfinite(ratios) & (ratios > 0)]
    if len(ratios) == 0:
        return DEFAULT_VOLATILITY

    result = float(np.std(np.log(ratios)))
    return result if np.isfinite(result) else DEFAULT_VOLATILITY


def seasonality(prices: Sequence[float]) -> float:
    """Deviation of the last price from its weekly average, scaled by 0.1."""
    data = _as_array(prices)
    if len(data) < SEASONALITY_WINDOW:
        return 0.0

    weekly_avg = np.mean(data[-SEASONALITY_WINDOW:])
    return float((data[-1] - weekly_avg) * SEASONALITY_WEIGHT)


# =============================================================================
# SUPPORT / RESISTANCE
# =============================================================================


def support_level(prices: Sequence[float]) -> float:
    """
    Proxy floor: mean of the 3 lowest prices among the last 20.

    With fewer than 5 prices, the minimum (0 for an empty sequence).
    """
    data = _as_array(prices)
    if len(data) == 0:
        return 0.0
    if len(data) < LEVELS_MIN_POINTS:
        return float(np.min(data))

    recent = np.sort(data[-LEVELS_LOOKBACK:])
    return float(np.mean(recent[:LEVELS_EXTREMES]))


def resistance_level(prices: Sequence[float]) -> float:
    """
    Proxy ceiling: mean of the 3 highest prices among the last 20.

    With fewer than 5 prices, the maximum (0 for an empty sequence).
    """
    data = _as_array(prices)
    if len(data) == 0:
        return 0.0
    if len(data) < LEVELS_MIN_POINTS:
        return float(np.max(data))

    recent = np.sort(data[-LEVELS_LOOKBACK:])
    return float(np.mean(recent[-LEVELS_EXTREMES:]))
