"""
Price Forecast Engine

Combines indicator outputs into a single next-price estimate.

Tiers by history length:
    < 5 prices   -> degenerate: last price, confidence 0.1, neutral
    5..9 prices  -> moving-average crossover + momentum
    >= 10 prices -> composite of volatility, seasonality, support/resistance

Every path clamps its output so that no negative or near-zero price
and no confidence outside [0, 1] reaches the caller.
"""

import logging
import math
import random
from typing import Optional, Sequence

from app.schemas.prediction import PredictionResult, Trend
from app.services.indicators.calculations import (
    moving_average,
    momentum,
    volatility,
    seasonality,
    support_level,
    resistance_level,
)

logger = logging.getLogger(__name__)

MIN_PRICES = 5
COMPOSITE_MIN_PRICES = 10

DEGENERATE_CONFIDENCE = 0.1

# Short-series heuristic
SHORT_MA_PERIOD = 5
LONG_MA_PERIOD = 10
MOMENTUM_WEIGHT = 0.1
SHORT_TREND_THRESHOLD = 0.02
SHORT_FLOOR_RATIO = 0.5
SHORT_MAX_CONFIDENCE = 0.9

# Composite path
SEASONALITY_WEIGHT = 0.3
LEVELS_WEIGHT = 0.1
NOISE_SCALE = 0.1
DIRECTION_WINDOW = 5
DIRECTION_THRESHOLD = 0.02
COMPOSITE_FLOOR_RATIO = 0.7
COMPOSITE_MAX_CONFIDENCE = 0.85


def _clamp_confidence(value: float) -> float:
    return max(0.0, min(1.0, value))


def _floor_price(prediction: float, last_price: float, ratio: float) -> float:
    if not math.isfinite(prediction):
        prediction = last_price
    return max(prediction, last_price * ratio, 0.0)


def _short_series_forecast(prices: Sequence[float]) -> PredictionResult:
    """Moving-average crossover with a momentum nudge."""
    last_price = prices[-1]
    short_ma = moving_average(prices[-SHORT_MA_PERIOD:], SHORT_MA_PERIOD)
    long_ma = moving_average(
        prices[-LONG_MA_PERIOD:], min(LONG_MA_PERIOD, len(prices))
    )

    trend_strength = (short_ma - long_ma) / long_ma if long_ma else 0.0
    momentum_factor = momentum(prices) * MOMENTUM_WEIGHT

    prediction = last_price * (1 + trend_strength + momentum_factor)

    if trend_strength > SHORT_TREND_THRESHOLD:
        trend = Trend.BULLISH
    elif trend_strength < -SHORT_TREND_THRESHOLD:
        trend = Trend.BEARISH
    else:
        trend = Trend.NEUTRAL

    confidence = min(abs(trend_strength) * 5 + 0.3, SHORT_MAX_CONFIDENCE)

    return PredictionResult(
        next_price=_floor_price(prediction, last_price, SHORT_FLOOR_RATIO),
        confidence=_clamp_confidence(confidence),
        trend=trend,
    )


def _composite_forecast(
    prices: Sequence[float], rng: random.Random
) -> PredictionResult:
    """
    Weighted blend of seasonality and support/resistance around the
    last price, perturbed by volatility-scaled noise.
    """
    last_price = prices[-1]
    vol = volatility(prices)
    seas = seasonality(prices)
    support = support_level(prices)
    resistance = resistance_level(prices)

    prediction = last_price
    prediction += seas * SEASONALITY_WEIGHT
    prediction += (support + resistance) / 2 * LEVELS_WEIGHT
    prediction *= 1 + (rng.random() - 0.5) * vol * NOISE_SCALE

    recent = prices[-DIRECTION_WINDOW:]
    direction = recent[-1] - recent[0]
    threshold = last_price * DIRECTION_THRESHOLD

    if direction > threshold:
        trend = Trend.BULLISH
    elif direction < -threshold:
        trend = Trend.BEARISH
    else:
        trend = Trend.NEUTRAL

    confidence = min(0.4 + (1 - vol) * 0.4, COMPOSITE_MAX_CONFIDENCE)

    logger.debug(
        f"Composite forecast: vol={vol:.4f} seas={seas:.4f} "
        f"support={support:.2f} resistance={resistance:.2f}"
    )

    return PredictionResult(
        next_price=_floor_price(prediction, last_price, COMPOSITE_FLOOR_RATIO),
        confidence=_clamp_confidence(confidence),
        trend=trend,
    )


def forecast(
    prices: Sequence[float],
    rng: Optional[random.Random] = None,
) -> PredictionResult:
    """
    Forecast the next price from a history ordered oldest -> newest.

    Args:
        prices: Daily closes, oldest first. May be empty.
        rng: Random source for the composite path's noise term. Pass a
            seeded random.Random for reproducible output.

    Returns:
        PredictionResult. Never raises for short or empty input. NaN and
        infinite prices are ignored before the tier is chosen.
    """
    prices = [p for p in prices if math.isfinite(p)]

    if len(prices) < MIN_PRICES:
        return PredictionResult(
            next_price=max(prices[-1], 0.0) if prices else 0.0,
            confidence=DEGENERATE_CONFIDENCE,
            trend=Trend.NEUTRAL,
        )

    if len(prices) < COMPOSITE_MIN_PRICES:
        return _short_series_forecast(prices)

    return _composite_forecast(prices, rng or random.Random())
