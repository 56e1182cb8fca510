"""Unit tests for the price forecast engine.

Tests cover the three tiers (degenerate, short-series, composite),
their output clamps, and reproducibility under an injected random source.
"""

import math
import random

import pytest

from conftest import FixedRandom
from app.schemas.prediction import Trend
from app.services.indicators.calculations import (
    resistance_level,
    seasonality,
    support_level,
    volatility,
)
from app.services.prediction.forecast import forecast


class TestDegenerateForecast:
    """Histories shorter than five prices."""

    def test_four_prices_return_last_price(self):
        result = forecast([100.0, 101.0, 99.0, 98.0])

        assert result.next_price == 98.0
        assert result.confidence == 0.1
        assert result.trend == Trend.NEUTRAL

    def test_empty_history_returns_zero(self):
        result = forecast([])

        assert result.next_price == 0.0
        assert result.confidence == 0.1
        assert result.trend == Trend.NEUTRAL

    @pytest.mark.parametrize("size", [1, 2, 3, 4])
    def test_any_short_history_is_low_confidence_neutral(self, size):
        prices = [float(10 + i) for i in range(size)]
        result = forecast(prices)

        assert result.next_price == prices[-1]
        assert result.confidence == 0.1
        assert result.trend == Trend.NEUTRAL


class TestShortSeriesForecast:
    """Histories of five to nine prices."""

    def test_five_prices_have_no_crossover(self):
        # short and long averages cover the same window
        result = forecast([10.0, 20.0, 30.0, 40.0, 50.0])

        momentum_factor = (50.0 - 30.0) / 30.0 * 0.1
        assert result.next_price == pytest.approx(50.0 * (1 + momentum_factor))
        assert result.confidence == pytest.approx(0.3)
        assert result.trend == Trend.NEUTRAL

    def test_moving_average_crossover(self):
        prices = [100.0, 100.0, 100.0, 100.0, 100.0, 110.0]
        result = forecast(prices)

        short_ma = (100.0 * 4 + 110.0) / 5
        long_ma = (100.0 * 5 + 110.0) / 6
        trend_strength = (short_ma - long_ma) / long_ma
        momentum_factor = 0.1 * 0.1
        assert result.next_price == pytest.approx(
            110.0 * (1 + trend_strength + momentum_factor)
        )
        assert result.confidence == pytest.approx(abs(trend_strength) * 5 + 0.3)
        assert result.trend == Trend.NEUTRAL

    def test_bullish_when_short_average_leads(self):
        prices = [100.0] * 4 + [120.0] * 5
        result = forecast(prices)

        # short 120 vs long 1000/9 -> strength 0.08
        assert result.trend == Trend.BULLISH
        assert result.confidence == pytest.approx(0.7)
        assert result.next_price == pytest.approx(120.0 * 1.08)

    def test_bearish_crash_is_floored_at_half_last_price(self):
        prices = [1000.0] * 4 + [1.0] * 5
        result = forecast(prices)

        assert result.trend == Trend.BEARISH
        assert result.next_price == pytest.approx(0.5)
        assert result.confidence == pytest.approx(0.9)

    def test_does_not_use_random_source(self):
        prices = [10.0, 12.0, 11.0, 13.0, 12.5, 14.0]
        assert forecast(prices, FixedRandom(0.0)) == forecast(prices, FixedRandom(1.0))


class TestCompositeForecast:
    """Histories of ten or more prices."""

    def test_flat_history(self):
        # vol 0, seasonality 0, support = resistance = 100
        result = forecast([100.0] * 10, FixedRandom(0.9))

        assert result.next_price == pytest.approx(110.0)
        assert result.confidence == pytest.approx(0.8)
        assert result.trend == Trend.NEUTRAL

    def test_matches_weighted_formula(self):
        prices = [100.0, 102.0, 101.0, 104.0, 103.0, 106.0, 108.0, 107.0, 110.0, 109.0, 111.0]
        result = forecast(prices, FixedRandom(0.9))

        vol = volatility(prices)
        base = (
            prices[-1]
            + seasonality(prices) * 0.3
            + (support_level(prices) + resistance_level(prices)) / 2 * 0.1
        )
        assert result.next_price == pytest.approx(base * (1 + 0.4 * vol * 0.1))
        assert result.confidence == pytest.approx(min(0.4 + (1 - vol) * 0.4, 0.85))

    def test_rising_series_is_bullish(self):
        prices = [100.0 + 2 * i for i in range(30)]
        result = forecast(prices, random.Random(3))

        assert result.trend == Trend.BULLISH

    def test_falling_series_is_bearish(self):
        prices = [200.0 - 2 * i for i in range(30)]
        result = forecast(prices, random.Random(3))

        assert result.trend == Trend.BEARISH

    def test_seeded_source_is_reproducible(self):
        prices = [50.0 + (i % 7) * 1.5 for i in range(25)]

        first = forecast(prices, random.Random(42))
        second = forecast(prices, random.Random(42))

        assert first == second

    def test_extreme_volatility_clamps_confidence_to_zero(self):
        prices = [1.0, 1000.0] * 6
        result = forecast(prices, random.Random(1))

        assert result.confidence == 0.0

    def test_confidence_capped(self):
        result = forecast([100.0] * 40, random.Random(1))
        assert result.confidence <= 0.85


class TestForecastBounds:
    """Bounds that hold for every input."""

    def test_floors_and_confidence_range_hold_for_random_histories(self):
        rng = random.Random(99)
        for _ in range(300):
            size = rng.randint(0, 60)
            prices = [rng.uniform(1.0, 500.0) for _ in range(size)]
            result = forecast(prices, random.Random(rng.randrange(1 << 30)))

            assert 0.0 <= result.confidence <= 1.0
            if 5 <= size < 10:
                assert result.next_price >= prices[-1] * 0.5
            elif size >= 10:
                assert result.next_price >= prices[-1] * 0.7


class TestNonFinitePrices:
    """NaN and infinite prices are ignored, never raised on."""

    def test_all_nan_history_is_degenerate(self):
        result = forecast([math.nan] * 3)

        assert result.next_price == 0.0
        assert result.confidence == 0.1
        assert result.trend == Trend.NEUTRAL

    def test_trailing_nan_is_dropped_before_short_path(self):
        result = forecast([100.0] * 6 + [math.nan])

        assert result == forecast([100.0] * 6)
        assert result.next_price == pytest.approx(100.0)

    def test_trailing_nan_drops_below_composite_threshold(self):
        # nine finite prices remain, so the short path runs
        result = forecast([100.0] * 9 + [math.nan], FixedRandom(0.9))

        assert result == forecast([100.0] * 9)

    def test_infinities_are_dropped(self):
        prices = [100.0 + i for i in range(12)] + [math.inf, -math.inf]
        result = forecast(prices, FixedRandom(0.5))

        assert result == forecast([100.0 + i for i in range(12)], FixedRandom(0.5))
        assert math.isfinite(result.next_price)
