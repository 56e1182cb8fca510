"""
Forward Projection

Extrapolates a daily series a week ahead: the last day-over-day move,
decayed by 10% per step, plus bounded uniform noise.
"""

import random
from datetime import timedelta
from typing import Optional

from app.schemas.market import TimeSeries, TimeSeriesPoint

PROJECTION_DAYS = 7
TREND_DECAY_PER_DAY = 0.1
NOISE_AMPLITUDE = 5.0  # noise ~ U(-2.5, 2.5)
FLOOR_RATIO = 0.5


def project(
    series: TimeSeries,
    rng: Optional[random.Random] = None,
    days: int = PROJECTION_DAYS,
) -> TimeSeries:
    """
    Project `days` future points after the last date in `series`.

    Returns an empty list for an empty series.
    """
    if not series:
        return []

    rng = rng or random.Random()
    last = series[-1]
    trend = last.value - series[-2].value if len(series) > 1 else 0.0
    floor = last.value * FLOOR_RATIO

    projection: TimeSeries = []
    for i in range(1, days + 1):
        noise = (rng.random() - 0.5) * NOISE_AMPLITUDE
        trend_decay = trend * (1 - i * TREND_DECAY_PER_DAY)
        predicted = last.value + trend_decay + noise

        projection.append(
            TimeSeriesPoint(
                time=last.time + timedelta(days=i),
                value=max(predicted, floor),
            )
        )

    return projection
