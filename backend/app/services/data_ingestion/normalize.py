"""
Payload Normalization Helpers

Shared by the upstream adapters when turning raw payload fields
into Quote / TimeSeries values.
"""

import math
from typing import Any, Iterable, Optional

from app.schemas.market import TimeSeries, TimeSeriesPoint


def to_float(value: Any) -> Optional[float]:
    """Parse a numeric field ("12.5", "0.67%", 12) into a finite float, else None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip().rstrip("%").replace(",", "")
        if not value:
            return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    return result if math.isfinite(result) else None


def derive_change_percent(price: float, change: float) -> float:
    """Percent change vs previous close (price - change)."""
    previous_close = price - change
    if previous_close <= 0:
        return 0.0
    return change / previous_close * 100


def normalize_series(points: Iterable[TimeSeriesPoint], max_points: int) -> TimeSeries:
    """
    Ascending by date, one point per date (later wins),
    truncated to the most recent `max_points`.
    """
    by_date = {}
    for point in points:
        by_date[point.time] = point
    ordered = [by_date[d] for d in sorted(by_date)]
    return ordered[-max_points:] if max_points > 0 else []
