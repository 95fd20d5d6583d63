"""Analytics package."""

from .metrics import (
    Metrics,
    compute_metrics,
    daily_study_minutes,
    seven_day_histogram,
    total_study_minutes,
    efficiency_score,
    streak,
    DAILY_TARGET_MINUTES,
    STREAK_LOOKBACK_DAYS,
)

__all__ = [
    "Metrics",
    "compute_metrics",
    "daily_study_minutes",
    "seven_day_histogram",
    "total_study_minutes",
    "efficiency_score",
    "streak",
    "DAILY_TARGET_MINUTES",
    "STREAK_LOOKBACK_DAYS",
]
