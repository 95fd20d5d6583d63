"""Timer package."""

from .engine import (
    TimerEngine,
    elapsed_seconds,
    target_seconds,
    MIN_TARGET_MINUTES,
    MAX_TARGET_MINUTES,
    TICK_INTERVAL_MS,
)

__all__ = [
    "TimerEngine",
    "elapsed_seconds",
    "target_seconds",
    "MIN_TARGET_MINUTES",
    "MAX_TARGET_MINUTES",
    "TICK_INTERVAL_MS",
]
