"""Derived study analytics.

All functions are pure and are recomputed from the full session / task
lists on every read; nothing here is cached.

Efficiency score
----------------
A linear heuristic, not a calibrated metric::

    max(0, round(study_minutes * 1 + criteria_done * 10 - blocked_tasks * 2))

summed over all sessions and tasks ever recorded.

Streak
------
Consecutive days, walking back from today, with at least
``DAILY_TARGET_MINUTES`` of study.  Today never breaks the streak: if it
has not reached the target yet the walk simply starts at yesterday.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable

from ..state import Session, SessionType, Task


# ── constants ─────────────────────────────────────────────────────────────

DAILY_TARGET_MINUTES = 45
STREAK_LOOKBACK_DAYS = 365
HISTOGRAM_DAYS = 7

MINUTE_WEIGHT = 1
CRITERION_WEIGHT = 10
BLOCKED_PENALTY = 2


def _key(day: date | str) -> str:
    return day if isinstance(day, str) else day.isoformat()


def _minutes_by_date(sessions: Iterable[Session]) -> dict[str, float]:
    totals: dict[str, float] = {}
    for s in sessions:
        if s.type == SessionType.STUDY:
            totals[s.date] = totals.get(s.date, 0.0) + s.duration / 60
    return totals


# ── queries ───────────────────────────────────────────────────────────────


def daily_study_minutes(sessions: Iterable[Session], day: date | str) -> float:
    """Study minutes logged on *day* (a ``date`` or ``YYYY-MM-DD`` key)."""
    key = _key(day)
    return sum(
        s.duration / 60
        for s in sessions
        if s.type == SessionType.STUDY and s.date == key
    )


def seven_day_histogram(
    sessions: Iterable[Session], today: date | None = None,
) -> list[tuple[str, float]]:
    """``(date_key, study_minutes)`` for the last 7 days, oldest first."""
    today = today or date.today()
    totals = _minutes_by_date(sessions)
    days = [today - timedelta(days=offset)
            for offset in range(HISTOGRAM_DAYS - 1, -1, -1)]
    return [(d.isoformat(), totals.get(d.isoformat(), 0.0)) for d in days]


def total_study_minutes(sessions: Iterable[Session]) -> float:
    return sum(s.duration / 60 for s in sessions if s.type == SessionType.STUDY)


def efficiency_score(sessions: Iterable[Session], tasks: Iterable[Task]) -> int:
    tasks = list(tasks)
    criteria_done = sum(t.criteria_done for t in tasks)
    blocked = sum(1 for t in tasks if t.is_blocked)
    raw = (
        total_study_minutes(sessions) * MINUTE_WEIGHT
        + criteria_done * CRITERION_WEIGHT
        - blocked * BLOCKED_PENALTY
    )
    # Halves round up, never to even.
    return max(0, math.floor(raw + 0.5))


def streak(sessions: Iterable[Session], today: date | None = None) -> int:
    today = today or date.today()
    totals = _minutes_by_date(sessions)

    count = 0
    for offset in range(STREAK_LOOKBACK_DAYS):
        day = today - timedelta(days=offset)
        if totals.get(day.isoformat(), 0.0) >= DAILY_TARGET_MINUTES:
            count += 1
        elif offset == 0:
            continue  # today is still in progress
        else:
            break
    return count


# ── snapshot ──────────────────────────────────────────────────────────────


@dataclass
class Metrics:
    """Everything the analytics tab shows, computed in one pass."""

    today_minutes: float = 0.0
    histogram: list[tuple[str, float]] = field(default_factory=list)
    efficiency_score: int = 0
    streak: int = 0

    @property
    def target_met(self) -> bool:
        return self.today_minutes >= DAILY_TARGET_MINUTES


def compute_metrics(
    sessions: Iterable[Session],
    tasks: Iterable[Task],
    today: date | None = None,
) -> Metrics:
    sessions = list(sessions)
    today = today or date.today()
    return Metrics(
        today_minutes=daily_study_minutes(sessions, today),
        histogram=seven_day_histogram(sessions, today),
        efficiency_score=efficiency_score(sessions, tasks),
        streak=streak(sessions, today),
    )
