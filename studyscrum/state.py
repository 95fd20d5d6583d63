"""Plain data records shared by the timer, the board and the analytics.

Everything here round-trips through :meth:`AppState.to_dict` /
:meth:`AppState.from_dict` using the camelCase keys of the persisted
record::

    {"tasks": [...], "sessions": [...], "dailyIntent": {...}, "timerState": {...}}

Missing or null keys fall back to defaults, as do timer targets that are
not positive.  Values of the wrong shape raise ``TypeError`` /
``ValueError`` (or ``OverflowError`` for out-of-range numbers) so the store
can treat the whole record as unusable.
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


# ── enums ─────────────────────────────────────────────────────────────────


class TimerMode(Enum):
    COUNTDOWN = "countdown"
    STOPWATCH = "stopwatch"
    BREAK = "break"


class SessionType(Enum):
    STUDY = "study"
    BREAK = "break"


class TaskStatus(Enum):
    TO_LEARN = "To-Learn"
    ACTIVE = "Active"
    COMPLETED = "Completed"


# ── defaults ──────────────────────────────────────────────────────────────

DEFAULT_STUDY_MINUTES = 25
DEFAULT_BREAK_MINUTES = 5
DEFAULT_TASK_COLOR = "blue"


def now_ms() -> float:
    """Wall-clock time as epoch milliseconds."""
    return time.time() * 1000


def date_key(epoch_ms: float) -> str:
    """Local calendar date (``YYYY-MM-DD``) for an epoch-ms timestamp."""
    return datetime.fromtimestamp(epoch_ms / 1000).date().isoformat()


def new_id() -> str:
    return uuid.uuid4().hex[:12]


def _as_float_or_none(value) -> float | None:
    return None if value is None else float(value)


def _text(value) -> str:
    return "" if value is None else str(value)


def _positive_int(value, default: int) -> int:
    """Whole minutes from a stored value; zero or negative means *default*."""
    if value is None:
        return default
    number = int(value)
    return number if number > 0 else default


# ── session ───────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Session:
    """One completed study or break interval."""

    id: str
    start_time: float
    duration: float
    type: SessionType
    date: str

    @classmethod
    def create(cls, duration: float, session_type: SessionType,
               at_ms: float | None = None) -> Session:
        stamp = now_ms() if at_ms is None else at_ms
        return cls(
            id=new_id(),
            start_time=stamp,
            duration=max(0.0, float(duration)),
            type=session_type,
            date=date_key(stamp),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "startTime": self.start_time,
            "duration": self.duration,
            "type": self.type.value,
            "date": self.date,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Session:
        start = float(data.get("startTime", 0))
        return cls(
            id=str(data.get("id") or new_id()),
            start_time=start,
            duration=max(0.0, float(data.get("duration", 0))),
            type=SessionType(data.get("type", SessionType.STUDY.value)),
            date=str(data.get("date") or date_key(start)),
        )


# ── tasks ─────────────────────────────────────────────────────────────────


@dataclass
class SuccessCriterion:
    text: str
    done: bool = False
    id: str = field(default_factory=new_id)

    def to_dict(self) -> dict:
        return {"id": self.id, "text": self.text, "done": self.done}

    @classmethod
    def from_dict(cls, data: dict) -> SuccessCriterion:
        return cls(
            id=str(data.get("id") or new_id()),
            text=_text(data.get("text")),
            done=bool(data.get("done", False)),
        )


@dataclass
class Task:
    title: str
    urgency: int = 3
    status: TaskStatus = TaskStatus.TO_LEARN
    formulas: str = ""
    notes: str = ""
    success_criteria: list[SuccessCriterion] = field(default_factory=list)
    is_blocked: bool = False
    blocker_reason: str | None = None
    color: str = DEFAULT_TASK_COLOR
    completed_at: float | None = None
    id: str = field(default_factory=new_id)

    @property
    def criteria_done(self) -> int:
        return sum(1 for c in self.success_criteria if c.done)

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "title": self.title,
            "urgency": self.urgency,
            "status": self.status.value,
            "formulas": self.formulas,
            "notes": self.notes,
            "successCriteria": [c.to_dict() for c in self.success_criteria],
            "isBlocked": self.is_blocked,
            "color": self.color,
        }
        if self.blocker_reason is not None:
            data["blockerReason"] = self.blocker_reason
        if self.completed_at is not None:
            data["completedAt"] = self.completed_at
        return data

    @classmethod
    def from_dict(cls, data: dict) -> Task:
        return cls(
            id=str(data.get("id") or new_id()),
            title=_text(data.get("title")),
            urgency=int(data.get("urgency", 3)),
            status=TaskStatus(data.get("status", TaskStatus.TO_LEARN.value)),
            formulas=_text(data.get("formulas")),
            notes=_text(data.get("notes")),
            success_criteria=[
                SuccessCriterion.from_dict(c)
                for c in data.get("successCriteria", [])
            ],
            is_blocked=bool(data.get("isBlocked", False)),
            blocker_reason=data.get("blockerReason") or None,
            color=str(data.get("color") or DEFAULT_TASK_COLOR),
            completed_at=_as_float_or_none(data.get("completedAt")),
        )


@dataclass
class DailyIntent:
    main_goal: str = ""
    yesterday_win: str = ""
    blocker: str = ""

    def to_dict(self) -> dict:
        return {
            "mainGoal": self.main_goal,
            "yesterdayWin": self.yesterday_win,
            "blocker": self.blocker,
        }

    @classmethod
    def from_dict(cls, data: dict) -> DailyIntent:
        return cls(
            main_goal=_text(data.get("mainGoal")),
            yesterday_win=_text(data.get("yesterdayWin")),
            blocker=_text(data.get("blocker")),
        )


# ── timer ─────────────────────────────────────────────────────────────────


@dataclass
class TimerState:
    """Mutable timer record.  ``last_start_time`` is set only while running."""

    mode: TimerMode = TimerMode.COUNTDOWN
    is_paused: bool = True
    accumulated_seconds: float = 0.0
    last_start_time: float | None = None
    study_minutes: int = DEFAULT_STUDY_MINUTES
    break_minutes: int = DEFAULT_BREAK_MINUTES

    def copy(self) -> TimerState:
        return TimerState(
            mode=self.mode,
            is_paused=self.is_paused,
            accumulated_seconds=self.accumulated_seconds,
            last_start_time=self.last_start_time,
            study_minutes=self.study_minutes,
            break_minutes=self.break_minutes,
        )

    def to_dict(self) -> dict:
        return {
            "mode": self.mode.value,
            "isPaused": self.is_paused,
            "accumulatedSeconds": self.accumulated_seconds,
            "lastStartTime": self.last_start_time,
            "studyMinutes": self.study_minutes,
            "breakMinutes": self.break_minutes,
        }

    @classmethod
    def from_dict(cls, data: dict) -> TimerState:
        state = cls(
            mode=TimerMode(data.get("mode", TimerMode.COUNTDOWN.value)),
            is_paused=bool(data.get("isPaused", True)),
            accumulated_seconds=max(0.0, float(data.get("accumulatedSeconds", 0))),
            last_start_time=_as_float_or_none(data.get("lastStartTime")),
            study_minutes=_positive_int(data.get("studyMinutes"), DEFAULT_STUDY_MINUTES),
            break_minutes=_positive_int(data.get("breakMinutes"), DEFAULT_BREAK_MINUTES),
        )
        # Repair records that break the running <-> start-time pairing.
        if state.is_paused:
            state.last_start_time = None
        elif state.last_start_time is None:
            state.is_paused = True
        return state


# ── aggregate ─────────────────────────────────────────────────────────────


@dataclass
class AppState:
    """Everything that gets persisted, owned by one controller."""

    tasks: list[Task] = field(default_factory=list)
    sessions: list[Session] = field(default_factory=list)
    daily_intent: DailyIntent = field(default_factory=DailyIntent)
    timer_state: TimerState = field(default_factory=TimerState)

    def to_dict(self) -> dict:
        return {
            "tasks": [t.to_dict() for t in self.tasks],
            "sessions": [s.to_dict() for s in self.sessions],
            "dailyIntent": self.daily_intent.to_dict(),
            "timerState": self.timer_state.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> AppState:
        if not isinstance(data, dict):
            raise TypeError(f"expected a JSON object, got {type(data).__name__}")
        intent = data.get("dailyIntent")
        timer = data.get("timerState")
        return cls(
            tasks=[Task.from_dict(t) for t in data.get("tasks") or []],
            sessions=[Session.from_dict(s) for s in data.get("sessions") or []],
            daily_intent=DailyIntent.from_dict(intent) if intent else DailyIntent(),
            timer_state=TimerState.from_dict(timer) if timer else TimerState(),
        )
