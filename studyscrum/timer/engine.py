"""Timer state machine for StudyScrum.

Modes
-----
COUNTDOWN     Study timer counting down from ``study_minutes``.
STOPWATCH     Open-ended study timer counting up.  Never auto-completes.
BREAK         Break timer counting down from ``break_minutes``.

Each mode is either paused or running.  The engine starts in
``COUNTDOWN`` / paused and has no terminal state.

Transitions
-----------
paused  → running                   (resume)
running → paused                    (pause)
paused  → paused, other mode        (switch_mode, progress discarded)
COUNTDOWN | STOPWATCH → BREAK       (finish, logs a study session)
BREAK → COUNTDOWN                   (finish, logs a break session)
BREAK → COUNTDOWN                   (skip_break, nothing logged)

Time accounting
---------------
Elapsed time is never counted per tick.  It is always rebuilt from
timestamps::

    elapsed = accumulated_seconds + (now - last_start_time) / 1000

so a stalled event loop (sleeping laptop, hidden window) loses nothing and
a resume never double-counts.  The poll timer only decides *when* to look.

Invalid transitions (pause while paused, resume while running, mode
switch while running) are silent no-ops.
"""

from __future__ import annotations

import logging
import math
from typing import Callable

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from ..state import Session, SessionType, TimerMode, TimerState, now_ms


logger = logging.getLogger(__name__)


# ── constants ─────────────────────────────────────────────────────────────

MIN_TARGET_MINUTES = 1
MAX_TARGET_MINUTES = 180
TICK_INTERVAL_MS = 100

Clock = Callable[[], float]


def elapsed_seconds(state: TimerState, now: float) -> float:
    """Seconds in the current unfinished run, derived from timestamps."""
    if state.is_paused or state.last_start_time is None:
        return state.accumulated_seconds
    return state.accumulated_seconds + max(0.0, now - state.last_start_time) / 1000


def target_seconds(state: TimerState) -> int | None:
    """Countdown length for the current mode, ``None`` for the stopwatch."""
    if state.mode == TimerMode.COUNTDOWN:
        return state.study_minutes * 60
    if state.mode == TimerMode.BREAK:
        return state.break_minutes * 60
    return None


# ── engine ────────────────────────────────────────────────────────────────


class TimerEngine(QObject):
    """Qt-driven study timer over a shared :class:`TimerState`.

    The engine mutates the ``TimerState`` it is given in place, so the
    owner (see :class:`~studyscrum.controller.StudyController`) always
    sees the live record.

    Signals
    -------
    tick(display_seconds: int)
        Emitted on every poll.  Seconds left for COUNTDOWN / BREAK,
        seconds elapsed for STOPWATCH, floored.
    state_changed(snapshot: TimerState)
        Emitted after every accepted transition.
    session_logged(session: Session)
        Emitted exactly once per finished run.
    """

    tick = pyqtSignal(int)
    state_changed = pyqtSignal(object)
    session_logged = pyqtSignal(object)

    def __init__(
        self,
        state: TimerState | None = None,
        parent: QObject | None = None,
        *,
        clock: Clock | None = None,
        tick_interval_ms: int = TICK_INTERVAL_MS,
        min_minutes: int = MIN_TARGET_MINUTES,
        max_minutes: int = MAX_TARGET_MINUTES,
    ) -> None:
        super().__init__(parent)

        self._state: TimerState = state if state is not None else TimerState()
        self._clock: Clock = clock or now_ms
        self._min_minutes = max(1, min_minutes)
        self._max_minutes = max(self._min_minutes, max_minutes)

        # Stored targets outside the configured bounds are pulled back in.
        self._state.study_minutes = self._clamp_minutes(self._state.study_minutes)
        self._state.break_minutes = self._clamp_minutes(self._state.break_minutes)

        self._poll_timer = QTimer(self)
        self._poll_timer.setInterval(tick_interval_ms)
        self._poll_timer.timeout.connect(self._on_tick)

        # A record restored mid-run keeps running from its stored start time.
        if not self._state.is_paused:
            self._poll_timer.start()

    # ══════════════════════════════════════════════════════════════════
    #  READ SIDE
    # ══════════════════════════════════════════════════════════════════

    @property
    def mode(self) -> TimerMode:
        return self._state.mode

    @property
    def is_paused(self) -> bool:
        return self._state.is_paused

    @property
    def is_polling(self) -> bool:
        return self._poll_timer.isActive()

    @property
    def target_bounds(self) -> tuple[int, int]:
        return self._min_minutes, self._max_minutes

    def get_state(self) -> TimerState:
        """A detached copy of the live state."""
        return self._state.copy()

    def compute_elapsed(self, now: float | None = None) -> float:
        return elapsed_seconds(self._state, self._now(now))

    def check_completion(self, now: float | None = None) -> bool:
        target = target_seconds(self._state)
        if target is None:
            return False
        return self.compute_elapsed(now) >= target

    def display_seconds(self, now: float | None = None) -> int:
        """Whole seconds to show: remaining for countdowns, elapsed otherwise."""
        elapsed = self.compute_elapsed(now)
        target = target_seconds(self._state)
        if target is None:
            return math.floor(elapsed)
        return math.floor(max(0.0, target - elapsed))

    def progress(self, now: float | None = None) -> float:
        """Fraction of the countdown still left, 0.0 → 1.0 (1.0 for stopwatch)."""
        target = target_seconds(self._state)
        if not target:
            return 1.0
        left = 1.0 - self.compute_elapsed(now) / target
        return max(0.0, min(1.0, left))

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def resume(self) -> TimerState:
        """Start or continue the current run.  No-op while running."""
        if not self._state.is_paused:
            return self.get_state()
        self._state.last_start_time = self._clock()
        self._state.is_paused = False
        self._poll_timer.start()
        return self._changed("resume")

    def pause(self) -> TimerState:
        """Bank elapsed time and freeze.  No-op while paused."""
        if self._state.is_paused:
            return self.get_state()
        self._state.accumulated_seconds = self.compute_elapsed(self._clock())
        self._state.last_start_time = None
        self._state.is_paused = True
        self._poll_timer.stop()
        return self._changed("pause")

    def switch_mode(self, mode: TimerMode) -> TimerState:
        """Change mode while paused.  Unlogged progress is dropped."""
        if not self._state.is_paused:
            return self.get_state()
        self._reset_to(mode)
        return self._changed("switch_mode")

    def finish(self, now: float | None = None) -> TimerState:
        """Log the current run as a session and move to the next mode.

        Studying (countdown or stopwatch) is always followed by an
        offered break; a break always returns to the countdown.
        """
        stamp = self._now(now)
        elapsed = self.compute_elapsed(stamp)
        was_break = self._state.mode == TimerMode.BREAK
        session = Session.create(
            elapsed,
            SessionType.BREAK if was_break else SessionType.STUDY,
            at_ms=stamp,
        )

        self._poll_timer.stop()
        self._reset_to(TimerMode.COUNTDOWN if was_break else TimerMode.BREAK)

        logger.info(
            "Logged %s session: %.1fs on %s",
            session.type.value, session.duration, session.date,
        )
        self.session_logged.emit(session)
        return self._changed("finish")

    def skip_break(self) -> TimerState:
        """Drop the break and go straight back to the countdown, unlogged."""
        self._poll_timer.stop()
        self._reset_to(TimerMode.COUNTDOWN)
        return self._changed("skip_break")

    def set_target_minutes(self, mode: TimerMode, minutes) -> TimerState:
        """Set the countdown length for COUNTDOWN or BREAK, clamped.

        Unparseable input clamps to the lower bound, infinities to the
        nearest one.  The stopwatch has no target, so STOPWATCH is a no-op.
        """
        if mode == TimerMode.STOPWATCH:
            return self.get_state()
        value = self._clamp_minutes(minutes)

        if mode == TimerMode.COUNTDOWN:
            self._state.study_minutes = value
        else:
            self._state.break_minutes = value
        return self._changed("set_target_minutes")

    def refresh(self) -> None:
        """Re-poll immediately, e.g. when the window becomes visible again."""
        self._on_tick()

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL
    # ══════════════════════════════════════════════════════════════════

    def _on_tick(self) -> None:
        stamp = self._clock()
        self.tick.emit(self.display_seconds(stamp))
        if not self._state.is_paused and self.check_completion(stamp):
            self.finish(stamp)

    def _reset_to(self, mode: TimerMode) -> None:
        self._state.mode = mode
        self._state.accumulated_seconds = 0.0
        self._state.last_start_time = None
        self._state.is_paused = True

    def _changed(self, action: str) -> TimerState:
        logger.debug(
            "%s -> mode=%s paused=%s accumulated=%.2fs",
            action, self._state.mode.value, self._state.is_paused,
            self._state.accumulated_seconds,
        )
        snapshot = self.get_state()
        self.state_changed.emit(snapshot)
        return snapshot

    def _now(self, now: float | None) -> float:
        return self._clock() if now is None else now

    def _clamp_minutes(self, minutes) -> int:
        try:
            value = int(minutes)
        except OverflowError:
            return self._max_minutes if minutes > 0 else self._min_minutes
        except (TypeError, ValueError):
            return self._min_minutes
        return max(self._min_minutes, min(self._max_minutes, value))
