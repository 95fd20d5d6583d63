"""Application controller: owns the app record and wires the pieces.

The controller holds the one :class:`AppState`.  It hands the live
``timer_state`` to the :class:`TimerEngine` and the live ``tasks`` list to
the :class:`TaskBoard`, appends every logged session to ``sessions`` and
saves the whole record after each change.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable

from PyQt6.QtCore import QObject, pyqtSignal

from .analytics.metrics import Metrics, compute_metrics
from .board.tasks import TaskBoard
from .database.store import load_app_state, save_app_state
from .settings import Settings
from .state import AppState, DailyIntent, Session, SuccessCriterion, Task, TaskStatus
from .timer.engine import TimerEngine


logger = logging.getLogger(__name__)


class StudyController(QObject):
    """Glue between the timer, the task board, analytics and storage.

    Signals
    -------
    sessions_changed()
        A session was appended to the log.
    tasks_changed()
        Any task board mutation.
    intent_changed()
        The daily intent was replaced.
    """

    sessions_changed = pyqtSignal()
    tasks_changed = pyqtSignal()
    intent_changed = pyqtSignal()

    def __init__(
        self,
        state: AppState | None = None,
        parent: QObject | None = None,
        *,
        settings: Settings | None = None,
        clock: Callable[[], float] | None = None,
        persist: bool = True,
    ) -> None:
        super().__init__(parent)
        self._persist = persist
        self._settings = settings or Settings()

        if state is None:
            state = load_app_state() if persist else AppState()
        self._state = state
        logger.debug(
            "App state ready: %d tasks, %d sessions, timer %s",
            len(state.tasks), len(state.sessions), state.timer_state.mode.value,
        )

        self.engine = TimerEngine(
            self._state.timer_state,
            self,
            clock=clock,
            tick_interval_ms=self._settings.tick_interval_ms,
            min_minutes=self._settings.min_target_minutes,
            max_minutes=self._settings.max_target_minutes,
        )
        self.board = TaskBoard(self._state.tasks, clock=clock)

        self.engine.session_logged.connect(self._on_session_logged)
        self.engine.state_changed.connect(self._on_timer_changed)

    # ── read side ─────────────────────────────────────────────────────

    @property
    def state(self) -> AppState:
        return self._state

    @property
    def sessions(self) -> list[Session]:
        return self._state.sessions

    @property
    def tasks(self) -> list[Task]:
        return self._state.tasks

    @property
    def daily_intent(self) -> DailyIntent:
        return self._state.daily_intent

    def metrics(self, today: date | None = None) -> Metrics:
        return compute_metrics(self._state.sessions, self._state.tasks, today)

    # ── daily intent ──────────────────────────────────────────────────

    def set_daily_intent(self, intent: DailyIntent) -> None:
        self._state.daily_intent = intent
        self.save()
        self.intent_changed.emit()

    # ── task board (each call persists on success) ────────────────────

    def add_task(self, title: str, urgency: int = 3, color: str = "blue") -> Task | None:
        return self._task_op(self.board.add_task(title, urgency, color))

    def update_task(self, task: Task) -> Task | None:
        return self._task_op(self.board.update_task(task))

    def delete_task(self, task_id: str) -> Task | None:
        return self._task_op(self.board.delete_task(task_id))

    def move_task(self, task_id: str, status: TaskStatus) -> Task | None:
        return self._task_op(self.board.move_task(task_id, status))

    def add_criterion(self, task_id: str, text: str) -> SuccessCriterion | None:
        return self._task_op(self.board.add_criterion(task_id, text))

    def toggle_criterion(self, task_id: str, criterion_id: str) -> SuccessCriterion | None:
        return self._task_op(self.board.toggle_criterion(task_id, criterion_id))

    def set_blocked(self, task_id: str, blocked: bool, reason: str | None = None) -> Task | None:
        return self._task_op(self.board.set_blocked(task_id, blocked, reason))

    # ── persistence ───────────────────────────────────────────────────

    def save(self) -> None:
        if self._persist:
            save_app_state(self._state)

    # ── internal ──────────────────────────────────────────────────────

    def _task_op(self, result):
        if result is not None:
            self.save()
            self.tasks_changed.emit()
        return result

    def _on_session_logged(self, session: Session) -> None:
        self._state.sessions.append(session)
        self.save()
        self.sessions_changed.emit()

    def _on_timer_changed(self, _snapshot) -> None:
        self.save()
