"""Task board: three status columns over a shared task list.

The board mutates the list it is given, so the owner's ``AppState.tasks``
stays the single source of truth.  Operations on unknown ids return
``None`` and change nothing.
"""

from __future__ import annotations

from datetime import date
from typing import Callable

from ..state import SuccessCriterion, Task, TaskStatus, date_key, now_ms


MIN_URGENCY = 1
MAX_URGENCY = 5

COLUMNS: tuple[TaskStatus, ...] = (
    TaskStatus.TO_LEARN,
    TaskStatus.ACTIVE,
    TaskStatus.COMPLETED,
)


def clamp_urgency(value: int) -> int:
    return max(MIN_URGENCY, min(MAX_URGENCY, int(value)))


class TaskBoard:
    """CRUD and column views for study tasks."""

    def __init__(
        self,
        tasks: list[Task] | None = None,
        *,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self._tasks: list[Task] = tasks if tasks is not None else []
        self._clock = clock or now_ms

    @property
    def tasks(self) -> list[Task]:
        return self._tasks

    def get(self, task_id: str) -> Task | None:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    # ── CRUD ──────────────────────────────────────────────────────────

    def add_task(self, title: str, urgency: int = 3, color: str = "blue") -> Task | None:
        """Create a task in the To-Learn column.  Blank titles are ignored."""
        title = title.strip()
        if not title:
            return None
        task = Task(title=title, urgency=clamp_urgency(urgency), color=color)
        self._tasks.append(task)
        return task

    def update_task(self, updated: Task) -> Task | None:
        for idx, task in enumerate(self._tasks):
            if task.id == updated.id:
                updated.urgency = clamp_urgency(updated.urgency)
                self._tasks[idx] = updated
                return updated
        return None

    def delete_task(self, task_id: str) -> Task | None:
        task = self.get(task_id)
        if task is not None:
            self._tasks.remove(task)
        return task

    def move_task(self, task_id: str, status: TaskStatus) -> Task | None:
        """Change column; entering Completed stamps ``completed_at``."""
        task = self.get(task_id)
        if task is None:
            return None
        task.status = status
        task.completed_at = self._clock() if status == TaskStatus.COMPLETED else None
        return task

    # ── criteria & blockers ───────────────────────────────────────────

    def add_criterion(self, task_id: str, text: str) -> SuccessCriterion | None:
        task = self.get(task_id)
        text = text.strip()
        if task is None or not text:
            return None
        criterion = SuccessCriterion(text=text)
        task.success_criteria.append(criterion)
        return criterion

    def toggle_criterion(self, task_id: str, criterion_id: str) -> SuccessCriterion | None:
        task = self.get(task_id)
        if task is None:
            return None
        for criterion in task.success_criteria:
            if criterion.id == criterion_id:
                criterion.done = not criterion.done
                return criterion
        return None

    def set_blocked(self, task_id: str, blocked: bool, reason: str | None = None) -> Task | None:
        task = self.get(task_id)
        if task is None:
            return None
        task.is_blocked = blocked
        task.blocker_reason = (reason or None) if blocked else None
        return task

    # ── views ─────────────────────────────────────────────────────────

    def column(self, status: TaskStatus, today: date | None = None) -> list[Task]:
        """Tasks in *status*, most urgent first.

        The Completed column only shows what was finished today; older
        completions live in :meth:`archive`.
        """
        tasks = [t for t in self._tasks if t.status == status]
        if status == TaskStatus.COMPLETED:
            key = (today or date.today()).isoformat()
            tasks = [t for t in tasks
                     if t.completed_at is not None and date_key(t.completed_at) == key]
        return sorted(tasks, key=lambda t: t.urgency, reverse=True)

    def archive(self) -> list[tuple[str, list[Task]]]:
        """Completed tasks grouped by completion date, newest first."""
        done = sorted(
            (t for t in self._tasks if t.status == TaskStatus.COMPLETED),
            key=lambda t: t.completed_at or 0,
            reverse=True,
        )
        groups: dict[str, list[Task]] = {}
        for task in done:
            label = (
                date_key(task.completed_at)
                if task.completed_at else "Unknown"
            )
            groups.setdefault(label, []).append(task)
        return list(groups.items())
