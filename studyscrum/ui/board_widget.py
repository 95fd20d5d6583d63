"""Board tab: the three task columns, with detail and archive dialogs."""

from __future__ import annotations

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QColor
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QLineEdit, QListWidget,
    QListWidgetItem, QPushButton, QSpinBox,
)

from ..board.tasks import COLUMNS, MAX_URGENCY, MIN_URGENCY
from ..controller import StudyController
from ..state import Task, TaskStatus
from .styles import urgency_color
from .task_dialog import ArchiveDialog, TaskDialog


def task_summary(task: Task) -> str:
    text = f"[{task.urgency}] {task.title}"
    if task.success_criteria:
        text += f"  ({task.criteria_done}/{len(task.success_criteria)} criteria)"
    if task.is_blocked:
        text += "  BLOCKED"
    return text


class BoardWidget(QWidget):
    """Three columns plus a one-line "new task" form."""

    def __init__(self, controller: StudyController, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._controller = controller
        self._build_ui()
        controller.tasks_changed.connect(self.refresh)
        self.refresh()

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 8, 0, 0)

        form = QHBoxLayout()
        self._title_input = QLineEdit(self)
        self._title_input.setPlaceholderText("e.g. Finite Element Analysis")
        self._urgency = QSpinBox(self)
        self._urgency.setRange(MIN_URGENCY, MAX_URGENCY)
        self._urgency.setValue(3)
        self._add_btn = QPushButton("Add Task", self)
        form.addWidget(self._title_input)
        form.addWidget(self._urgency)
        form.addWidget(self._add_btn)
        layout.addLayout(form)

        columns = QHBoxLayout()
        self._lists: dict[TaskStatus, QListWidget] = {}
        for status in COLUMNS:
            col = QVBoxLayout()
            col.addWidget(QLabel(status.value.upper(), self))
            lst = QListWidget(self)
            lst.itemDoubleClicked.connect(self._open_item)
            self._lists[status] = lst
            col.addWidget(lst)
            columns.addLayout(col)
        layout.addLayout(columns)

        actions = QHBoxLayout()
        self._move_buttons: dict[TaskStatus, QPushButton] = {}
        for status in COLUMNS:
            btn = QPushButton(f"Move to {status.value}", self)
            btn.clicked.connect(lambda _=False, s=status: self._move_selected(s))
            self._move_buttons[status] = btn
            actions.addWidget(btn)
        self._block_btn = QPushButton("Toggle Blocked", self)
        self._delete_btn = QPushButton("Delete", self)
        actions.addWidget(self._block_btn)
        actions.addWidget(self._delete_btn)
        self._archive_btn = QPushButton("Archive History", self)
        actions.addWidget(self._archive_btn)
        layout.addLayout(actions)

        self._add_btn.clicked.connect(self._add)
        self._title_input.returnPressed.connect(self._add)
        self._block_btn.clicked.connect(self._toggle_blocked)
        self._delete_btn.clicked.connect(self._delete_selected)
        self._archive_btn.clicked.connect(self._show_archive)

    # ── slots ─────────────────────────────────────────────────────────

    def refresh(self) -> None:
        for status, lst in self._lists.items():
            lst.clear()
            for task in self._controller.board.column(status):
                item = QListWidgetItem(task_summary(task))
                item.setData(Qt.ItemDataRole.UserRole, task.id)
                item.setForeground(QColor(urgency_color(task.urgency)))
                lst.addItem(item)

    def column_titles(self, status: TaskStatus) -> list[str]:
        lst = self._lists[status]
        return [lst.item(i).text() for i in range(lst.count())]

    def _add(self) -> None:
        if self._controller.add_task(self._title_input.text(), self._urgency.value()):
            self._title_input.clear()
            self._urgency.setValue(3)

    def _selected_id(self) -> str | None:
        for lst in self._lists.values():
            item = lst.currentItem()
            if item is not None and item.isSelected():
                return item.data(Qt.ItemDataRole.UserRole)
        return None

    def _move_selected(self, status: TaskStatus) -> None:
        task_id = self._selected_id()
        if task_id:
            self._controller.move_task(task_id, status)

    def _toggle_blocked(self) -> None:
        task_id = self._selected_id()
        task = self._controller.board.get(task_id) if task_id else None
        if task is not None:
            self._controller.set_blocked(task.id, not task.is_blocked)

    def _delete_selected(self) -> None:
        task_id = self._selected_id()
        if task_id:
            self._controller.delete_task(task_id)

    # ── dialogs ───────────────────────────────────────────────────────

    def task_dialog(self, task_id: str) -> TaskDialog | None:
        if self._controller.board.get(task_id) is None:
            return None
        return TaskDialog(self._controller, task_id, self)

    def archive_dialog(self) -> ArchiveDialog:
        return ArchiveDialog(self._controller.board.archive(), self)

    def _open_item(self, item: QListWidgetItem) -> None:
        dialog = self.task_dialog(item.data(Qt.ItemDataRole.UserRole))
        if dialog is not None:
            dialog.exec()

    def _show_archive(self) -> None:
        self.archive_dialog().exec()
