"""Task detail and archive dialogs for the Board tab.

``TaskDialog`` is the per-task knowledge vault: title, urgency, formulas,
notes, blocker reason and the success-criteria checklist.  Criteria are
added and ticked through the controller straight away, so they count
toward the efficiency score even if the dialog is cancelled.  The text
fields are written back only on Save.

``ArchiveDialog`` lists every completed task grouped by completion day.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QFormLayout, QLabel, QLineEdit,
    QPlainTextEdit, QSpinBox, QCheckBox, QPushButton, QListWidget,
    QListWidgetItem, QTreeWidget, QTreeWidgetItem, QWidget,
)

from ..board.tasks import MAX_URGENCY, MIN_URGENCY
from ..controller import StudyController
from ..state import Task


def format_archive_day(key: str) -> str:
    """``"2024-03-15"`` -> ``"March 15, 2024"``."""
    try:
        day = date.fromisoformat(key)
    except ValueError:
        return "Unknown Date"
    return f"{day:%B} {day.day}, {day.year}"


class TaskDialog(QDialog):
    """Modal editor for one task."""

    def __init__(
        self,
        controller: StudyController,
        task_id: str,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("Knowledge Vault")
        self.setMinimumWidth(480)
        self.setModal(True)

        self._controller = controller
        self._task_id = task_id

        self._build_ui()
        self._populate()

    # ══════════════════════════════════════════════════════════════════
    #  BUILD UI
    # ══════════════════════════════════════════════════════════════════

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(24, 20, 24, 20)
        root.setSpacing(12)

        form = QFormLayout()
        self._title_edit = QLineEdit(self)
        self._title_edit.setPlaceholderText("Task Title")
        form.addRow("Title:", self._title_edit)

        self._urgency = QSpinBox(self)
        self._urgency.setRange(MIN_URGENCY, MAX_URGENCY)
        form.addRow("Urgency:", self._urgency)

        self._blocked_cb = QCheckBox("Blocked", self)
        self._blocked_cb.toggled.connect(self._on_blocked_toggled)
        form.addRow("", self._blocked_cb)

        self._blocker_edit = QPlainTextEdit(self)
        self._blocker_edit.setPlaceholderText("Why is this task stuck?")
        self._blocker_edit.setFixedHeight(60)
        form.addRow("Blocker:", self._blocker_edit)

        self._formulas_edit = QPlainTextEdit(self)
        self._formulas_edit.setPlaceholderText("Key equations...")
        form.addRow("Formulas:", self._formulas_edit)

        self._notes_edit = QPlainTextEdit(self)
        self._notes_edit.setPlaceholderText("Study notes...")
        form.addRow("Notes:", self._notes_edit)
        root.addLayout(form)

        # ── success criteria ─────────────────────────────────────────
        root.addWidget(QLabel("Success Criteria", self))
        self._criteria_list = QListWidget(self)
        self._criteria_list.itemChanged.connect(self._on_criterion_changed)
        root.addWidget(self._criteria_list)

        add_row = QHBoxLayout()
        self._criterion_input = QLineEdit(self)
        self._criterion_input.setPlaceholderText("Success metric...")
        self._add_criterion_btn = QPushButton("+ Add Criterion", self)
        add_row.addWidget(self._criterion_input)
        add_row.addWidget(self._add_criterion_btn)
        root.addLayout(add_row)

        self._add_criterion_btn.clicked.connect(self._add_criterion)
        self._criterion_input.returnPressed.connect(self._add_criterion)

        # ── buttons ──────────────────────────────────────────────────
        btn_row = QHBoxLayout()
        self._delete_btn = QPushButton("Delete", self)
        self._cancel_btn = QPushButton("Cancel", self)
        self._save_btn = QPushButton("Save", self)
        self._save_btn.setObjectName("primaryButton")
        btn_row.addWidget(self._delete_btn)
        btn_row.addStretch()
        btn_row.addWidget(self._cancel_btn)
        btn_row.addWidget(self._save_btn)
        root.addLayout(btn_row)

        self._delete_btn.clicked.connect(self._delete)
        self._cancel_btn.clicked.connect(self.reject)
        self._save_btn.clicked.connect(self._save)

    # ══════════════════════════════════════════════════════════════════
    #  POPULATE
    # ══════════════════════════════════════════════════════════════════

    def _task(self) -> Task | None:
        return self._controller.board.get(self._task_id)

    def _populate(self) -> None:
        task = self._task()
        if task is None:
            return
        self._title_edit.setText(task.title)
        self._urgency.setValue(task.urgency)
        self._blocked_cb.setChecked(task.is_blocked)
        self._blocker_edit.setPlainText(task.blocker_reason or "")
        self._blocker_edit.setEnabled(task.is_blocked)
        self._formulas_edit.setPlainText(task.formulas)
        self._notes_edit.setPlainText(task.notes)
        self._populate_criteria(task)

    def _populate_criteria(self, task: Task) -> None:
        self._criteria_list.blockSignals(True)
        self._criteria_list.clear()
        for criterion in task.success_criteria:
            item = QListWidgetItem(criterion.text)
            item.setData(Qt.ItemDataRole.UserRole, criterion.id)
            item.setFlags(item.flags() | Qt.ItemFlag.ItemIsUserCheckable)
            item.setCheckState(
                Qt.CheckState.Checked if criterion.done else Qt.CheckState.Unchecked
            )
            self._criteria_list.addItem(item)
        self._criteria_list.blockSignals(False)

    def criteria_states(self) -> list[tuple[str, bool]]:
        """(text, checked) per row, as shown."""
        rows = []
        for i in range(self._criteria_list.count()):
            item = self._criteria_list.item(i)
            rows.append((item.text(), item.checkState() == Qt.CheckState.Checked))
        return rows

    # ══════════════════════════════════════════════════════════════════
    #  HANDLERS
    # ══════════════════════════════════════════════════════════════════

    def _on_blocked_toggled(self, checked: bool) -> None:
        self._blocker_edit.setEnabled(checked)

    def _add_criterion(self) -> None:
        if self._controller.add_criterion(self._task_id, self._criterion_input.text()):
            self._criterion_input.clear()
            self._populate_criteria(self._task())

    def _on_criterion_changed(self, item: QListWidgetItem) -> None:
        task = self._task()
        if task is None:
            return
        criterion_id = item.data(Qt.ItemDataRole.UserRole)
        checked = item.checkState() == Qt.CheckState.Checked
        for criterion in task.success_criteria:
            if criterion.id == criterion_id and criterion.done != checked:
                self._controller.toggle_criterion(task.id, criterion_id)

    def _save(self) -> None:
        task = self._task()
        if task is None:
            self.reject()
            return
        blocked = self._blocked_cb.isChecked()
        reason = self._blocker_edit.toPlainText().strip()
        edited = replace(
            task,
            title=self._title_edit.text().strip() or task.title,
            urgency=self._urgency.value(),
            formulas=self._formulas_edit.toPlainText(),
            notes=self._notes_edit.toPlainText(),
            is_blocked=blocked,
            blocker_reason=(reason or None) if blocked else None,
        )
        self._controller.update_task(edited)
        self.accept()

    def _delete(self) -> None:
        self._controller.delete_task(self._task_id)
        self.accept()


class ArchiveDialog(QDialog):
    """Read-only history of completed tasks, newest day first."""

    def __init__(
        self,
        groups: list[tuple[str, list[Task]]],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("Archive History")
        self.setMinimumSize(420, 480)

        root = QVBoxLayout(self)
        root.setContentsMargins(24, 20, 24, 20)

        self._tree = QTreeWidget(self)
        self._tree.setHeaderHidden(True)
        total = 0
        for key, tasks in groups:
            day_item = QTreeWidgetItem([format_archive_day(key)])
            for task in tasks:
                day_item.addChild(QTreeWidgetItem([task.title]))
            self._tree.addTopLevelItem(day_item)
            total += len(tasks)
        self._tree.expandAll()

        if total:
            root.addWidget(self._tree)
        else:
            self._tree.hide()
            root.addWidget(QLabel("Archive Empty", self))

        self.total_label = QLabel(f"Total archived tasks: {total}", self)
        root.addWidget(self.total_label)

        close_btn = QPushButton("Close", self)
        close_btn.clicked.connect(self.accept)
        root.addWidget(close_btn, alignment=Qt.AlignmentFlag.AlignRight)

    def day_labels(self) -> list[str]:
        return [
            self._tree.topLevelItem(i).text(0)
            for i in range(self._tree.topLevelItemCount())
        ]

    def titles_for(self, index: int) -> list[str]:
        day = self._tree.topLevelItem(index)
        return [day.child(i).text(0) for i in range(day.childCount())]
