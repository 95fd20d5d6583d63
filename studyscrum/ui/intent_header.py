"""Daily intent header: main goal, yesterday's win, current blocker."""

from __future__ import annotations

from PyQt6.QtWidgets import QWidget, QHBoxLayout, QLineEdit

from ..controller import StudyController
from ..state import DailyIntent


class IntentHeader(QWidget):

    def __init__(self, controller: StudyController, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._controller = controller

        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        intent = controller.daily_intent

        self.goal_input = QLineEdit(intent.main_goal, self)
        self.goal_input.setPlaceholderText("Today's main goal")
        self.win_input = QLineEdit(intent.yesterday_win, self)
        self.win_input.setPlaceholderText("Yesterday's win")
        self.blocker_input = QLineEdit(intent.blocker, self)
        self.blocker_input.setPlaceholderText("Current blocker")

        for field in (self.goal_input, self.win_input, self.blocker_input):
            layout.addWidget(field)
            field.editingFinished.connect(self._commit)

    def _commit(self) -> None:
        intent = DailyIntent(
            main_goal=self.goal_input.text().strip(),
            yesterday_win=self.win_input.text().strip(),
            blocker=self.blocker_input.text().strip(),
        )
        if intent != self._controller.daily_intent:
            self._controller.set_daily_intent(intent)
