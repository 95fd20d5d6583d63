"""Main window for StudyScrum."""

from __future__ import annotations

from PyQt6.QtCore import Qt, QEvent
from PyQt6.QtGui import QKeySequence, QShortcut
from PyQt6.QtWidgets import QMainWindow, QTabWidget, QVBoxLayout, QWidget, QStatusBar

from .controller import StudyController
from .settings import Settings, load_settings, save_settings
from .state import Session, SessionType, TimerMode
from .ui.board_widget import BoardWidget
from .ui.intent_header import IntentHeader
from .ui.stats_widget import StatsWidget
from .ui.styles import build_stylesheet
from .ui.timer_widget import TimerWidget


class StudyScrumApp(QMainWindow):
    """Main application window."""

    def __init__(
        self,
        controller: StudyController | None = None,
        settings: Settings | None = None,
    ) -> None:
        super().__init__()
        self.setWindowTitle("StudyScrum")
        self.setMinimumSize(480, 640)

        self._settings: Settings = settings or load_settings()
        self._controller = controller or StudyController(settings=self._settings)
        self._controller.setParent(self)
        self.setStyleSheet(build_stylesheet())

        # ── central widget ────────────────────────────────────────────
        central = QWidget()
        self.setCentralWidget(central)
        root_layout = QVBoxLayout(central)
        root_layout.setContentsMargins(16, 12, 16, 12)
        root_layout.setSpacing(8)

        self._intent = IntentHeader(self._controller, central)
        root_layout.addWidget(self._intent)

        self._tabs = QTabWidget(central)
        root_layout.addWidget(self._tabs)

        self._timer_widget = TimerWidget(self._controller.engine, self._tabs)
        self._tabs.addTab(self._timer_widget, "Focus")

        self._board_widget = BoardWidget(self._controller, self._tabs)
        self._tabs.addTab(self._board_widget, "Board")

        self._stats_widget = StatsWidget(self._tabs)
        self._tabs.addTab(self._stats_widget, "Analytics")

        self._status_bar = QStatusBar(self)
        self.setStatusBar(self._status_bar)
        self._status_bar.showMessage("Ready to study!")

        # ── wire signals ──────────────────────────────────────────────
        self._controller.sessions_changed.connect(self._refresh_stats)
        self._controller.tasks_changed.connect(self._refresh_stats)
        self._controller.engine.session_logged.connect(self._on_session_logged)
        self._tabs.currentChanged.connect(lambda _: self._refresh_stats())

        space = QShortcut(QKeySequence(Qt.Key.Key_Space), self)
        space.activated.connect(self._toggle_timer)

        self._restore_geometry()
        if self._settings.always_on_top:
            self.setWindowFlag(Qt.WindowType.WindowStaysOnTopHint, True)
        self._refresh_stats()

    @property
    def controller(self) -> StudyController:
        return self._controller

    # ── slots ─────────────────────────────────────────────────────────

    def _refresh_stats(self) -> None:
        self._stats_widget.set_metrics(self._controller.metrics())

    def _toggle_timer(self) -> None:
        engine = self._controller.engine
        if engine.is_paused:
            engine.resume()
        else:
            engine.pause()

    def _on_session_logged(self, session: Session) -> None:
        minutes = round(session.duration / 60)
        if session.type == SessionType.BREAK:
            self._status_bar.showMessage(f"Break over ({minutes} min). Back to it!")
        else:
            self._status_bar.showMessage(f"Logged {minutes} min of study. Take a break.")
        if self._controller.engine.mode == TimerMode.BREAK:
            self._tabs.setCurrentWidget(self._timer_widget)

    # ── window state ──────────────────────────────────────────────────

    def _restore_geometry(self) -> None:
        s = self._settings
        self.resize(s.window_width, s.window_height)
        if s.window_x is not None and s.window_y is not None:
            self.move(s.window_x, s.window_y)

    def _save_geometry(self) -> None:
        s = self._settings
        s.window_x, s.window_y = self.x(), self.y()
        s.window_width, s.window_height = self.width(), self.height()
        save_settings(s)

    def changeEvent(self, event) -> None:  # type: ignore[override]
        # Rebuild the clock from timestamps as soon as the window is back.
        if event.type() == QEvent.Type.ActivationChange and self.isActiveWindow():
            self._controller.engine.refresh()
        super().changeEvent(event)

    def closeEvent(self, event) -> None:  # type: ignore[override]
        self._save_geometry()
        self._controller.save()
        super().closeEvent(event)
