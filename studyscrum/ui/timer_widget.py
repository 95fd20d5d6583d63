"""Timer card for the Focus tab.

Layout (top → bottom):
    - Mode selector (Countdown / Stopwatch / Break), enabled only while paused
    - Clock, or a minutes editor when a countdown has not started yet
    - Status caption (Paused / Deep Focus / Resting)
    - Start / Pause button, Finish button, Skip Break button
"""

from __future__ import annotations

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout,
    QLabel, QPushButton, QSpinBox, QFrame,
)

from ..state import TimerMode, TimerState
from ..timer.engine import TimerEngine
from .styles import MODE_COLORS, mode_button_style


MODE_LABELS: dict[TimerMode, str] = {
    TimerMode.COUNTDOWN: "Countdown",
    TimerMode.STOPWATCH: "Stopwatch",
    TimerMode.BREAK:     "Break",
}


def format_clock(seconds: int, mode: TimerMode) -> str:
    """``MM:SS``, or ``HH:MM:SS`` past an hour and always for the stopwatch."""
    seconds = max(0, seconds)
    h, rem = divmod(seconds, 3600)
    m, s = divmod(rem, 60)
    if h > 0 or mode == TimerMode.STOPWATCH:
        return f"{h:02d}:{m:02d}:{s:02d}"
    return f"{m:02d}:{s:02d}"


def primary_button_text(state: TimerState) -> str:
    if not state.is_paused:
        return "Pause"
    started = state.accumulated_seconds > 0
    if state.mode == TimerMode.BREAK:
        return "Resume Break" if started else "Start Break"
    return "Resume Session" if started else "Start Studying"


class TimerWidget(QWidget):
    """The main timer card shown in the Focus tab."""

    def __init__(self, engine: TimerEngine, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._engine = engine
        self._build_ui()
        self._connect_signals()
        self._sync(engine.get_state())

    # ── build ─────────────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)

        card = QFrame(self)
        card.setObjectName("card")
        root.addWidget(card)

        layout = QVBoxLayout(card)
        layout.setContentsMargins(32, 24, 32, 28)
        layout.setSpacing(12)
        layout.setAlignment(Qt.AlignmentFlag.AlignCenter)

        # ── mode selector ────────────────────────────────────────────
        mode_row = QHBoxLayout()
        mode_row.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._mode_buttons: dict[TimerMode, QPushButton] = {}
        for mode, label in MODE_LABELS.items():
            btn = QPushButton(label, card)
            btn.setCheckable(True)
            btn.clicked.connect(lambda _=False, m=mode: self._engine.switch_mode(m))
            self._mode_buttons[mode] = btn
            mode_row.addWidget(btn)
        layout.addLayout(mode_row)

        # ── clock / minutes editor ───────────────────────────────────
        self._clock = QLabel("25:00", card)
        self._clock.setObjectName("clock")
        self._clock.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._clock)

        low, high = self._engine.target_bounds
        self._minutes = QSpinBox(card)
        self._minutes.setRange(low, high)
        self._minutes.setSuffix(" m")
        self._minutes.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._minutes, alignment=Qt.AlignmentFlag.AlignCenter)

        self._caption = QLabel("PAUSED", card)
        self._caption.setObjectName("caption")
        self._caption.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._caption)

        # ── controls ─────────────────────────────────────────────────
        self._primary_btn = QPushButton("Start Studying", card)
        self._primary_btn.setObjectName("primaryButton")
        layout.addWidget(self._primary_btn)

        self._finish_btn = QPushButton("Finish Session", card)
        layout.addWidget(self._finish_btn)

        self._skip_btn = QPushButton("Skip Break", card)
        self._skip_btn.setObjectName("secondaryButton")
        layout.addWidget(self._skip_btn)

    # ── signals ───────────────────────────────────────────────────────────

    def _connect_signals(self) -> None:
        self._primary_btn.clicked.connect(self._on_primary)
        self._finish_btn.clicked.connect(lambda: self._engine.finish())
        self._skip_btn.clicked.connect(self._engine.skip_break)
        self._minutes.valueChanged.connect(self._on_minutes_changed)

        self._engine.tick.connect(self._on_tick)
        self._engine.state_changed.connect(self._sync)

    # ── slots ─────────────────────────────────────────────────────────────

    def _on_primary(self) -> None:
        if self._engine.is_paused:
            self._engine.resume()
        else:
            self._engine.pause()

    def _on_minutes_changed(self, value: int) -> None:
        mode = self._engine.mode
        state = self._engine.get_state()
        current = state.break_minutes if mode == TimerMode.BREAK else state.study_minutes
        if value != current:
            self._engine.set_target_minutes(mode, value)

    def _on_tick(self, display_seconds: int) -> None:
        self._clock.setText(format_clock(display_seconds, self._engine.mode))

    def _sync(self, state: TimerState) -> None:
        mode = state.mode
        for m, btn in self._mode_buttons.items():
            btn.setChecked(m == mode)
            btn.setEnabled(state.is_paused)

        editing = (
            state.is_paused
            and state.accumulated_seconds == 0
            and mode != TimerMode.STOPWATCH
        )
        self._minutes.setVisible(editing)
        self._clock.setVisible(not editing)
        if editing:
            self._minutes.blockSignals(True)
            self._minutes.setValue(
                state.break_minutes if mode == TimerMode.BREAK else state.study_minutes
            )
            self._minutes.blockSignals(False)
            self._minutes.setStyleSheet(f"color: {MODE_COLORS[mode]};")

        self._clock.setText(format_clock(self._engine.display_seconds(), mode))
        self._clock.setStyleSheet(f"color: {MODE_COLORS[mode]};")

        if state.is_paused:
            self._caption.setText("PAUSED")
        else:
            self._caption.setText("RESTING" if mode == TimerMode.BREAK else "DEEP FOCUS")

        self._primary_btn.setText(primary_button_text(state))
        self._primary_btn.setStyleSheet(mode_button_style(mode))

        self._finish_btn.setText("End Break" if mode == TimerMode.BREAK else "Finish Session")
        self._finish_btn.setVisible(
            state.is_paused and self._engine.compute_elapsed() > 0
        )
        self._skip_btn.setVisible(mode == TimerMode.BREAK)
