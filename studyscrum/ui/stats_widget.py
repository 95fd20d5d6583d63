"""Analytics tab: efficiency score, streak, today's focus and a 7-day chart."""

from __future__ import annotations

from datetime import date

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QGridLayout, QLabel, QProgressBar, QFrame,
)

from ..analytics.metrics import DAILY_TARGET_MINUTES, Metrics
from ..state import TimerMode
from .styles import MODE_COLORS, PALETTE


def _format_minutes(minutes: float) -> str:
    return f"{round(minutes)}m"


class StatCard(QFrame):
    """Caption over a big value."""

    def __init__(self, caption: str, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setObjectName("card")
        layout = QVBoxLayout(self)
        layout.setContentsMargins(16, 12, 16, 12)
        self._caption = QLabel(caption.upper(), self)
        self._caption.setObjectName("caption")
        self._value = QLabel("0", self)
        self._value.setStyleSheet("font-size: 24px; font-weight: 900;")
        layout.addWidget(self._caption)
        layout.addWidget(self._value)

    def set_value(self, text: str) -> None:
        self._value.setText(text)

    @property
    def value(self) -> str:
        return self._value.text()


class WeeklyBars(QWidget):
    """Seven vertical bars; days at or above the daily target are highlighted."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._grid = QGridLayout(self)
        self._bars: list[QProgressBar] = []
        self._labels: list[QLabel] = []
        for col in range(7):
            bar = QProgressBar(self)
            bar.setOrientation(Qt.Orientation.Vertical)
            bar.setTextVisible(False)
            bar.setMinimumHeight(140)
            label = QLabel("", self)
            label.setAlignment(Qt.AlignmentFlag.AlignCenter)
            self._grid.addWidget(bar, 0, col, alignment=Qt.AlignmentFlag.AlignHCenter)
            self._grid.addWidget(label, 1, col)
            self._bars.append(bar)
            self._labels.append(label)

    def set_data(self, histogram: list[tuple[str, float]]) -> None:
        peak = max([DAILY_TARGET_MINUTES] + [round(m) for _, m in histogram])
        for bar, label, (key, minutes) in zip(self._bars, self._labels, histogram):
            value = round(minutes)
            bar.setRange(0, peak)
            bar.setValue(value)
            hit = minutes >= DAILY_TARGET_MINUTES
            color = MODE_COLORS[TimerMode.COUNTDOWN] if hit else PALETTE["border"]
            bar.setStyleSheet(f"QProgressBar::chunk {{ background: {color}; }}")
            label.setText(date.fromisoformat(key).strftime("%a"))
            bar.setToolTip(f"{key}: {value} min")

    def day_labels(self) -> list[str]:
        return [label.text() for label in self._labels]


class StatsWidget(QWidget):
    """Focus analytics, refreshed from a :class:`Metrics` snapshot."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 8, 0, 0)
        layout.setSpacing(12)

        top = QHBoxLayout()
        self.score_card = StatCard("Efficiency Score", self)
        self.streak_card = StatCard("Streak", self)
        top.addWidget(self.score_card)
        top.addWidget(self.streak_card)
        layout.addLayout(top)

        self.weekly = WeeklyBars(self)
        layout.addWidget(self.weekly)

        bottom = QHBoxLayout()
        self.today_card = StatCard("Focus Time Today", self)
        self.target_card = StatCard("Target Status", self)
        bottom.addWidget(self.today_card)
        bottom.addWidget(self.target_card)
        layout.addLayout(bottom)
        layout.addStretch()

    def set_metrics(self, metrics: Metrics) -> None:
        self.score_card.set_value(str(metrics.efficiency_score))
        self.streak_card.set_value(f"{metrics.streak} Days")
        self.today_card.set_value(_format_minutes(metrics.today_minutes))
        self.target_card.set_value("Complete" if metrics.target_met else "Pending")
        self.weekly.set_data(metrics.histogram)
