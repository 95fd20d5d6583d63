"""QSS stylesheet and mode colours for StudyScrum."""

from __future__ import annotations

from ..state import TimerMode

# Accent per timer mode: countdown blue, stopwatch indigo, break emerald.
MODE_COLORS: dict[TimerMode, str] = {
    TimerMode.COUNTDOWN: "#63A2FF",
    TimerMode.STOPWATCH: "#6366F1",
    TimerMode.BREAK:     "#10B981",
}

PALETTE: dict[str, str] = {
    "bg":         "#F8FAFC",
    "surface":    "#FFFFFF",
    "text":       "#1E293B",
    "text_muted": "#94A3B8",
    "border":     "#E2E8F0",
    "danger":     "#F43F5E",
}

URGENCY_COLORS: tuple[str, ...] = (
    "#64748B", "#3B82F6", "#6366F1", "#A855F7", "#F43F5E",
)


def urgency_color(level: int) -> str:
    idx = max(1, min(len(URGENCY_COLORS), level)) - 1
    return URGENCY_COLORS[idx]


def build_stylesheet(palette: dict[str, str] | None = None) -> str:
    p = palette or PALETTE
    return f"""
    QMainWindow, QWidget {{
        background: {p['bg']};
        color: {p['text']};
        font-size: 13px;
    }}
    QFrame#card {{
        background: {p['surface']};
        border: 1px solid {p['border']};
        border-radius: 24px;
    }}
    QLabel#clock {{
        font-size: 56px;
        font-weight: 900;
    }}
    QLabel#caption {{
        color: {p['text_muted']};
        font-size: 10px;
        font-weight: 800;
        letter-spacing: 2px;
    }}
    QPushButton {{
        border: 1px solid {p['border']};
        border-radius: 12px;
        padding: 8px 16px;
        font-weight: 800;
    }}
    QPushButton:disabled {{
        color: {p['text_muted']};
    }}
    QListWidget {{
        background: {p['surface']};
        border: 1px solid {p['border']};
        border-radius: 12px;
    }}
    """


def mode_button_style(mode: TimerMode) -> str:
    return (
        f"QPushButton#primaryButton {{ background: {MODE_COLORS[mode]}; "
        "color: white; border: none; }"
    )
