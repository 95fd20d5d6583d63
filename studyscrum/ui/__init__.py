"""UI package."""

from .timer_widget import TimerWidget
from .stats_widget import StatsWidget
from .board_widget import BoardWidget
from .intent_header import IntentHeader
from .task_dialog import ArchiveDialog, TaskDialog

__all__ = [
    "TimerWidget",
    "StatsWidget",
    "BoardWidget",
    "IntentHeader",
    "TaskDialog",
    "ArchiveDialog",
]
