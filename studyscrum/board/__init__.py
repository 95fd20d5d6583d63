"""Task board package."""

from .tasks import TaskBoard, COLUMNS, clamp_urgency

__all__ = ["TaskBoard", "COLUMNS", "clamp_urgency"]
