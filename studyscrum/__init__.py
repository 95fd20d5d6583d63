"""StudyScrum: study task board, session timer and focus analytics."""

__version__ = "0.1.0"
