"""SQLAlchemy ORM models for StudyScrum."""

from datetime import datetime
from sqlalchemy import Column, Integer, Text, DateTime
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class AppSnapshot(Base):
    """Single-row table holding the whole app record as JSON.

    ``payload`` is ``{"tasks", "sessions", "dailyIntent", "timerState"}``.
    """

    __tablename__ = "app_snapshots"

    SINGLETON_ID = 1

    id = Column(Integer, primary_key=True, autoincrement=False)
    payload = Column(Text, nullable=False, default="{}")
    saved_at = Column(DateTime, nullable=False, default=datetime.now)

    def __repr__(self) -> str:
        return f"<AppSnapshot id={self.id} saved_at={self.saved_at}>"
