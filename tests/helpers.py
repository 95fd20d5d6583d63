"""Shared test helpers for StudyScrum."""

from datetime import date, datetime

from studyscrum.state import Session, SessionType, new_id


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


class FakeClock:
    """Manually advanced epoch-millisecond clock."""

    def __init__(self, start_ms: float = 1_700_000_000_000.0):
        self.now = start_ms

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float = 0.0, *, ms: float = 0.0) -> None:
        self.now += seconds * 1000 + ms

    @property
    def today(self) -> date:
        return datetime.fromtimestamp(self.now / 1000).date()


def study(day: date | str, minutes: float) -> Session:
    key = day if isinstance(day, str) else day.isoformat()
    return Session(id=new_id(), start_time=0.0, duration=minutes * 60,
                   type=SessionType.STUDY, date=key)


def rest(day: date | str, minutes: float) -> Session:
    key = day if isinstance(day, str) else day.isoformat()
    return Session(id=new_id(), start_time=0.0, duration=minutes * 60,
                   type=SessionType.BREAK, date=key)
