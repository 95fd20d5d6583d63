"""Database package."""

from .db import configure_engine, get_session, init_db
from .models import AppSnapshot
from .store import load_app_state, save_app_state, parse_app_state

__all__ = [
    "configure_engine",
    "get_session",
    "init_db",
    "AppSnapshot",
    "load_app_state",
    "save_app_state",
    "parse_app_state",
]
