"""Load and save the persisted app record.

The record is stored verbatim as JSON in the single ``app_snapshots`` row.
A missing row, unparseable JSON, a record of the wrong shape or numbers out
of range all mean "no saved state": the caller gets a fresh :class:`AppState`.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime

from ..state import AppState
from .db import get_session
from .models import AppSnapshot


logger = logging.getLogger(__name__)


def parse_app_state(payload: str | None) -> AppState:
    """Decode a stored payload, falling back to defaults when unusable."""
    if not payload:
        return AppState()
    try:
        return AppState.from_dict(json.loads(payload))
    except (ValueError, TypeError, AttributeError, OverflowError, OSError) as exc:
        logger.warning("Saved state is malformed, starting fresh: %s", exc)
        return AppState()


def load_app_state() -> AppState:
    with get_session() as db:
        row = db.get(AppSnapshot, AppSnapshot.SINGLETON_ID)
        payload = row.payload if row else None
    return parse_app_state(payload)


def save_app_state(state: AppState) -> None:
    payload = json.dumps(state.to_dict())
    with get_session() as db:
        row = db.get(AppSnapshot, AppSnapshot.SINGLETON_ID)
        if row is None:
            row = AppSnapshot(id=AppSnapshot.SINGLETON_ID)
            db.add(row)
        row.payload = payload
        row.saved_at = datetime.now()
