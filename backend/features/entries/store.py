"""
backend/features/entries/store.py

Entry persistence: one row per (user, date), upserted, last write wins.
In-memory implementation used for development and tests; the SQL-backed
store in store_sql.py keeps the identical interface.
"""

import logging
from datetime import date
from typing import Dict, List, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError

from backend.core.database import check_connection, get_database_url
from backend.core.logging import log_event
from backend.models.entry import Entry

logger = logging.getLogger("compoundverse")


class EntryStore(Protocol):
    """Persistence contract consumed by the check-in and momentum services."""

    def list_entries(self, user_id: str) -> List[Entry]: ...

    def get_entry(self, user_id: str, day: date) -> Optional[Entry]: ...

    def upsert_entry(self, user_id: str, entry: Entry) -> Entry: ...

    def add_protected_day(self, user_id: str, day: date) -> bool: ...

    def list_protected_days(self, user_id: str) -> List[date]: ...


class InMemoryEntryStore:
    """Dictionary-backed entry store keyed by (user_id, date)."""

    def __init__(self):
        self._entries: Dict[str, Dict[date, Entry]] = {}
        self._protected: Dict[str, set] = {}

    def list_entries(self, user_id: str) -> List[Entry]:
        """All entries for a user, ordered by date ascending (copies)."""
        rows = self._entries.get(user_id, {})
        return [self._copy(rows[d]) for d in sorted(rows)]

    def get_entry(self, user_id: str, day: date) -> Optional[Entry]:
        entry = self._entries.get(user_id, {}).get(day)
        return self._copy(entry) if entry else None

    def upsert_entry(self, user_id: str, entry: Entry) -> Entry:
        self._entries.setdefault(user_id, {})[entry.date] = self._copy(entry)
        return self._copy(entry)

    def add_protected_day(self, user_id: str, day: date) -> bool:
        """Mark a date protected. Returns False when it already was."""
        days = self._protected.setdefault(user_id, set())
        if day in days:
            return False
        days.add(day)
        return True

    def list_protected_days(self, user_id: str) -> List[date]:
        return sorted(self._protected.get(user_id, set()))

    def clear(self) -> None:
        """
        Drop every entry and protected day.
        FOR TESTING ONLY.
        """
        self._entries.clear()
        self._protected.clear()

    @staticmethod
    def _copy(entry: Entry) -> Entry:
        return Entry(
            date=entry.date,
            domains=dict(entry.domains),
            reflection=entry.reflection,
            daily_score=entry.daily_score,
            active_day=entry.active_day,
            strong_day=entry.strong_day,
            perfect_day=entry.perfect_day,
            xp_earned=entry.xp_earned,
        )


_memory_store = InMemoryEntryStore()


def get_memory_store() -> InMemoryEntryStore:
    return _memory_store


def get_entry_store():
    """
    Get the appropriate entry store implementation.

    - SQL store when DATABASE_URL is configured and reachable
    - Falls back to in-memory otherwise
    - Services are agnostic to the implementation

    Returns:
        InMemoryEntryStore or SqlEntryStore instance
    """
    if get_database_url():
        from backend.features.entries.store_sql import SqlEntryStore

        if check_connection():
            return SqlEntryStore()
        logger.warning("DATABASE_URL set but database unreachable; using in-memory entry store")

    return _memory_store


# Guarded access for services: a database error reads as empty history.

def _store_failed(op: str, user_id: str, exc: SQLAlchemyError) -> None:
    log_event(
        "warning",
        f"entries.{op}_failed",
        user_id=user_id,
        event_type=f"entries.{op}_failed",
        error_code=type(exc).__name__,
    )


def load_entries(store: EntryStore, user_id: str) -> List[Entry]:
    try:
        return store.list_entries(user_id)
    except SQLAlchemyError as exc:
        _store_failed("list", user_id, exc)
        return []


def load_entry(store: EntryStore, user_id: str, day: date) -> Optional[Entry]:
    try:
        return store.get_entry(user_id, day)
    except SQLAlchemyError as exc:
        _store_failed("get", user_id, exc)
        return None


def load_protected_days(store: EntryStore, user_id: str) -> List[date]:
    try:
        return store.list_protected_days(user_id)
    except SQLAlchemyError as exc:
        _store_failed("list_protected", user_id, exc)
        return []


def save_protected_day(store: EntryStore, user_id: str, day: date) -> bool:
    """Returns False when the day was already protected or could not be saved."""
    try:
        return store.add_protected_day(user_id, day)
    except SQLAlchemyError as exc:
        _store_failed("protect", user_id, exc)
        return False
