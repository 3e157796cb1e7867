"""
backend/features/entries/store_sql.py

SQLAlchemy-backed entry store.

Maintains the identical interface to InMemoryEntryStore:
- list ordered by date
- upsert by (user_id, date), last write wins
- protected days are insert-once
"""

from datetime import date
from typing import List, Optional

from sqlalchemy import and_, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.sql import func

from backend.core.database import entries, get_db_session, protected_days
from backend.models.entry import Entry


class SqlEntryStore:
    """Relational entry store over the `entries` and `protected_days` tables."""

    @staticmethod
    def list_entries(user_id: str) -> List[Entry]:
        with get_db_session() as session:
            rows = session.execute(
                select(entries)
                .where(entries.c.user_id == user_id)
                .order_by(entries.c.date.asc())
            ).fetchall()
        return [Entry.from_row(row) for row in rows]

    @staticmethod
    def get_entry(user_id: str, day: date) -> Optional[Entry]:
        with get_db_session() as session:
            row = session.execute(
                select(entries).where(and_(entries.c.user_id == user_id, entries.c.date == day))
            ).first()
        return Entry.from_row(row) if row else None

    @staticmethod
    def upsert_entry(user_id: str, entry: Entry) -> Entry:
        """
        Insert or overwrite the entry for (user_id, entry.date).

        Two writers racing on the same date resolve to the last write.
        """
        values = entry.to_row(user_id)
        changes = {k: v for k, v in values.items() if k not in ("user_id", "date")}
        where = and_(entries.c.user_id == user_id, entries.c.date == entry.date)

        with get_db_session() as session:
            result = session.execute(
                update(entries).where(where).values(**changes, updated_at=func.now())
            )
            if result.rowcount:
                return entry

        try:
            with get_db_session() as session:
                session.execute(insert(entries).values(**values))
        except IntegrityError:
            # Another writer inserted the same date first
            with get_db_session() as session:
                session.execute(update(entries).where(where).values(**changes, updated_at=func.now()))
        return entry

    @staticmethod
    def add_protected_day(user_id: str, day: date) -> bool:
        try:
            with get_db_session() as session:
                session.execute(insert(protected_days).values(user_id=user_id, date=day))
            return True
        except IntegrityError:
            return False

    @staticmethod
    def list_protected_days(user_id: str) -> List[date]:
        with get_db_session() as session:
            rows = session.execute(
                select(protected_days.c.date)
                .where(protected_days.c.user_id == user_id)
                .order_by(protected_days.c.date.asc())
            ).fetchall()
        return [row.date for row in rows]
