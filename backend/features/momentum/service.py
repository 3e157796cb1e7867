"""
Momentum Service

Reads entries and protected days from the entry store, then computes
momentum deterministically with the configured window.
"""

from datetime import date, datetime, timezone
from typing import List, Optional

from backend.core.config import Settings, settings
from backend.features.entries.store import EntryStore, get_entry_store, load_entries, load_protected_days
from backend.features.momentum.scoring_engine import MomentumScoringEngine
from backend.models.momentum import MomentumPoint, MomentumResult


class MomentumService:
    """Momentum for a user as of today (UTC) or any given date."""

    def __init__(self, store: Optional[EntryStore] = None, config: Optional[Settings] = None):
        self._store = store
        self._config = config

    @property
    def store(self) -> EntryStore:
        return self._store if self._store is not None else get_entry_store()

    @property
    def config(self) -> Settings:
        return self._config or settings

    def current(self, user_id: str, as_of: Optional[date] = None) -> MomentumResult:
        store = self.store
        return MomentumScoringEngine.compute_momentum(
            load_entries(store, user_id),
            load_protected_days(store, user_id),
            as_of=as_of or datetime.now(timezone.utc).date(),
            window=self.config.MOMENTUM_WINDOW_DAYS,
            neutral_score=self.config.MOMENTUM_NEUTRAL_SCORE,
            trend_tolerance=self.config.MOMENTUM_TREND_TOLERANCE,
        )

    def history(self, user_id: str, days: int = 14, as_of: Optional[date] = None) -> List[MomentumPoint]:
        """Daily momentum for the last `days` dates ending at as_of, oldest first."""
        store = self.store
        return MomentumScoringEngine.momentum_history(
            load_entries(store, user_id),
            load_protected_days(store, user_id),
            as_of=as_of or datetime.now(timezone.utc).date(),
            days=days,
            window=self.config.MOMENTUM_WINDOW_DAYS,
            neutral_score=self.config.MOMENTUM_NEUTRAL_SCORE,
            trend_tolerance=self.config.MOMENTUM_TREND_TOLERANCE,
        )


# Singleton service used by routes
momentum_service = MomentumService()
