"""
Grounding Service

The panic button: entering grounding mode protects today's date so the
momentum calculation neither rewards nor penalizes it. Protected dates are
kept in the entry store; the timer state is kept per user in memory.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from backend.features.entries.store import (
    EntryStore,
    get_entry_store,
    load_protected_days,
    save_protected_day,
)
from backend.models.grounding import (
    MAX_GROUNDING_MINUTES,
    MIN_GROUNDING_MINUTES,
    GroundingState,
)

logger = logging.getLogger("compoundverse")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class GroundingService:
    """Grounding timer and protected-day bookkeeping."""

    def __init__(self, store: Optional[EntryStore] = None):
        self._store = store
        self._states: Dict[str, GroundingState] = {}

    @property
    def store(self) -> EntryStore:
        return self._store if self._store is not None else get_entry_store()

    def get_state(self, user_id: str) -> GroundingState:
        if user_id not in self._states:
            self._states[user_id] = GroundingState(user_id=user_id)
        return self._states[user_id]

    def activate(self, user_id: str, now: Optional[datetime] = None) -> GroundingState:
        """Enter grounding mode immediately and protect today."""
        now = now or _utcnow()
        state = self.get_state(user_id)

        state.is_active = True
        state.activated_at = now
        state.grounding_end = now + timedelta(minutes=state.duration_minutes)
        state.total_activations += 1

        newly_protected = save_protected_day(self.store, user_id, now.date())
        logger.info(
            "grounding.activated",
            extra={"user_id": user_id, "event_type": "grounding.activated"},
        )
        if not newly_protected:
            logger.debug("grounding.day_already_protected", extra={"user_id": user_id})
        return state

    def exit(self, user_id: str) -> GroundingState:
        """Leave grounding mode. The day stays protected."""
        state = self.get_state(user_id)
        state.is_active = False
        state.grounding_end = None
        logger.info("grounding.exited", extra={"user_id": user_id, "event_type": "grounding.exited"})
        return state

    def is_expired(self, user_id: str, now: Optional[datetime] = None) -> bool:
        state = self.get_state(user_id)
        if not state.is_active or state.grounding_end is None:
            return True
        return (now or _utcnow()) >= state.grounding_end

    def remaining_seconds(self, user_id: str, now: Optional[datetime] = None) -> int:
        """Whole seconds left on the timer, rounded up; 0 when inactive."""
        state = self.get_state(user_id)
        if not state.is_active or state.grounding_end is None:
            return 0
        remaining = (state.grounding_end - (now or _utcnow())).total_seconds()
        if remaining <= 0:
            return 0
        whole = int(remaining)
        return whole if whole == remaining else whole + 1

    def set_duration(self, user_id: str, minutes: int) -> GroundingState:
        state = self.get_state(user_id)
        state.duration_minutes = max(MIN_GROUNDING_MINUTES, min(MAX_GROUNDING_MINUTES, int(minutes)))
        return state

    def reset_for_new_day(self, user_id: str, now: Optional[datetime] = None) -> GroundingState:
        """Clear timer state when the last activation was not today. History is kept."""
        today = (now or _utcnow()).date()
        state = self.get_state(user_id)
        last = state.activated_at.date() if state.activated_at else None
        if last != today:
            state.is_active = False
            state.activated_at = None
            state.grounding_end = None
        return state

    def refresh(self, user_id: str, now: Optional[datetime] = None) -> GroundingState:
        """Apply the daily reset, then end a session whose timer has run out."""
        now = now or _utcnow()
        state = self.reset_for_new_day(user_id, now)
        if state.is_active and self.is_expired(user_id, now):
            logger.info("grounding.expired", extra={"user_id": user_id, "event_type": "grounding.expired"})
            state = self.exit(user_id)
        return state

    def exited_today(self, user_id: str, now: Optional[datetime] = None) -> bool:
        """True when grounding was activated today and has since ended."""
        state = self.get_state(user_id)
        if state.activated_at is None or state.is_active:
            return False
        return state.activated_at.date() == (now or _utcnow()).date()

    def protected_days(self, user_id: str) -> List:
        return load_protected_days(self.store, user_id)

    def stats(self, user_id: str) -> dict:
        state = self.get_state(user_id)
        return {
            "totalActivations": state.total_activations,
            "protectedDaysCount": len(self.protected_days(user_id)),
        }

    def clear(self) -> None:
        """FOR TESTING ONLY."""
        self._states.clear()


# Singleton service used by routes
grounding_service = GroundingService()
