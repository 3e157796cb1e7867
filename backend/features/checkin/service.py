"""
Check-in Service

Record -> score -> persist -> progress -> coach feedback.

Persistence failures never lose the computed score: the caller gets the
result with persisted=False and can retry the same check-in later (the
upsert is idempotent per date).
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Dict, List, Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError

from backend.core.logging import log_event
from backend.features.admin.service import SystemConfigService, config_service
from backend.features.checkin.recorder import build_domain_record, build_entry
from backend.features.coach.service import CoachService
from backend.features.domains.service import DomainService, domain_service
from backend.features.entries.store import (
    EntryStore,
    get_entry_store,
    load_entries,
    load_entry,
    load_protected_days,
)
from backend.features.grounding.service import GroundingService, grounding_service
from backend.features.scoring.scoring_engine import DailyScoringEngine
from backend.features.stats.service import StatsService
from backend.models.entry import Entry
from backend.models.stats import Stats

logger = logging.getLogger("compoundverse")


@dataclass
class CheckinResult:
    entry: Entry
    persisted: bool
    stats: Stats
    new_badges: List[str] = field(default_factory=list)
    feedback: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "entry": self.entry.to_dict(),
            "persisted": self.persisted,
            "stats": self.stats.to_dict(),
            "newBadges": list(self.new_badges),
            "feedback": dict(self.feedback),
        }


class CheckinService:
    def __init__(
        self,
        store: Optional[EntryStore] = None,
        domains: Optional[DomainService] = None,
        config: Optional[SystemConfigService] = None,
        grounding: Optional[GroundingService] = None,
    ):
        self._store = store
        self._domains = domains or domain_service
        self._config = config or config_service
        self._grounding = grounding or grounding_service

    @property
    def store(self) -> EntryStore:
        return self._store if self._store is not None else get_entry_store()

    def submit(
        self,
        user_id: str,
        checked_items: Mapping[str, List[str]],
        reflection: str = "",
        day: Optional[date] = None,
    ) -> CheckinResult:
        now = datetime.now(timezone.utc)
        day = day or now.date()
        registry = self._domains.registry(user_id)
        active_ids = registry.active_ids()
        xp_rules = self._config.get_config().xp_rules

        record = build_domain_record(active_ids, checked_items)
        score = DailyScoringEngine.compute_score(
            active_ids, record, xp_rules=xp_rules, xp_values=registry.xp_values()
        )
        entry = build_entry(day, reflection.strip(), record, score)

        store = self.store
        history = load_entries(store, user_id)
        protected = set(load_protected_days(store, user_id))

        persisted = True
        try:
            store.upsert_entry(user_id, entry)
        except SQLAlchemyError as exc:
            persisted = False
            log_event(
                "warning",
                "checkin.persist_failed",
                user_id=user_id,
                event_type="checkin.persist_failed",
                error_code=type(exc).__name__,
                extra={"error": exc},
            )

        before = StatsService.compute_stats(history, xp_rules, today=day)
        updated = [e for e in history if e.date != day] + [entry]
        after = StatsService.compute_stats(updated, xp_rules, today=day)

        # Grounding state only describes the current UTC day
        exited_grounding = False
        if day == now.date():
            self._grounding.refresh(user_id, now)
            exited_grounding = self._grounding.exited_today(user_id, now)

        feedback = CoachService.feedback(
            user_id,
            day,
            score,
            is_protected=day in protected,
            exited_grounding_today=exited_grounding,
        )

        logger.info(
            "checkin.recorded",
            extra={"user_id": user_id, "event_type": "checkin.recorded"},
        )
        return CheckinResult(
            entry=entry,
            persisted=persisted,
            stats=after,
            new_badges=StatsService.badges_gained(before, after),
            feedback=feedback,
        )

    def today(self, user_id: str, day: Optional[date] = None) -> dict:
        day = day or datetime.now(timezone.utc).date()
        entry = load_entry(self.store, user_id, day)
        return {
            "date": day.isoformat(),
            "submitted": entry is not None,
            "entry": entry.to_dict() if entry else None,
        }

    def entries(self, user_id: str, since: Optional[date] = None) -> List[Entry]:
        rows = load_entries(self.store, user_id)
        if since is not None:
            rows = [e for e in rows if e.date >= since]
        return rows


# Singleton service used by routes
checkin_service = CheckinService()
