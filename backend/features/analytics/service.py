"""
Analytics Service

Read-only dashboard derived from entries, protected days and domains:
engagement, per-domain completion, grounding usage and momentum history.
"""

import math
from datetime import date, datetime, timedelta, timezone
from typing import List, Optional, Sequence

from backend.features.domains.service import DomainService, domain_service
from backend.features.entries.store import EntryStore, get_entry_store, load_entries, load_protected_days
from backend.features.grounding.service import GroundingService, grounding_service
from backend.features.momentum.service import MomentumService
from backend.features.streaks.service import StreakService
from backend.models.entry import Entry

HISTORY_DAYS = 14


def _percent(part: int, whole: int) -> int:
    if whole <= 0:
        return 0
    return int(math.floor(100.0 * part / whole + 0.5))


def _since(today: date, days: int) -> date:
    """First date of a `days`-long range ending today."""
    return today - timedelta(days=days - 1)


class AnalyticsService:
    def __init__(
        self,
        store: Optional[EntryStore] = None,
        domains: Optional[DomainService] = None,
        grounding: Optional[GroundingService] = None,
        momentum: Optional[MomentumService] = None,
    ):
        self._store = store
        self._domains = domains or domain_service
        self._grounding = grounding or grounding_service
        self._momentum = momentum or MomentumService(store)

    @property
    def store(self) -> EntryStore:
        return self._store if self._store is not None else get_entry_store()

    def engagement(self, user_id: str, entries: Sequence[Entry], today: date) -> dict:
        total = len(entries)
        active = sum(1 for e in entries if e.active_day)
        momentum = self._momentum.current(user_id, as_of=today)
        streak = StreakService.summarize(entries, today=today)

        last7 = _since(today, 7)
        last30 = _since(today, 30)
        active7 = sum(1 for e in entries if e.active_day and last7 <= e.date <= today)
        active30 = sum(1 for e in entries if e.active_day and last30 <= e.date <= today)

        return {
            "totalDays": total,
            "activeDays": active,
            "engagementRate": _percent(active, total),
            "currentStreak": streak.current,
            "longestStreak": streak.longest,
            "currentMomentum": momentum.score,
            "momentumTrend": momentum.trend,
            "averageActivity7Days": _percent(active7, 7),
            "averageActivity30Days": _percent(active30, 30),
        }

    def domain_stats(self, user_id: str, entries: Sequence[Entry], today: date) -> List[dict]:
        """Completion stats for each active domain, in registry order."""
        last7 = _since(today, 7)
        last30 = _since(today, 30)
        stats = []
        for domain in self._domains.registry(user_id).active_domains():
            done = [e for e in entries if e.completed(domain.id)]
            stats.append(
                {
                    "domainId": domain.id,
                    "domainName": domain.name,
                    "domainIcon": domain.icon,
                    "totalActiveDays": len(done),
                    "activeDaysLast7": sum(1 for e in done if last7 <= e.date <= today),
                    "activeDaysLast30": sum(1 for e in done if last30 <= e.date <= today),
                    "completionRate": _percent(len(done), len(entries)),
                }
            )
        return stats

    def grounding_stats(self, user_id: str, today: date) -> dict:
        protected = load_protected_days(self.store, user_id)
        last7 = _since(today, 7)
        last30 = _since(today, 30)

        if protected:
            days_since_first = max(1, (today - protected[0]).days)
            per_month = round(len(protected) / (days_since_first / 30.0), 1)
        else:
            per_month = 0.0

        return {
            "totalActivations": self._grounding.get_state(user_id).total_activations,
            "protectedDaysLast7": sum(1 for d in protected if last7 <= d <= today),
            "protectedDaysLast30": sum(1 for d in protected if last30 <= d <= today),
            "averagePerMonth": per_month,
            "protectedDays": [d.isoformat() for d in protected],
        }

    def dashboard(self, user_id: str, today: Optional[date] = None) -> dict:
        today = today or datetime.now(timezone.utc).date()
        entries = [e for e in load_entries(self.store, user_id) if e.date <= today]
        history = self._momentum.history(user_id, days=HISTORY_DAYS, as_of=today)

        return {
            "engagement": self.engagement(user_id, entries, today),
            "domains": self.domain_stats(user_id, entries, today),
            "grounding": self.grounding_stats(user_id, today),
            "momentumHistory": [point.to_dict() for point in history],
            "lastUpdated": datetime.now(timezone.utc).isoformat(),
        }


# Singleton service used by routes
analytics_service = AnalyticsService()
