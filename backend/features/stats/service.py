"""
Stats Service

Lifetime totals, level and badges, recomputed from the entry history on
demand. Nothing here is stored; the entry rows are the source of truth.
"""

from datetime import date
from typing import List, Optional, Sequence

from backend.features.stats.badges import earned_badges
from backend.features.streaks.service import StreakService
from backend.models.entry import Entry
from backend.models.stats import Stats
from backend.models.system_config import XPRules


class StatsService:
    """Deterministic stats from entries."""

    @staticmethod
    def compute_stats(
        entries: Sequence[Entry],
        xp_rules: Optional[XPRules] = None,
        today: Optional[date] = None,
    ) -> Stats:
        rules = xp_rules or XPRules()
        entries = list(entries)

        total_xp = sum(max(0, e.xp_earned) for e in entries)
        level, into_level = StatsService.level_for(total_xp, rules.xp_per_level)
        streak = StreakService.summarize(entries, today=today)

        stats = Stats(
            total_xp=total_xp,
            level=level,
            xp_into_level=into_level,
            xp_per_level=rules.xp_per_level,
            current_streak=streak.current,
            longest_streak=streak.longest,
            active_days=sum(e.active_day for e in entries),
            strong_days=sum(e.strong_day for e in entries),
            perfect_days=sum(e.perfect_day for e in entries),
        )
        stats.badges = earned_badges(stats, entries)
        return stats

    @staticmethod
    def level_for(total_xp: int, xp_per_level: int) -> tuple:
        """Level starts at 1; returns (level, xp earned inside the current level)."""
        per_level = max(1, xp_per_level)
        xp = max(0, total_xp)
        return xp // per_level + 1, xp % per_level

    @staticmethod
    def badges_gained(before: Stats, after: Stats) -> List[str]:
        previous = set(before.badges)
        return [b for b in after.badges if b not in previous]
