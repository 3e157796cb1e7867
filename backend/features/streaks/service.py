from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Iterable, List, Optional

from backend.models.entry import Entry
from backend.models.stats import StreakSummary


class StreakService:
    """
    Legacy streak summary derived from the entry history.

    Momentum is the primary consistency signal; streaks are kept for display
    and badges. A streak is alive while the latest active day is today or
    yesterday.
    """

    @staticmethod
    def summarize(entries: Iterable[Entry], today: Optional[date] = None) -> StreakSummary:
        today = today or datetime.now(timezone.utc).date()
        active_days = StreakService._active_days(entries, today)
        if not active_days:
            return StreakSummary(current=0, longest=0)

        longest = StreakService._longest_run(active_days)

        latest = active_days[-1]
        if latest not in (today, today - timedelta(days=1)):
            return StreakSummary(current=0, longest=longest)

        current = 1
        for previous, following in zip(reversed(active_days[:-1]), reversed(active_days[1:])):
            if following - previous == timedelta(days=1):
                current += 1
            else:
                break

        return StreakSummary(current=current, longest=max(longest, current))

    @staticmethod
    def _active_days(entries: Iterable[Entry], today: date) -> List[date]:
        """Unique active dates up to today, ascending."""
        return sorted({e.date for e in entries if e.active_day == 1 and e.date <= today})

    @staticmethod
    def _longest_run(days: List[date]) -> int:
        longest = 1
        run = 1
        for previous, following in zip(days, days[1:]):
            if following - previous == timedelta(days=1):
                run += 1
                longest = max(longest, run)
            else:
                run = 1
        return longest
