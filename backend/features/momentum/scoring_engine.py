"""
Momentum Scoring Engine

Pure, deterministic computation of momentum from the entry history.
No external calls, no randomness, no side effects.

Scoring philosophy:
- Rolling window of N days ending on the as-of date (inclusive)
- A day is active when its entry has activeDay = 1
- Protected (grounding) days are removed from the window entirely:
  they neither help nor hurt
- score = round(100 * active / non-protected days), clamped to 0..100
- Every day protected: neutral score instead of a division by zero

Missing one day costs roughly 100 / N points. Momentum never snaps to zero
the way a streak counter does.
"""

import math
from datetime import date, datetime, timedelta, timezone
from typing import Iterable, List, Optional, Set, Tuple

from backend.models.entry import Entry
from backend.models.momentum import MomentumPoint, MomentumResult, MomentumTrend


class MomentumScoringEngine:
    """Pure deterministic momentum scoring."""

    DEFAULT_WINDOW = 14
    NEUTRAL_SCORE = 50
    TREND_TOLERANCE = 5

    # Message level thresholds
    HIGH_THRESHOLD = 70
    MEDIUM_THRESHOLD = 40

    MESSAGES = {
        "high_rising": "Momentum building quietly.",
        "high_stable": "You're in a good rhythm.",
        "high_falling": "Still strong. One day changes nothing.",
        "medium_rising": "Moving in the right direction.",
        "medium_stable": "You're still in motion.",
        "medium_falling": "Pattern matters more than any single day.",
        "low_rising": "Something is better than nothing.",
        "low_stable": "Showing up is what counts.",
        "low_falling": "You're here now. That matters.",
        "protected": "Protected day. No penalty.",
        "zero": "Ready when you are.",
    }

    @staticmethod
    def compute_momentum(
        entries: Iterable[Entry],
        protected_days: Iterable[date] = (),
        as_of: Optional[date] = None,
        window: int = DEFAULT_WINDOW,
        neutral_score: int = NEUTRAL_SCORE,
        trend_tolerance: int = TREND_TOLERANCE,
    ) -> MomentumResult:
        """
        Compute momentum as of a date.

        Args:
            entries: Entry history in any order
            protected_days: Dates exempt from momentum (grounding days)
            as_of: Last date of the window; defaults to the latest entry or protected date
            window: Window length in days
            neutral_score: Score used when every day in the window is protected
            trend_tolerance: Points the score must move to count as a trend

        Returns:
            MomentumResult with score, trend, counts, protection flag and message
        """
        window = max(1, int(window))
        history = MomentumScoringEngine._normalize(entries)
        protected = set(protected_days)
        end = as_of or MomentumScoringEngine._latest_date(history, protected)

        # Only dates up to the as-of date are visible
        active_dates = {e.date for e in history if e.date <= end and e.active_day == 1}
        has_history = any(e.date <= end for e in history)

        active, total = MomentumScoringEngine._window_counts(active_dates, protected, end, window)
        score = MomentumScoringEngine._score(active, total, neutral_score)

        if has_history:
            previous_end = end - timedelta(days=window)
            prev_active, prev_total = MomentumScoringEngine._window_counts(
                active_dates, protected, previous_end, window
            )
            previous_score = MomentumScoringEngine._score(prev_active, prev_total, neutral_score)
            trend = MomentumScoringEngine._calculate_trend(score, previous_score, trend_tolerance)
        else:
            trend = "stable"

        is_protected = end in protected
        message = MomentumScoringEngine._generate_message(score, trend, is_protected)

        result = MomentumResult(
            score=score,
            trend=trend,
            window=window,
            active_days=active,
            total_days=total,
            is_protected=is_protected,
            message=message,
        )
        result.validate()
        return result

    @staticmethod
    def momentum_history(
        entries: Iterable[Entry],
        protected_days: Iterable[date] = (),
        as_of: Optional[date] = None,
        days: int = 14,
        window: int = DEFAULT_WINDOW,
        neutral_score: int = NEUTRAL_SCORE,
        trend_tolerance: int = TREND_TOLERANCE,
    ) -> List[MomentumPoint]:
        """Momentum as of each of the last `days` dates, oldest first."""
        history = MomentumScoringEngine._normalize(entries)
        protected = set(protected_days)
        end = as_of or MomentumScoringEngine._latest_date(history, protected)

        points: List[MomentumPoint] = []
        for offset in range(max(0, days) - 1, -1, -1):
            day = end - timedelta(days=offset)
            result = MomentumScoringEngine.compute_momentum(
                history,
                protected,
                as_of=day,
                window=window,
                neutral_score=neutral_score,
                trend_tolerance=trend_tolerance,
            )
            points.append(MomentumPoint(date=day.isoformat(), score=result.score, trend=result.trend))
        return points

    @staticmethod
    def window_dates(end: date, window: int) -> List[date]:
        """Dates of the window ending on `end`, most recent first."""
        return [end - timedelta(days=i) for i in range(window)]

    @staticmethod
    def _window_counts(
        active_dates: Set[date], protected: Set[date], end: date, window: int
    ) -> Tuple[int, int]:
        active = 0
        total = 0
        for day in MomentumScoringEngine.window_dates(end, window):
            if day in protected:
                continue
            total += 1
            if day in active_dates:
                active += 1
        return active, total

    @staticmethod
    def _score(active: int, total: int, neutral_score: int) -> int:
        if total <= 0:
            return max(0, min(100, int(neutral_score)))
        raw = math.floor(100.0 * active / total + 0.5)
        return max(0, min(100, int(raw)))

    @staticmethod
    def _calculate_trend(current: int, previous: int, tolerance: int) -> MomentumTrend:
        """
        Compare the current window to the window immediately before it.

        Only moves beyond the tolerance count as a trend.
        """
        if current > previous + tolerance:
            return "rising"
        if current < previous - tolerance:
            return "falling"
        return "stable"

    @staticmethod
    def _generate_message(score: int, trend: MomentumTrend, is_protected: bool) -> str:
        """Calm, grounded message. Never moralizing."""
        messages = MomentumScoringEngine.MESSAGES
        if is_protected:
            return messages["protected"]
        if score == 0:
            return messages["zero"]

        if score >= MomentumScoringEngine.HIGH_THRESHOLD:
            level = "high"
        elif score >= MomentumScoringEngine.MEDIUM_THRESHOLD:
            level = "medium"
        else:
            level = "low"
        return messages.get(f"{level}_{trend}", messages["medium_stable"])

    @staticmethod
    def _normalize(entries: Iterable[Entry]) -> List[Entry]:
        """Sort ascending by date; a duplicate date keeps the last entry seen."""
        by_date = {}
        for entry in entries:
            by_date[entry.date] = entry
        return [by_date[d] for d in sorted(by_date)]

    @staticmethod
    def _latest_date(history: List[Entry], protected: Set[date]) -> date:
        candidates = [e.date for e in history] + list(protected)
        if candidates:
            return max(candidates)
        return datetime.now(timezone.utc).date()
