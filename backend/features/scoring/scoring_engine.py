"""
Daily Scoring Engine

Pure, deterministic computation of a day's quality from a completion record.
No external calls, no randomness, no side effects.

Rules:
- dailyScore counts active domains marked 1
- activeDay: at least one domain touched
- strongDay: a majority of active domains touched (ceil(k / 2))
- perfectDay: every active domain touched
- XP: per-domain XP for completed domains plus a flat perfect-day bonus

XP is never negative and there is no XP-loss path.
"""

from typing import Iterable, Mapping, Optional

from backend.models.entry import ScoreResult
from backend.models.system_config import XPRules


class DailyScoringEngine:
    """Pure deterministic daily scoring."""

    @staticmethod
    def compute_score(
        active_domain_ids: Iterable[str],
        domains: Mapping[str, int],
        xp_rules: Optional[XPRules] = None,
        xp_values: Optional[Mapping[str, int]] = None,
    ) -> ScoreResult:
        """
        Compute the day's metrics.

        Args:
            active_domain_ids: Ordered ids of the user's active domains
            domains: Completion record, domain id -> 0/1 (missing ids count as 0)
            xp_rules: Configured XP table (defaults when omitted)
            xp_values: Optional per-domain XP overrides (e.g. 0 for XP-disabled domains)

        Returns:
            ScoreResult with dailyScore, activeDay, strongDay, perfectDay, xpEarned
        """
        rules = xp_rules or XPRules()
        active_ids = DailyScoringEngine._unique(active_domain_ids)
        domain_count = len(active_ids)

        if domain_count == 0:
            return ScoreResult()

        completed = [d for d in active_ids if DailyScoringEngine._is_done(domains.get(d))]
        daily_score = len(completed)

        active_day = 1 if daily_score >= 1 else 0
        strong_day = 1 if daily_score >= DailyScoringEngine.strong_threshold(domain_count) else 0
        perfect_day = 1 if daily_score == domain_count else 0

        xp = sum(DailyScoringEngine._domain_xp(d, rules, xp_values) for d in completed)
        if perfect_day:
            xp += rules.perfect_day_bonus

        result = ScoreResult(
            daily_score=daily_score,
            active_day=active_day,
            strong_day=strong_day,
            perfect_day=perfect_day,
            xp_earned=max(0, xp),
        )
        result.validate()
        return result

    @staticmethod
    def strong_threshold(domain_count: int) -> int:
        """Majority of active domains, never below one."""
        if domain_count <= 0:
            return 1
        return max(1, -(-domain_count // 2))

    @staticmethod
    def _domain_xp(domain_id: str, rules: XPRules, xp_values: Optional[Mapping[str, int]]) -> int:
        if xp_values is not None and domain_id in xp_values:
            return max(0, int(xp_values[domain_id]))
        return rules.xp_for(domain_id)

    @staticmethod
    def _is_done(value) -> bool:
        try:
            return int(value) == 1
        except (TypeError, ValueError):
            return False

    @staticmethod
    def _unique(ids: Iterable[str]) -> list:
        seen = set()
        ordered = []
        for domain_id in ids:
            if domain_id in seen:
                continue
            seen.add(domain_id)
            ordered.append(domain_id)
        return ordered
