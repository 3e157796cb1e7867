"""Turn checked micro-actions into a per-domain completion record and an Entry."""

from datetime import date
from typing import Dict, Iterable, List, Mapping

from backend.models.entry import Entry, ScoreResult


def build_domain_record(
    active_domain_ids: Iterable[str],
    checked_items: Mapping[str, List[str]],
) -> Dict[str, int]:
    """
    1 for every active domain with at least one checked item, else 0.

    Domains outside the active set are dropped even if items were checked.
    """
    return {domain_id: 1 if checked_items.get(domain_id) else 0 for domain_id in active_domain_ids}


def build_entry(day: date, reflection: str, domains: Mapping[str, int], score: ScoreResult) -> Entry:
    return Entry(
        date=day,
        domains=dict(domains),
        reflection=reflection,
        daily_score=score.daily_score,
        active_day=score.active_day,
        strong_day=score.strong_day,
        perfect_day=score.perfect_day,
        xp_earned=score.xp_earned,
    )
