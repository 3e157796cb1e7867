"""Badge catalogue and award rules."""

from typing import Callable, Dict, Iterable, List, Sequence, Tuple

from backend.models.entry import Entry
from backend.models.stats import Badge, Stats


def count_domain(entries: Iterable[Entry], domain_id: str) -> int:
    """Number of entries where the domain was completed."""
    return sum(1 for e in entries if e.completed(domain_id))


BadgeRule = Callable[[Stats, Sequence[Entry]], bool]

BADGES: List[Tuple[Badge, BadgeRule]] = [
    (
        Badge("first_flame", "🔥", "First Flame", "Complete your first active day"),
        lambda stats, _: stats.active_days >= 1,
    ),
    (
        Badge("perfect_day", "⭐", "Perfect Day", "Complete every active domain in one day"),
        lambda stats, _: stats.perfect_days >= 1,
    ),
    (
        Badge("week_warrior", "🎯", "Week Warrior", "Achieve a 7-day streak"),
        lambda stats, _: stats.longest_streak >= 7,
    ),
    (
        Badge("consistency", "💎", "Consistency King", "Achieve a 30-day streak"),
        lambda stats, _: stats.longest_streak >= 30,
    ),
    (
        Badge("health_hero", "💪", "Health Hero", "Complete 10 health check-ins"),
        lambda _, entries: count_domain(entries, "health") >= 10,
    ),
    (
        Badge("zen_master", "✨", "Zen Master", "Complete 10 faith check-ins"),
        lambda _, entries: count_domain(entries, "faith") >= 10,
    ),
    (
        Badge("mind_sharp", "🧠", "Mind Sharpener", "Complete 10 career check-ins"),
        lambda _, entries: count_domain(entries, "career") >= 10,
    ),
]

BADGES_BY_ID: Dict[str, Badge] = {badge.id: badge for badge, _ in BADGES}


def earned_badges(stats: Stats, entries: Sequence[Entry]) -> List[str]:
    """Ids of every badge whose condition holds, in catalogue order."""
    return [badge.id for badge, rule in BADGES if rule(stats, entries)]

