"""Progress models: streak summary, lifetime stats and badges."""

from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class StreakSummary:
    current: int = 0
    longest: int = 0

    def to_dict(self) -> dict:
        return {"current": self.current, "longest": self.longest}


@dataclass
class Stats:
    """Lifetime totals derived from the entry history."""

    total_xp: int = 0
    level: int = 1
    xp_into_level: int = 0
    xp_per_level: int = 30
    current_streak: int = 0
    longest_streak: int = 0
    active_days: int = 0
    strong_days: int = 0
    perfect_days: int = 0
    badges: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "totalXP": self.total_xp,
            "level": self.level,
            "xpIntoLevel": self.xp_into_level,
            "xpPerLevel": self.xp_per_level,
            "currentStreak": self.current_streak,
            "longestStreak": self.longest_streak,
            "activeDays": self.active_days,
            "strongDays": self.strong_days,
            "perfectDays": self.perfect_days,
            "badges": list(self.badges),
        }


@dataclass(frozen=True)
class Badge:
    id: str
    icon: str
    name: str
    description: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "icon": self.icon,
            "name": self.name,
            "description": self.description,
        }
