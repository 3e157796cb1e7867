"""
Check-in entry model.

One Entry exists per (user, calendar date). Later check-ins for the same
date overwrite the stored row, they never duplicate it.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Dict


@dataclass(frozen=True)
class ScoreResult:
    """Day-quality metrics derived from a completion record.

    All flags are 0/1 integers so they sum cleanly in analytics.
    """

    daily_score: int = 0
    active_day: int = 0
    strong_day: int = 0
    perfect_day: int = 0
    xp_earned: int = 0

    def validate(self) -> None:
        assert self.daily_score >= 0, f"daily_score negative: {self.daily_score}"
        assert self.xp_earned >= 0, f"xp_earned negative: {self.xp_earned}"
        assert self.active_day in (0, 1) and self.strong_day in (0, 1) and self.perfect_day in (0, 1)
        assert self.strong_day <= self.active_day, "strong day must also be an active day"
        assert self.perfect_day <= self.strong_day, "perfect day must also be a strong day"

    def to_dict(self) -> dict:
        return {
            "dailyScore": self.daily_score,
            "activeDay": self.active_day,
            "strongDay": self.strong_day,
            "perfectDay": self.perfect_day,
            "xpEarned": self.xp_earned,
        }


@dataclass
class Entry:
    """A user's check-in for one date."""

    date: date
    domains: Dict[str, int] = field(default_factory=dict)
    reflection: str = ""
    daily_score: int = 0
    active_day: int = 0
    strong_day: int = 0
    perfect_day: int = 0
    xp_earned: int = 0

    @property
    def score(self) -> ScoreResult:
        return ScoreResult(
            daily_score=self.daily_score,
            active_day=self.active_day,
            strong_day=self.strong_day,
            perfect_day=self.perfect_day,
            xp_earned=self.xp_earned,
        )

    def completed(self, domain_id: str) -> bool:
        return self.domains.get(domain_id, 0) == 1

    def to_dict(self) -> dict:
        """Serialize to dict for JSON response (camelCase)."""
        return {
            "date": self.date.isoformat(),
            "domains": dict(self.domains),
            "reflection": self.reflection,
            **self.score.to_dict(),
        }

    def to_row(self, user_id: str) -> dict:
        """Column mapping for the entries table (snake_case)."""
        return {
            "user_id": user_id,
            "date": self.date,
            "domains": dict(self.domains),
            "reflection": self.reflection,
            "daily_score": self.daily_score,
            "active_day": self.active_day,
            "strong_day": self.strong_day,
            "perfect_day": self.perfect_day,
            "xp_earned": self.xp_earned,
        }

    @classmethod
    def from_row(cls, row) -> "Entry":
        raw_date = row.date
        day = raw_date if isinstance(raw_date, date) else date.fromisoformat(str(raw_date))
        return cls(
            date=day,
            domains={k: int(v) for k, v in (row.domains or {}).items()},
            reflection=row.reflection or "",
            daily_score=row.daily_score,
            active_day=row.active_day,
            strong_day=row.strong_day,
            perfect_day=row.perfect_day,
            xp_earned=row.xp_earned,
        )
