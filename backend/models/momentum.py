"""
Momentum domain model.

Momentum answers: "Am I still in motion?" It is a rolling-window
consistency score that degrades gradually instead of snapping to zero the
way a streak counter does.
"""

from dataclasses import dataclass
from typing import Literal


MomentumTrend = Literal["rising", "stable", "falling"]


@dataclass(frozen=True)
class MomentumResult:
    """
    Momentum for one user as of one date. Derived, never persisted.

    Attributes:
        score: 0..100 integer
        trend: rising / stable / falling vs the preceding window
        window: Window length in days
        active_days: Active, non-protected days inside the window
        total_days: Non-protected days inside the window (the denominator)
        is_protected: Whether the as-of date itself is protected
        message: Calm, non-judgmental summary
    """

    score: int
    trend: MomentumTrend
    window: int
    active_days: int
    total_days: int
    is_protected: bool
    message: str

    def validate(self) -> None:
        assert 0 <= self.score <= 100, f"score out of range: {self.score}"
        assert self.trend in ("rising", "stable", "falling"), f"invalid trend: {self.trend}"
        assert 0 <= self.active_days <= self.total_days <= self.window
        assert self.message, "message required"

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "trend": self.trend,
            "window": self.window,
            "activeDays": self.active_days,
            "totalDays": self.total_days,
            "isProtected": self.is_protected,
            "message": self.message,
        }


@dataclass(frozen=True)
class MomentumPoint:
    """One point of a momentum history series."""

    date: str  # ISO date YYYY-MM-DD
    score: int
    trend: MomentumTrend

    def to_dict(self) -> dict:
        return {"date": self.date, "score": self.score, "trend": self.trend}
