"""Coach messages: calm, observational feedback after a check-in."""

import hashlib
from datetime import date
from typing import Dict, List, Literal, Optional

from backend.models.entry import ScoreResult

MessageType = Literal["perfect", "strong", "active", "rest", "protected", "after_grounding"]

COACH_MESSAGES: Dict[str, List[str]] = {
    "perfect": [
        "All three areas touched today. Pattern building.",
        "You covered everything. That's enough.",
        "Complete day. The consistency speaks for itself.",
        "Every domain got attention. Rest now.",
    ],
    "strong": [
        "Two areas covered. That's a solid day.",
        "You showed up where it mattered.",
        "Two out of three. That counts.",
        "Good effort across the board.",
    ],
    "active": [
        "You showed up. That's what matters.",
        "One step is still forward motion.",
        "Something beats nothing. Always.",
        "You're still in the game.",
    ],
    "rest": [
        "One day changes nothing. Pattern changes everything.",
        "Tomorrow is a new page.",
        "Rest is part of the process.",
        "No judgment here. Come back when ready.",
    ],
    "protected": [
        "Today is protected. No pressure.",
        "You took care of yourself. That counts.",
        "Grounding day. This was the right choice.",
        "Protected day complete. Welcome back.",
    ],
    "after_grounding": [
        "Welcome back. No rush.",
        "Take your time settling in.",
        "One breath at a time.",
        "You're here now. That's enough.",
    ],
}

CALM_OBSERVATIONS = [
    "Small actions, done consistently, change everything.",
    "You're here. That's already something.",
    "The goal is motion, not perfection.",
    "One day at a time is enough.",
    "Showing up matters more than showing off.",
    "Progress hides in the ordinary days.",
    "Consistency is quieter than motivation.",
    "You don't have to feel ready to begin.",
    "The streak isn't the point. The pattern is.",
    "Momentum builds in silence.",
    "Today is enough. Tomorrow will come.",
    "The compound effect works even when you don't see it.",
]


class CoachService:
    """Deterministic coach feedback. No randomness, no hype."""

    @staticmethod
    def message_type(
        score: ScoreResult,
        is_protected: bool = False,
        exited_grounding_today: bool = False,
    ) -> str:
        """
        Pick the message family for a day.

        Protected days win, then a just-finished grounding session, then the
        day-quality flags from best to worst.
        """
        if is_protected:
            return "protected"
        if exited_grounding_today:
            return "after_grounding"
        if score.perfect_day:
            return "perfect"
        if score.strong_day:
            return "strong"
        if score.active_day:
            return "active"
        return "rest"

    @staticmethod
    def pick_message(message_type: str, user_id: str, day: date) -> str:
        """Same user and date always get the same message."""
        messages = COACH_MESSAGES[message_type]
        digest = hashlib.sha256(f"{user_id}:{day.isoformat()}:{message_type}".encode()).hexdigest()
        return messages[int(digest[:8], 16) % len(messages)]

    @staticmethod
    def xp_note(xp_earned: int) -> str:
        if xp_earned > 0:
            return f"+{xp_earned} XP earned"
        return "Protected day - no XP change"

    @staticmethod
    def feedback(
        user_id: str,
        day: date,
        score: ScoreResult,
        is_protected: bool = False,
        exited_grounding_today: bool = False,
    ) -> dict:
        message_type = CoachService.message_type(score, is_protected, exited_grounding_today)
        return {
            "type": message_type,
            "message": CoachService.pick_message(message_type, user_id, day),
            "xpNote": CoachService.xp_note(score.xp_earned),
        }

    @staticmethod
    def calm_observation(hour: int) -> str:
        """Rotates hourly."""
        return CALM_OBSERVATIONS[hour % len(CALM_OBSERVATIONS)]

    @staticmethod
    def should_be_silent(grounding_active: bool) -> bool:
        """The coach says nothing while grounding mode is running."""
        return grounding_active

    @staticmethod
    def observation_or_none(hour: int, grounding_active: bool, enable_tips: bool = True) -> Optional[str]:
        if not enable_tips or CoachService.should_be_silent(grounding_active):
            return None
        return CoachService.calm_observation(hour)
