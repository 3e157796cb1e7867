from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

DEFAULT_GROUNDING_MINUTES = 15
MIN_GROUNDING_MINUTES = 5
MAX_GROUNDING_MINUTES = 30


@dataclass
class GroundingState:
    """
    Grounding ("panic button") state for one user. UTC only.

    Activating grounding protects the current date: momentum neither counts
    it as active nor as missed. Protected dates live in the entry store.
    """

    user_id: str
    is_active: bool = False
    activated_at: Optional[datetime] = None
    grounding_end: Optional[datetime] = None
    total_activations: int = 0
    duration_minutes: int = DEFAULT_GROUNDING_MINUTES

    def to_dict(self) -> dict:
        return {
            "userId": self.user_id,
            "isActive": self.is_active,
            "activatedAt": self.activated_at.isoformat() if self.activated_at else None,
            "groundingEnd": self.grounding_end.isoformat() if self.grounding_end else None,
            "totalActivations": self.total_activations,
            "durationMinutes": self.duration_minutes,
        }
