"""
Domain model.

A domain is a life area (health, faith, career or a custom one) tracked
independently every day through a handful of micro-actions.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List


MAX_ACTIVE_DOMAINS = 5
CORE_DOMAIN_IDS = ("health", "faith", "career")
DEFAULT_CUSTOM_COLOR = "#8b5cf6"


@dataclass
class MicroAction:
    """A small, checkable task owned by exactly one domain."""

    id: str
    label: str

    def to_dict(self) -> dict:
        return {"id": self.id, "label": self.label}


@dataclass
class Domain:
    """
    Tracked life area.

    Attributes:
        id: Stable identifier ("health", "custom_3", ...)
        name: Display name
        icon: Emoji or icon key
        intention: The user's reason for tracking this domain
        color: Accent color (hex)
        items: Ordered micro-actions
        is_core: Core domains can never be archived or deleted
        xp_enabled: Whether completing this domain awards XP
        archived: Soft-deleted; archived domains are not active
        created_at: UTC creation timestamp
    """

    id: str
    name: str
    icon: str
    intention: str = ""
    color: str = DEFAULT_CUSTOM_COLOR
    items: List[MicroAction] = field(default_factory=list)
    is_core: bool = False
    xp_enabled: bool = False
    archived: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def active(self) -> bool:
        return not self.archived

    def item_ids(self) -> List[str]:
        return [item.id for item in self.items]

    def to_dict(self) -> dict:
        """Serialize to dict for JSON response."""
        return {
            "id": self.id,
            "name": self.name,
            "icon": self.icon,
            "intention": self.intention,
            "color": self.color,
            "items": [item.to_dict() for item in self.items],
            "isCore": self.is_core,
            "xpEnabled": self.xp_enabled,
            "archived": self.archived,
            "createdAt": self.created_at.isoformat(),
        }
