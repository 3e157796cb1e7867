from __future__ import annotations

import copy
import logging
from typing import Dict, Iterable, List, Optional

from backend.models.domain import (
    CORE_DOMAIN_IDS,
    DEFAULT_CUSTOM_COLOR,
    MAX_ACTIVE_DOMAINS,
    Domain,
    MicroAction,
)

logger = logging.getLogger("compoundverse")


def default_domains() -> List[Domain]:
    """The three permanent core domains with their starter micro-actions."""
    return [
        Domain(
            id="health",
            name="Health",
            icon="💪",
            intention="Body, movement, recovery",
            color="#58cc02",
            items=[
                MicroAction("pushups", "Push-ups (any amount)"),
                MicroAction("walk", "Walk (10+ minutes)"),
                MicroAction("norelapse", "No relapse today"),
            ],
            is_core=True,
            xp_enabled=True,
        ),
        Domain(
            id="faith",
            name="Faith",
            icon="✨",
            intention="Reflection, gratitude, grounding",
            color="#ffc800",
            items=[
                MicroAction("tasbih", "Tasbih (any count)"),
                MicroAction("reflection", "Quiet reflection"),
                MicroAction("gratitude", "Gratitude (1 blessing)"),
            ],
            is_core=True,
            xp_enabled=True,
        ),
        Domain(
            id="career",
            name="Career",
            icon="🧠",
            intention="Skill-building, study, cognitive growth",
            color="#1cb0f6",
            items=[
                MicroAction("de", "Data Engineering lesson"),
                MicroAction("german", "German lesson"),
                MicroAction("reading", "Read 10 pages"),
                MicroAction("learning", "Learned 1 positive thing"),
            ],
            is_core=True,
            xp_enabled=True,
        ),
    ]


class DomainRegistry:
    """
    One user's domains with cardinality and lifecycle rules.

    Rule violations return None/False, never raise. After every mutation the
    active count stays within 0..MAX_ACTIVE_DOMAINS and core domains remain.
    """

    def __init__(self, domains: Optional[Iterable[Domain]] = None, max_active: int = MAX_ACTIVE_DOMAINS):
        self._max_active = max_active
        self._domains: List[Domain] = list(domains) if domains is not None else default_domains()
        self._ensure_core()

    # Queries ----------------------------------------------------------
    def list_domains(self) -> List[Domain]:
        return list(self._domains)

    def active_domains(self) -> List[Domain]:
        return [d for d in self._domains if d.active]

    def archived_domains(self) -> List[Domain]:
        return [d for d in self._domains if d.archived]

    def active_ids(self) -> List[str]:
        return [d.id for d in self.active_domains()]

    def active_count(self) -> int:
        return len(self.active_domains())

    def can_add(self) -> bool:
        return self.active_count() < self._max_active

    def get_domain(self, domain_id: str) -> Optional[Domain]:
        return next((d for d in self._domains if d.id == domain_id), None)

    def xp_values(self) -> Dict[str, int]:
        """Zero XP for domains with XP switched off; others use the configured table."""
        return {d.id: 0 for d in self._domains if not d.xp_enabled}

    # Mutations --------------------------------------------------------
    def add_domain(
        self,
        name: str,
        icon: str,
        intention: str = "",
        items: Optional[List[MicroAction]] = None,
        color: str = DEFAULT_CUSTOM_COLOR,
    ) -> Optional[Domain]:
        if not self.can_add():
            return None

        domain = Domain(
            id=self._next_custom_id(),
            name=name,
            icon=icon,
            intention=intention,
            color=color,
            items=list(items) if items else [MicroAction("default", "Did something")],
            is_core=False,
            xp_enabled=False,
        )
        self._domains.append(domain)
        self._check_invariants()
        return domain

    def archive_domain(self, domain_id: str) -> bool:
        domain = self.get_domain(domain_id)
        if not domain or domain.is_core or domain.archived:
            return False
        domain.archived = True
        self._check_invariants()
        return True

    def restore_domain(self, domain_id: str) -> bool:
        domain = self.get_domain(domain_id)
        if not domain or not domain.archived:
            return False
        if not self.can_add():
            return False
        domain.archived = False
        self._check_invariants()
        return True

    def delete_domain(self, domain_id: str) -> bool:
        """Permanently remove an archived custom domain. Irreversible."""
        domain = self.get_domain(domain_id)
        if not domain or domain.is_core or not domain.archived:
            return False
        self._domains = [d for d in self._domains if d.id != domain_id]
        self._check_invariants()
        return True

    def update_domain(
        self,
        domain_id: str,
        *,
        name: Optional[str] = None,
        icon: Optional[str] = None,
        intention: Optional[str] = None,
        color: Optional[str] = None,
    ) -> bool:
        domain = self.get_domain(domain_id)
        if not domain:
            return False
        if name is not None:
            domain.name = name
        if icon is not None:
            domain.icon = icon
        if intention is not None:
            domain.intention = intention
        if color is not None:
            domain.color = color
        return True

    def update_items(self, domain_id: str, items: List[MicroAction]) -> bool:
        domain = self.get_domain(domain_id)
        if not domain:
            return False
        domain.items = list(items)
        return True

    def toggle_xp(self, domain_id: str) -> Optional[bool]:
        """Flip XP for a domain; returns the new flag, None if unknown."""
        domain = self.get_domain(domain_id)
        if not domain:
            return None
        domain.xp_enabled = not domain.xp_enabled
        return domain.xp_enabled

    # Internal helpers -------------------------------------------------
    def _ensure_core(self) -> None:
        present = {d.id for d in self._domains}
        missing = [d for d in default_domains() if d.id not in present]
        # Core domains always lead the list
        self._domains = missing + self._domains
        for domain in self._domains:
            if domain.id in CORE_DOMAIN_IDS:
                domain.is_core = True
                domain.archived = False

    def _next_custom_id(self) -> str:
        highest = 0
        for domain in self._domains:
            if domain.id.startswith("custom_"):
                suffix = domain.id[len("custom_"):]
                if suffix.isdigit():
                    highest = max(highest, int(suffix))
        return f"custom_{highest + 1}"

    def _check_invariants(self) -> None:
        count = self.active_count()
        assert 0 <= count <= self._max_active, f"active domain count out of range: {count}"
        core_present = {d.id for d in self._domains if d.is_core}
        assert set(CORE_DOMAIN_IDS) <= core_present, "core domains must never be removed"


class DomainService:
    """Per-user domain registries (in-memory)."""

    def __init__(self, max_active: int = MAX_ACTIVE_DOMAINS):
        self._registries: Dict[str, DomainRegistry] = {}
        self._max_active = max_active

    def registry(self, user_id: str) -> DomainRegistry:
        if user_id not in self._registries:
            self._registries[user_id] = DomainRegistry(max_active=self._max_active)
            logger.info("domains.initialized", extra={"user_id": user_id})
        return self._registries[user_id]

    def snapshot(self, user_id: str) -> List[Domain]:
        """Deep copy of a user's domains for read-only callers."""
        return copy.deepcopy(self.registry(user_id).list_domains())

    def clear(self) -> None:
        """FOR TESTING ONLY."""
        self._registries.clear()


# Singleton service used by routes
domain_service = DomainService()
