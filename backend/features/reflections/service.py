"""
Weekly Reflection Service

Pattern observation without AI:
- No predictions
- No moral judgments
- Observational, not prescriptive

Prompt selection is hashed from (user, week end) so the same week always
reads the same way.
"""

import hashlib
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Dict, List, Optional, Sequence, Tuple

from backend.features.domains.service import DomainService, domain_service
from backend.features.entries.store import EntryStore, get_entry_store, load_entries, load_protected_days
from backend.features.momentum.service import MomentumService
from backend.models.domain import Domain
from backend.models.entry import Entry
from backend.models.momentum import MomentumResult

WEEK_DAYS = 7

PROTECTED_PROMPTS = ["Rest is part of the process.", "You're still here. That counts.", None]
HIGH_PROMPTS = ["Steady progress.", "The work is adding up.", None]
LOW_PROMPTS = ["One small action is enough.", "Start where you are.", None]
DEFAULT_PROMPTS = ["Consistency compounds quietly.", "You showed up.", None, None]


@dataclass
class WeeklyReflection:
    week_start: date
    week_end: date
    days_logged: int
    active_days: int
    strong_days: int
    perfect_days: int
    protected_days: int
    dominant_domain: Optional[str]
    weakest_domain: Optional[str]
    momentum: MomentumResult
    narrative: str
    observation: str
    gentle_prompt: Optional[str]

    def to_dict(self) -> dict:
        return {
            "weekStart": self.week_start.isoformat(),
            "weekEnd": self.week_end.isoformat(),
            "daysLogged": self.days_logged,
            "activeDays": self.active_days,
            "strongDays": self.strong_days,
            "perfectDays": self.perfect_days,
            "protectedDays": self.protected_days,
            "dominantDomain": self.dominant_domain,
            "weakestDomain": self.weakest_domain,
            "momentum": self.momentum.to_dict(),
            "narrative": self.narrative,
            "observation": self.observation,
            "gentlePrompt": self.gentle_prompt,
        }


def analyze_domains(entries: Sequence[Entry], domain_ids: Sequence[str]) -> Tuple[Optional[str], Optional[str]]:
    """Most and least completed domains. Ties keep registry order."""
    if not entries or not domain_ids:
        return None, None

    totals = [(sum(1 for e in entries if e.completed(d)), d) for d in domain_ids]
    ranked = sorted(totals, key=lambda pair: -pair[0])
    top_count, top_id = ranked[0]
    low_count, low_id = ranked[-1]

    dominant = top_id if top_count > 0 else None
    weakest = low_id if low_count < top_count else None
    return dominant, weakest


def generate_narrative(days_logged: int, protected_days: int, momentum: MomentumResult) -> str:
    if days_logged == 0:
        return "This week is a fresh start."

    parts: List[str] = []
    if days_logged == WEEK_DAYS:
        parts.append("You showed up every day this week.")
    elif days_logged >= 5:
        parts.append(f"You checked in {days_logged} of 7 days.")
    elif days_logged >= 3:
        parts.append(f"You checked in {days_logged} days this week.")
    else:
        parts.append(f"{days_logged} check-in{'' if days_logged == 1 else 's'} this week.")

    if protected_days > 0:
        parts.append(f"{protected_days} day{' was' if protected_days == 1 else 's were'} protected.")

    if momentum.trend == "rising":
        parts.append("Momentum is building.")
    elif momentum.trend == "stable":
        parts.append("Momentum is steady.")
    elif momentum.score > 50:
        parts.append("Momentum dipped slightly.")

    return " ".join(parts)


def generate_observation(
    entries: Sequence[Entry],
    dominant: Optional[str],
    weakest: Optional[str],
    names: Dict[str, str],
) -> str:
    if len(entries) < 3:
        return "Not enough data for patterns yet."

    observations: List[str] = []
    if dominant and weakest and dominant != weakest:
        observations.append(
            f"{names.get(dominant, dominant)} had the most activity. "
            f"{names.get(weakest, weakest)} had the least."
        )

    perfect = sum(1 for e in entries if e.perfect_day)
    if perfect >= 3:
        observations.append(f"{perfect} perfect days.")
    elif perfect > 0:
        observations.append(f"{perfect} perfect day{'' if perfect == 1 else 's'}.")

    active_rate = sum(1 for e in entries if e.active_day) / len(entries)
    if active_rate >= 0.8:
        observations.append("High consistency this week.")
    elif active_rate >= 0.5:
        observations.append("Moderate consistency.")

    return " ".join(observations) if observations else "Patterns are still forming."


def _pick(options: List[Optional[str]], seed: str) -> Optional[str]:
    digest = hashlib.sha256(seed.encode()).hexdigest()
    return options[int(digest[:8], 16) % len(options)]


def generate_gentle_prompt(
    entries: Sequence[Entry],
    protected_days: int,
    momentum: MomentumResult,
    seed: str,
) -> Optional[str]:
    """Optional nudge. Silence (None) is a valid answer."""
    if int(hashlib.sha256(f"silence:{seed}".encode()).hexdigest()[:8], 16) % 10 < 3:
        return None
    if protected_days > 2:
        return _pick(PROTECTED_PROMPTS, seed)
    if momentum.score >= 80:
        return _pick(HIGH_PROMPTS, seed)
    if momentum.score < 40 and len(entries) > 3:
        return _pick(LOW_PROMPTS, seed)
    return _pick(DEFAULT_PROMPTS, seed)


class ReflectionService:
    def __init__(
        self,
        store: Optional[EntryStore] = None,
        domains: Optional[DomainService] = None,
        momentum: Optional[MomentumService] = None,
    ):
        self._store = store
        self._domains = domains or domain_service
        self._momentum = momentum or MomentumService(store)

    @property
    def store(self) -> EntryStore:
        return self._store if self._store is not None else get_entry_store()

    def weekly(self, user_id: str, today: Optional[date] = None) -> WeeklyReflection:
        """Reflection over the 7 days ending today (inclusive)."""
        today = today or datetime.now(timezone.utc).date()
        week_start = today - timedelta(days=WEEK_DAYS - 1)

        store = self.store
        entries = [e for e in load_entries(store, user_id) if week_start <= e.date <= today]
        protected = [d for d in load_protected_days(store, user_id) if week_start <= d <= today]
        momentum = self._momentum.current(user_id, as_of=today)

        active: List[Domain] = self._domains.registry(user_id).active_domains()
        names = {d.id: d.name for d in active}
        dominant, weakest = analyze_domains(entries, [d.id for d in active])

        return WeeklyReflection(
            week_start=week_start,
            week_end=today,
            days_logged=len(entries),
            active_days=sum(e.active_day for e in entries),
            strong_days=sum(e.strong_day for e in entries),
            perfect_days=sum(e.perfect_day for e in entries),
            protected_days=len(protected),
            dominant_domain=dominant,
            weakest_domain=weakest,
            momentum=momentum,
            narrative=generate_narrative(len(entries), len(protected), momentum),
            observation=generate_observation(entries, dominant, weakest, names),
            gentle_prompt=generate_gentle_prompt(
                entries, len(protected), momentum, seed=f"{user_id}:{today.isoformat()}"
            ),
        )


# Singleton service used by routes
reflection_service = ReflectionService()
