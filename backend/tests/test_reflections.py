"""Weekly reflection: domain analysis, narrative and prompt selection."""

from datetime import date, timedelta

from backend.features.domains.service import DomainService
from backend.features.entries.store import InMemoryEntryStore
from backend.features.momentum.service import MomentumService
from backend.features.reflections.service import (
    ReflectionService,
    analyze_domains,
    generate_gentle_prompt,
    generate_narrative,
    generate_observation,
)
from backend.models.entry import Entry
from backend.models.momentum import MomentumResult

TODAY = date(2026, 3, 14)


def make_entry(day, **domains):
    record = {"health": 0, "faith": 0, "career": 0, **domains}
    score = sum(record.values())
    return Entry(
        date=day,
        domains=record,
        daily_score=score,
        active_day=1 if score else 0,
        strong_day=1 if score >= 2 else 0,
        perfect_day=1 if score == 3 else 0,
        xp_earned=score,
    )


def momentum(score=50, trend="stable"):
    return MomentumResult(score=score, trend=trend, window=14, active_days=0, total_days=14, is_protected=False, message="")


class TestAnalyzeDomains:
    def test_empty(self):
        assert analyze_domains([], ["health"]) == (None, None)

    def test_dominant_and_weakest(self):
        entries = [make_entry(TODAY, health=1, faith=1), make_entry(TODAY - timedelta(days=1), health=1)]
        assert analyze_domains(entries, ["health", "faith", "career"]) == ("health", "career")

    def test_even_spread_has_no_weakest(self):
        entries = [make_entry(TODAY, health=1, faith=1, career=1)]
        assert analyze_domains(entries, ["health", "faith", "career"]) == ("health", None)

    def test_nothing_done(self):
        entries = [make_entry(TODAY)]
        assert analyze_domains(entries, ["health", "faith"]) == (None, None)


class TestNarrative:
    def test_fresh_start(self):
        assert generate_narrative(0, 0, momentum()) == "This week is a fresh start."

    def test_full_week_rising(self):
        text = generate_narrative(7, 0, momentum(80, "rising"))
        assert text == "You showed up every day this week. Momentum is building."

    def test_partial_with_protection(self):
        text = generate_narrative(5, 1, momentum(60, "falling"))
        assert text == "You checked in 5 of 7 days. 1 day was protected. Momentum dipped slightly."

    def test_single_checkin(self):
        assert generate_narrative(1, 2, momentum(10, "falling")) == "1 check-in this week. 2 days were protected."


class TestObservation:
    def test_not_enough_data(self):
        assert generate_observation([make_entry(TODAY, health=1)], "health", None, {}) == (
            "Not enough data for patterns yet."
        )

    def test_patterns(self):
        entries = [make_entry(TODAY - timedelta(days=i), health=1, faith=1, career=1) for i in range(3)]
        entries.append(make_entry(TODAY - timedelta(days=3), health=1))
        text = generate_observation(entries, "health", "faith", {"health": "Health", "faith": "Faith"})
        assert text == "Health had the most activity. Faith had the least. 3 perfect days. High consistency this week."


class TestGentlePrompt:
    def test_deterministic(self):
        entries = [make_entry(TODAY, health=1)]
        first = generate_gentle_prompt(entries, 0, momentum(), "u1:2026-03-14")
        assert generate_gentle_prompt(entries, 0, momentum(), "u1:2026-03-14") == first

    def test_silence_happens(self):
        results = {generate_gentle_prompt([], 0, momentum(), f"u{i}:2026-03-14") for i in range(40)}
        assert None in results
        assert len(results) > 1


class TestWeekly:
    def test_seven_day_window(self):
        store = InMemoryEntryStore()
        for offset in range(9):
            store.upsert_entry("u1", make_entry(TODAY - timedelta(days=offset), health=1))
        store.add_protected_day("u1", TODAY - timedelta(days=2))
        store.add_protected_day("u1", TODAY - timedelta(days=8))

        service = ReflectionService(store=store, domains=DomainService(), momentum=MomentumService(store))
        reflection = service.weekly("u1", today=TODAY)

        assert reflection.week_start == TODAY - timedelta(days=6)
        assert reflection.days_logged == 7
        assert reflection.active_days == 7
        assert reflection.protected_days == 1
        assert reflection.dominant_domain == "health"
        assert reflection.to_dict()["weekEnd"] == "2026-03-14"
