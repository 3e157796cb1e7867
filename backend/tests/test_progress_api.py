"""Momentum, grounding, stats, badges, analytics, reflections and coach endpoints."""

from datetime import datetime, timedelta, timezone

from backend.features.admin.service import config_service
from backend.features.grounding.service import grounding_service
from backend.models.system_config import CoachSettings, FeatureFlags, SystemConfig


def today():
    return datetime.now(timezone.utc).date()


def check_in(client, headers, offset=0, items=None):
    day = (today() - timedelta(days=offset)).isoformat()
    body = {"checkedItems": items or {"health": ["walk"]}, "date": day}
    return client.post("/v1/checkins", headers=headers, json=body)


class TestMomentum:
    def test_no_history(self, client, user_headers):
        data = client.get("/v1/momentum/today", headers=user_headers).json()["data"]
        assert data["score"] == 0
        assert data["trend"] == "stable"
        assert data["window"] == 14
        assert data["message"] == "Ready when you are."

    def test_every_day_active(self, client, user_headers):
        for offset in range(14):
            check_in(client, user_headers, offset)
        data = client.get("/v1/momentum/today", headers=user_headers).json()["data"]
        assert data["score"] == 100
        assert data["activeDays"] == 14

    def test_as_of(self, client, user_headers):
        check_in(client, user_headers, 0)
        past = (today() - timedelta(days=30)).isoformat()
        data = client.get("/v1/momentum/today", headers=user_headers, params={"asOf": past}).json()["data"]
        assert data["activeDays"] == 0

    def test_history(self, client, user_headers):
        resp = client.get("/v1/momentum/history", headers=user_headers, params={"days": 7}).json()
        points = resp["data"]
        assert len(points) == 7
        assert points[-1]["date"] == today().isoformat()
        assert points[0]["date"] < points[-1]["date"]

    def test_history_bounds(self, client, user_headers):
        assert client.get("/v1/momentum/history", headers=user_headers, params={"days": 0}).status_code == 422
        assert client.get("/v1/momentum/history", headers=user_headers, params={"days": 91}).status_code == 422


class TestGrounding:
    def test_initial_state(self, client, user_headers):
        data = client.get("/v1/grounding", headers=user_headers).json()["data"]
        assert data["isActive"] is False
        assert data["durationMinutes"] == 15
        assert data["remainingSeconds"] == 0
        assert data["protectedDays"] == []

    def test_activate_protects_today(self, client, user_headers):
        data = client.post("/v1/grounding/activate", headers=user_headers).json()["data"]
        assert data["isActive"] is True
        assert data["totalActivations"] == 1
        assert 0 < data["remainingSeconds"] <= 15 * 60
        assert data["protectedDays"] == [today().isoformat()]

        momentum = client.get("/v1/momentum/today", headers=user_headers).json()["data"]
        assert momentum["isProtected"] is True

    def test_exit_keeps_protection(self, client, user_headers):
        client.post("/v1/grounding/activate", headers=user_headers)
        data = client.post("/v1/grounding/exit", headers=user_headers).json()["data"]
        assert data["isActive"] is False
        assert data["protectedDays"] == [today().isoformat()]

    def test_duration_clamped(self, client, user_headers):
        low = client.put("/v1/grounding/duration", headers=user_headers, json={"minutes": 1}).json()["data"]
        assert low["durationMinutes"] == 5
        high = client.put("/v1/grounding/duration", headers=user_headers, json={"minutes": 90}).json()["data"]
        assert high["durationMinutes"] == 30

    def test_timer_expiry_ends_session(self, client, user_headers):
        grounding_service.activate("user_test", now=datetime.now(timezone.utc) - timedelta(minutes=20))

        state = client.get("/v1/grounding", headers=user_headers).json()["data"]
        assert state["isActive"] is False
        assert state["remainingSeconds"] == 0
        assert len(state["protectedDays"]) == 1

        coach = client.get("/v1/coach/observation", headers=user_headers).json()["data"]
        assert coach["silent"] is False
        assert coach["observation"]

    def test_coach_notices_expiry_on_its_own(self, client, user_headers):
        grounding_service.activate("user_test", now=datetime.now(timezone.utc) - timedelta(minutes=20))
        coach = client.get("/v1/coach/observation", headers=user_headers).json()["data"]
        assert coach["silent"] is False

    def test_stats(self, client, user_headers):
        client.post("/v1/grounding/activate", headers=user_headers)
        data = client.get("/v1/grounding/stats", headers=user_headers).json()["data"]
        assert data == {"totalActivations": 1, "protectedDaysCount": 1}

    def test_protected_day_feedback(self, client, user_headers):
        client.post("/v1/grounding/activate", headers=user_headers)
        feedback = check_in(client, user_headers, items={}).json()["data"]["feedback"]
        assert feedback["type"] == "protected"


class TestStats:
    def test_empty(self, client, user_headers):
        data = client.get("/v1/stats", headers=user_headers).json()["data"]
        assert data["totalXP"] == 0
        assert data["level"] == 1
        assert data["badges"] == []

    def test_streak_and_xp(self, client, user_headers):
        for offset in (2, 1, 0):
            check_in(client, user_headers, offset)
        data = client.get("/v1/stats", headers=user_headers).json()["data"]
        assert data["currentStreak"] == 3
        assert data["totalXP"] == 3
        assert data["badges"] == ["first_flame"]

    def test_badge_catalogue(self, client, user_headers):
        check_in(client, user_headers)
        badges = client.get("/v1/badges", headers=user_headers).json()["data"]
        earned = {b["id"]: b["earned"] for b in badges}
        assert earned["first_flame"] is True
        assert earned["perfect_day"] is False
        assert len(badges) == 7


class TestAnalytics:
    def test_dashboard_shape(self, client, user_headers):
        check_in(client, user_headers, items={"health": ["walk"], "faith": ["tasbih"]})
        data = client.get("/v1/analytics", headers=user_headers).json()["data"]
        assert data["engagement"]["totalDays"] == 1
        assert data["engagement"]["engagementRate"] == 100
        assert [d["domainId"] for d in data["domains"]] == ["health", "faith", "career"]
        assert data["domains"][2]["totalActiveDays"] == 0
        assert data["grounding"]["totalActivations"] == 0
        assert len(data["momentumHistory"]) == 14
        assert data["lastUpdated"]


class TestReflections:
    def test_weekly(self, client, user_headers):
        for offset in range(7):
            check_in(client, user_headers, offset)
        data = client.get("/v1/reflections/weekly", headers=user_headers).json()["data"]
        assert data["daysLogged"] == 7
        assert data["weekEnd"] == today().isoformat()
        assert data["weekStart"] == (today() - timedelta(days=6)).isoformat()
        assert data["dominantDomain"] == "health"
        assert data["narrative"].startswith("You showed up every day this week.")

    def test_disabled(self, client, user_headers):
        config_service.replace_config(SystemConfig(features=FeatureFlags(reflections=False)).model_dump())
        resp = client.get("/v1/reflections/weekly", headers=user_headers)
        assert resp.status_code == 403


class TestCoach:
    def test_observation(self, client, user_headers):
        data = client.get("/v1/coach/observation", headers=user_headers).json()["data"]
        assert data["observation"]
        assert data["silent"] is False
        assert data["tone"] == "neutral"

    def test_silent_while_grounding(self, client, user_headers):
        client.post("/v1/grounding/activate", headers=user_headers)
        data = client.get("/v1/coach/observation", headers=user_headers).json()["data"]
        assert data["observation"] is None
        assert data["silent"] is True

    def test_tips_disabled(self, client, user_headers):
        config_service.replace_config(SystemConfig(coach=CoachSettings(enable_tips=False)).model_dump())
        data = client.get("/v1/coach/observation", headers=user_headers).json()["data"]
        assert data["observation"] is None
        assert data["silent"] is False
