"""AI text service: request validation, provider calls and fallbacks."""

import json
from types import SimpleNamespace

import pytest

from backend.features.ai.service import AIService, FALLBACK_STARTER_PACK
from backend.features.ai.validation import (
    AnalysisRequest,
    GreetingRequest,
    InvalidAIRequest,
    StarterPackRequest,
    validate_ai_request,
)


class FakeCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeGroq:
    def __init__(self, content=None, error=None):
        self.chat = SimpleNamespace(completions=FakeCompletions(content, error))


def greeting(**overrides):
    payload = {"username": "Sam", "timeOfDay": "morning", "currentStreak": 3}
    payload.update(overrides)
    return validate_ai_request({"action": "greeting", "payload": payload})


class TestValidation:
    def test_greeting_normalized(self):
        request = greeting(username="  Sam  ", currentStreak=-4.7)
        assert isinstance(request, GreetingRequest)
        assert request.payload.username == "Sam"
        assert request.payload.current_streak == 0

    def test_streak_floored(self):
        assert greeting(currentStreak=5.9).payload.current_streak == 5

    @pytest.mark.parametrize(
        "overrides",
        [
            {"username": ""},
            {"username": "x" * 41},
            {"timeOfDay": "x" * 21},
            {"currentStreak": "3"},
            {"recentMood": "   "},
            {"recentMood": "m" * 81},
        ],
    )
    def test_greeting_rejects(self, overrides):
        with pytest.raises(InvalidAIRequest):
            greeting(**overrides)

    def test_starter_pack(self):
        request = validate_ai_request({"action": "starter_pack", "payload": {"identity": "a runner"}})
        assert isinstance(request, StarterPackRequest)
        with pytest.raises(InvalidAIRequest):
            validate_ai_request({"action": "starter_pack", "payload": {"identity": "x" * 121}})

    def test_analysis_entries_limit(self):
        entry = {"date": "2026-01-01", "domains": {"health": 1}, "dailyScore": 1}
        request = validate_ai_request({"action": "analysis", "payload": {"username": "Sam", "entries": [entry]}})
        assert isinstance(request, AnalysisRequest)
        with pytest.raises(InvalidAIRequest):
            validate_ai_request({"action": "analysis", "payload": {"username": "Sam", "entries": [entry] * 61}})

    def test_analysis_entry_shape(self):
        bad = {"date": "2026-01-01", "domains": [], "dailyScore": 1}
        with pytest.raises(InvalidAIRequest):
            validate_ai_request({"action": "analysis", "payload": {"username": "Sam", "entries": [bad]}})

    @pytest.mark.parametrize(
        "body",
        [None, [], {"action": "dance", "payload": {}}, {"action": "greeting"}, {"action": "greeting", "payload": []}],
    )
    def test_malformed_bodies(self, body):
        with pytest.raises(InvalidAIRequest) as exc:
            validate_ai_request(body)
        assert exc.value.code == "invalid_request"
        assert exc.value.status_code == 400


class TestOffline:
    @pytest.fixture
    def service(self, monkeypatch):
        monkeypatch.setattr("backend.features.ai.service.settings.GROQ_API_KEY", None)
        return AIService()

    def test_greeting(self, service):
        assert service.handle(greeting()) == {"greeting": "Good morning, Sam."}

    def test_starter_pack(self, service):
        request = validate_ai_request({"action": "starter_pack", "payload": {"identity": "a runner"}})
        assert service.handle(request) == {"starterPack": FALLBACK_STARTER_PACK}

    def test_analysis(self, service):
        request = validate_ai_request({"action": "analysis", "payload": {"username": "Sam", "entries": []}})
        assert service.handle(request) == {
            "narrative": "AI Coach is currently offline.",
            "tips": ["Focus on consistency."],
        }


class TestProvider:
    def test_greeting_uses_model(self):
        client = FakeGroq(content="Morning, Sam. Three days in.")
        service = AIService(client=client, model="test-model")
        assert service.handle(greeting()) == {"greeting": "Morning, Sam. Three days in."}
        call = client.chat.completions.calls[0]
        assert call["model"] == "test-model"
        assert "Streak: 3 days" in call["messages"][0]["content"]

    def test_greeting_error_fallback(self):
        service = AIService(client=FakeGroq(error=RuntimeError("boom")))
        assert service.handle(greeting()) == {"greeting": "Good morning, Sam. Ready to build?"}

    def test_starter_pack_parsed(self):
        habits = [{"domain": "health", "title": "Run", "intention": "Move daily."}]
        service = AIService(client=FakeGroq(content=json.dumps({"habits": habits})))
        request = validate_ai_request({"action": "starter_pack", "payload": {"identity": "a runner"}})
        assert service.handle(request) == {"starterPack": habits}

    def test_starter_pack_bad_json_falls_back(self):
        service = AIService(client=FakeGroq(content="not json"))
        request = validate_ai_request({"action": "starter_pack", "payload": {"identity": "a runner"}})
        assert service.handle(request)["starterPack"] == FALLBACK_STARTER_PACK

    def test_analysis_parsed(self):
        content = json.dumps({"narrative": "Steady.", "tips": ["a", "b", "c"]})
        service = AIService(client=FakeGroq(content=content))
        request = validate_ai_request({"action": "analysis", "payload": {"username": "Sam", "entries": []}})
        assert service.handle(request) == {"narrative": "Steady.", "tips": ["a", "b", "c"]}

    def test_analysis_error_fallback(self):
        service = AIService(client=FakeGroq(error=RuntimeError("boom")))
        request = validate_ai_request({"action": "analysis", "payload": {"username": "Sam", "entries": []}})
        assert service.handle(request)["narrative"] == (
            "AI services are currently unavailable, but your data is safe."
        )
