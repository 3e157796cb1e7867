"""AI text service backed by Groq chat completions.

Every call has a deterministic fallback: with no API key the offline text is
returned, and any provider or parsing failure returns the degraded text.
The endpoint never fails because of the provider.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Union

import groq

from backend.core.config import settings
from backend.features.ai import prompts
from backend.features.ai.validation import (
    AnalysisRequest,
    GreetingRequest,
    StarterPackRequest,
)

logger = logging.getLogger("compoundverse")

FALLBACK_STARTER_PACK: List[Dict[str, str]] = [
    {"domain": "health", "title": "Drink water", "intention": "Hydration fuels focus."},
    {"domain": "faith", "title": "Gratitude log", "intention": "Shift perspective to abundance."},
    {"domain": "career", "title": "Read 1 page", "intention": "Small inputs lead to big outputs."},
]
OFFLINE_ANALYSIS = {
    "narrative": "AI Coach is currently offline.",
    "tips": ["Focus on consistency."],
}
FAILED_ANALYSIS = {
    "narrative": "AI services are currently unavailable, but your data is safe.",
    "tips": ["Review your daily habits manually today."],
}


def _build_client(api_key: Optional[str]):
    if not api_key:
        return None
    return groq.Groq(api_key=api_key)


class AIService:
    """Greeting, starter pack and weekly analysis with local fallbacks."""

    def __init__(self, client: Any = None, model: Optional[str] = None):
        self._client = client
        self._model = model

    @property
    def client(self):
        if self._client is None:
            self._client = _build_client(settings.GROQ_API_KEY)
        return self._client

    @property
    def model(self) -> str:
        return self._model or settings.GROQ_MODEL

    def _complete(self, messages: List[Dict[str, str]], **kwargs) -> str:
        response = self.client.chat.completions.create(model=self.model, messages=messages, **kwargs)
        return response.choices[0].message.content or ""

    def greeting(self, request: GreetingRequest) -> Dict[str, str]:
        p = request.payload
        if self.client is None:
            return {"greeting": f"Good {p.time_of_day}, {p.username}."}
        try:
            text = self._complete(
                [{"role": "system", "content": prompts.greeting_prompt(
                    p.username, p.time_of_day, p.current_streak, p.recent_mood
                )}],
                max_tokens=50,
                temperature=0.7,
            )
            return {"greeting": text.strip() or "Welcome back to CompoundVerse."}
        except Exception as e:
            logger.error(f"[ai.greeting] provider error: {e}", exc_info=True)
            return {"greeting": f"Good {p.time_of_day}, {p.username}. Ready to build?"}

    def starter_pack(self, request: StarterPackRequest) -> Dict[str, Any]:
        if self.client is None:
            return {"starterPack": [dict(h) for h in FALLBACK_STARTER_PACK]}
        try:
            content = self._complete(
                [
                    {"role": "system", "content": prompts.STARTER_PACK_SYSTEM},
                    {"role": "user", "content": prompts.starter_pack_prompt(request.payload.identity)},
                ],
                response_format={"type": "json_object"},
            )
            parsed = json.loads(content or '{"habits": []}')
            habits = parsed.get("habits", parsed) if isinstance(parsed, dict) else parsed
            if not isinstance(habits, list):
                raise ValueError("starter pack is not a list")
            return {"starterPack": habits}
        except Exception as e:
            logger.error(f"[ai.starter_pack] provider error: {e}", exc_info=True)
            return {"starterPack": [dict(h) for h in FALLBACK_STARTER_PACK]}

    def analysis(self, request: AnalysisRequest) -> Dict[str, Any]:
        if self.client is None:
            return dict(OFFLINE_ANALYSIS, tips=list(OFFLINE_ANALYSIS["tips"]))
        p = request.payload
        try:
            content = self._complete(
                [
                    {"role": "system", "content": prompts.ANALYSIS_SYSTEM},
                    {"role": "user", "content": prompts.analysis_prompt(p.username, p.entries)},
                ],
                response_format={"type": "json_object"},
                temperature=0.7,
            )
            parsed = json.loads(content or "{}")
            return {
                "narrative": parsed.get("narrative") or "Keep consistent to see insights.",
                "tips": parsed.get("tips") or ["Focus on daily consistency."],
            }
        except Exception as e:
            logger.error(f"[ai.analysis] provider error: {e}", exc_info=True)
            return dict(FAILED_ANALYSIS, tips=list(FAILED_ANALYSIS["tips"]))

    def handle(self, request: Union[GreetingRequest, StarterPackRequest, AnalysisRequest]) -> Dict[str, Any]:
        if isinstance(request, GreetingRequest):
            return self.greeting(request)
        if isinstance(request, StarterPackRequest):
            return self.starter_pack(request)
        return self.analysis(request)

    def reset(self) -> None:
        """Drop the cached client. FOR TESTING ONLY."""
        self._client = None


# Singleton service used by routes
ai_service = AIService()
