"""Prompt templates for the AI text service.

Plain templates only. The tone is calm and grounded: no shame language,
no hype, no exclamation marks for short streaks.
"""

import json
from typing import List, Optional

from backend.features.ai.validation import AnalysisEntry

STARTER_PACK_SYSTEM = "You are a habit architect."
ANALYSIS_SYSTEM = "You are a calm, grounded habit coach. Reply only with JSON."

ANALYSIS_MAX_DAYS = 14


def greeting_prompt(username: str, time_of_day: str, current_streak: int, recent_mood: Optional[str]) -> str:
    return (
        "You are a supportive, stoic but warm habit coach.\n"
        f"User: {username}\n"
        f"Time: {time_of_day}\n"
        f"Streak: {current_streak} days\n"
        f"Mood: {recent_mood or 'Neutral'}\n\n"
        "Generate a ONE-SENTENCE greeting (max 15 words) that acknowledges their streak "
        "and time of day. Be inspiring but grounded. No exclamation marks unless streak > 10."
    )


def starter_pack_prompt(identity: str) -> str:
    return (
        f'The user wants to become: "{identity}".\n'
        'Generate a "Starter Pack" of 3 atomic habits (one for Health, one for '
        "Faith/Mindset, one for Career/Growth) that would help them embody this identity.\n\n"
        'Return JSON: {"habits": [{"domain": "health", "title": "Habit Title", '
        '"intention": "1-sentence why"}, ...]}\n'
        "Keep titles under 6 words. Intentions under 12 words."
    )


def analysis_prompt(username: str, entries: List[AnalysisEntry]) -> str:
    activity = [
        {"date": e.date, "score": e.daily_score, "domains": e.domains}
        for e in entries[:ANALYSIS_MAX_DAYS]
    ]
    return (
        f"Analyze this habit data for {username}.\n"
        f"Data (last 14 days): {json.dumps(activity)}\n\n"
        "1. Write a short paragraph (2-3 sentences) analyzing their consistency and balance "
        "across domains.\n"
        "2. Provide 3 actionable tips to improve.\n\n"
        'Return JSON format: {"narrative": "...", "tips": ["...", "...", "..."]}\n'
        "Keep tone professional yet encouraging."
    )
