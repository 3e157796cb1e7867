"""
Progress API Endpoints

GET /v1/stats               totals, level, streaks, badges
GET /v1/badges              badge catalogue with earned flags
GET /v1/analytics           dashboard
GET /v1/reflections/weekly  weekly reflection
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from backend.core.auth import get_current_user_id
from backend.core.errors import PermissionError
from backend.features.admin.service import config_service
from backend.features.analytics.service import analytics_service
from backend.features.checkin.service import checkin_service
from backend.features.reflections.service import reflection_service
from backend.features.stats.badges import BADGES
from backend.features.stats.service import StatsService

router = APIRouter(prefix="/v1", tags=["progress"])


def _stats(user_id: str):
    today = datetime.now(timezone.utc).date()
    xp_rules = config_service.get_config().xp_rules
    return StatsService.compute_stats(checkin_service.entries(user_id), xp_rules, today=today)


@router.get("/stats")
async def get_stats(user_id: str = Depends(get_current_user_id)) -> dict:
    return {"data": _stats(user_id).to_dict()}


@router.get("/badges")
async def get_badges(user_id: str = Depends(get_current_user_id)) -> dict:
    earned = set(_stats(user_id).badges)
    return {
        "data": [
            {**badge.to_dict(), "earned": badge.id in earned}
            for badge, _ in BADGES
        ]
    }


@router.get("/analytics")
async def get_analytics(user_id: str = Depends(get_current_user_id)) -> dict:
    return {"data": analytics_service.dashboard(user_id)}


@router.get("/reflections/weekly")
async def get_weekly_reflection(user_id: str = Depends(get_current_user_id)) -> dict:
    if not config_service.get_config().features.reflections:
        raise PermissionError("Reflections are disabled")
    return {"data": reflection_service.weekly(user_id).to_dict()}
