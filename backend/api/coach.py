"""
Coach API Endpoints

GET /v1/coach/observation  the calm observation for this hour (null while grounding)
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from backend.core.auth import get_current_user_id
from backend.features.admin.service import config_service
from backend.features.coach.service import CoachService
from backend.features.grounding.service import grounding_service

router = APIRouter(prefix="/v1/coach", tags=["coach"])


@router.get("/observation")
async def get_observation(user_id: str = Depends(get_current_user_id)) -> dict:
    now = datetime.now(timezone.utc)
    coach = config_service.get_config().coach
    active = grounding_service.refresh(user_id, now).is_active
    rotation = now.hour // coach.tip_rotation_hours
    return {
        "data": {
            "observation": CoachService.observation_or_none(rotation, active, coach.enable_tips),
            "silent": CoachService.should_be_silent(active),
            "tone": coach.tone,
        }
    }
