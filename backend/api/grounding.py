"""
Grounding API Endpoints

GET  /v1/grounding            current state and remaining seconds, ends an expired session
POST /v1/grounding/activate   enter grounding mode, protect today
POST /v1/grounding/exit       leave grounding mode
PUT  /v1/grounding/duration   set timer length (clamped 5..30 minutes)
GET  /v1/grounding/stats      lifetime activations and protected day count
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, StrictInt

from backend.core.auth import get_current_user_id
from backend.features.grounding.service import grounding_service

router = APIRouter(prefix="/v1/grounding", tags=["grounding"])


class DurationRequest(BaseModel):
    minutes: StrictInt


def _state_payload(user_id: str) -> dict:
    state = grounding_service.get_state(user_id)
    return {
        **state.to_dict(),
        "remainingSeconds": grounding_service.remaining_seconds(user_id),
        "protectedDays": [d.isoformat() for d in grounding_service.protected_days(user_id)],
    }


@router.get("")
async def get_grounding(user_id: str = Depends(get_current_user_id)) -> dict:
    grounding_service.refresh(user_id)
    return {"data": _state_payload(user_id)}


@router.post("/activate")
async def activate(user_id: str = Depends(get_current_user_id)) -> dict:
    grounding_service.activate(user_id)
    return {"data": _state_payload(user_id)}


@router.post("/exit")
async def exit_grounding(user_id: str = Depends(get_current_user_id)) -> dict:
    grounding_service.exit(user_id)
    return {"data": _state_payload(user_id)}


@router.put("/duration")
async def set_duration(body: DurationRequest, user_id: str = Depends(get_current_user_id)) -> dict:
    grounding_service.set_duration(user_id, body.minutes)
    return {"data": _state_payload(user_id)}


@router.get("/stats")
async def get_grounding_stats(user_id: str = Depends(get_current_user_id)) -> dict:
    return {"data": grounding_service.stats(user_id)}
