"""
Check-in API Endpoints

POST /v1/checkins        submit (or resubmit) a day's check-in
GET  /v1/checkins/today  today's entry, if submitted
GET  /v1/entries         entry history, oldest first
"""

from datetime import date, datetime, timezone
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict, Field

from backend.core.auth import get_current_user_id
from backend.core.errors import ValidationError
from backend.features.admin.service import config_service
from backend.features.checkin.service import checkin_service

router = APIRouter(tags=["checkins"])

MAX_REFLECTION_LENGTH = 2000


class CheckinRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    checked_items: Dict[str, List[str]] = Field(default_factory=dict, alias="checkedItems")
    reflection: str = Field(default="", max_length=MAX_REFLECTION_LENGTH)
    day: Optional[date] = Field(default=None, alias="date")


@router.post("/v1/checkins")
async def submit_checkin(body: CheckinRequest, user_id: str = Depends(get_current_user_id)) -> dict:
    """
    Record a check-in. Resubmitting the same date overwrites it.

    Returns:
        {"data": {"entry", "persisted", "stats", "newBadges", "feedback"}}
    """
    today = datetime.now(timezone.utc).date()
    day = body.day or today
    if day > today:
        raise ValidationError("Cannot check in for a future date")

    reflection = body.reflection if config_service.get_config().features.reflections else ""
    result = checkin_service.submit(user_id, body.checked_items, reflection, day=day)
    return {"data": result.to_dict()}


@router.get("/v1/checkins/today")
async def get_today(user_id: str = Depends(get_current_user_id)) -> dict:
    return {"data": checkin_service.today(user_id)}


@router.get("/v1/entries")
async def list_entries(
    since: Optional[date] = Query(None, description="Only entries on or after this date"),
    user_id: str = Depends(get_current_user_id),
) -> dict:
    entries = checkin_service.entries(user_id, since=since)
    return {"data": [e.to_dict() for e in entries], "count": len(entries)}
