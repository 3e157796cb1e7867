"""
Momentum API Endpoints

GET /v1/momentum/today    momentum as of today (UTC)
GET /v1/momentum/history  daily momentum for the last N days, oldest first
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from backend.core.auth import get_current_user_id
from backend.features.momentum.service import momentum_service

router = APIRouter(prefix="/v1/momentum", tags=["momentum"])


@router.get("/today")
async def get_momentum_today(
    as_of: Optional[date] = Query(None, alias="asOf"),
    user_id: str = Depends(get_current_user_id),
) -> dict:
    """
    Returns:
        {
            "data": {
                "score": 50,
                "trend": "stable",
                "window": 14,
                "activeDays": 7,
                "totalDays": 14,
                "isProtected": false,
                "message": "You're still in motion."
            }
        }
    """
    return {"data": momentum_service.current(user_id, as_of=as_of).to_dict()}


@router.get("/history")
async def get_momentum_history(
    days: int = Query(14, ge=1, le=90),
    user_id: str = Depends(get_current_user_id),
) -> dict:
    points = momentum_service.history(user_id, days=days)
    return {"data": [p.to_dict() for p in points]}
