"""
Admin API routes for system configuration.

All routes require the X-Admin-Key header.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from backend.core.auth import require_admin
from backend.features.admin.service import config_service

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.get("/config")
def get_config(actor: str = Depends(require_admin)) -> dict:
    return {"data": config_service.get_config().model_dump()}


@router.put("/config")
def replace_config(body: Dict[str, Any], actor: str = Depends(require_admin)) -> dict:
    """Replace the whole config. Missing sections fall back to defaults."""
    config = config_service.replace_config(body, actor=actor)
    return {"data": config.model_dump()}


@router.get("/log")
def get_log(actor: str = Depends(require_admin)) -> dict:
    entries = config_service.get_log()
    return {"count": len(entries), "entries": entries}


@router.delete("/log")
def clear_log(actor: str = Depends(require_admin)) -> dict:
    config_service.clear_log()
    return {"count": 0, "entries": []}
