"""
Domain API Endpoints

GET    /v1/domains                  all domains (active first, then archived)
POST   /v1/domains                  add a custom domain (409 at the cap)
PATCH  /v1/domains/{id}             rename / restyle
PUT    /v1/domains/{id}/items       replace micro-actions
POST   /v1/domains/{id}/archive     archive (custom only)
POST   /v1/domains/{id}/restore     restore (409 at the cap)
POST   /v1/domains/{id}/xp          toggle XP
DELETE /v1/domains/{id}             delete an archived custom domain
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from backend.core.auth import get_current_user_id
from backend.core.errors import ConflictError, NotFoundError, PermissionError
from backend.features.admin.service import config_service
from backend.features.domains.service import domain_service
from backend.models.domain import DEFAULT_CUSTOM_COLOR, MAX_ACTIVE_DOMAINS, MicroAction

logger = logging.getLogger("compoundverse")

router = APIRouter(prefix="/v1/domains", tags=["domains"])


class MicroActionBody(BaseModel):
    id: str = Field(min_length=1, max_length=64)
    label: str = Field(min_length=1, max_length=120)


class CreateDomainRequest(BaseModel):
    name: str = Field(min_length=1, max_length=40)
    icon: str = Field(min_length=1, max_length=16)
    intention: str = Field(default="", max_length=200)
    color: str = Field(default=DEFAULT_CUSTOM_COLOR, max_length=32)
    items: List[MicroActionBody] = Field(default_factory=list, max_length=20)


class UpdateDomainRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=40)
    icon: Optional[str] = Field(default=None, min_length=1, max_length=16)
    intention: Optional[str] = Field(default=None, max_length=200)
    color: Optional[str] = Field(default=None, max_length=32)


class UpdateItemsRequest(BaseModel):
    items: List[MicroActionBody] = Field(min_length=1, max_length=20)


def _to_actions(items: List[MicroActionBody]) -> List[MicroAction]:
    return [MicroAction(id=i.id, label=i.label) for i in items]


def _listing(user_id: str) -> dict:
    registry = domain_service.registry(user_id)
    return {
        "active": [d.to_dict() for d in registry.active_domains()],
        "archived": [d.to_dict() for d in registry.archived_domains()],
        "activeCount": registry.active_count(),
        "maxActive": MAX_ACTIVE_DOMAINS,
        "canAdd": registry.can_add(),
    }


def _require_domain(user_id: str, domain_id: str):
    domain = domain_service.registry(user_id).get_domain(domain_id)
    if not domain:
        raise NotFoundError(f"Domain {domain_id} not found")
    return domain


@router.get("")
async def list_domains(user_id: str = Depends(get_current_user_id)) -> dict:
    return {"data": _listing(user_id)}


@router.post("", status_code=201)
async def create_domain(body: CreateDomainRequest, user_id: str = Depends(get_current_user_id)) -> dict:
    if not config_service.get_config().features.dynamic_domains:
        raise PermissionError("Custom domains are disabled")

    domain = domain_service.registry(user_id).add_domain(
        name=body.name.strip(),
        icon=body.icon,
        intention=body.intention.strip(),
        items=_to_actions(body.items),
        color=body.color,
    )
    if domain is None:
        raise ConflictError(f"Maximum of {MAX_ACTIVE_DOMAINS} active domains reached")

    logger.info("domains.added", extra={"user_id": user_id, "event_type": "domains.added"})
    return {"data": domain.to_dict()}


@router.patch("/{domain_id}")
async def update_domain(
    domain_id: str, body: UpdateDomainRequest, user_id: str = Depends(get_current_user_id)
) -> dict:
    _require_domain(user_id, domain_id)
    domain_service.registry(user_id).update_domain(
        domain_id,
        name=body.name,
        icon=body.icon,
        intention=body.intention,
        color=body.color,
    )
    return {"data": _require_domain(user_id, domain_id).to_dict()}


@router.put("/{domain_id}/items")
async def update_items(
    domain_id: str, body: UpdateItemsRequest, user_id: str = Depends(get_current_user_id)
) -> dict:
    _require_domain(user_id, domain_id)
    domain_service.registry(user_id).update_items(domain_id, _to_actions(body.items))
    return {"data": _require_domain(user_id, domain_id).to_dict()}


@router.post("/{domain_id}/archive")
async def archive_domain(domain_id: str, user_id: str = Depends(get_current_user_id)) -> dict:
    domain = _require_domain(user_id, domain_id)
    if not domain_service.registry(user_id).archive_domain(domain_id):
        reason = "Core domains cannot be archived" if domain.is_core else "Domain is already archived"
        raise ConflictError(reason)
    return {"data": _listing(user_id)}


@router.post("/{domain_id}/restore")
async def restore_domain(domain_id: str, user_id: str = Depends(get_current_user_id)) -> dict:
    domain = _require_domain(user_id, domain_id)
    if not domain_service.registry(user_id).restore_domain(domain_id):
        reason = (
            "Domain is not archived"
            if not domain.archived
            else f"Maximum of {MAX_ACTIVE_DOMAINS} active domains reached"
        )
        raise ConflictError(reason)
    return {"data": _listing(user_id)}


@router.post("/{domain_id}/xp")
async def toggle_xp(domain_id: str, user_id: str = Depends(get_current_user_id)) -> dict:
    _require_domain(user_id, domain_id)
    enabled = domain_service.registry(user_id).toggle_xp(domain_id)
    return {"data": {"id": domain_id, "xpEnabled": enabled}}


@router.delete("/{domain_id}")
async def delete_domain(domain_id: str, user_id: str = Depends(get_current_user_id)) -> dict:
    domain = _require_domain(user_id, domain_id)
    if not domain_service.registry(user_id).delete_domain(domain_id):
        reason = "Core domains cannot be deleted" if domain.is_core else "Archive the domain before deleting it"
        raise ConflictError(reason)
    logger.info("domains.deleted", extra={"user_id": user_id, "event_type": "domains.deleted"})
    return {"data": _listing(user_id)}
