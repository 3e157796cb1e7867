"""
Health and diagnostics API.

Lightweight endpoints for operational monitoring without exposing secrets.
"""

import logging
import time
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Query
from pydantic import BaseModel

from backend.core.database import check_connection, get_database_url
from backend.core.logging import get_request_id, latency_bucket_ms
from backend.features.entries.store import get_entry_store

logger = logging.getLogger("compoundverse")

router = APIRouter(prefix="/api/health", tags=["health"])
root_router = APIRouter(tags=["health"])


class DBHealth(BaseModel):
    configured: bool
    connected: bool
    store: str
    latency_ms: Optional[float] = None  # None for determinism in tests


class HealthResponse(BaseModel):
    ok: bool
    db: DBHealth
    computed_at: str  # UTC ISO format


@root_router.get("/healthz")
def healthz():
    """Liveness check (no deps)."""
    return {"status": "ok"}


@router.get("/db", response_model=HealthResponse)
def health_db(now: Optional[str] = Query(None)):
    """
    Database health. Without DATABASE_URL the service runs on the in-memory
    store and reports ok with connected=false.

    Args:
        now: Optional ISO timestamp for deterministic testing
    """
    configured = bool(get_database_url())
    start = time.perf_counter()
    connected = check_connection() if configured else False
    latency_ms = (time.perf_counter() - start) * 1000

    logger.info(
        "health.db",
        extra={"request_id": get_request_id(), "latency_bucket": latency_bucket_ms(latency_ms)},
    )

    return HealthResponse(
        ok=connected or not configured,
        db=DBHealth(
            configured=configured,
            connected=connected,
            store=type(get_entry_store()).__name__,
            latency_ms=None if now else latency_ms,
        ),
        computed_at=now or datetime.now(timezone.utc).isoformat(),
    )
