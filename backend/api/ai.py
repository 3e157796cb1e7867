"""
AI text API

POST /v1/ai  {action: greeting|starter_pack|analysis, payload}

Rate limited per client IP with a fixed window. Provider failures never
surface as errors; the service answers with fallback text instead.
"""

import json
import logging

from fastapi import APIRouter, Request

from backend.core.errors import RateLimitError
from backend.core.logging import get_request_id
from backend.core.rate_limit import get_client_ip
from backend.features.ai.service import ai_service
from backend.features.ai.validation import InvalidAIRequest, validate_ai_request

logger = logging.getLogger("compoundverse")

router = APIRouter(prefix="/v1/ai", tags=["ai"])


@router.post("")
async def ai_endpoint(request: Request) -> dict:
    rid = getattr(request.state, "request_id", None) or get_request_id()
    limiter = getattr(request.app.state, "ai_rate_limiter", None)

    client_ip = get_client_ip(request)
    if limiter and not limiter.allow(f"ai:{client_ip}"):
        logger.warning("ai.rate_limited", extra={"event_type": "ai.rate_limited", "error_code": "rate_limited"})
        raise RateLimitError("Too many requests", request_id=rid)

    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InvalidAIRequest("Invalid request", request_id=rid) from exc

    ai_request = validate_ai_request(body)
    result = ai_service.handle(ai_request)

    logger.info("ai.completed", extra={"event_type": f"ai.{ai_request.action}"})
    return result
