"""
Caller identity for CompoundVerse API routes.

Authentication is handled upstream by the identity provider; the gateway
forwards the verified user id in the X-User-Id header.
"""
import hmac
import logging
from typing import Optional

from fastapi import Header

from backend.core.config import settings
from backend.core.errors import PermissionError, UnauthorizedError

logger = logging.getLogger("compoundverse")

MAX_USER_ID_LENGTH = 128


async def get_current_user_id(x_user_id: Optional[str] = Header(None)) -> str:
    """
    Resolve the calling user's id.

    Raises:
        UnauthorizedError: header missing, blank or oversized
    """
    user_id = (x_user_id or "").strip()
    if not user_id:
        raise UnauthorizedError("X-User-Id header is required")
    if len(user_id) > MAX_USER_ID_LENGTH:
        raise UnauthorizedError("X-User-Id header is invalid")
    return user_id


async def require_admin(x_admin_key: Optional[str] = Header(None)) -> str:
    """Guard admin routes with the shared ADMIN_KEY."""
    expected = settings.ADMIN_KEY
    if not expected:
        logger.warning("admin.disabled", extra={"error_code": "admin_key_missing"})
        raise PermissionError("Admin access is not configured")
    if not x_admin_key or not hmac.compare_digest(x_admin_key, expected):
        raise PermissionError("Invalid admin key")
    return "admin"
