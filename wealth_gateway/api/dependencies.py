"""Dependency injection for FastAPI endpoints"""

from datetime import date, datetime, timezone
from fastapi import HTTPException, Request
from wealth_gateway.config import settings


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_current_user_id(request: Request) -> str:
    """
    Caller identity forwarded by the authenticating proxy.

    Raises:
        HTTPException: 401 when the identity header is missing or blank
    """
    user_id = request.headers.get(settings.user_header, "").strip()
    if not user_id:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user_id


def get_today() -> date:
    """Current UTC date; overridden in tests to pin the clock"""
    return datetime.now(timezone.utc).date()
