import secrets
from typing import Optional

import structlog
from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..config import Settings, get_settings
from ..news.services.aggregator import NewsAggregator
from ..news.services.scheduler import AggregationScheduler

logger = structlog.get_logger(__name__)

security = HTTPBearer(auto_error=False)


def get_aggregator(request: Request) -> NewsAggregator:
    aggregator = getattr(request.app.state, "aggregator", None)
    if aggregator is None:
        raise HTTPException(status_code=503, detail="News aggregator is not running")
    return aggregator


def get_scheduler(request: Request) -> Optional[AggregationScheduler]:
    return getattr(request.app.state, "scheduler", None)


def get_app_settings(request: Request) -> Settings:
    """Settings the running app was built with; the environment settings otherwise"""
    settings = getattr(request.app.state, "settings", None)
    return settings if settings is not None else get_settings()


async def require_admin(
    request: Request,
    settings: Settings = Depends(get_app_settings),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> None:
    """
    Admin access check for aggregation write endpoints.
    - If authentication_enabled=False: every caller is allowed
    - If authentication_enabled=True: a bearer token equal to admin_api_token is required
    """
    if not settings.authentication_enabled:
        return

    if not settings.admin_api_token:
        logger.error("admin_token_not_configured", path=request.url.path)
        raise HTTPException(
            status_code=503,
            detail="Admin authentication is enabled but no admin token is configured"
        )

    token = credentials.credentials if credentials else ""
    if not token or not secrets.compare_digest(token, settings.admin_api_token):
        logger.warning("admin_auth_rejected", path=request.url.path, token_present=bool(token))
        raise HTTPException(
            status_code=401,
            detail="Authentication required. Please provide a valid admin token.",
            headers={"WWW-Authenticate": "Bearer"},
        )
