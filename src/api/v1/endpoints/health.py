from datetime import datetime, timezone
from typing import Any, Dict, Optional

import structlog
from fastapi import APIRouter, Depends

from ...dependencies import get_aggregator, get_scheduler
from ....news.services.aggregator import NewsAggregator
from ....news.services.scheduler import AggregationScheduler

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check(
    aggregator: NewsAggregator = Depends(get_aggregator),
    scheduler: Optional[AggregationScheduler] = Depends(get_scheduler)
) -> Dict[str, Any]:
    sources = aggregator.source_health()
    configured = [entry for entry in sources if entry["configured"]]
    unhealthy = [entry["source"] for entry in configured if entry["status"] == "unhealthy"]

    status = "degraded" if unhealthy or not configured else "healthy"

    return {
        "status": status,
        "service": "Media News Aggregator",
        "version": "0.1.0",
        "scheduler_running": bool(scheduler and scheduler.is_running),
        "configured_sources": [entry["source"] for entry in configured],
        "unhealthy_sources": unhealthy,
        "aggregator": aggregator.stats(),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
