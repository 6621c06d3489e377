import structlog
from fastapi import APIRouter, Depends, Query

from src.api.dependencies import get_aggregator
from src.news.schemas.responses import NewsItemListResponse, NewsItemResponse
from src.news.services.aggregator import NewsAggregator

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("", response_model=NewsItemListResponse)
async def get_news_items(
    limit: int = Query(50, ge=1, le=200, description="Number of articles (max 200)"),
    offset: int = Query(0, ge=0, description="Offset for pagination"),
    aggregator: NewsAggregator = Depends(get_aggregator)
):
    """Aggregated articles, newest first"""
    articles = aggregator.get_news_items(limit=limit, offset=offset)
    total = aggregator.stats()["stored_articles"]
    return NewsItemListResponse(
        articles=[NewsItemResponse.model_validate(article) for article in articles],
        limit=limit,
        offset=offset,
        total=total,
        has_more=offset + len(articles) < total,
    )
