from fastapi import APIRouter

from .endpoints import aggregation, health, news

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])

# Admin aggregation surface - jobs CRUD, run-now, manual fetch, source status
api_router.include_router(aggregation.router, prefix="/aggregation", tags=["aggregation"])

# Read-only aggregated articles
api_router.include_router(news.router, prefix="/news", tags=["news"])
