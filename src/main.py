import logging
import structlog
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.v1.router import api_router
from .config import Settings, get_settings
from .news.services.aggregator import NewsAggregator
from .news.services.scheduler import AggregationScheduler


def apply_logging_preferences(settings: Settings):
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    # Request URLs carry provider API keys in the query string
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def configure_logging(settings: Settings):
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(message)s"
    )

    apply_logging_preferences(settings)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if settings.log_format == "json" else structlog.dev.ConsoleRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


settings = get_settings()

configure_logging(settings)

logger = structlog.get_logger(__name__)


def create_application(
    app_settings: Optional[Settings] = None,
    aggregator: Optional[NewsAggregator] = None,
) -> FastAPI:
    app_settings = app_settings or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        news_aggregator = aggregator or NewsAggregator(app_settings)
        scheduler = AggregationScheduler(news_aggregator, interval_seconds=app_settings.scheduler_interval_seconds)
        app.state.aggregator = news_aggregator
        app.state.scheduler = scheduler

        logger.info(
            "Starting Media News Aggregator API",
            version="0.1.0",
            scheduler_enabled=app_settings.scheduler_enabled,
        )
        if app_settings.scheduler_enabled:
            scheduler.start()

        yield

        logger.info("Shutting down Media News Aggregator API")
        await scheduler.stop()
        await news_aggregator.aclose()
        app.state.aggregator = None
        app.state.scheduler = None

    app = FastAPI(
        title="Media News Aggregator",
        description="Scheduled multi-source news aggregation for Middle East media intelligence",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/api/v1/openapi.json",
        lifespan=lifespan,
    )

    app.state.settings = app_settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled exception occurred",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "message": "An unexpected error occurred. Please try again later.",
            }
        )

    # Health check at root
    from .api.v1.endpoints import health
    app.include_router(health.router, tags=["health"])

    # Include API router
    app.include_router(api_router, prefix="/api/v1")

    return app


app = create_application()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
        log_level="info",
        access_log=False,
    )
