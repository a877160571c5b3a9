"""
FastAPI application factory.
"""

import time
import uuid
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from news_analytics.api.dependencies import cleanup_dependencies
from news_analytics.api.middleware.timeout import TimeoutMiddleware
from news_analytics.api.routes import analysis, articles, health, keywords, topics
from news_analytics.clustering.service import ClusteringConfigError, DimensionMismatchError
from news_analytics.config.settings import get_settings
from news_analytics.keywords.ranker import RankingError
from news_analytics.observability.logging import bind_context, clear_context
from news_analytics.providers.base import ProviderNotConfiguredError, UpstreamServiceError
from news_analytics.providers.languages import UnsupportedLanguageError
from news_analytics.topics.aggregator import MissingEmbeddingError

logger = structlog.get_logger(__name__)

API_PREFIX = "/api"

# Errors caused by the request itself rather than by a dependency
INPUT_ERRORS: tuple[type[Exception], ...] = (
    RankingError,
    ClusteringConfigError,
    DimensionMismatchError,
    MissingEmbeddingError,
    UnsupportedLanguageError,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("News analytics API starting up")

    yield

    logger.info("News analytics API shutting down")
    await cleanup_dependencies()


async def input_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.info(
        "Rejected request input",
        path=request.url.path,
        error_type=type(exc).__name__,
        error=str(exc),
    )
    return JSONResponse(
        status_code=422,
        content={"detail": str(exc), "error_type": type(exc).__name__},
    )


async def upstream_error_handler(request: Request, exc: UpstreamServiceError) -> JSONResponse:
    status_code = 503 if isinstance(exc, ProviderNotConfiguredError) else 502
    logger.warning(
        "Upstream service error",
        path=request.url.path,
        service=exc.service,
        error_type=type(exc).__name__,
        error=str(exc),
        cause=repr(exc.cause) if exc.cause else None,
    )
    return JSONResponse(
        status_code=status_code,
        content={
            "detail": str(exc),
            "error_type": type(exc).__name__,
            "service": exc.service,
        },
    )


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application
    """
    settings = get_settings()

    openapi_tags = [
        {"name": "health", "description": "Service health checks"},
        {"name": "keywords", "description": "TF-IDF keyword extraction"},
        {"name": "topics", "description": "Topic modeling over article batches"},
        {"name": "articles", "description": "Article fetch and search"},
        {"name": "analysis", "description": "Summarization, translation, sentiment and entities"},
    ]

    app = FastAPI(
        title="News Analytics API",
        description="""
Keyword ranking, topic modeling and model-backed analysis for news articles.

## Topics

Articles are embedded with a sentence-transformer model, clustered with
k-means and each cluster is described by its most frequent terms. The
response always holds exactly `num_topics` topics.
        """,
        version="0.1.0",
        debug=settings.debug,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
        openapi_tags=openapi_tags,
    )

    # Add CORS middleware (origins from CORS_ORIGINS env var, comma-separated)
    cors_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    # Request timeout middleware (must be added before logging middleware
    # so timeout wraps the entire request lifecycle)
    if settings.request_timeout_seconds > 0:
        app.add_middleware(
            TimeoutMiddleware,
            timeout_seconds=settings.request_timeout_seconds,
            path_timeouts={"/api/topics": settings.topics_request_timeout_seconds},
        )

    # Request logging and correlation ID middleware
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        # Correlation ID: use incoming header or generate a new one
        request_id = (
            request.headers.get("X-Request-ID")
            or request.headers.get("X-Correlation-ID")
            or str(uuid.uuid4())
        )

        # Bind to structlog contextvars for automatic log correlation
        bind_context(request_id=request_id)

        start_time = time.perf_counter()

        try:
            response = await call_next(request)
            duration = time.perf_counter() - start_time

            # Add correlation ID to response headers
            response.headers["X-Request-ID"] = request_id

            logger.info(
                "HTTP request",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round(duration * 1000, 2),
            )
            return response
        finally:
            clear_context()

    # Rate limiting (opt-in via RATE_LIMIT_ENABLED=true)
    if settings.rate_limit_enabled:
        from slowapi import _rate_limit_exceeded_handler
        from slowapi.errors import RateLimitExceeded

        from news_analytics.api.rate_limit import limiter

        app.state.limiter = limiter
        app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Exception handlers
    for error_cls in INPUT_ERRORS:
        app.add_exception_handler(error_cls, input_error_handler)
    app.add_exception_handler(UpstreamServiceError, upstream_error_handler)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error", "error_type": "internal"},
        )

    # Include routers
    app.include_router(health.router, tags=["health"])
    app.include_router(keywords.router, prefix=API_PREFIX, tags=["keywords"])
    app.include_router(topics.router, prefix=API_PREFIX, tags=["topics"])
    app.include_router(articles.router, prefix=API_PREFIX, tags=["articles"])
    app.include_router(analysis.router, prefix=API_PREFIX, tags=["analysis"])

    # Root endpoint
    @app.get("/", include_in_schema=False)
    async def root():
        return {
            "service": "News Analytics API",
            "version": "0.1.0",
            "docs": "/docs",
        }

    return app
