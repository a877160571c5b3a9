"""
Request timeout middleware.

Every API request gets a time budget. Topic modeling fans out one embedding
call per article (or per batch), so its routes usually get a longer budget
than single-call routes such as summarize or keywords. A request that runs
past its budget is answered with 504 Gateway Timeout; the upstream calls it
was awaiting are cancelled with it.

Health and documentation paths have no budget.
"""

import asyncio
from collections.abc import Mapping

import structlog
from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from news_analytics.observability.metrics import get_metrics

logger = structlog.get_logger(__name__)

DEFAULT_EXCLUDED_PREFIXES = ("/health", "/docs", "/redoc", "/openapi.json")


class TimeoutMiddleware(BaseHTTPMiddleware):
    """
    Enforce a per-path maximum request duration, returning 504 on timeout.

    Args:
        app: ASGI app to wrap.
        timeout_seconds: Budget for paths without an override.
        path_timeouts: Budgets keyed by path prefix; the longest matching
            prefix wins. A budget of 0 disables the timeout for that prefix.
        excluded_prefixes: Paths that never time out.
    """

    def __init__(
        self,
        app,
        timeout_seconds: float = 60.0,
        path_timeouts: Mapping[str, float] | None = None,
        excluded_prefixes: tuple[str, ...] = DEFAULT_EXCLUDED_PREFIXES,
    ):
        super().__init__(app)
        self.timeout_seconds = timeout_seconds
        # Longest prefix first so /api/topics/urls beats /api/topics
        self.path_timeouts = sorted(
            (path_timeouts or {}).items(), key=lambda item: len(item[0]), reverse=True
        )
        self.excluded_prefixes = excluded_prefixes

    def timeout_for(self, path: str) -> float | None:
        """Return the budget for ``path`` in seconds, or None for no timeout."""
        if path.startswith(self.excluded_prefixes):
            return None
        for prefix, seconds in self.path_timeouts:
            if path.startswith(prefix):
                return seconds or None
        return self.timeout_seconds or None

    async def dispatch(self, request: Request, call_next):
        budget = self.timeout_for(request.url.path)
        if budget is None:
            return await call_next(request)

        try:
            async with asyncio.timeout(budget):
                return await call_next(request)
        except TimeoutError:
            get_metrics().record_request_timeout(request.url.path)
            logger.warning(
                "Request timed out",
                path=request.url.path,
                method=request.method,
                timeout_seconds=budget,
            )
            return JSONResponse(
                status_code=504,
                content={
                    "detail": "Request timed out",
                    "error_type": "timeout",
                    "timeout_seconds": budget,
                },
            )
