"""
Dependency injection for FastAPI endpoints.
"""

from news_analytics.config.settings import get_settings
from news_analytics.services.pipeline import NewsAnalyticsPipeline

# Global pipeline instance (initialized on first request)
_pipeline: NewsAnalyticsPipeline | None = None


async def get_pipeline() -> NewsAnalyticsPipeline:
    """
    Get the analytics pipeline.

    Creates a singleton wired from settings, sharing HTTP clients across
    requests.
    """
    global _pipeline

    if _pipeline is None:
        _pipeline = NewsAnalyticsPipeline.from_settings(get_settings())

    return _pipeline


async def cleanup_dependencies() -> None:
    """Clean up global dependencies on shutdown."""
    global _pipeline

    if _pipeline is not None:
        await _pipeline.aclose()
        _pipeline = None
