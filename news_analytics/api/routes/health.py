"""
Health check endpoint.
"""

from fastapi import APIRouter, Depends

from news_analytics.api.dependencies import get_pipeline
from news_analytics.api.models import HealthResponse
from news_analytics.services.pipeline import NewsAnalyticsPipeline

router = APIRouter()

API_VERSION = "0.1.0"


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    description="Report service status and which external collaborators are configured.",
)
async def health_check(
    pipeline: NewsAnalyticsPipeline = Depends(get_pipeline),
) -> HealthResponse:
    providers = pipeline.configured_providers
    # Topic modeling over raw text is unavailable without embeddings
    status = "healthy" if providers.get("embedding") else "degraded"
    return HealthResponse(status=status, version=API_VERSION, providers=providers)
