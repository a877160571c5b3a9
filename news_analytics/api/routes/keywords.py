"""Keyword extraction endpoint."""

import time

from fastapi import APIRouter, Depends
from starlette.requests import Request

from news_analytics.api.dependencies import get_pipeline
from news_analytics.api.models import ErrorResponse, KeywordsRequest, KeywordsResponse
from news_analytics.api.rate_limit import limiter
from news_analytics.config.settings import get_settings as _get_settings
from news_analytics.services.pipeline import NewsAnalyticsPipeline

router = APIRouter()


@router.post(
    "/keywords",
    response_model=KeywordsResponse,
    responses={
        422: {"model": ErrorResponse, "description": "Validation error"},
    },
    summary="Extract keywords from a text",
    description="Rank the terms of one text by TF-IDF and return the top_n terms.",
)
@limiter.limit(lambda: _get_settings().rate_limit_default)
async def extract_keywords(
    request: Request,
    body: KeywordsRequest,
    pipeline: NewsAnalyticsPipeline = Depends(get_pipeline),
) -> KeywordsResponse:
    start_time = time.perf_counter()
    keywords = pipeline.extract_keywords(body.text, body.top_n)
    latency_ms = (time.perf_counter() - start_time) * 1000
    return KeywordsResponse(keywords=keywords, latency_ms=round(latency_ms, 2))
