"""Topic modeling endpoints."""

import time

from fastapi import APIRouter, Depends
from starlette.requests import Request

from news_analytics.api.dependencies import get_pipeline
from news_analytics.api.models import (
    ErrorResponse,
    TopicItem,
    TopicsRequest,
    TopicsResponse,
    UrlTopicsRequest,
)
from news_analytics.api.rate_limit import limiter
from news_analytics.config.settings import get_settings as _get_settings
from news_analytics.services.pipeline import NewsAnalyticsPipeline
from news_analytics.topics.schemas import Document, TopicRecord

router = APIRouter()

_ERROR_RESPONSES = {
    422: {"model": ErrorResponse, "description": "Invalid batch or topic count"},
    502: {"model": ErrorResponse, "description": "Upstream service failed"},
    503: {"model": ErrorResponse, "description": "Required provider not configured"},
}


def _to_response(topics: list[TopicRecord], start_time: float) -> TopicsResponse:
    latency_ms = (time.perf_counter() - start_time) * 1000
    return TopicsResponse(
        topics=[TopicItem(**topic.to_dict()) for topic in topics],
        total=len(topics),
        latency_ms=round(latency_ms, 2),
    )


@router.post(
    "/topics",
    response_model=TopicsResponse,
    responses=_ERROR_RESPONSES,
    summary="Cluster articles into topics",
    description=(
        "Embed each article (unless an embedding is supplied), cluster with "
        "k-means and describe every cluster by its most frequent terms."
    ),
)
@limiter.limit(lambda: _get_settings().rate_limit_topics)
async def analyze_topics(
    request: Request,
    body: TopicsRequest,
    pipeline: NewsAnalyticsPipeline = Depends(get_pipeline),
) -> TopicsResponse:
    start_time = time.perf_counter()
    documents = [Document(text=a.text, embedding=a.embedding) for a in body.articles]
    topics = await pipeline.analyze_documents(documents, body.num_topics)
    return _to_response(topics, start_time)


@router.post(
    "/topics/urls",
    response_model=TopicsResponse,
    responses=_ERROR_RESPONSES,
    summary="Fetch articles by URL and cluster them into topics",
)
@limiter.limit(lambda: _get_settings().rate_limit_topics)
async def analyze_url_topics(
    request: Request,
    body: UrlTopicsRequest,
    pipeline: NewsAnalyticsPipeline = Depends(get_pipeline),
) -> TopicsResponse:
    start_time = time.perf_counter()
    topics = await pipeline.analyze_urls(body.urls, body.num_topics)
    return _to_response(topics, start_time)
