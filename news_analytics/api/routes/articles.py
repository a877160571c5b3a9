"""Article fetch and search endpoints."""

from fastapi import APIRouter, Depends
from starlette.requests import Request

from news_analytics.api.dependencies import get_pipeline
from news_analytics.api.models import (
    ArticleFetchRequest,
    ArticleResponse,
    ArticleSearchRequest,
    ArticleSearchResponse,
    ArticleSummaryItem,
    ErrorResponse,
)
from news_analytics.api.rate_limit import limiter
from news_analytics.config.settings import get_settings as _get_settings
from news_analytics.services.pipeline import NewsAnalyticsPipeline

router = APIRouter()


@router.post(
    "/articles/fetch",
    response_model=ArticleResponse,
    responses={
        502: {"model": ErrorResponse, "description": "Article could not be fetched"},
    },
    summary="Fetch the structured content of an article",
)
@limiter.limit(lambda: _get_settings().rate_limit_default)
async def fetch_article(
    request: Request,
    body: ArticleFetchRequest,
    pipeline: NewsAnalyticsPipeline = Depends(get_pipeline),
) -> ArticleResponse:
    article = await pipeline.fetch_article(body.url)
    return ArticleResponse(**article.to_dict())


@router.post(
    "/articles/search",
    response_model=ArticleSearchResponse,
    responses={
        502: {"model": ErrorResponse, "description": "Search provider failed"},
        503: {"model": ErrorResponse, "description": "Search provider not configured"},
    },
    summary="Search news articles by keyword",
)
@limiter.limit(lambda: _get_settings().rate_limit_default)
async def search_articles(
    request: Request,
    body: ArticleSearchRequest,
    pipeline: NewsAnalyticsPipeline = Depends(get_pipeline),
) -> ArticleSearchResponse:
    articles = await pipeline.search_articles(body.query)
    return ArticleSearchResponse(
        articles=[
            ArticleSummaryItem(
                title=a.title,
                url=a.url,
                description=a.description,
                source=a.source,
                author=a.author,
                published_at=a.published_at,
            )
            for a in articles
        ],
        total=len(articles),
    )
