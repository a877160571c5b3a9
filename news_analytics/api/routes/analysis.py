"""Model-backed text analysis endpoints: summary, translation, sentiment, entities."""

from fastapi import APIRouter, Depends
from starlette.requests import Request

from news_analytics.api.dependencies import get_pipeline
from news_analytics.api.models import (
    EntitiesResponse,
    EntityItem,
    ErrorResponse,
    SentimentItem,
    SentimentResponse,
    SummarizeRequest,
    SummarizeResponse,
    TextRequest,
    TranslateRequest,
    TranslateResponse,
)
from news_analytics.api.rate_limit import limiter
from news_analytics.config.settings import get_settings as _get_settings
from news_analytics.services.pipeline import NewsAnalyticsPipeline

router = APIRouter()

_ERROR_RESPONSES = {
    502: {"model": ErrorResponse, "description": "Model inference failed"},
    503: {"model": ErrorResponse, "description": "Inference provider not configured"},
}


@router.post(
    "/summarize",
    response_model=SummarizeResponse,
    responses=_ERROR_RESPONSES,
    summary="Summarize a text",
)
@limiter.limit(lambda: _get_settings().rate_limit_default)
async def summarize(
    request: Request,
    body: SummarizeRequest,
    pipeline: NewsAnalyticsPipeline = Depends(get_pipeline),
) -> SummarizeResponse:
    summary = await pipeline.summarize(body.text, body.model)
    return SummarizeResponse(summary=summary)


@router.post(
    "/translate",
    response_model=TranslateResponse,
    responses={
        422: {"model": ErrorResponse, "description": "Unsupported language"},
        **_ERROR_RESPONSES,
    },
    summary="Translate a text",
)
@limiter.limit(lambda: _get_settings().rate_limit_default)
async def translate(
    request: Request,
    body: TranslateRequest,
    pipeline: NewsAnalyticsPipeline = Depends(get_pipeline),
) -> TranslateResponse:
    translation = await pipeline.translate(body.text, body.target_lang, body.source_lang)
    return TranslateResponse(
        translation=translation,
        source_lang=body.source_lang.lower(),
        target_lang=body.target_lang.lower(),
    )


@router.post(
    "/sentiment",
    response_model=SentimentResponse,
    responses=_ERROR_RESPONSES,
    summary="Classify the sentiment of a text",
)
@limiter.limit(lambda: _get_settings().rate_limit_default)
async def analyze_sentiment(
    request: Request,
    body: TextRequest,
    pipeline: NewsAnalyticsPipeline = Depends(get_pipeline),
) -> SentimentResponse:
    results = await pipeline.analyze_sentiment(body.text)
    return SentimentResponse(
        results=[SentimentItem(label=r.label, score=r.score) for r in results]
    )


@router.post(
    "/entities",
    response_model=EntitiesResponse,
    responses=_ERROR_RESPONSES,
    summary="Extract named entities from a text",
)
@limiter.limit(lambda: _get_settings().rate_limit_default)
async def extract_entities(
    request: Request,
    body: TextRequest,
    pipeline: NewsAnalyticsPipeline = Depends(get_pipeline),
) -> EntitiesResponse:
    entities = await pipeline.extract_entities(body.text)
    return EntitiesResponse(
        entities=[EntityItem(**e.to_dict()) for e in entities],
        total=len(entities),
    )
