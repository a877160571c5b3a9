"""
Request and response models for the news analytics API.
"""

import datetime as dt

from pydantic import BaseModel, Field

from news_analytics.providers.config import SummarizationModel


class ErrorResponse(BaseModel):
    """Response model for errors."""

    detail: str = Field(
        ...,
        description="Error message",
    )
    error_type: str = Field(
        default="error",
        description="Error type",
    )
    service: str | None = Field(
        default=None,
        description="Failing external service, for upstream errors",
    )


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str = Field(
        ...,
        description="Overall service status: healthy or degraded",
    )
    version: str = Field(
        ...,
        description="Service version",
    )
    providers: dict[str, bool] = Field(
        default_factory=dict,
        description="Which external collaborators are configured",
    )


# Keyword models


class KeywordsRequest(BaseModel):
    """Request model for keyword extraction."""

    text: str = Field(
        ...,
        max_length=100_000,
        description="Text to extract keywords from",
    )
    top_n: int = Field(
        default=10,
        ge=0,
        le=100,
        description="Maximum keywords to return",
    )


class KeywordsResponse(BaseModel):
    """Response model for keyword extraction."""

    keywords: list[str] = Field(
        ...,
        description="Keywords, highest TF-IDF score first",
    )
    latency_ms: float = Field(
        ...,
        description="Processing latency in milliseconds",
    )


# Topic models


class ArticleInput(BaseModel):
    """One article of a topic modeling batch."""

    text: str = Field(
        ...,
        max_length=100_000,
        description="Article text",
    )
    embedding: list[float] | None = Field(
        default=None,
        description="Pre-computed embedding; computed remotely when omitted",
    )


class TopicsRequest(BaseModel):
    """Request model for topic modeling over article texts."""

    articles: list[ArticleInput] = Field(
        ...,
        min_length=1,
        description="Articles to cluster (at most TOPICS_MAX_ARTICLES)",
    )
    num_topics: int | None = Field(
        default=None,
        ge=1,
        le=50,
        description="Number of topics (defaults to TOPICS_DEFAULT_NUM_TOPICS)",
    )


class UrlTopicsRequest(BaseModel):
    """Request model for topic modeling over article URLs."""

    urls: list[str] = Field(
        ...,
        min_length=1,
        max_length=50,
        description="Article URLs to fetch and cluster (1-50)",
    )
    num_topics: int | None = Field(
        default=None,
        ge=1,
        le=50,
        description="Number of topics (defaults to TOPICS_DEFAULT_NUM_TOPICS)",
    )


class TopicItem(BaseModel):
    """One discovered topic."""

    topic: str = Field(..., description="Topic label, e.g. 'Topic 1'")
    keywords: list[str] = Field(default_factory=list, description="Top terms of the topic")
    document_count: int = Field(..., description="Articles in the topic")
    document_indices: list[int] = Field(
        default_factory=list,
        description="Positions of the topic's articles in the request",
    )


class TopicsResponse(BaseModel):
    """Response model for topic modeling."""

    topics: list[TopicItem] = Field(..., description="Exactly num_topics topics")
    total: int = Field(..., description="Number of topics")
    latency_ms: float = Field(..., description="Processing latency in milliseconds")


# Article models


class ArticleFetchRequest(BaseModel):
    """Request model for fetching one article."""

    url: str = Field(..., min_length=1, max_length=2048, description="Article URL")


class ArticleResponse(BaseModel):
    """Structured article content."""

    headline: str
    body: str
    url: str | None = None


class ArticleSearchRequest(BaseModel):
    """Request model for article search."""

    query: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="Keyword query",
    )


class ArticleSummaryItem(BaseModel):
    """One search result."""

    title: str
    url: str
    description: str | None = None
    source: str | None = None
    author: str | None = None
    published_at: dt.datetime | None = None


class ArticleSearchResponse(BaseModel):
    """Response model for article search."""

    articles: list[ArticleSummaryItem] = Field(default_factory=list)
    total: int = Field(..., description="Number of articles returned")


# Model-backed analysis


class SummarizeRequest(BaseModel):
    """Request model for summarization."""

    text: str = Field(..., min_length=1, max_length=100_000, description="Text to summarize")
    model: SummarizationModel | None = Field(
        default=None,
        description="Summarization model (defaults to PROVIDERS_SUMMARIZATION_MODEL)",
    )


class SummarizeResponse(BaseModel):
    """Response model for summarization."""

    summary: str


class TranslateRequest(BaseModel):
    """Request model for translation."""

    text: str = Field(..., min_length=1, max_length=20_000, description="Text to translate")
    target_lang: str = Field(..., description="ISO 639-1 target language code")
    source_lang: str = Field(default="en", description="ISO 639-1 source language code")


class TranslateResponse(BaseModel):
    """Response model for translation."""

    translation: str
    source_lang: str
    target_lang: str


class TextRequest(BaseModel):
    """Request model for single-text analysis (sentiment, entities)."""

    text: str = Field(..., min_length=1, max_length=20_000, description="Text to analyze")


class SentimentItem(BaseModel):
    """One sentiment label."""

    label: str
    score: float


class SentimentResponse(BaseModel):
    """Response model for sentiment analysis."""

    results: list[SentimentItem] = Field(
        default_factory=list,
        description="Labels, most confident first",
    )


class EntityItem(BaseModel):
    """One recognized entity."""

    entity_group: str
    word: str
    score: float
    start: int | None = None
    end: int | None = None


class EntitiesResponse(BaseModel):
    """Response model for named entity recognition."""

    entities: list[EntityItem] = Field(default_factory=list)
    total: int
