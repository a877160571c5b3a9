"""Shared fixtures for API tests."""

from collections.abc import Sequence
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from news_analytics.api.app import create_app
from news_analytics.api.dependencies import get_pipeline
from news_analytics.providers.base import (
    ArticleFetcher,
    ArticleSearchProvider,
    EmbeddingProvider,
    EntityProvider,
    FetchError,
    SentimentProvider,
    SummarizationProvider,
    TranslationProvider,
)
from news_analytics.providers.languages import Language
from news_analytics.providers.schemas import (
    Article,
    ArticleSummary,
    EntityMention,
    SentimentResult,
)
from news_analytics.services.pipeline import NewsAnalyticsPipeline


class StubEmbedder(EmbeddingProvider):
    def __init__(self, vectors: dict[str, list[float]]):
        self.vectors = vectors

    async def embed(self, texts: Sequence[str]) -> list[list[float]]:
        return [self.vectors[text] for text in texts]


class StubFetcher(ArticleFetcher):
    def __init__(self, articles: dict[str, Article]):
        self.articles = articles

    async def fetch(self, url: str) -> Article:
        if url not in self.articles:
            raise FetchError(f"No article schema found at {url}")
        return self.articles[url]


class StubSearcher(ArticleSearchProvider):
    async def search(self, query: str) -> list[ArticleSummary]:
        return [
            ArticleSummary(
                title=f"{query.title()} rally extends",
                url="https://news.example.com/rally",
                source="Example Wire",
                published_at=datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc),
            )
        ]


class StubSummarizer(SummarizationProvider):
    async def summarize(self, text, model=None) -> str:
        return f"{(model.value if model else 'default')}: {text[:20]}"


class StubTranslator(TranslationProvider):
    async def translate(self, text, target, source=Language.ENGLISH) -> str:
        return f"{source.value}->{target.value}: {text}"


class StubSentiment(SentimentProvider):
    async def analyze(self, text: str) -> list[SentimentResult]:
        return [SentimentResult("POSITIVE", 0.97), SentimentResult("NEGATIVE", 0.03)]


class StubEntities(EntityProvider):
    async def extract(self, text: str) -> list[EntityMention]:
        return [EntityMention("ORG", "Nvidia", 0.99, start=0, end=6)]


@pytest.fixture
def article_urls(sample_texts) -> list[str]:
    return [f"https://news.example.com/story/{i}" for i in range(len(sample_texts))]


@pytest.fixture
def pipeline(sample_texts, sample_embeddings, article_urls, mock_metrics) -> NewsAnalyticsPipeline:
    """Pipeline wired with in-memory collaborators."""
    return NewsAnalyticsPipeline(
        embedder=StubEmbedder(dict(zip(sample_texts, sample_embeddings))),
        fetcher=StubFetcher(
            {url: Article(headline="", body=text, url=url) for url, text in zip(article_urls, sample_texts)}
        ),
        searcher=StubSearcher(),
        summarizer=StubSummarizer(),
        translator=StubTranslator(),
        sentiment=StubSentiment(),
        entities=StubEntities(),
        metrics=mock_metrics,
    )


@pytest.fixture
def client(pipeline):
    """FastAPI TestClient with the pipeline dependency overridden."""
    app = create_app()
    app.dependency_overrides[get_pipeline] = lambda: pipeline

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def mock_pipeline():
    """Pipeline double for forcing error paths."""
    mock = MagicMock(spec=NewsAnalyticsPipeline)
    mock.configured_providers = {"embedding": False, "fetch": True}
    return mock


@pytest.fixture
def failing_client(mock_pipeline):
    """TestClient over mock_pipeline that returns 500s instead of raising."""
    app = create_app()
    app.dependency_overrides[get_pipeline] = lambda: mock_pipeline

    with TestClient(app, raise_server_exceptions=False) as c:
        yield c

    app.dependency_overrides.clear()
