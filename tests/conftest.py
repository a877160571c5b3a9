"""Pytest fixtures for news-analytics tests."""

from unittest.mock import MagicMock

import pytest

from news_analytics.config.settings import Settings
from news_analytics.observability.metrics import MetricsCollector
from news_analytics.topics.schemas import Document


@pytest.fixture
def test_settings() -> Settings:
    """Settings configured for testing (no external providers)."""
    return Settings(
        environment="development",
        log_level="DEBUG",
        huggingface_api_key=None,
        newsapi_api_keys=None,
        max_http_retries=0,
        upstream_timeout_seconds=5.0,
    )


@pytest.fixture
def mock_metrics() -> MagicMock:
    """Metrics collector stand-in (avoids duplicate Prometheus registration)."""
    return MagicMock(spec=MetricsCollector)


@pytest.fixture
def sample_texts() -> list[str]:
    """Four articles in two themes: football (0, 1) and cooking (2, 3)."""
    return [
        "Football league final: the striker scored twice as the football club won the league title.",
        "The football club signed a new striker before the league season opener.",
        "Cooking pasta at home: boil the pasta, simmer the tomato sauce, season the cooking water.",
        "A slow cooking recipe for tomato sauce with fresh basil and pasta.",
    ]


@pytest.fixture
def sample_embeddings() -> list[list[float]]:
    """Embeddings for sample_texts: the topical pairs sit close together."""
    return [
        [0.90, 0.10, 0.00],
        [0.85, 0.15, 0.05],
        [0.05, 0.10, 0.95],
        [0.00, 0.20, 0.90],
    ]


@pytest.fixture
def sample_documents(sample_texts, sample_embeddings) -> list[Document]:
    """Documents with embeddings attached."""
    return [
        Document(text=text, embedding=embedding)
        for text, embedding in zip(sample_texts, sample_embeddings)
    ]
