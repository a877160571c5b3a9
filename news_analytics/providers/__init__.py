"""
External collaborators of the analytics pipeline.

This module provides:
- Interfaces: ArticleFetcher, EmbeddingProvider, SummarizationProvider,
  TranslationProvider, SentimentProvider, EntityProvider, ArticleSearchProvider
- UpstreamServiceError and its per-service subclasses
- Hugging Face Inference API adapters for the model-backed capabilities
- JsonLdArticleFetcher: reads the JSON-LD article schema from news pages
- NewsApiSearchProvider: keyword search over NewsAPI
- HTTPClient / GenericCircuitBreaker: shared transport infrastructure
- Language: supported translation languages
"""

from news_analytics.providers.article_fetcher import JsonLdArticleFetcher
from news_analytics.providers.base import (
    ArticleFetcher,
    ArticleSearchProvider,
    EmbeddingProvider,
    EmbeddingServiceError,
    EntityExtractionError,
    EntityProvider,
    FetchError,
    ProviderNotConfiguredError,
    SearchError,
    SentimentError,
    SentimentProvider,
    SummarizationError,
    SummarizationProvider,
    TranslationError,
    TranslationProvider,
    UpstreamServiceError,
)
from news_analytics.providers.circuit_breaker import CircuitOpenError, GenericCircuitBreaker
from news_analytics.providers.config import (
    EmbeddingModel,
    EntityModel,
    ProvidersConfig,
    SentimentModel,
    SummarizationModel,
    TranslationModel,
)
from news_analytics.providers.http_client import HTTPClient, HTTPClientError, RetryConfig
from news_analytics.providers.huggingface import (
    HuggingFaceEmbeddingProvider,
    HuggingFaceEntityProvider,
    HuggingFaceInferenceClient,
    HuggingFaceSentimentProvider,
    HuggingFaceSummarizationProvider,
    HuggingFaceTranslationProvider,
)
from news_analytics.providers.languages import Language, UnsupportedLanguageError
from news_analytics.providers.newsapi import NewsApiSearchProvider
from news_analytics.providers.schemas import (
    Article,
    ArticleSummary,
    EntityMention,
    SentimentResult,
)

__all__ = [
    # Interfaces
    "ArticleFetcher",
    "ArticleSearchProvider",
    "EmbeddingProvider",
    "EntityProvider",
    "SentimentProvider",
    "SummarizationProvider",
    "TranslationProvider",
    # Errors
    "UpstreamServiceError",
    "FetchError",
    "EmbeddingServiceError",
    "SummarizationError",
    "TranslationError",
    "SentimentError",
    "EntityExtractionError",
    "SearchError",
    "ProviderNotConfiguredError",
    "UnsupportedLanguageError",
    # Adapters
    "HuggingFaceInferenceClient",
    "HuggingFaceEmbeddingProvider",
    "HuggingFaceSummarizationProvider",
    "HuggingFaceTranslationProvider",
    "HuggingFaceSentimentProvider",
    "HuggingFaceEntityProvider",
    "JsonLdArticleFetcher",
    "NewsApiSearchProvider",
    # Infrastructure
    "HTTPClient",
    "HTTPClientError",
    "RetryConfig",
    "GenericCircuitBreaker",
    "CircuitOpenError",
    # Models and values
    "ProvidersConfig",
    "SummarizationModel",
    "EmbeddingModel",
    "TranslationModel",
    "SentimentModel",
    "EntityModel",
    "Language",
    "Article",
    "ArticleSummary",
    "SentimentResult",
    "EntityMention",
]
