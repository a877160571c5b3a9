"""
Abstract interfaces and errors for external collaborators.

Every service the pipeline depends on (article fetch, embeddings, model
inference, article search) is reached through one of the interfaces below.
Implementations may wrap different backends (Hugging Face Inference API,
a self-hosted model server, a test double) while providing a consistent API.

All methods are async to support non-blocking I/O.

Errors raised by collaborators derive from UpstreamServiceError so callers
can tell a dependency outage apart from a failure of the pipeline's own
computation.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from news_analytics.providers.config import SummarizationModel
from news_analytics.providers.languages import Language
from news_analytics.providers.schemas import (
    Article,
    ArticleSummary,
    EntityMention,
    SentimentResult,
)


class UpstreamServiceError(Exception):
    """
    Base exception for failures of an external collaborator.

    Attributes:
        service: Collaborator name (fetch, embedding, search, ...).
        cause: The underlying exception, if any.
    """

    service: str = "upstream"

    def __init__(
        self,
        message: str,
        service: str | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        if service is not None:
            self.service = service
        self._cause = cause

    @property
    def cause(self) -> BaseException | None:
        """The wrapped exception (explicit cause or ``raise ... from``)."""
        return self._cause or self.__cause__


class FetchError(UpstreamServiceError):
    """Raised when an article cannot be fetched or has no structured content."""

    service = "fetch"


class EmbeddingServiceError(UpstreamServiceError):
    """Raised when the embedding service fails or returns malformed vectors."""

    service = "embedding"


class SummarizationError(UpstreamServiceError):
    """Raised when summarization fails."""

    service = "summarization"


class TranslationError(UpstreamServiceError):
    """Raised when translation fails."""

    service = "translation"


class SentimentError(UpstreamServiceError):
    """Raised when sentiment analysis fails."""

    service = "sentiment"


class EntityExtractionError(UpstreamServiceError):
    """Raised when named entity recognition fails."""

    service = "entities"


class SearchError(UpstreamServiceError):
    """Raised when article search fails."""

    service = "search"


class ProviderNotConfiguredError(UpstreamServiceError):
    """Raised when an operation needs a collaborator that was not configured."""


class ArticleFetcher(ABC):
    """Fetches the structured content of a news article."""

    @abstractmethod
    async def fetch(self, url: str) -> Article:
        """
        Fetch an article.

        Raises:
            FetchError: On network failure or missing/malformed content.
        """
        ...


class EmbeddingProvider(ABC):
    """Produces one fixed-length vector per input text."""

    @abstractmethod
    async def embed(self, texts: Sequence[str]) -> list[list[float]]:
        """
        Embed texts.

        Returns:
            One vector per text, in input order.

        Raises:
            EmbeddingServiceError: On failure or malformed response.
        """
        ...


class SummarizationProvider(ABC):
    """Produces an abstractive summary of a text."""

    @abstractmethod
    async def summarize(self, text: str, model: SummarizationModel | None = None) -> str:
        """
        Summarize text.

        Raises:
            SummarizationError: On failure.
        """
        ...


class TranslationProvider(ABC):
    """Translates text between supported languages."""

    @abstractmethod
    async def translate(
        self,
        text: str,
        target: Language,
        source: Language = Language.ENGLISH,
    ) -> str:
        """
        Translate text.

        Raises:
            TranslationError: On failure or empty translation.
        """
        ...


class SentimentProvider(ABC):
    """Classifies the sentiment of a text."""

    @abstractmethod
    async def analyze(self, text: str) -> list[SentimentResult]:
        """
        Analyze sentiment.

        Returns:
            Labels with confidence, most confident first.

        Raises:
            SentimentError: On failure.
        """
        ...


class EntityProvider(ABC):
    """Extracts named entities from a text."""

    @abstractmethod
    async def extract(self, text: str) -> list[EntityMention]:
        """
        Extract entities.

        Raises:
            EntityExtractionError: On failure.
        """
        ...


class ArticleSearchProvider(ABC):
    """Searches a news index by keyword query."""

    @abstractmethod
    async def search(self, query: str) -> list[ArticleSummary]:
        """
        Search articles.

        Raises:
            SearchError: On failure.
        """
        ...
