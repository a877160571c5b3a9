"""
News analytics pipeline - the single entry point used by the API and CLI.

Sequences the external collaborators (article fetch, embeddings, model
inference, search) with the pure core (term ranking, k-means clustering,
topic aggregation).

Error contract:
- Core errors (RankingError, ClusteringConfigError, DimensionMismatchError,
  MissingEmbeddingError) propagate unmodified.
- Anything raised by a collaborator, including a per-call timeout, surfaces
  as an UpstreamServiceError. Adapter errors that already are one pass
  through; everything else is wrapped with ``__cause__`` set.
- A batch with any failed embedding or fetch fails as a whole, after all
  sibling calls have settled. Clustering never sees an incomplete set.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable, Sequence
from typing import Any, TypeVar

import structlog

from news_analytics.clustering.service import ClusteringConfigError, EmbeddingClusterer
from news_analytics.config.settings import Settings, get_settings
from news_analytics.keywords.ranker import RankingError, TermFrequencyRanker
from news_analytics.observability.metrics import MetricsCollector, get_metrics
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
from news_analytics.providers.config import ProvidersConfig, SummarizationModel
from news_analytics.providers.http_client import HTTPClient, RetryConfig
from news_analytics.providers.huggingface import (
    HuggingFaceEmbeddingProvider,
    HuggingFaceEntityProvider,
    HuggingFaceInferenceClient,
    HuggingFaceSentimentProvider,
    HuggingFaceSummarizationProvider,
    HuggingFaceTranslationProvider,
)
from news_analytics.providers.languages import Language
from news_analytics.providers.newsapi import NewsApiSearchProvider
from news_analytics.providers.schemas import (
    Article,
    ArticleSummary,
    EntityMention,
    SentimentResult,
)
from news_analytics.topics.aggregator import TopicAggregator
from news_analytics.topics.config import TopicsConfig
from news_analytics.topics.schemas import Document, TopicRecord

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class NewsAnalyticsPipeline:
    """
    Facade composing collaborators (by interface) with the analytics core.

    Every collaborator is optional; an operation whose collaborator is
    missing raises ProviderNotConfiguredError.

    Usage:
        pipeline = NewsAnalyticsPipeline.from_settings(get_settings())
        topics = await pipeline.analyze_topics(texts, num_topics=3)
        keywords = pipeline.extract_keywords(text, top_n=10)
        await pipeline.aclose()
    """

    def __init__(
        self,
        embedder: EmbeddingProvider | None = None,
        fetcher: ArticleFetcher | None = None,
        searcher: ArticleSearchProvider | None = None,
        summarizer: SummarizationProvider | None = None,
        translator: TranslationProvider | None = None,
        sentiment: SentimentProvider | None = None,
        entities: EntityProvider | None = None,
        aggregator: TopicAggregator | None = None,
        ranker: TermFrequencyRanker | None = None,
        config: TopicsConfig | None = None,
        upstream_timeout: float = 30.0,
        metrics: MetricsCollector | None = None,
        resources: Sequence[Any] = (),
    ):
        """
        Initialize the pipeline.

        Args:
            embedder: Embedding provider used for topic modeling.
            fetcher: Article fetcher used by analyze_urls/fetch_article.
            searcher: Article search provider.
            summarizer: Summarization provider.
            translator: Translation provider.
            sentiment: Sentiment provider.
            entities: Named entity provider.
            aggregator: Topic aggregator (default config if None).
            ranker: Keyword ranker (default config if None).
            config: Topics configuration (default config if None).
            upstream_timeout: Seconds allowed for each collaborator call.
            metrics: Metrics collector (global instance if None).
            resources: Objects with an async ``aclose()`` released by aclose().
        """
        self.embedder = embedder
        self.fetcher = fetcher
        self.searcher = searcher
        self.summarizer = summarizer
        self.translator = translator
        self.sentiment = sentiment
        self.entities = entities
        self.ranker = ranker or TermFrequencyRanker()
        self.aggregator = aggregator or TopicAggregator(ranker=self.ranker)
        self.config = config or TopicsConfig()
        self.upstream_timeout = upstream_timeout
        self._metrics = metrics or get_metrics()
        self._resources = list(resources)

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        providers_config: ProvidersConfig | None = None,
        topics_config: TopicsConfig | None = None,
    ) -> "NewsAnalyticsPipeline":
        """
        Wire the default adapters from application settings.

        Model-backed collaborators are left unset when no Hugging Face key
        is configured; search is left unset when no NewsAPI key is.
        """
        settings = settings or get_settings()
        providers_config = providers_config or ProvidersConfig()
        resources: list[Any] = []

        fetcher = JsonLdArticleFetcher(
            HTTPClient(
                retry_config=RetryConfig(
                    max_retries=settings.max_http_retries,
                    max_backoff_seconds=settings.max_backoff_seconds,
                ),
                timeout=settings.upstream_timeout_seconds,
            )
        )
        resources.append(fetcher)

        searcher = NewsApiSearchProvider.from_settings(settings)
        if searcher is not None:
            resources.append(searcher)

        model_providers: dict[str, Any] = {}
        if settings.huggingface_configured:
            client = HuggingFaceInferenceClient.from_settings(settings, providers_config)
            resources.append(client)
            model_providers = {
                "embedder": HuggingFaceEmbeddingProvider(client, providers_config.embedding_model),
                "summarizer": HuggingFaceSummarizationProvider(
                    client, providers_config.summarization_model
                ),
                "translator": HuggingFaceTranslationProvider(
                    client,
                    providers_config.translation_model,
                    max_length=providers_config.translation_max_length,
                    num_beams=providers_config.translation_num_beams,
                ),
                "sentiment": HuggingFaceSentimentProvider(client, providers_config.sentiment_model),
                "entities": HuggingFaceEntityProvider(client, providers_config.entity_model),
            }
        else:
            logger.warning("huggingface_not_configured", detail="model-backed operations disabled")

        return cls(
            fetcher=fetcher,
            searcher=searcher,
            config=topics_config,
            upstream_timeout=settings.upstream_timeout_seconds,
            resources=resources,
            **model_providers,
        )

    @property
    def configured_providers(self) -> dict[str, bool]:
        """Which collaborators are available, by operation family."""
        return {
            "embedding": self.embedder is not None,
            "fetch": self.fetcher is not None,
            "search": self.searcher is not None,
            "summarization": self.summarizer is not None,
            "translation": self.translator is not None,
            "sentiment": self.sentiment is not None,
            "entities": self.entities is not None,
        }

    async def aclose(self) -> None:
        """Release the HTTP clients owned by the wired adapters."""
        for resource in self._resources:
            await resource.aclose()
        self._resources.clear()

    # Core operations

    def extract_keywords(self, text: str, top_n: int | None = None) -> list[str]:
        """
        Rank the keywords of a single text (TF-IDF).

        Raises:
            RankingError: If text is not a string or top_n is negative.
        """
        keywords = self.ranker.rank(text, top_n)
        self._metrics.record_keyword_extraction()
        return keywords

    async def analyze_topics(
        self,
        article_texts: Sequence[str],
        num_topics: int | None = None,
    ) -> list[TopicRecord]:
        """
        Embed article texts, cluster them and describe each cluster.

        Args:
            article_texts: Article texts, in the order their indices refer to.
            num_topics: Number of topics (TopicsConfig.default_num_topics if None).

        Returns:
            Exactly num_topics TopicRecords.

        Raises:
            RankingError: If article_texts is not a sequence of strings.
            ClusteringConfigError: If num_topics is invalid for the batch, or the
                batch exceeds TopicsConfig.max_articles. Checked before embedding.
            DimensionMismatchError: If returned embeddings differ in length.
            UpstreamServiceError: If any embedding request failed.
        """
        texts = self._check_texts(article_texts)
        k = self.config.default_num_topics if num_topics is None else num_topics
        self._check_batch(len(texts), k)
        documents = await self._embed_documents([Document(text=text) for text in texts])
        return self._build_topics(documents, k)

    async def analyze_documents(
        self,
        documents: Sequence[Document],
        num_topics: int | None = None,
    ) -> list[TopicRecord]:
        """
        Topic-model documents, embedding only those without a vector.

        Raises:
            Same as analyze_topics.
        """
        k = self.config.default_num_topics if num_topics is None else num_topics
        self._check_texts([doc.text for doc in documents])
        self._check_batch(len(documents), k)
        documents = await self._embed_documents(list(documents))
        return self._build_topics(documents, k)

    async def analyze_urls(
        self,
        urls: Sequence[str],
        num_topics: int | None = None,
    ) -> list[TopicRecord]:
        """
        Fetch articles by URL, then topic-model their headline and body.

        Raises:
            FetchError: If any article could not be fetched (whole batch fails).
            Same as analyze_topics otherwise.
        """
        fetcher = self._require(self.fetcher, "fetch")
        urls = list(urls)
        self._check_batch(
            len(urls), self.config.default_num_topics if num_topics is None else num_topics
        )
        articles = await self._gather_all(
            "fetch",
            FetchError,
            [lambda url=url: fetcher.fetch(url) for url in urls],
        )
        return await self.analyze_topics([article.text for article in articles], num_topics)

    # Pass-through operations

    async def fetch_article(self, url: str) -> Article:
        fetcher = self._require(self.fetcher, "fetch")
        return await self._call("fetch", FetchError, fetcher.fetch, url)

    async def search_articles(self, query: str) -> list[ArticleSummary]:
        searcher = self._require(self.searcher, "search")
        return await self._call("search", SearchError, searcher.search, query)

    async def summarize(
        self,
        text: str,
        model: SummarizationModel | None = None,
    ) -> str:
        summarizer = self._require(self.summarizer, "summarization")
        return await self._call("summarization", SummarizationError, summarizer.summarize, text, model)

    async def translate(
        self,
        text: str,
        target: Language | str,
        source: Language | str = Language.ENGLISH,
    ) -> str:
        """
        Translate text between two supported languages.

        Raises:
            UnsupportedLanguageError: If either code is not supported.
            TranslationError: On translation failure.
        """
        target_lang = Language.from_code(target)
        source_lang = Language.from_code(source)
        translator = self._require(self.translator, "translation")
        return await self._call(
            "translation",
            TranslationError,
            translator.translate,
            text,
            target_lang,
            source_lang,
        )

    async def analyze_sentiment(self, text: str) -> list[SentimentResult]:
        provider = self._require(self.sentiment, "sentiment")
        return await self._call("sentiment", SentimentError, provider.analyze, text)

    async def extract_entities(self, text: str) -> list[EntityMention]:
        provider = self._require(self.entities, "entities")
        return await self._call("entities", EntityExtractionError, provider.extract, text)

    # Internals

    @staticmethod
    def _check_texts(article_texts: object) -> list[str]:
        if isinstance(article_texts, (str, bytes)) or not isinstance(article_texts, Sequence):
            raise RankingError(
                f"article_texts must be a sequence of strings, got {type(article_texts).__name__}"
            )
        bad = [index for index, text in enumerate(article_texts) if not isinstance(text, str)]
        if bad:
            raise RankingError(f"article_texts contains non-string entries at indices {bad}")
        return list(article_texts)

    def _check_batch(self, n_articles: int, k: int) -> None:
        """Reject an oversized batch or an invalid topic count before any upstream call."""
        try:
            if n_articles > self.config.max_articles:
                raise ClusteringConfigError(
                    f"Batch of {n_articles} articles exceeds the limit of {self.config.max_articles}"
                )
            EmbeddingClusterer.check_k(k, n_articles)
        except ClusteringConfigError:
            self._metrics.record_topics_run(n_articles, k, status="error")
            raise

    @staticmethod
    def _require(provider: T | None, service: str) -> T:
        if provider is None:
            raise ProviderNotConfiguredError(f"No {service} provider configured", service=service)
        return provider

    def _build_topics(self, documents: list[Document], k: int) -> list[TopicRecord]:
        start_time = time.perf_counter()
        try:
            topics = self.aggregator.build_topics(documents, k)
        except Exception:
            self._metrics.record_topics_run(len(documents), k, status="error")
            raise
        self._metrics.record_topics_run(
            len(documents), k, latency=time.perf_counter() - start_time
        )
        return topics

    async def _embed_documents(self, documents: list[Document]) -> list[Document]:
        """Attach embeddings to documents that lack one."""
        pending = [index for index, doc in enumerate(documents) if not doc.has_embedding]
        if not pending:
            return documents

        embedder = self._require(self.embedder, "embedding")
        batch_size = self.config.embedding_batch_size
        chunks = [pending[i : i + batch_size] for i in range(0, len(pending), batch_size)]

        async def embed_chunk(chunk: list[int]) -> list[list[float]]:
            vectors = await embedder.embed([documents[index].text for index in chunk])
            if len(vectors) != len(chunk):
                raise EmbeddingServiceError(
                    f"Expected {len(chunk)} embeddings, got {len(vectors)}"
                )
            return vectors

        results = await self._gather_all(
            "embedding",
            EmbeddingServiceError,
            [lambda chunk=chunk: embed_chunk(chunk) for chunk in chunks],
            labels=chunks,
        )

        embedded = list(documents)
        for chunk, vectors in zip(chunks, results):
            for index, vector in zip(chunk, vectors):
                embedded[index] = documents[index].with_embedding(vector)
        return embedded

    async def _gather_all(
        self,
        service: str,
        error_cls: type[UpstreamServiceError],
        calls: Sequence[Callable[[], Awaitable[T]]],
        labels: Sequence[Any] | None = None,
    ) -> list[T]:
        """
        Run calls concurrently (bounded) and fail if any of them failed.

        Siblings are never cancelled; the error is raised once all settled
        and names every failed position (``labels`` or call index).
        """
        semaphore = asyncio.Semaphore(self.config.max_concurrency)

        async def bounded(call: Callable[[], Awaitable[T]]) -> T:
            async with semaphore:
                return await self._call(service, error_cls, call)

        results = await asyncio.gather(*(bounded(call) for call in calls), return_exceptions=True)

        failures = [
            (labels[position] if labels is not None else position, result)
            for position, result in enumerate(results)
            if isinstance(result, BaseException)
        ]
        if failures:
            failed = []
            for label, _ in failures:
                failed.extend(label if isinstance(label, list) else [label])
            first_error = failures[0][1]
            logger.warning(
                "batch_failed",
                service=service,
                failed=failed,
                total=len(calls),
                error=str(first_error),
            )
            raise error_cls(
                f"{len(failures)} of {len(calls)} {service} call(s) failed "
                f"(indices {failed}): {first_error}",
                service=service,
            ) from first_error

        return list(results)

    async def _call(
        self,
        service: str,
        error_cls: type[UpstreamServiceError],
        fn: Callable[..., Awaitable[T]],
        *args: Any,
    ) -> T:
        """Invoke one collaborator with a timeout, converting its failures."""
        start_time = time.perf_counter()
        try:
            async with asyncio.timeout(self.upstream_timeout):
                result = await fn(*args)
        except UpstreamServiceError as e:
            self._metrics.record_upstream_error(service, type(e).__name__)
            raise
        except TimeoutError as e:
            self._metrics.record_upstream_error(service, "TimeoutError")
            raise error_cls(
                f"{service} call timed out after {self.upstream_timeout}s",
                service=service,
            ) from e
        except Exception as e:
            self._metrics.record_upstream_error(service, type(e).__name__)
            raise error_cls(f"{service} call failed: {e}", service=service) from e

        self._metrics.record_upstream_call(service, time.perf_counter() - start_time)
        return result
