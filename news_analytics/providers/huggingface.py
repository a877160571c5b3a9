"""
Hugging Face Inference API adapters.

One HuggingFaceInferenceClient (HTTP with retries plus a circuit breaker)
is shared by the capability adapters:

- HuggingFaceEmbeddingProvider: feature extraction, mean-pooled to one
  vector per text
- HuggingFaceSummarizationProvider: ``summary_text`` generation
- HuggingFaceTranslationProvider: NLLB translation with FLORES-200 codes
- HuggingFaceSentimentProvider: text classification
- HuggingFaceEntityProvider: token classification with grouped entities

Each adapter converts transport failures into its own UpstreamServiceError
subclass; response payloads are validated before they reach the pipeline.
"""

import time
from collections.abc import Sequence
from numbers import Real
from typing import Any

import numpy as np
import structlog

from news_analytics.config.settings import Settings
from news_analytics.providers.base import (
    EmbeddingProvider,
    EmbeddingServiceError,
    EntityExtractionError,
    EntityProvider,
    SentimentError,
    SentimentProvider,
    SummarizationError,
    SummarizationProvider,
    TranslationError,
    TranslationProvider,
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
from news_analytics.providers.languages import Language
from news_analytics.providers.schemas import EntityMention, SentimentResult

logger = structlog.get_logger(__name__)

NO_SUMMARY = "No summary available."

# Failures of the transport layer that adapters convert into provider errors
TRANSPORT_ERRORS = (HTTPClientError, CircuitOpenError)


class HuggingFaceInferenceClient:
    """
    Minimal client for ``POST {base_url}/models/{model_id}``.

    Usage:
        client = HuggingFaceInferenceClient.from_settings(get_settings())
        data = await client.infer("facebook/bart-large-cnn", "Long article ...")
        await client.aclose()
    """

    def __init__(
        self,
        api_key: str | None,
        base_url: str = "https://api-inference.huggingface.co",
        http_client: HTTPClient | None = None,
        breaker: GenericCircuitBreaker | None = None,
        wait_for_model: bool = True,
    ):
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._http = http_client or HTTPClient()
        self._breaker = breaker or GenericCircuitBreaker(name="huggingface")
        self._wait_for_model = wait_for_model

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        config: ProvidersConfig | None = None,
    ) -> "HuggingFaceInferenceClient":
        """Build a client from application settings."""
        config = config or ProvidersConfig()
        api_key = settings.huggingface_api_key
        return cls(
            api_key=api_key.get_secret_value() if api_key else None,
            base_url=settings.huggingface_base_url,
            http_client=HTTPClient(
                retry_config=RetryConfig(
                    max_retries=settings.max_http_retries,
                    max_backoff_seconds=settings.max_backoff_seconds,
                ),
                timeout=settings.upstream_timeout_seconds,
            ),
            breaker=GenericCircuitBreaker(
                failure_threshold=settings.circuit_failure_threshold,
                recovery_timeout=settings.circuit_recovery_timeout,
                name="huggingface",
            ),
            wait_for_model=config.wait_for_model,
        )

    @property
    def breaker(self) -> GenericCircuitBreaker:
        return self._breaker

    def model_url(self, model_id: str) -> str:
        return f"{self._base_url}/models/{model_id}"

    async def infer(
        self,
        model_id: str,
        inputs: Any,
        parameters: dict[str, Any] | None = None,
    ) -> Any:
        """
        Run one inference request and return the decoded JSON payload.

        Raises:
            HTTPClientError: On HTTP failure, invalid JSON, or an ``error`` payload.
            CircuitOpenError: When the circuit breaker is open.
        """
        payload: dict[str, Any] = {"inputs": inputs}
        if parameters:
            payload["parameters"] = parameters
        if self._wait_for_model:
            payload["options"] = {"wait_for_model": True}

        start_time = time.perf_counter()
        response = await self._breaker.call(
            self._http.post,
            self.model_url(model_id),
            json_body=payload,
            bearer_token=self._api_key,
        )
        try:
            data = response.json()
        except ValueError as e:
            raise HTTPClientError(
                f"Invalid JSON from model {model_id}",
                status_code=response.status_code,
                response_body=response.text,
            ) from e

        if isinstance(data, dict) and "error" in data:
            raise HTTPClientError(
                f"Model {model_id} returned an error: {data['error']}",
                status_code=response.status_code,
                response_body=response.text,
            )

        logger.debug(
            "huggingface_inference",
            model=model_id,
            latency_ms=round((time.perf_counter() - start_time) * 1000, 2),
        )
        return data

    async def aclose(self) -> None:
        await self._http.aclose()


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _pool_vector(item: Any) -> list[float]:
    """Turn a sentence vector or a token matrix into one vector."""
    if isinstance(item, list) and item and all(_is_number(v) for v in item):
        return [float(v) for v in item]
    if (
        isinstance(item, list)
        and item
        and all(isinstance(row, list) and row and all(_is_number(v) for v in row) for row in item)
    ):
        try:
            return np.asarray(item, dtype=np.float64).mean(axis=0).tolist()
        except ValueError as e:
            raise EmbeddingServiceError("Ragged token embeddings in response") from e
    raise EmbeddingServiceError("Unexpected embedding payload shape")


class HuggingFaceEmbeddingProvider(EmbeddingProvider):
    """Sentence embeddings via the feature-extraction task."""

    def __init__(
        self,
        client: HuggingFaceInferenceClient,
        model: EmbeddingModel = EmbeddingModel.MINILM,
    ):
        self._client = client
        self.model = model

    async def embed(self, texts: Sequence[str]) -> list[list[float]]:
        if not texts:
            return []
        try:
            data = await self._client.infer(self.model.model_id, list(texts))
        except TRANSPORT_ERRORS as e:
            raise EmbeddingServiceError(f"Embedding request failed: {e}") from e

        if not isinstance(data, list) or len(data) != len(texts):
            raise EmbeddingServiceError(
                f"Expected {len(texts)} embeddings, got "
                f"{len(data) if isinstance(data, list) else type(data).__name__}"
            )
        return [_pool_vector(item) for item in data]


class HuggingFaceSummarizationProvider(SummarizationProvider):
    """Abstractive summaries via the summarization task."""

    def __init__(
        self,
        client: HuggingFaceInferenceClient,
        default_model: SummarizationModel = SummarizationModel.BART_LARGE_CNN,
    ):
        self._client = client
        self.default_model = default_model

    async def summarize(self, text: str, model: SummarizationModel | None = None) -> str:
        model = model or self.default_model
        try:
            data = await self._client.infer(model.model_id, text)
        except TRANSPORT_ERRORS as e:
            raise SummarizationError(f"Failed to summarize text: {e}") from e

        if isinstance(data, list):
            data = data[0] if data else {}
        if not isinstance(data, dict):
            raise SummarizationError("Invalid response format from the model")
        return data.get("summary_text") or NO_SUMMARY


class HuggingFaceTranslationProvider(TranslationProvider):
    """NLLB translation between languages of the supported table."""

    def __init__(
        self,
        client: HuggingFaceInferenceClient,
        model: TranslationModel = TranslationModel.NLLB_600M,
        max_length: int = 512,
        num_beams: int = 4,
    ):
        self._client = client
        self.model = model
        self.max_length = max_length
        self.num_beams = num_beams

    async def translate(
        self,
        text: str,
        target: Language,
        source: Language = Language.ENGLISH,
    ) -> str:
        parameters = {
            "src_lang": source.nllb_code,
            "tgt_lang": target.nllb_code,
            "max_length": self.max_length,
            "num_beams": self.num_beams,
            "early_stopping": True,
        }
        try:
            data = await self._client.infer(self.model.model_id, text, parameters)
        except TRANSPORT_ERRORS as e:
            raise TranslationError(f"Translation failed: {e}") from e

        if not isinstance(data, list) or not data or not isinstance(data[0], dict):
            raise TranslationError("Invalid response format from the model")
        translated = data[0].get("translation_text")
        if not translated:
            raise TranslationError("No translation received from the model")
        return translated


class HuggingFaceSentimentProvider(SentimentProvider):
    """Sentiment labels via the text-classification task."""

    def __init__(
        self,
        client: HuggingFaceInferenceClient,
        model: SentimentModel = SentimentModel.DISTILBERT_SST2,
    ):
        self._client = client
        self.model = model

    async def analyze(self, text: str) -> list[SentimentResult]:
        try:
            data = await self._client.infer(self.model.model_id, text)
        except TRANSPORT_ERRORS as e:
            raise SentimentError(f"Failed to analyze sentiment: {e}") from e

        # Single-input responses come back either flat or nested one level
        if isinstance(data, list) and data and isinstance(data[0], list):
            data = data[0]
        if not isinstance(data, list):
            raise SentimentError("Invalid response format from the model")
        try:
            results = [
                SentimentResult(label=str(item["label"]), score=float(item["score"]))
                for item in data
            ]
        except (KeyError, TypeError, ValueError) as e:
            raise SentimentError(f"Malformed sentiment result: {e}") from e
        return sorted(results, key=lambda r: r.score, reverse=True)


class HuggingFaceEntityProvider(EntityProvider):
    """Named entities via the token-classification task."""

    def __init__(
        self,
        client: HuggingFaceInferenceClient,
        model: EntityModel = EntityModel.DISTILBERT_NER,
    ):
        self._client = client
        self.model = model

    async def extract(self, text: str) -> list[EntityMention]:
        try:
            data = await self._client.infer(
                self.model.model_id,
                text,
                {"aggregation_strategy": "simple"},
            )
        except TRANSPORT_ERRORS as e:
            raise EntityExtractionError(f"Failed to extract entities: {e}") from e

        if not isinstance(data, list):
            raise EntityExtractionError("Invalid response format from the model")
        try:
            return [
                EntityMention(
                    entity_group=str(item.get("entity_group") or item["entity"]),
                    word=str(item["word"]),
                    score=float(item["score"]),
                    start=item.get("start"),
                    end=item.get("end"),
                )
                for item in data
            ]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise EntityExtractionError(f"Malformed entity result: {e}") from e
