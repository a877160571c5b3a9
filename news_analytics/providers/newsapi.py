"""
NewsAPI search adapter.

Queries the ``/v2/everything`` endpoint and maps each result into an
ArticleSummary. Multiple API keys may be configured (comma-separated) and
are rotated round-robin across requests.
"""

import logging
from datetime import datetime
from typing import Any

from news_analytics.config.settings import Settings
from news_analytics.providers.base import ArticleSearchProvider, SearchError
from news_analytics.providers.http_client import (
    APIKeyRotator,
    HTTPClient,
    HTTPClientError,
    RetryConfig,
)
from news_analytics.providers.schemas import ArticleSummary

logger = logging.getLogger(__name__)

NEWSAPI_EVERYTHING_URL = "https://newsapi.org/v2/everything"


def _parse_published_at(value: str | None) -> datetime | None:
    """Parse ISO 8601 (2024-01-15T10:30:00Z) to datetime."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.debug(f"Unparseable publishedAt: {value!r}")
        return None


def parse_article(raw: dict[str, Any]) -> ArticleSummary | None:
    """Map one NewsAPI article object; returns None when title or url is missing."""
    title = raw.get("title")
    url = raw.get("url")
    if not title or not url:
        return None
    source = raw.get("source") or {}
    return ArticleSummary(
        title=title,
        url=url,
        description=raw.get("description"),
        source=source.get("name") if isinstance(source, dict) else None,
        author=raw.get("author"),
        published_at=_parse_published_at(raw.get("publishedAt")),
    )


class NewsApiSearchProvider(ArticleSearchProvider):
    """
    Keyword search over NewsAPI.

    Usage:
        provider = NewsApiSearchProvider(APIKeyRotator(keys=["key"]))
        articles = await provider.search("semiconductors")
    """

    def __init__(
        self,
        key_rotator: APIKeyRotator,
        url: str = NEWSAPI_EVERYTHING_URL,
        http_client: HTTPClient | None = None,
        page_size: int = 50,
    ):
        self._keys = key_rotator
        self._url = url
        self._http = http_client or HTTPClient()
        self._page_size = page_size

    @classmethod
    def from_settings(cls, settings: Settings) -> "NewsApiSearchProvider | None":
        """Build a provider, or None when no API key is configured."""
        rotator = APIKeyRotator.from_env_var(settings.newsapi_api_keys)
        if rotator is None:
            return None
        return cls(
            key_rotator=rotator,
            url=settings.newsapi_url,
            http_client=HTTPClient(
                retry_config=RetryConfig(
                    max_retries=settings.max_http_retries,
                    max_backoff_seconds=settings.max_backoff_seconds,
                ),
                timeout=settings.upstream_timeout_seconds,
            ),
        )

    async def search(self, query: str) -> list[ArticleSummary]:
        try:
            response = await self._http.get(
                self._url,
                params={"q": query, "sortBy": "publishedAt", "pageSize": self._page_size},
                api_key_rotator=self._keys,
                api_key_param="apiKey",
            )
            data = response.json()
        except HTTPClientError as e:
            raise SearchError(f"Article search failed: {e}") from e
        except ValueError as e:
            raise SearchError("Article search returned invalid JSON") from e

        if not isinstance(data, dict) or data.get("status") != "ok":
            message = data.get("message") if isinstance(data, dict) else None
            raise SearchError(f"Article search failed: {message or 'unexpected response'}")

        articles = []
        for raw in data.get("articles") or []:
            if not isinstance(raw, dict):
                continue
            article = parse_article(raw)
            if article is not None:
                articles.append(article)

        logger.debug(f"NewsAPI returned {len(articles)} articles for {query!r}")
        return articles

    async def aclose(self) -> None:
        await self._http.aclose()
