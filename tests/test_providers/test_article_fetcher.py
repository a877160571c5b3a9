"""Tests for the JSON-LD article fetcher."""

import json

import httpx
import pytest
import respx

from news_analytics.providers.article_fetcher import (
    JsonLdArticleFetcher,
    parse_article_html,
)
from news_analytics.providers.base import FetchError
from news_analytics.providers.http_client import HTTPClient, RetryConfig

ARTICLE_URL = "https://news.example.com/markets/chip-rally"


def _page(payload, script_id: str = "articleschemascript") -> str:
    body = payload if isinstance(payload, str) else json.dumps(payload)
    return (
        "<html><head><title>Chip rally</title>"
        f'<script type="application/ld+json" id="{script_id}">{body}</script>'
        "</head><body><p>Rendered article</p></body></html>"
    )


class TestParseArticleHtml:
    """Tests for parse_article_html()."""

    def test_extracts_headline_and_body(self):
        html = _page({
            "@type": "NewsArticle",
            "headline": "  Chip stocks rally  ",
            "articleBody": "Semiconductor shares rose on strong demand.\n",
        })

        article = parse_article_html(html, url=ARTICLE_URL)

        assert article.headline == "Chip stocks rally"
        assert article.body == "Semiconductor shares rose on strong demand."
        assert article.url == ARTICLE_URL
        assert article.text == "Chip stocks rally\n\nSemiconductor shares rose on strong demand."

    def test_unwraps_single_element_list(self):
        html = _page([{"headline": "Rates hold", "articleBody": "The central bank held rates."}])

        assert parse_article_html(html).headline == "Rates hold"

    def test_missing_script(self):
        with pytest.raises(FetchError, match="No article schema"):
            parse_article_html("<html><body><p>No metadata</p></body></html>")

    def test_other_ld_json_script_ignored(self):
        html = _page({"headline": "x", "articleBody": "y"}, script_id="breadcrumbs")

        with pytest.raises(FetchError, match="No article schema"):
            parse_article_html(html)

    def test_invalid_json(self):
        with pytest.raises(FetchError, match="Invalid article schema JSON"):
            parse_article_html(_page("{not json"))

    def test_unexpected_shape(self):
        with pytest.raises(FetchError, match="Unexpected article schema"):
            parse_article_html(_page([{"headline": "a"}, {"headline": "b"}]))

    @pytest.mark.parametrize(
        "payload",
        [
            {"articleBody": "Body only"},
            {"headline": "Headline only"},
            {"headline": "Blank body", "articleBody": "   "},
            {"headline": 42, "articleBody": "Numeric headline"},
        ],
    )
    def test_missing_fields(self, payload):
        with pytest.raises(FetchError, match="lacks headline or body"):
            parse_article_html(_page(payload))

    def test_error_service_name(self):
        with pytest.raises(FetchError) as exc_info:
            parse_article_html("<html></html>")
        assert exc_info.value.service == "fetch"


class TestJsonLdArticleFetcher:
    """Tests for JsonLdArticleFetcher.fetch()."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_fetch(self):
        route = respx.get(ARTICLE_URL).mock(
            return_value=httpx.Response(
                200,
                text=_page({"headline": "Chip stocks rally", "articleBody": "Shares rose."}),
            )
        )
        fetcher = JsonLdArticleFetcher(HTTPClient(retry_config=RetryConfig(max_retries=0)))

        article = await fetcher.fetch(ARTICLE_URL)

        assert article.headline == "Chip stocks rally"
        assert article.url == ARTICLE_URL
        assert "Mozilla" in route.calls.last.request.headers["User-Agent"]
        await fetcher.aclose()

    @pytest.mark.asyncio
    @respx.mock
    async def test_http_failure_becomes_fetch_error(self):
        respx.get(ARTICLE_URL).mock(return_value=httpx.Response(404))
        fetcher = JsonLdArticleFetcher(HTTPClient(retry_config=RetryConfig(max_retries=0)))

        with pytest.raises(FetchError, match="Failed to fetch") as exc_info:
            await fetcher.fetch(ARTICLE_URL)

        assert exc_info.value.cause is not None
        await fetcher.aclose()

    @pytest.mark.asyncio
    @respx.mock
    async def test_page_without_schema(self):
        respx.get(ARTICLE_URL).mock(return_value=httpx.Response(200, text="<html></html>"))
        fetcher = JsonLdArticleFetcher(HTTPClient(retry_config=RetryConfig(max_retries=0)))

        with pytest.raises(FetchError):
            await fetcher.fetch(ARTICLE_URL)
        await fetcher.aclose()
