"""
Command-line interface for news-analytics.

Provides commands to run the API server and to run keyword extraction,
topic modeling and article search from the shell.

Usage:
    news-analytics serve                  # Run the API server
    news-analytics keywords "some text"   # Rank keywords of a text
    news-analytics topics articles.jsonl  # Topic-model a file of articles
    news-analytics search "chip exports"  # Search news articles
    news-analytics health                 # Show configured providers
"""

import asyncio
import json
import os
import sys
from pathlib import Path

import click

from news_analytics.clustering.service import ClusteringConfigError, DimensionMismatchError
from news_analytics.config.settings import get_settings
from news_analytics.keywords.ranker import RankingError
from news_analytics.observability.logging import setup_logging
from news_analytics.observability.metrics import get_metrics
from news_analytics.providers.base import UpstreamServiceError
from news_analytics.topics.aggregator import MissingEmbeddingError
from news_analytics.topics.schemas import Document

INPUT_ERRORS = (RankingError, ClusteringConfigError, DimensionMismatchError, MissingEmbeddingError)


def load_documents(path: Path) -> list[Document]:
    """
    Read articles from a JSON array or a JSON-lines file.

    Each entry is either a string (the article text) or an object with a
    ``text`` field and an optional ``embedding`` list.

    Raises:
        click.BadParameter: If the file is not valid JSON or an entry is malformed.
    """
    content = path.read_text(encoding="utf-8").strip()
    if not content:
        return []

    try:
        if content.startswith("["):
            items = json.loads(content)
        else:
            items = [json.loads(line) for line in content.splitlines() if line.strip()]
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"{path} is not valid JSON: {e}") from e

    documents = []
    for position, item in enumerate(items):
        if isinstance(item, str):
            documents.append(Document(text=item))
        elif isinstance(item, dict) and isinstance(item.get("text"), str):
            documents.append(Document(text=item["text"], embedding=item.get("embedding")))
        else:
            raise click.BadParameter(f"Entry {position} of {path} has no 'text' field")
    return documents


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool) -> None:
    """News Analytics - keywords, topics and model-backed analysis for news."""
    if debug:
        os.environ["LOG_LEVEL"] = "DEBUG"
        get_settings.cache_clear()

    setup_logging()


@main.command()
@click.option("--host", default=None, help="API server host")
@click.option("--port", default=None, type=int, help="API server port")
@click.option("--reload", is_flag=True, help="Enable auto-reload (dev only)")
@click.option("--metrics/--no-metrics", default=True, help="Enable metrics server")
@click.option("--metrics-port", default=None, type=int, help="Metrics server port")
def serve(
    host: str | None,
    port: int | None,
    reload: bool,
    metrics: bool,
    metrics_port: int | None,
) -> None:
    """Start the API server."""
    import uvicorn

    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port

    if metrics:
        metrics_port = metrics_port or settings.metrics_port
        get_metrics().start_server(port=metrics_port)
        click.echo(f"Metrics available on http://localhost:{metrics_port}/metrics")

    click.echo(f"Starting API server on {host}:{port}")
    click.echo(f"API docs available on http://localhost:{port}/docs")

    uvicorn.run(
        "news_analytics.api.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


@main.command()
@click.argument("text")
@click.option("--top-n", default=10, type=int, help="Number of keywords")
@click.option("--scores", is_flag=True, help="Show TF-IDF scores")
def keywords(text: str, top_n: int, scores: bool) -> None:
    """Rank the keywords of TEXT ("-" reads standard input)."""
    from news_analytics.keywords.ranker import TermFrequencyRanker

    if top_n < 0:
        raise click.BadParameter("must be >= 0", param_hint="--top-n")
    if text == "-":
        text = sys.stdin.read()

    ranker = TermFrequencyRanker()
    try:
        ranked = ranker.score(text)
    except RankingError as e:
        raise click.ClickException(str(e)) from e

    if not ranked:
        click.echo("No keywords found.")
        return

    for term_score in ranked[:top_n]:
        if scores:
            click.echo(f"{term_score.term}\t{term_score.score:.4f}\t{term_score.count}")
        else:
            click.echo(term_score.term)


@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--num-topics", "-k", default=None, type=int, help="Number of topics")
@click.option("--json", "as_json", is_flag=True, help="Print topics as JSON")
def topics(path: Path, num_topics: int | None, as_json: bool) -> None:
    """Topic-model the articles in PATH (JSON array or JSON lines).

    Entries without an embedding are embedded through the configured
    embedding provider.

    Example:
        news-analytics topics articles.jsonl -k 3
    """
    from news_analytics.services.pipeline import NewsAnalyticsPipeline

    documents = load_documents(path)

    async def run():
        pipeline = NewsAnalyticsPipeline.from_settings(get_settings())
        try:
            return await pipeline.analyze_documents(documents, num_topics)
        finally:
            await pipeline.aclose()

    try:
        records = asyncio.run(run())
    except INPUT_ERRORS as e:
        raise click.ClickException(str(e)) from e
    except UpstreamServiceError as e:
        raise click.ClickException(f"{e.service} service failed: {e}") from e

    if as_json:
        click.echo(json.dumps([record.to_dict() for record in records], indent=2))
        return

    click.echo(f"\n{len(records)} topics from {len(documents)} articles:")
    click.echo("-" * 40)
    for record in records:
        keywords_str = ", ".join(record.keywords) if record.keywords else "(empty)"
        click.echo(f"  {record.topic_label} ({record.document_count} articles): {keywords_str}")


@main.command()
@click.argument("query")
@click.option("--limit", default=10, help="Maximum results to show")
def search(query: str, limit: int) -> None:
    """Search news articles matching QUERY."""
    from news_analytics.services.pipeline import NewsAnalyticsPipeline

    async def run():
        pipeline = NewsAnalyticsPipeline.from_settings(get_settings())
        try:
            return await pipeline.search_articles(query)
        finally:
            await pipeline.aclose()

    try:
        articles = asyncio.run(run())
    except UpstreamServiceError as e:
        raise click.ClickException(f"{e.service} service failed: {e}") from e

    if not articles:
        click.echo("No articles found.")
        return

    click.echo(f"\nFound {len(articles)} articles (showing {min(limit, len(articles))}):")
    for article in articles[:limit]:
        published = article.published_at.strftime("%Y-%m-%d") if article.published_at else "?"
        click.echo(f"\n  [{published}] {article.title}")
        if article.source:
            click.echo(f"    Source: {article.source}")
        click.echo(f"    {article.url}")


@main.command()
def health() -> None:
    """Show which external providers are configured."""
    settings = get_settings()
    results = {
        "huggingface_configured": settings.huggingface_configured,
        "newsapi_configured": settings.newsapi_configured,
    }

    click.echo("\nProvider Configuration:")
    click.echo("-" * 40)
    for name, status in results.items():
        icon = "✓" if status else "✗"
        color = "green" if status else "red"
        click.echo(click.style(f"  {icon} {name}: {status}", fg=color))
    click.echo("-" * 40)

    if not settings.huggingface_configured:
        click.echo(click.style("Topic modeling needs HUGGINGFACE_API_KEY!", fg="red"))
        sys.exit(1)
    click.echo(click.style("Ready.", fg="green"))


if __name__ == "__main__":
    main()
