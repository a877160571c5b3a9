"""
Prometheus metrics for monitoring the analytics pipeline.

Defines and exposes metrics for:
- Topic modeling runs and their latency
- Keyword extraction requests
- Upstream (model-serving, fetch, search) call latency and errors

Metrics are exposed via HTTP endpoint for Prometheus scraping.
"""

import logging

from prometheus_client import (
    REGISTRY,
    Counter,
    Histogram,
    start_http_server,
)

from news_analytics.config.settings import get_settings

logger = logging.getLogger(__name__)

# Buckets for latency histograms (in seconds)
LATENCY_BUCKETS = (0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0)


class MetricsCollector:
    """
    Prometheus metrics collector for the news-analytics service.

    Usage:
        metrics = get_metrics()
        metrics.start_server()

        metrics.record_topics_run(documents=12, topics=3, latency=0.4)
        metrics.record_upstream_call("embedding", latency=1.2)
    """

    def __init__(self):
        """Initialize Prometheus metrics."""

        # Topic modeling
        self.topic_runs = Counter(
            "news_analytics_topic_runs_total",
            "Total topic modeling runs",
            ["status"],  # status: success, error
        )

        self.topic_documents = Histogram(
            "news_analytics_topic_documents",
            "Documents per topic modeling run",
            buckets=(1, 2, 5, 10, 20, 50, 100, 250),
        )

        self.topic_latency = Histogram(
            "news_analytics_topic_latency_seconds",
            "Time to cluster and rank a topic modeling batch",
            buckets=LATENCY_BUCKETS,
        )

        # Keyword extraction
        self.keyword_extractions = Counter(
            "news_analytics_keyword_extractions_total",
            "Total keyword extraction requests",
        )

        # Upstream collaborators
        self.upstream_latency = Histogram(
            "news_analytics_upstream_latency_seconds",
            "Latency of calls to external services",
            ["service"],  # embedding, fetch, search, summarization, ...
            buckets=LATENCY_BUCKETS,
        )

        self.upstream_errors = Counter(
            "news_analytics_upstream_errors_total",
            "Total failed calls to external services",
            ["service", "error_type"],
        )

        # API
        self.request_timeouts = Counter(
            "news_analytics_request_timeouts_total",
            "Total API requests cut off by the request timeout",
            ["path"],
        )

    def start_server(self, port: int | None = None) -> None:
        """
        Start Prometheus metrics HTTP server.

        Args:
            port: Port to expose metrics on (default from settings)
        """
        settings = get_settings()
        port = port or settings.metrics_port

        start_http_server(port, registry=REGISTRY)
        logger.info(f"Prometheus metrics server started on port {port}")

    # Convenience methods

    def record_topics_run(
        self,
        documents: int,
        topics: int,
        latency: float | None = None,
        status: str = "success",
    ) -> None:
        """
        Record a topic modeling run.

        Args:
            documents: Number of documents clustered
            topics: Number of topics requested
            latency: Core computation latency in seconds
            status: success or error
        """
        self.topic_runs.labels(status=status).inc()
        if documents > 0:
            self.topic_documents.observe(documents)
        if latency is not None:
            self.topic_latency.observe(latency)
        logger.debug(f"Topic run recorded: {documents} documents, {topics} topics")

    def record_keyword_extraction(self) -> None:
        """Record a keyword extraction request."""
        self.keyword_extractions.inc()

    def record_upstream_call(self, service: str, latency: float) -> None:
        """
        Record a completed upstream call.

        Args:
            service: Collaborator name (embedding, fetch, search, ...)
            latency: Call latency in seconds
        """
        self.upstream_latency.labels(service=service).observe(latency)

    def record_upstream_error(self, service: str, error_type: str) -> None:
        """
        Record a failed upstream call.

        Args:
            service: Collaborator name
            error_type: Exception class name
        """
        self.upstream_errors.labels(service=service, error_type=error_type).inc()

    def record_request_timeout(self, path: str) -> None:
        """Record an API request that exceeded its time budget."""
        self.request_timeouts.labels(path=path).inc()


# Global metrics instance
_metrics: MetricsCollector | None = None


def get_metrics() -> MetricsCollector:
    """Get global metrics collector instance."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics
