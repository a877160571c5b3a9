"""Observability layer - logging and metrics."""

from news_analytics.observability.logging import setup_logging
from news_analytics.observability.metrics import MetricsCollector, get_metrics

__all__ = ["setup_logging", "MetricsCollector", "get_metrics"]
