"""Services that orchestrate collaborators and the analytics core."""

from news_analytics.services.pipeline import NewsAnalyticsPipeline

__all__ = ["NewsAnalyticsPipeline"]
