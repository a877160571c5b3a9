"""
Topic modeling over article embeddings.

Components:
- TopicsConfig: Configuration for topic modeling
- Document: Article text with optional embedding
- TopicRecord: One topic (label plus keywords)
- TopicAggregator: Clusters documents and ranks keywords per cluster
- MissingEmbeddingError: Raised when a document lacks an embedding
"""

from news_analytics.topics.aggregator import MissingEmbeddingError, TopicAggregator
from news_analytics.topics.config import TopicsConfig
from news_analytics.topics.schemas import Document, TopicRecord

__all__ = [
    "TopicsConfig",
    "Document",
    "TopicRecord",
    "TopicAggregator",
    "MissingEmbeddingError",
]
