"""
K-means clustering of document embeddings.

This module partitions pre-computed embedding vectors into a fixed number of
topic clusters with a deterministic k-means.

Components:
- ClusteringConfig: Configuration for the clusterer
- ClusterAssignment: Dataclass holding one label per input vector
- EmbeddingClusterer: k-means service
- ClusteringConfigError, DimensionMismatchError: input validation errors
"""

from news_analytics.clustering.config import ClusteringConfig
from news_analytics.clustering.schemas import ClusterAssignment
from news_analytics.clustering.service import (
    ClusteringConfigError,
    DimensionMismatchError,
    EmbeddingClusterer,
)

__all__ = [
    "ClusteringConfig",
    "ClusterAssignment",
    "EmbeddingClusterer",
    "ClusteringConfigError",
    "DimensionMismatchError",
]
