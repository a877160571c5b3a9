"""
Topic aggregation over clustered documents.

Combines the EmbeddingClusterer and the TermFrequencyRanker: clusters the
document embeddings, groups the texts by cluster, and ranks the terms of each
group into a TopicRecord. Pure computation over in-memory data, no I/O.
"""

import logging
import time
from collections.abc import Sequence

from news_analytics.clustering.service import EmbeddingClusterer
from news_analytics.keywords.ranker import TermFrequencyRanker
from news_analytics.topics.config import TopicsConfig
from news_analytics.topics.schemas import Document, TopicRecord

logger = logging.getLogger(__name__)


class MissingEmbeddingError(Exception):
    """Raised when a document handed to topic aggregation has no embedding."""

    def __init__(self, indices: list[int]):
        super().__init__(
            f"{len(indices)} document(s) lack an embedding: indices {indices}"
        )
        self.indices = indices


class TopicAggregator:
    """
    Builds one TopicRecord per cluster.

    Always returns exactly k records, labelled "Topic 1" .. "Topic k" in
    cluster-id order. A cluster with no documents yields a record with an
    empty keyword list.

    Usage:
        >>> aggregator = TopicAggregator()
        >>> topics = aggregator.build_topics(documents, k=2)
        >>> [t.topic_label for t in topics]
        ['Topic 1', 'Topic 2']
    """

    def __init__(
        self,
        clusterer: EmbeddingClusterer | None = None,
        ranker: TermFrequencyRanker | None = None,
        config: TopicsConfig | None = None,
    ):
        """
        Initialize the aggregator.

        Args:
            clusterer: k-means clusterer (default config if None).
            ranker: Term ranker (default config if None).
            config: Topics configuration (default config if None).
        """
        self.clusterer = clusterer or EmbeddingClusterer()
        self.ranker = ranker or TermFrequencyRanker()
        self.config = config or TopicsConfig()

    def build_topics(self, documents: Sequence[Document], k: int) -> list[TopicRecord]:
        """
        Cluster documents and describe every cluster by its top terms.

        Args:
            documents: Documents that all carry an embedding.
            k: Number of topics.

        Returns:
            Exactly k TopicRecords in cluster-id order.

        Raises:
            MissingEmbeddingError: If any document has no embedding.
            ClusteringConfigError: If k is invalid for the batch.
            DimensionMismatchError: If embeddings differ in length.
            RankingError: If a document text is not a string.
        """
        missing = [index for index, doc in enumerate(documents) if doc.embedding is None]
        if missing:
            raise MissingEmbeddingError(missing)

        start_time = time.monotonic()
        assignment = self.clusterer.cluster([doc.embedding for doc in documents], k)

        topics: list[TopicRecord] = []
        for cluster_id, member_indices in enumerate(assignment.groups()):
            texts = [documents[index].text for index in member_indices]
            keywords = self.ranker.rank_corpus(texts, top_n=self.config.keywords_per_topic)
            topics.append(
                TopicRecord(
                    topic_label=f"Topic {cluster_id + 1}",
                    keywords=keywords,
                    document_indices=member_indices,
                )
            )

        elapsed = time.monotonic() - start_time
        empty = sum(1 for topic in topics if topic.is_empty)
        logger.info(
            f"Built {len(topics)} topics from {len(documents)} documents "
            f"({empty} empty), {elapsed:.3f}s elapsed"
        )
        return topics
