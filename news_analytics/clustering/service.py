"""
K-means clustering over pre-computed document embeddings.

Partitions a batch of embedding vectors into a fixed number of clusters and
returns a label for every vector.

Algorithm:
- Seeding: the first k distinct vectors in input order become the initial
  centroids. When the batch holds fewer than k distinct vectors, the
  remaining seeds are the earliest unused positions (duplicates).
- Assignment: nearest centroid by Euclidean distance, ties to the lowest id.
- Update: each centroid moves to the mean of its members.
- Empty clusters: a centroid that loses all its members stays where it was.
- Stop when an assignment pass changes nothing, or after
  ``ClusteringConfig.max_iterations`` passes.

The run is deterministic: identical input always yields identical labels.
"""

import logging
import time
from collections.abc import Sequence

import numpy as np

from news_analytics.clustering.config import ClusteringConfig
from news_analytics.clustering.schemas import ClusterAssignment

logger = logging.getLogger(__name__)


class ClusteringConfigError(Exception):
    """Raised for an invalid cluster count or unusable vector batch."""


class DimensionMismatchError(Exception):
    """Raised when the vectors of a batch do not share one dimensionality."""

    def __init__(
        self,
        message: str,
        index: int | None = None,
        expected: int | None = None,
        actual: int | None = None,
    ):
        super().__init__(message)
        self.index = index
        self.expected = expected
        self.actual = actual


class EmbeddingClusterer:
    """
    Deterministic k-means clusterer.

    Holds no state between calls; each cluster() call validates its input,
    seeds, iterates and returns a complete ClusterAssignment or raises.

    Usage:
        >>> clusterer = EmbeddingClusterer()
        >>> result = clusterer.cluster([[0, 0], [0, 1], [9, 9], [9, 8]], k=2)
        >>> result.labels
        [0, 0, 1, 1]
    """

    def __init__(self, config: ClusteringConfig | None = None):
        """
        Initialize clustering service.

        Args:
            config: Clustering configuration. If None, uses default config.
        """
        self.config = config or ClusteringConfig()

    def cluster(self, vectors: Sequence[Sequence[float]] | np.ndarray, k: int) -> ClusterAssignment:
        """
        Partition vectors into k clusters.

        Args:
            vectors: Embedding vectors, all of the same length.
            k: Number of clusters, 1 <= k <= len(vectors).

        Returns:
            ClusterAssignment covering every input index.

        Raises:
            ClusteringConfigError: If k is out of range, the batch is empty,
                or a vector holds non-numeric or non-finite values.
            DimensionMismatchError: If vector lengths differ.
        """
        matrix = self._to_matrix(vectors)
        n_vectors = matrix.shape[0]
        self.check_k(k, n_vectors)
        k = int(k)

        start_time = time.monotonic()
        centroids = matrix[self._seed_indices(matrix, k)].copy()
        labels = np.full(n_vectors, -1, dtype=np.intp)
        converged = False
        iterations = 0

        for iterations in range(1, self.config.max_iterations + 1):
            new_labels = self._assign(matrix, centroids)
            if np.array_equal(new_labels, labels):
                converged = True
                break
            labels = new_labels
            centroids = self._update_centroids(matrix, labels, centroids)

        if not converged:
            logger.warning(
                f"k-means stopped after {self.config.max_iterations} iterations without converging"
            )

        elapsed = time.monotonic() - start_time
        logger.debug(
            f"Clustered {n_vectors} vectors into k={k} in {iterations} iterations, "
            f"{elapsed:.4f}s elapsed"
        )

        return ClusterAssignment(
            labels=[int(label) for label in labels],
            k=k,
            centroids=centroids,
            iterations=iterations,
            converged=converged,
        )

    # Validation

    @staticmethod
    def _to_matrix(vectors: Sequence[Sequence[float]] | np.ndarray) -> np.ndarray:
        try:
            n_vectors = len(vectors)
        except TypeError as e:
            raise ClusteringConfigError(
                f"Vectors must be a sequence, got {type(vectors).__name__}"
            ) from e
        if n_vectors == 0:
            raise ClusteringConfigError("Cannot cluster an empty batch of vectors")

        expected: int | None = None
        for index, vector in enumerate(vectors):
            try:
                length = len(vector)
            except TypeError as e:
                raise ClusteringConfigError(
                    f"Vector {index} is not a sequence ({type(vector).__name__})"
                ) from e
            if expected is None:
                expected = length
            elif length != expected:
                raise DimensionMismatchError(
                    f"Vector {index} has dimension {length}, expected {expected}",
                    index=index,
                    expected=expected,
                    actual=length,
                )

        if expected == 0:
            raise DimensionMismatchError("Vectors must have at least one dimension", expected=0, actual=0)

        try:
            matrix = np.asarray(vectors, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise ClusteringConfigError(f"Vectors must contain only numbers: {e}") from e

        if matrix.ndim != 2:
            raise ClusteringConfigError(f"Vectors must be flat, got array of shape {matrix.shape}")
        if not np.all(np.isfinite(matrix)):
            raise ClusteringConfigError("Vectors must contain only finite values")

        return matrix

    @staticmethod
    def check_k(k: int, n_vectors: int) -> None:
        """Raise ClusteringConfigError unless 1 <= k <= n_vectors."""
        if isinstance(k, bool) or not isinstance(k, (int, np.integer)):
            raise ClusteringConfigError(f"k must be an integer, got {type(k).__name__}")
        if k < 1:
            raise ClusteringConfigError(f"k must be at least 1, got {k}")
        if k > n_vectors:
            raise ClusteringConfigError(
                f"k ({k}) cannot exceed the number of vectors ({n_vectors})"
            )

    # k-means steps

    @staticmethod
    def _seed_indices(matrix: np.ndarray, k: int) -> list[int]:
        chosen: list[int] = []
        seen: set[tuple[float, ...]] = set()
        for index, row in enumerate(matrix):
            key = tuple(row.tolist())
            if key not in seen:
                seen.add(key)
                chosen.append(index)
                if len(chosen) == k:
                    return chosen

        # Fewer than k distinct vectors: pad with the earliest unused positions
        taken = set(chosen)
        for index in range(matrix.shape[0]):
            if len(chosen) == k:
                break
            if index not in taken:
                chosen.append(index)
        logger.debug(f"Only {len(seen)} distinct vectors for k={k}, seeded with duplicates")
        return chosen

    @staticmethod
    def _assign(matrix: np.ndarray, centroids: np.ndarray) -> np.ndarray:
        # (n, k) squared distances; argmin returns the first minimum
        distances = ((matrix[:, np.newaxis, :] - centroids[np.newaxis, :, :]) ** 2).sum(axis=2)
        return np.argmin(distances, axis=1)

    @staticmethod
    def _update_centroids(
        matrix: np.ndarray,
        labels: np.ndarray,
        centroids: np.ndarray,
    ) -> np.ndarray:
        updated = centroids.copy()
        for cluster_id in range(centroids.shape[0]):
            mask = labels == cluster_id
            if mask.any():
                updated[cluster_id] = matrix[mask].mean(axis=0)
            else:
                logger.debug(f"Cluster {cluster_id} is empty, keeping previous centroid")
        return updated
