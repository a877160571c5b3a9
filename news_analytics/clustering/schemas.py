"""Schema definitions for clustering results.

Provides a dataclass representing a complete k-means assignment of a batch
of embedding vectors, with helpers for grouping and serialization.
"""

from dataclasses import dataclass
from typing import Any

import numpy as np


@dataclass
class ClusterAssignment:
    """
    Cluster label for every vector of a batch.

    ``labels[i]`` is the cluster id of input vector ``i``. Every input index
    has exactly one label and every label lies in ``[0, k)``. A cluster id
    with no members is valid (see the empty-cluster policy in
    ``EmbeddingClusterer``).

    Attributes:
        labels: Cluster id per input position.
        k: Number of clusters requested.
        centroids: Final centroid matrix of shape (k, dim).
        iterations: Assign/update passes performed.
        converged: False when the iteration bound stopped the run.

    Example:
        >>> assignment = ClusterAssignment(labels=[0, 0, 1], k=2, centroids=np.zeros((2, 3)))
        >>> assignment.members(0)
        [0, 1]
        >>> assignment.as_mapping()
        {0: 0, 1: 0, 2: 1}
    """

    labels: list[int]
    k: int
    centroids: np.ndarray
    iterations: int = 0
    converged: bool = True

    def __len__(self) -> int:
        return len(self.labels)

    def __getitem__(self, index: int) -> int:
        return self.labels[index]

    def as_mapping(self) -> dict[int, int]:
        """Return the assignment as ``{document_index: cluster_id}``."""
        return dict(enumerate(self.labels))

    def members(self, cluster_id: int) -> list[int]:
        """
        Input indices assigned to a cluster, in input order.

        Raises:
            IndexError: If cluster_id is outside [0, k).
        """
        if not 0 <= cluster_id < self.k:
            raise IndexError(f"cluster_id {cluster_id} out of range for k={self.k}")
        return [index for index, label in enumerate(self.labels) if label == cluster_id]

    def groups(self) -> list[list[int]]:
        """Member indices for every cluster id 0..k-1 (empty lists included)."""
        grouped: list[list[int]] = [[] for _ in range(self.k)]
        for index, label in enumerate(self.labels):
            grouped[label].append(index)
        return grouped

    def cluster_sizes(self) -> list[int]:
        """Number of members per cluster id 0..k-1."""
        return [len(group) for group in self.groups()]

    def to_dict(self) -> dict[str, Any]:
        """
        Convert assignment to dictionary for JSON serialization.

        The centroid ndarray is converted to a plain list for JSON compatibility.
        """
        return {
            "labels": list(self.labels),
            "k": self.k,
            "centroids": self.centroids.tolist(),
            "iterations": self.iterations,
            "converged": self.converged,
        }
