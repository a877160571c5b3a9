"""Tests for EmbeddingClusterer."""

import numpy as np
import pytest

from news_analytics.clustering.config import ClusteringConfig
from news_analytics.clustering.schemas import ClusterAssignment
from news_analytics.clustering.service import (
    ClusteringConfigError,
    DimensionMismatchError,
    EmbeddingClusterer,
)


@pytest.fixture
def clusterer():
    return EmbeddingClusterer()


@pytest.fixture
def two_blobs():
    """Two well separated groups in 2-D."""
    return [[0.0, 0.0], [0.0, 1.0], [9.0, 9.0], [9.0, 8.0]]


class TestInit:
    """Tests for clusterer construction."""

    def test_default_config(self):
        assert EmbeddingClusterer().config.max_iterations == 100

    def test_custom_config(self):
        clusterer = EmbeddingClusterer(ClusteringConfig(max_iterations=7))
        assert clusterer.config.max_iterations == 7


class TestCluster:
    """Tests for the k-means run."""

    def test_separates_two_groups(self, clusterer, two_blobs):
        result = clusterer.cluster(two_blobs, k=2)

        assert isinstance(result, ClusterAssignment)
        assert result.labels == [0, 0, 1, 1]
        assert result.converged is True
        np.testing.assert_allclose(result.centroids, [[0.0, 0.5], [9.0, 8.5]])

    def test_domain_and_range(self, clusterer):
        rng = np.random.default_rng(7)
        vectors = rng.normal(size=(25, 4))

        for k in range(1, 26):
            result = clusterer.cluster(vectors, k)
            assert len(result) == 25
            assert set(result.as_mapping()) == set(range(25))
            assert all(0 <= label < k for label in result.labels)
            assert len(result.cluster_sizes()) == k
            assert sum(result.cluster_sizes()) == 25

    def test_k_equals_n_gives_singletons(self, clusterer):
        vectors = [[1.0, 0.0], [0.0, 1.0], [1.0, 1.0], [5.0, 5.0], [-3.0, 2.0]]
        result = clusterer.cluster(vectors, k=5)

        assert result.labels == [0, 1, 2, 3, 4]
        assert result.cluster_sizes() == [1, 1, 1, 1, 1]

    def test_k_one_puts_everything_together(self, clusterer, two_blobs):
        result = clusterer.cluster(two_blobs, k=1)

        assert result.labels == [0, 0, 0, 0]
        np.testing.assert_allclose(result.centroids[0], [4.5, 4.5])

    def test_idempotent(self, clusterer):
        rng = np.random.default_rng(3)
        vectors = rng.normal(size=(30, 8)).tolist()

        first = clusterer.cluster(vectors, k=4)
        second = clusterer.cluster(vectors, k=4)

        assert first.labels == second.labels
        np.testing.assert_array_equal(first.centroids, second.centroids)

    def test_seeds_with_first_distinct_vectors(self, clusterer):
        """Leading duplicates do not take two seeds."""
        vectors = [[0.0], [0.0], [10.0], [11.0]]
        result = clusterer.cluster(vectors, k=2)

        assert result.labels == [0, 0, 1, 1]

    def test_empty_cluster_keeps_previous_centroid(self, clusterer):
        """Fewer distinct vectors than k: padded seed cluster stays empty."""
        vectors = [[1.0, 1.0], [1.0, 1.0], [1.0, 1.0]]
        result = clusterer.cluster(vectors, k=2)

        assert result.labels == [0, 0, 0]
        assert result.cluster_sizes() == [3, 0]
        assert result.members(1) == []
        np.testing.assert_array_equal(result.centroids[1], [1.0, 1.0])

    def test_empty_cluster_with_mixed_duplicates(self, clusterer):
        vectors = [[0.0], [0.0], [10.0]]
        result = clusterer.cluster(vectors, k=3)

        # Seeds: index 0, index 2, then duplicate index 1; ties go to the lowest id
        assert result.labels == [0, 0, 1]
        assert result.cluster_sizes() == [2, 1, 0]
        np.testing.assert_array_equal(result.centroids[2], [0.0])

    def test_iteration_bound(self, two_blobs):
        clusterer = EmbeddingClusterer(ClusteringConfig(max_iterations=1))
        result = clusterer.cluster(two_blobs, k=2)

        assert result.iterations == 1
        assert result.converged is False
        # Labels from the single assignment pass are still total
        assert result.labels == [0, 1, 1, 1]

    def test_accepts_ndarray_and_numpy_k(self, clusterer, two_blobs):
        result = clusterer.cluster(np.asarray(two_blobs), np.int64(2))
        assert result.labels == [0, 0, 1, 1]
        assert result.k == 2

    def test_accepts_integer_vectors(self, clusterer):
        result = clusterer.cluster([[0, 0], [10, 10]], k=2)
        assert result.labels == [0, 1]


class TestValidation:
    """Tests for precondition checks."""

    def test_empty_batch(self, clusterer):
        with pytest.raises(ClusteringConfigError):
            clusterer.cluster([], k=1)

    @pytest.mark.parametrize("k", [0, -1, 5])
    def test_k_out_of_range(self, clusterer, two_blobs, k):
        with pytest.raises(ClusteringConfigError):
            clusterer.cluster(two_blobs, k=k)

    @pytest.mark.parametrize("k", [1.5, "2", True, None])
    def test_k_not_an_integer(self, clusterer, two_blobs, k):
        with pytest.raises(ClusteringConfigError):
            clusterer.cluster(two_blobs, k=k)

    def test_dimension_mismatch(self, clusterer):
        with pytest.raises(DimensionMismatchError) as exc_info:
            clusterer.cluster([[0.0, 1.0], [1.0, 2.0], [1.0, 2.0, 3.0]], k=2)

        assert exc_info.value.index == 2
        assert exc_info.value.expected == 2
        assert exc_info.value.actual == 3

    def test_zero_dimensional_vectors(self, clusterer):
        with pytest.raises(DimensionMismatchError):
            clusterer.cluster([[], []], k=1)

    @pytest.mark.parametrize("bad_value", [float("nan"), float("inf")])
    def test_non_finite_values(self, clusterer, bad_value):
        with pytest.raises(ClusteringConfigError):
            clusterer.cluster([[0.0, 1.0], [bad_value, 2.0]], k=1)

    def test_non_numeric_values(self, clusterer):
        with pytest.raises(ClusteringConfigError):
            clusterer.cluster([["a", "b"], ["c", "d"]], k=1)

    def test_vector_not_a_sequence(self, clusterer):
        with pytest.raises(ClusteringConfigError):
            clusterer.cluster([1.0, 2.0], k=1)

    def test_batch_not_a_sequence(self, clusterer):
        with pytest.raises(ClusteringConfigError):
            clusterer.cluster(42, k=1)

    def test_nested_vectors(self, clusterer):
        with pytest.raises(ClusteringConfigError):
            clusterer.cluster([[[1.0], [2.0]], [[3.0], [4.0]]], k=1)
