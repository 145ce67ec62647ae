"""
Tests for the clustering module.
"""

import pytest
import numpy as np
import sys
import os

# Add the parent directory to the path to import the module
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from semdiff.errors import InvalidConfiguration
from semdiff.math.clusters import (
    Cluster, euclidean_distance, resolve_rng, init_clusters,
    assign_points_to_clusters, update_cluster_centers, filter_empty_clusters,
    kmeans, cluster_sessions
)


@pytest.fixture
def two_blobs(make_session):
    """
    Six completed sessions with two distinct response patterns.

    Responses within a pattern are identical, which makes the split
    independent of which rows seed the centroids.
    """
    return [
        make_session('a1', {'p1': 0, 'p2': 0, 'p3': 1}),
        make_session('a2', {'p1': 0, 'p2': 0, 'p3': 1}),
        make_session('a3', {'p1': 0, 'p2': 0, 'p3': 1}),
        make_session('b1', {'p1': 6, 'p2': 6, 'p3': 5}),
        make_session('b2', {'p1': 6, 'p2': 6, 'p3': 5}),
        make_session('b3', {'p1': 6, 'p2': 6, 'p3': 5}),
    ]


class TestCluster:
    """Tests for the Cluster class."""

    def test_init(self):
        """Test Cluster initialization."""
        cluster = Cluster(np.array([1.0, 2.0]), [1, 3], 0)

        assert np.array_equal(cluster.center, [1.0, 2.0])
        assert cluster.members == [1, 3]
        assert cluster.id == 0

        cluster_default = Cluster([0.0, 0.0])
        assert cluster_default.members == []
        assert cluster_default.id is None

    def test_update_center(self):
        """Centers move to the mean of their members."""
        data = np.array([[1.0, 1.0], [2.0, 2.0], [3.0, 3.0]])

        cluster = Cluster(np.array([0.0, 0.0]), [0, 1])
        cluster.update_center(data)
        assert np.allclose(cluster.center, [1.5, 1.5])

    def test_update_center_without_members(self):
        """An empty cluster keeps its center."""
        data = np.array([[1.0, 1.0], [2.0, 2.0]])

        cluster = Cluster(np.array([5.0, 5.0]), [])
        cluster.update_center(data)
        assert np.allclose(cluster.center, [5.0, 5.0])


class TestClusteringUtils:
    """Tests for the clustering utility functions."""

    def test_euclidean_distance(self):
        """Test Euclidean distance calculation."""
        dist = euclidean_distance(np.array([1.0, 2.0, 3.0]), np.array([4.0, 5.0, 6.0]))
        assert np.isclose(dist, 5.196, atol=1e-3)

    def test_resolve_rng(self):
        """Seeds, generators and None all give a random source."""
        generator = np.random.default_rng(1)
        assert resolve_rng(generator) is generator

        legacy = np.random.RandomState(1)
        assert resolve_rng(legacy) is legacy

        assert isinstance(resolve_rng(3), np.random.Generator)
        assert isinstance(resolve_rng(None), np.random.Generator)

    def test_init_clusters_distinct_rows(self):
        """Initial centers are k distinct rows of the data."""
        data = np.arange(20, dtype=float).reshape(10, 2)

        clusters = init_clusters(data, 4, rng=0)

        assert [c.id for c in clusters] == [0, 1, 2, 3]
        centers = {tuple(c.center) for c in clusters}
        assert len(centers) == 4
        for center in centers:
            assert any(np.array_equal(center, row) for row in data)

    def test_init_clusters_copies_rows(self):
        """Moving a center does not touch the data."""
        data = np.array([[1.0, 1.0], [2.0, 2.0]])
        clusters = init_clusters(data, 2, rng=0)
        clusters[0].center += 10
        assert np.array_equal(data, [[1.0, 1.0], [2.0, 2.0]])

    def test_init_clusters_seeded(self):
        """The same seed picks the same rows."""
        data = np.random.default_rng(5).normal(size=(30, 3))
        first = init_clusters(data, 3, rng=11)
        second = init_clusters(data, 3, rng=11)
        for a, b in zip(first, second):
            assert np.array_equal(a.center, b.center)

    def test_assign_points_to_clusters(self):
        """Each point goes to its nearest center."""
        data = np.array([[1.0, 1.0], [2.0, 2.0], [5.0, 5.0], [6.0, 6.0]])
        clusters = [Cluster(np.array([1.5, 1.5])), Cluster(np.array([5.5, 5.5]))]

        assignments = assign_points_to_clusters(data, clusters)

        assert assignments == [0, 0, 1, 1]
        assert clusters[0].members == [0, 1]
        assert clusters[1].members == [2, 3]

    def test_assign_ties_to_lower_index(self):
        """Equidistant points go to the first cluster."""
        data = np.array([[0.0]])
        clusters = [Cluster(np.array([-1.0])), Cluster(np.array([1.0]))]

        assert assign_points_to_clusters(data, clusters) == [0]

    def test_update_and_filter(self):
        """Centers update from members and empty clusters are filtered."""
        data = np.array([[1.0, 1.0], [3.0, 3.0]])
        clusters = [
            Cluster(np.array([0.0, 0.0]), [0, 1]),
            Cluster(np.array([9.0, 9.0]), [])
        ]

        update_cluster_centers(data, clusters)

        assert np.allclose(clusters[0].center, [2.0, 2.0])
        assert np.allclose(clusters[1].center, [9.0, 9.0])
        assert filter_empty_clusters(clusters) == [clusters[0]]


class TestKMeans:
    """Tests for the k-means loop."""

    def test_separates_blobs(self):
        """Two separated blobs end up in two clusters."""
        data = np.array([
            [-40.0, -40.0], [-42.0, -40.0], [-40.0, -42.0],
            [40.0, 40.0], [42.0, 40.0], [40.0, 42.0]
        ])

        assignments, centers = kmeans(data, 2, 100, initial_centroids=data[[0, 1]])

        assert len(set(assignments[:3])) == 1
        assert len(set(assignments[3:])) == 1
        assert assignments[0] != assignments[3]
        blob_b = assignments[3]
        assert np.allclose(centers[blob_b], [40.6667, 40.6667], atol=1e-3)

    def test_stable_with_same_initial_centroids(self):
        """Identical data and initial centers give identical results."""
        data = np.random.default_rng(3).normal(size=(40, 4)) * 20
        initial = data[[0, 5, 9]]

        first = kmeans(data, 3, 100, initial_centroids=initial)
        second = kmeans(data, 3, 100, initial_centroids=initial)

        assert first[0] == second[0]
        assert np.array_equal(first[1], second[1])

    def test_stable_with_same_seed(self):
        """The same seed gives the same clustering."""
        data = np.random.default_rng(4).normal(size=(40, 4)) * 20

        first = kmeans(data, 3, 100, rng=123)
        second = kmeans(data, 3, 100, rng=123)

        assert first[0] == second[0]
        assert np.array_equal(first[1], second[1])

    def test_empty_cluster_keeps_center(self):
        """A center that attracts no points keeps its coordinates."""
        data = np.array([[0.0, 0.0], [1.0, 1.0]])
        initial = np.array([[0.0, 0.0], [1.0, 1.0], [100.0, 100.0]])

        assignments, centers = kmeans(data, 3, 10, initial_centroids=initial)

        assert assignments == [0, 1]
        assert np.allclose(centers[2], [100.0, 100.0])

    def test_single_iteration(self):
        """With one iteration the centers are the means of the first assignment."""
        data = np.array([[0.0], [2.0], [10.0], [12.0]])
        initial = np.array([[0.0], [12.0]])

        assignments, centers = kmeans(data, 2, 1, initial_centroids=initial)

        assert assignments == [0, 0, 1, 1]
        assert np.allclose(centers, [[1.0], [11.0]])

    def test_invalid_parameters(self):
        """Non-positive k or iteration budget fails fast."""
        data = np.zeros((4, 2))
        with pytest.raises(InvalidConfiguration):
            kmeans(data, 0, 10)
        with pytest.raises(InvalidConfiguration):
            kmeans(data, 2, 0)

    def test_initial_centroid_count(self):
        """The number of initial centers must match k."""
        data = np.zeros((4, 2))
        with pytest.raises(InvalidConfiguration):
            kmeans(data, 3, 10, initial_centroids=data[:2])


class TestClusterSessions:
    """Tests for clustering sessions."""

    def test_insufficient_sessions(self, make_session, items):
        """Fewer completed sessions than k gives an empty result."""
        sessions = [
            make_session('s1', {'p1': 0}),
            make_session('s2', {'p1': 6}),
            make_session('s3', {'p1': 3}, status='in_progress'),
        ]
        assert cluster_sessions(sessions, items, k=5, max_iterations=100) == []

    def test_invalid_parameters(self, two_blobs, items):
        """Invalid parameters fail even with enough data."""
        with pytest.raises(InvalidConfiguration):
            cluster_sessions(two_blobs, items, k=0)
        with pytest.raises(InvalidConfiguration):
            cluster_sessions(two_blobs, items, k=2, max_iterations=-1)
        with pytest.raises(InvalidConfiguration):
            cluster_sessions([], items, k=0)

    def test_no_items(self, two_blobs):
        """Without items there is nothing to cluster."""
        assert cluster_sessions(two_blobs, [], k=2) == []

    def test_separates_blobs(self, two_blobs, items):
        """Two response patterns give two clusters."""
        clusters = cluster_sessions(two_blobs, items, k=2, max_iterations=100, rng=42)

        assert len(clusters) == 2
        memberships = sorted(sorted(c.members) for c in clusters)
        assert memberships == [['a1', 'a2', 'a3'], ['b1', 'b2', 'b3']]
        for cluster in clusters:
            assert cluster.member_count == 3
            assert len(cluster.centroid) == 3

    def test_reproducible_with_seed(self, two_blobs, items):
        """The same seed gives the same clusters."""
        first = cluster_sessions(two_blobs, items, k=3, rng=7)
        second = cluster_sessions(two_blobs, items, k=3, rng=7)
        assert first == second

    def test_members_partition_sessions(self, two_blobs, items):
        """Every completed session appears in exactly one cluster."""
        clusters = cluster_sessions(two_blobs, items, k=3)

        members = [m for c in clusters for m in c.members]
        assert sorted(members) == sorted(s.session_id for s in two_blobs)
        assert sum(c.member_count for c in clusters) == len(two_blobs)
        assert all(c.member_count > 0 for c in clusters)

    def test_empty_clusters_dropped(self, make_session, items):
        """Identical responses collapse into one cluster."""
        sessions = [make_session(f"s{i}", {'p1': 2, 'p2': 4, 'p3': 3}) for i in range(3)]

        clusters = cluster_sessions(sessions, items, k=2, rng=0)

        assert len(clusters) == 1
        assert clusters[0].cluster_id == 0
        assert clusters[0].member_count == 3
        assert clusters[0].members == ['s0', 's1', 's2']

    def test_missing_responses_are_neutral(self, make_session, items):
        """Unanswered items count as 0 in the centroid."""
        sessions = [
            make_session('s1', {'p1': 0}),
            make_session('s2', {'p1': 0}),
        ]

        clusters = cluster_sessions(sessions, items, k=1, rng=0)

        assert clusters[0].centroid == [-50.0, 0.0, 0.0]

    def test_ignores_incomplete_sessions(self, two_blobs, make_session, items):
        """In-progress sessions are not clustered."""
        sessions = two_blobs + [make_session('x1', {'p1': 3}, status='in_progress')]
        clusters = cluster_sessions(sessions, items, k=2, rng=1)
        members = [m for c in clusters for m in c.members]
        assert 'x1' not in members
