"""
K-means clustering of participants.

Participants are rows of the normalized response matrix. Centroids are
seeded from distinct random rows and refined until the assignment stops
changing or the iteration budget runs out.
"""

import logging
import numpy as np
from typing import List, Optional, Tuple, Union

from semdiff.errors import InvalidConfiguration
from semdiff.math.response_matrix import response_matrix
from semdiff.schemas.models import ClusterAssignment, ScaleItem, Session

logger = logging.getLogger(__name__)

RandomSource = Union[None, int, np.random.Generator, np.random.RandomState]


class Cluster:
    """
    Represents a cluster in K-means clustering.
    """

    def __init__(self,
                center: np.ndarray,
                members: Optional[List[int]] = None,
                id: Optional[int] = None):
        """
        Initialize a cluster with a center and optional members.

        Args:
            center: The center of the cluster
            members: Row indices belonging to the cluster
            id: Cluster identifier
        """
        self.center = np.array(center, dtype=float)
        self.members = [] if members is None else list(members)
        self.id = id

    def add_member(self, idx: int) -> None:
        self.members.append(idx)

    def clear_members(self) -> None:
        self.members = []

    def update_center(self, data: np.ndarray) -> None:
        """
        Move the center to the mean of its members.

        A cluster without members keeps its current center.

        Args:
            data: Data matrix containing all points
        """
        if not self.members:
            return
        self.center = np.mean(data[self.members], axis=0)

    def __repr__(self) -> str:
        return f"Cluster(id={self.id}, members={len(self.members)})"


def euclidean_distance(a: np.ndarray, b: np.ndarray) -> float:
    """
    Calculate Euclidean distance between two vectors.

    Args:
        a: First vector
        b: Second vector

    Returns:
        Euclidean distance
    """
    return float(np.linalg.norm(a - b))


def resolve_rng(rng: RandomSource) -> Union[np.random.Generator, np.random.RandomState]:
    """
    Turn a seed, generator or None into a random source.

    None gives a fresh unseeded generator.

    Args:
        rng: Seed, numpy Generator/RandomState, or None

    Returns:
        Object with a numpy-style ``choice`` method
    """
    if isinstance(rng, (np.random.Generator, np.random.RandomState)):
        return rng
    return np.random.default_rng(rng)


def validate_params(k: int, max_iterations: int) -> None:
    """
    Check clustering parameters.

    Raises:
        InvalidConfiguration: If k or max_iterations is not positive
    """
    if k is None or k <= 0:
        raise InvalidConfiguration(f"k must be positive, got {k}")
    if max_iterations is None or max_iterations <= 0:
        raise InvalidConfiguration(f"max_iterations must be positive, got {max_iterations}")


def init_clusters(data: np.ndarray, k: int, rng: RandomSource = None) -> List[Cluster]:
    """
    Seed k clusters on k distinct rows chosen uniformly at random.

    Args:
        data: Data matrix with at least k rows
        k: Number of clusters
        rng: Random source for picking the rows

    Returns:
        List of clusters with ids 0..k-1 and no members
    """
    indices = resolve_rng(rng).choice(data.shape[0], size=k, replace=False)
    return [Cluster(data[idx].copy(), [], i) for i, idx in enumerate(indices)]


def assign_points_to_clusters(data: np.ndarray, clusters: List[Cluster]) -> List[int]:
    """
    Assign each data point to the nearest cluster.

    Ties go to the cluster that comes first in the list.

    Args:
        data: Data matrix
        clusters: List of clusters

    Returns:
        Position in ``clusters`` of the nearest cluster for every row
    """
    for cluster in clusters:
        cluster.clear_members()

    assignments = []
    for i, point in enumerate(data):
        min_dist = float('inf')
        nearest = 0

        for j, cluster in enumerate(clusters):
            dist = euclidean_distance(point, cluster.center)
            if dist < min_dist:
                min_dist = dist
                nearest = j

        clusters[nearest].add_member(i)
        assignments.append(nearest)

    return assignments


def update_cluster_centers(data: np.ndarray, clusters: List[Cluster]) -> None:
    for cluster in clusters:
        cluster.update_center(data)


def filter_empty_clusters(clusters: List[Cluster]) -> List[Cluster]:
    return [cluster for cluster in clusters if cluster.members]


def kmeans(data: np.ndarray,
           k: int,
           max_iterations: int = 100,
           rng: RandomSource = None,
           initial_centroids: Optional[np.ndarray] = None) -> Tuple[List[int], np.ndarray]:
    """
    Perform K-means clustering on the data.

    Stops as soon as an iteration reproduces the previous assignment.
    Clusters that lose all their members keep their last center.

    Args:
        data: Data matrix with at least k rows
        k: Number of clusters
        max_iterations: Maximum number of assignment passes
        rng: Random source for seeding, ignored if initial_centroids is given
        initial_centroids: Optional k x m matrix of starting centers

    Returns:
        Tuple of (cluster index per row, k x m matrix of final centers)
    """
    validate_params(k, max_iterations)
    data = np.asarray(data, dtype=float)

    if initial_centroids is not None:
        initial_centroids = np.asarray(initial_centroids, dtype=float)
        if initial_centroids.shape[0] != k:
            raise InvalidConfiguration(f"Expected {k} initial centroids, got {initial_centroids.shape[0]}")
        clusters = [Cluster(center, [], i) for i, center in enumerate(initial_centroids)]
    else:
        clusters = init_clusters(data, k, rng)

    assignments: List[int] = []
    for iteration in range(max_iterations):
        new_assignments = assign_points_to_clusters(data, clusters)

        if new_assignments == assignments:
            logger.debug(f"K-means converged after {iteration} iterations")
            break

        assignments = new_assignments
        update_cluster_centers(data, clusters)
    else:
        logger.debug(f"K-means stopped after {max_iterations} iterations without converging")

    # Membership follows the last accepted assignment
    for cluster in clusters:
        cluster.clear_members()
    for i, cluster_idx in enumerate(assignments):
        clusters[cluster_idx].add_member(i)

    centers = np.array([cluster.center for cluster in clusters], dtype=float)
    return assignments, centers


def cluster_sessions(sessions: List[Session],
                     items: List[ScaleItem],
                     k: int = 3,
                     max_iterations: int = 100,
                     rng: RandomSource = None) -> List[ClusterAssignment]:
    """
    Group completed sessions into at most k clusters of similar responses.

    Missing responses count as neutral (0). With fewer completed sessions
    than k, or no items, nothing is clustered and an empty list is
    returned. Clusters left without members are dropped, so fewer than k
    clusters may come back.

    Args:
        sessions: Sessions of any status
        items: Items in configuration order, one matrix column each
        k: Number of clusters
        max_iterations: Maximum number of iterations
        rng: Seed or numpy random source for centroid seeding; None is
            unseeded and so not reproducible

    Returns:
        List of ClusterAssignment ordered by cluster id
    """
    validate_params(k, max_iterations)

    matrix = response_matrix(sessions, items)
    n_rows, n_cols = matrix.shape

    if n_rows < k:
        logger.warning(f"Skipping clustering: {n_rows} completed sessions for k={k}")
        return []

    if n_cols == 0:
        logger.warning("Skipping clustering: no scale items")
        return []

    assignments, centers = kmeans(matrix.to_numpy(dtype=float), k, max_iterations, rng)

    session_ids = list(matrix.index)
    clusters = [Cluster(centers[i], [], i) for i in range(k)]
    for row, cluster_idx in enumerate(assignments):
        clusters[cluster_idx].add_member(row)

    return [
        ClusterAssignment(
            cluster_id=cluster.id,
            centroid=cluster.center.tolist(),
            members=[session_ids[idx] for idx in cluster.members],
            member_count=len(cluster.members)
        )
        for cluster in filter_empty_clusters(clusters)
    ]
