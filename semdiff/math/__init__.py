"""
Core algorithms for response normalization, statistics and clustering.

This module contains implementations of:
- Deterministic per-session pole flipping
- Response normalization to the signed [-50, 50] scale
- Item statistics and group comparison
- K-means clustering of participants
"""

from semdiff.math.randomizer import flip_pattern, hash_string, SeededRandom
from semdiff.math.normalize import normalize, build_response, renormalize
from semdiff.math.stats import calculate_item_statistics, summarize_item
from semdiff.math.groups import compare_groups, profile_vector
from semdiff.math.clusters import cluster_sessions, kmeans
from semdiff.math.response_matrix import response_matrix, response_table

__all__ = [
    'flip_pattern',
    'hash_string',
    'SeededRandom',
    'normalize',
    'build_response',
    'renormalize',
    'calculate_item_statistics',
    'summarize_item',
    'compare_groups',
    'profile_vector',
    'cluster_sessions',
    'kmeans',
    'response_matrix',
    'response_table',
]
