"""
Analysis of one semantic-differential project.

This module wires the project configuration to the statistics, group
comparison and clustering functions and assembles a JSON-ready summary.
"""

import time
import logging
import pandas as pd
from typing import Any, Dict, List, Optional

from semdiff.components.config import Config, ConfigManager, apply_config_defaults
from semdiff.math.clusters import RandomSource, cluster_sessions
from semdiff.math.groups import compare_groups, profile_from_stats
from semdiff.math.normalize import validate_scale
from semdiff.math.randomizer import flip_pattern
from semdiff.math.response_matrix import response_table
from semdiff.math.stats import summarize_item
from semdiff.schemas.models import (
    ClusterAssignment, GroupProfile, ItemStatistics, ProjectConfig, Session
)

logger = logging.getLogger(__name__)


class ProjectAnalysis:
    """
    Computes statistics, group profiles and clusters for a project.

    The sessions are held as given; every computation reads them without
    modifying them, so repeated calls return the same results (apart from
    clustering with an unseeded random source).
    """

    def __init__(self,
                 project: ProjectConfig,
                 sessions: Optional[List[Session]] = None,
                 config: Optional[Config] = None,
                 rng: RandomSource = None):
        """
        Initialize the analysis.

        Args:
            project: Project configuration with items and scale settings;
                scale and randomization sections it leaves unset come from
                the runtime configuration
            sessions: Sessions of any status
            config: Runtime configuration (defaults to the shared instance)
            rng: Seed or numpy random source for clustering; falls back to
                the configured clustering seed
        """
        self.config = config or ConfigManager.get_config()
        self.project = apply_config_defaults(project, self.config)
        self.sessions = list(sessions or [])
        self.rng = rng if rng is not None else self.config.get('clustering.seed')

        validate_scale(self.mode, self.scale_points)

    @property
    def mode(self) -> str:
        return self.project.scale.mode

    @property
    def scale_points(self) -> int:
        return self.project.scale.points

    @property
    def items(self):
        return self.project.items

    @property
    def completed_sessions(self) -> List[Session]:
        return [s for s in self.sessions if s.is_completed]

    def flip_pattern(self, session_id: str) -> Dict[str, bool]:
        """
        Flip flags a session should be rendered with.

        Args:
            session_id: Session identifier

        Returns:
            Mapping from item id to flip flag
        """
        return flip_pattern(session_id, self.project.item_ids, self.project.randomization.enabled)

    def item_statistics(self) -> List[ItemStatistics]:
        """Statistics per item over all completed sessions, in item order."""
        return [summarize_item(self.sessions, item, self.mode, self.scale_points) for item in self.items]

    def compare_groups(self) -> List[GroupProfile]:
        return compare_groups(self.sessions, self.items, self.mode, self.scale_points)

    def profile_vector(self) -> List[int]:
        return profile_from_stats(self.item_statistics())

    def cluster(self,
                k: Optional[int] = None,
                max_iterations: Optional[int] = None) -> List[ClusterAssignment]:
        """
        Cluster completed sessions.

        Args:
            k: Number of clusters (defaults to configuration)
            max_iterations: Iteration budget (defaults to configuration)

        Returns:
            Non-empty clusters, possibly fewer than k
        """
        k = self.config.get('clustering.k', 3) if k is None else k
        max_iterations = self.config.get('clustering.max-iterations', 100) if max_iterations is None else max_iterations
        return cluster_sessions(self.sessions, self.items, k, max_iterations, self.rng)

    def response_table(self) -> pd.DataFrame:
        return response_table(self.sessions, self.items)

    def to_dict(self,
                k: Optional[int] = None,
                max_iterations: Optional[int] = None) -> Dict[str, Any]:
        """
        Run every analysis and collect the results.

        Args:
            k: Number of clusters (defaults to configuration)
            max_iterations: Iteration budget (defaults to configuration)

        Returns:
            JSON-serializable summary
        """
        start_time = time.time()
        logger.info(f"Analyzing {len(self.sessions)} sessions over {len(self.items)} items")

        item_stats = self.item_statistics()
        logger.info(f"[{time.time() - start_time:.2f}s] Item statistics computed")

        groups = self.compare_groups()
        logger.info(f"[{time.time() - start_time:.2f}s] Compared {len(groups)} groups")

        clusters = self.cluster(k, max_iterations)
        logger.info(f"[{time.time() - start_time:.2f}s] Found {len(clusters)} clusters")

        return {
            'scale': {'mode': self.mode, 'points': self.scale_points},
            'session_count': len(self.sessions),
            'completed_count': len(self.completed_sessions),
            'item_stats': [stats.model_dump() for stats in item_stats],
            'profile_vector': profile_from_stats(item_stats),
            'groups': [group.model_dump() for group in groups],
            'clusters': [cluster.model_dump() for cluster in clusters],
        }
