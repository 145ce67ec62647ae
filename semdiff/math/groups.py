"""
Group comparison.

Partitions completed sessions by their group key and computes per-item
statistics for each group, so cohorts can be compared side by side.
"""

import logging
from typing import Dict, List

from semdiff.math.normalize import validate_scale
from semdiff.math.stats import summarize_item
from semdiff.schemas.models import GroupProfile, ItemStatistics, ScaleItem, Session
from semdiff.utils.general import round_to

logger = logging.getLogger(__name__)


def profile_from_stats(item_stats: List[ItemStatistics]) -> List[int]:
    """
    Remap item means from [-50, 50] to integers in [0, 100].

    Args:
        item_stats: Statistics in item order

    Returns:
        Profile vector for radar charts
    """
    return [int(round_to(((stats.mean + 50) / 100) * 100, 0)) for stats in item_stats]


def profile_vector(sessions: List[Session],
                   items: List[ScaleItem],
                   mode: str = 'discrete',
                   scale_points: int = 7) -> List[int]:
    """
    Mean of each item over completed sessions, remapped to 0-100.

    Args:
        sessions: Sessions of any status
        items: Items in configuration order
        mode: 'discrete' or 'continuous'
        scale_points: Number of points on a discrete scale

    Returns:
        One integer per item
    """
    return profile_from_stats([summarize_item(sessions, item, mode, scale_points) for item in items])


def partition_sessions(sessions: List[Session]) -> Dict[str, List[Session]]:
    """
    Split completed sessions by group key, in order of first appearance.

    Sessions with no group id land in the 'ungrouped' partition.

    Args:
        sessions: Sessions of any status

    Returns:
        Ordered mapping from group key to its completed sessions
    """
    groups: Dict[str, List[Session]] = {}
    for session in sessions:
        if not session.is_completed:
            continue
        groups.setdefault(session.group_key, []).append(session)
    return groups


def compare_groups(sessions: List[Session],
                   items: List[ScaleItem],
                   mode: str,
                   scale_points: int) -> List[GroupProfile]:
    """
    Compute a profile per group of completed sessions.

    Groups are returned in discovery order. A group's label is the label
    of its first session, falling back to the group key.

    Args:
        sessions: Sessions of any status
        items: Items in configuration order
        mode: 'discrete' or 'continuous'
        scale_points: Number of points on a discrete scale

    Returns:
        List of GroupProfile
    """
    validate_scale(mode, scale_points)

    profiles = []
    for group_id, group_sessions in partition_sessions(sessions).items():
        item_stats = [summarize_item(group_sessions, item, mode, scale_points) for item in items]

        profiles.append(GroupProfile(
            group_id=group_id,
            group_label=group_sessions[0].group_label or group_id,
            item_stats=item_stats,
            profile_vector=profile_from_stats(item_stats),
            participant_count=sum(1 for s in group_sessions if s.is_completed)
        ))

    logger.debug(f"Compared {len(profiles)} groups over {len(items)} items")
    return profiles
