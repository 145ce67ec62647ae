"""
Statistical functions for the semdiff math module.

This module computes descriptive statistics of normalized responses for
one scale item: mean, population standard deviation, median, extremes
and, for discrete scales, the distribution over scale points.
"""

import numpy as np
from typing import Iterable, List, Optional

from semdiff.math.normalize import validate_scale
from semdiff.schemas.models import ItemStatistics, ScaleItem, Session
from semdiff.utils.general import round_to, round_half_up


def empty_distribution(mode: str, scale_points: int) -> Optional[List[int]]:
    """
    Zero distribution for a scale, or None for continuous scales.

    Args:
        mode: 'discrete' or 'continuous'
        scale_points: Number of points on a discrete scale

    Returns:
        List of scale_points zeros in discrete mode, None otherwise
    """
    if mode != 'discrete':
        return None
    return [0] * scale_points


def discrete_distribution(values: Iterable[float], scale_points: int) -> List[int]:
    """
    Count normalized values per discrete scale point.

    Each value is mapped back to the position it came from. Positions that
    fall outside the scale after rounding are skipped.

    Args:
        values: Normalized values
        scale_points: Number of points on the scale

    Returns:
        Count per scale point
    """
    distribution = [0] * scale_points
    midpoint = (scale_points - 1) / 2

    for value in values:
        index = round_half_up((value / 50) * midpoint + midpoint)
        if 0 <= index < scale_points:
            distribution[index] += 1

    return distribution


def calculate_item_statistics(values: Iterable[float],
                              mode: str,
                              scale_points: int,
                              item: Optional[ScaleItem] = None) -> ItemStatistics:
    """
    Compute descriptive statistics over normalized values of one item.

    The standard deviation is the population one (divides by n). Mean,
    standard deviation and median are rounded to one decimal; min and max
    are returned exactly. An empty input gives all-zero statistics.

    Args:
        values: Normalized values from completed sessions
        mode: 'discrete' or 'continuous'
        scale_points: Number of points on a discrete scale
        item: Item the values belong to, used for labelling the result

    Returns:
        ItemStatistics for the values
    """
    validate_scale(mode, scale_points)

    labels = {
        'item_id': item.id if item is not None else '',
        'low': item.low if item is not None else '',
        'high': item.high if item is not None else '',
    }

    arr = np.asarray(list(values), dtype=float)

    if arr.size == 0:
        return ItemStatistics(
            **labels,
            distribution=empty_distribution(mode, scale_points)
        )

    distribution = None
    if mode == 'discrete':
        distribution = discrete_distribution(arr.tolist(), scale_points)

    return ItemStatistics(
        **labels,
        mean=round_to(float(np.mean(arr)), 1),
        std_dev=round_to(float(np.std(arr)), 1),
        median=round_to(float(np.median(arr)), 1),
        min=float(np.min(arr)),
        max=float(np.max(arr)),
        count=int(arr.size),
        distribution=distribution
    )


def item_values(sessions: Iterable[Session], item_id: str) -> List[float]:
    """
    Collect the normalized values for an item from completed sessions.

    Sessions without a response for the item contribute nothing.

    Args:
        sessions: Sessions to scan
        item_id: Item to collect

    Returns:
        Normalized values in session order
    """
    values = []
    for session in sessions:
        if not session.is_completed:
            continue
        response = session.response_for(item_id)
        if response is not None:
            values.append(response.value)
    return values


def summarize_item(sessions: Iterable[Session],
                   item: ScaleItem,
                   mode: str,
                   scale_points: int) -> ItemStatistics:
    """
    Statistics for one item over the completed sessions of a collection.

    Args:
        sessions: Sessions of any status
        item: Item to summarize
        mode: 'discrete' or 'continuous'
        scale_points: Number of points on a discrete scale

    Returns:
        ItemStatistics for the item
    """
    return calculate_item_statistics(item_values(sessions, item.id), mode, scale_points, item)
