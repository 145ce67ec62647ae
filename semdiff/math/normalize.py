"""
Response normalization.

Maps a participant's raw input onto the common signed scale [-50, 50],
where the configured ``low`` pole is always negative regardless of how the
item was presented.
"""

from typing import Optional

from semdiff.errors import InvalidConfiguration
from semdiff.schemas.models import MODES, ResponseRecord, Session
from semdiff.utils.general import round_to, now_ms


def validate_scale(mode: str, scale_points: int) -> None:
    """
    Check the scale settings shared by normalization and statistics.

    Args:
        mode: 'discrete' or 'continuous'
        scale_points: Number of selectable points on a discrete scale

    Raises:
        InvalidConfiguration: If the mode is unknown or scale_points <= 0
    """
    if mode not in MODES:
        raise InvalidConfiguration(f"Unknown scale mode: {mode!r}")
    if scale_points is None or scale_points <= 0:
        raise InvalidConfiguration(f"scale_points must be positive, got {scale_points}")


def normalize(raw_value: float, was_flipped: bool, mode: str, scale_points: int) -> float:
    """
    Normalize a raw response to the signed [-50, 50] scale.

    In discrete mode the raw value is a position in [0, scale_points - 1]
    and the middle position maps to 0. In continuous mode the raw value is
    a percentage in [0, 100]. A flipped presentation negates the result.
    Out-of-domain raw values are not guarded and give out-of-range results.

    Args:
        raw_value: Position index or percentage
        was_flipped: Whether the poles were swapped when the item was shown
        mode: 'discrete' or 'continuous'
        scale_points: Number of points on a discrete scale

    Returns:
        Normalized value rounded to one decimal place
    """
    validate_scale(mode, scale_points)

    if mode == 'discrete':
        midpoint = (scale_points - 1) / 2
        if midpoint == 0:
            normalized = 0.0
        else:
            normalized = ((raw_value - midpoint) / midpoint) * 50
    else:
        normalized = raw_value - 50

    if was_flipped:
        normalized = -normalized

    return round_to(normalized, 1)


def build_response(item_id: str,
                   raw_value: float,
                   was_flipped: bool,
                   mode: str,
                   scale_points: int,
                   timestamp: Optional[int] = None) -> ResponseRecord:
    """
    Record a response together with its normalized value.

    Args:
        item_id: Item the response belongs to
        raw_value: Position index or percentage as submitted
        was_flipped: Flip flag in effect when the item was rendered
        mode: 'discrete' or 'continuous'
        scale_points: Number of points on a discrete scale
        timestamp: Submission time in ms since epoch (defaults to now)

    Returns:
        ResponseRecord with the normalized value filled in
    """
    return ResponseRecord(
        item_id=item_id,
        raw_value=raw_value,
        was_flipped=was_flipped,
        value=normalize(raw_value, was_flipped, mode, scale_points),
        timestamp=now_ms() if timestamp is None else timestamp
    )


def renormalize(session: Session, mode: str, scale_points: int) -> Session:
    """
    Recompute every normalized value of a session from raw value and flip flag.

    Args:
        session: Session to recompute
        mode: 'discrete' or 'continuous'
        scale_points: Number of points on a discrete scale

    Returns:
        A new Session; the input is left untouched
    """
    responses = [
        response.model_copy(update={
            'value': normalize(response.raw_value, response.was_flipped, mode, scale_points)
        })
        for response in session.responses
    ]
    return session.model_copy(update={'responses': responses})
