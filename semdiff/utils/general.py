"""
General utility functions for the semdiff package.
"""

import math
import time
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Iterable, List, TypeVar

T = TypeVar('T')


def round_to(n: float, digits: int = 1) -> float:
    """
    Round a number to a specific number of decimal places.

    Halves are rounded away from zero (2.25 -> 2.3, -2.25 -> -2.3). The
    decimal repr of the float is rounded, so values that print as an exact
    half are treated as one. Non-finite values are returned unchanged.

    Args:
        n: Number to round
        digits: Number of decimal digits to keep

    Returns:
        Rounded number
    """
    if not math.isfinite(n):
        return n

    value = Decimal(repr(float(n)))
    quantum = Decimal(1).scaleb(-digits)

    # quantize needs room for every integer digit plus the kept decimals
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + digits + 2)
        rounded = float(value.quantize(quantum, rounding=ROUND_HALF_UP))

    # Collapse -0.0
    return rounded + 0.0


def round_half_up(x: float) -> int:
    """
    Round to the nearest integer, halves toward positive infinity.

    Args:
        x: Number to round

    Returns:
        Nearest integer
    """
    return int(math.floor(x + 0.5))


def distinct(coll: Iterable[T]) -> List[T]:
    """
    Return a list with duplicates removed, preserving order.

    Args:
        coll: Collection to process

    Returns:
        List with duplicates removed
    """
    seen = set()
    result = []
    for item in coll:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


def now_ms() -> int:
    """Current time in milliseconds since the epoch."""
    return int(time.time() * 1000)
