"""
Deterministic pole flipping for counterbalancing.

Each session gets a reproducible flip pattern derived from its identifier,
so a participant who reloads the survey sees the same presentation and the
stored flip flags can always be recomputed.
"""

from typing import Dict, List

LCG_MULTIPLIER = 1103515245
LCG_INCREMENT = 12345
LCG_MODULUS = 2 ** 31


def _utf16_code_units(s: str) -> List[int]:
    data = s.encode('utf-16-le')
    return [data[i] | (data[i + 1] << 8) for i in range(0, len(data), 2)]


def hash_string(s: str) -> int:
    """
    Fold a string into a non-negative integer seed.

    Computes ``hash = hash * 31 + code`` over the UTF-16 code units of the
    string, wrapping to a signed 32-bit integer at every step, and returns
    the absolute value of the result. The empty string hashes to 0.

    Args:
        s: String to hash

    Returns:
        Non-negative integer seed
    """
    h = 0
    for code in _utf16_code_units(s):
        h = (h * 31 + code) & 0xFFFFFFFF
        if h >= 0x80000000:
            h -= 0x100000000
    return abs(h)


class SeededRandom:
    """
    Linear congruential generator producing floats in [0, 1).
    """

    def __init__(self, seed: int):
        """
        Initialize the generator.

        Args:
            seed: Initial state
        """
        self.state = seed

    def random(self) -> float:
        """Advance the state and return the next draw."""
        self.state = (self.state * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS
        return self.state / LCG_MODULUS

    def __call__(self) -> float:
        return self.random()


def flip_pattern(session_id: str, item_ids: List[str], enabled: bool) -> Dict[str, bool]:
    """
    Decide for each item whether its poles are presented swapped.

    One draw is consumed per item, in the order given, so callers must pass
    a stable order (the configuration order). With randomization disabled
    every item maps to False and no draws are made.

    Args:
        session_id: Opaque session identifier used as the seed
        item_ids: Item identifiers in configuration order
        enabled: Whether randomization is enabled for the project

    Returns:
        Mapping from item id to flip flag
    """
    if not enabled:
        return {item_id: False for item_id in item_ids}

    rng = SeededRandom(hash_string(session_id))

    pattern = {}
    for item_id in item_ids:
        pattern[item_id] = rng.random() > 0.5
    return pattern
