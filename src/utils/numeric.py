"""Numeric helpers shared by the normalizer and the dashboard helpers."""

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards positive infinity.

    Python's ``round`` uses banker's rounding (``round(1012.5) == 1012``),
    which would put displayed values and pressures one off on exact halves.
    """
    return int(math.floor(value + 0.5))
