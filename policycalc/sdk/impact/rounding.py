"""Rounding helpers shared by the impact calculators."""

import math


def round_to_dollar(amount: float) -> int:
    """Round half up to a whole dollar.

    Python's round() rounds half to even; reported figures round .5 toward
    positive infinity instead. Example: -2.5 -> -2, 2.5 -> 3
    """
    return int(math.floor(amount + 0.5))


def clamp(value: float, low: float, high: float) -> float:
    """Limit value to the inclusive range [low, high]."""
    return max(low, min(high, value))
