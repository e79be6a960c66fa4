"""
Utilization bands.

Bands:
- none: 0%
- light: 1-50%
- moderate: 51-80%
- heavy: 81-100%
- over: > 100%

Each band includes its upper edge: 50 is light, 100 is heavy.
"""

from enum import Enum


class UtilizationBand(str, Enum):
    """Discrete classification of an aggregate allocation."""
    NONE = "none"
    LIGHT = "light"
    MODERATE = "moderate"
    HEAVY = "heavy"
    OVER = "over"


LIGHT_MAX = 50.0
MODERATE_MAX = 80.0
HEAVY_MAX = 100.0


def classify(aggregate_percentage: float) -> UtilizationBand:
    """Map an aggregate percentage to its band."""
    if aggregate_percentage <= 0:
        return UtilizationBand.NONE
    if aggregate_percentage <= LIGHT_MAX:
        return UtilizationBand.LIGHT
    if aggregate_percentage <= MODERATE_MAX:
        return UtilizationBand.MODERATE
    if aggregate_percentage <= HEAVY_MAX:
        return UtilizationBand.HEAVY
    return UtilizationBand.OVER


def display_percentage(aggregate_percentage: float) -> float:
    """Percentage clamped to [0, 100] for labels. Never feed this back into classify()."""
    return max(0.0, min(aggregate_percentage, HEAVY_MAX))
