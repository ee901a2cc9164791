"""Combining metric sub-scores into file and project scores."""

from .aggregator import Aggregator
from .levels import QUALITY_LEVELS, quality_level

__all__ = ["Aggregator", "QUALITY_LEVELS", "quality_level"]
