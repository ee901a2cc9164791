"""Quality levels: eleven bands over the 0-100 composite scale."""

from bisect import bisect_right
from typing import Tuple

from ..models import QualityLevel

# Upper bounds are exclusive: a score of exactly 5 is already "mild", and
# only a perfect 100 reaches "ultimate".
QUALITY_LEVELS: Tuple[QualityLevel, ...] = (
    QualityLevel("clean", "Clean", 5.0),
    QualityLevel("mild", "Mild issues", 15.0),
    QualityLevel("moderate", "Moderate", 25.0),
    QualityLevel("bad", "Bad", 40.0),
    QualityLevel("terrible", "Terrible", 55.0),
    QualityLevel("disaster", "Disaster", 65.0),
    QualityLevel("severe", "Severe", 75.0),
    QualityLevel("very_bad", "Very bad", 85.0),
    QualityLevel("extreme", "Extreme", 95.0),
    QualityLevel("worst", "Worst", 100.0),
    QualityLevel("ultimate", "Ultimate mess", None),
)

_BOUNDS = [level.upper_bound for level in QUALITY_LEVELS if level.upper_bound is not None]


def quality_level(score: float) -> QualityLevel:
    """Band for a composite score in [0, 100]."""
    return QUALITY_LEVELS[bisect_right(_BOUNDS, score)]
