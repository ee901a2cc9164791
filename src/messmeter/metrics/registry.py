"""Metric registry: the single source of truth for the seven metrics.

Adding a metric requires a ``Metric`` subclass, an entry in
``METRIC_CLASSES`` and a weight in ``config.MetricWeights``. The scorer and
formatters pick it up from there.
"""

from typing import Dict, List, Type

from ..config import METRIC_NAMES, MetricWeights
from ..exceptions import InvalidWeightsError
from .base import Metric
from .comments import CommentsMetric
from .complexity import ComplexityMetric
from .duplication import DuplicationMetric
from .error_handling import ErrorHandlingMetric
from .naming import NamingMetric
from .state import StateMetric
from .structure import StructureMetric

METRIC_CLASSES: List[Type[Metric]] = [
    ComplexityMetric,
    StateMetric,
    CommentsMetric,
    DuplicationMetric,
    StructureMetric,
    ErrorHandlingMetric,
    NamingMetric,
]


def create_local_metrics() -> List[Metric]:
    """Instances of every metric computable from one file alone, in canonical order."""
    return [cls() for cls in METRIC_CLASSES if cls is not DuplicationMetric]


def validate_registry(weights: MetricWeights) -> None:
    """Check that every registered metric has exactly one weight.

    Raises:
        InvalidWeightsError: If metric names and weight names differ
    """
    names = tuple(cls.name for cls in METRIC_CLASSES)
    if names != METRIC_NAMES or set(weights.as_dict()) != set(names):
        raise InvalidWeightsError(weights.as_dict(), f"weights do not match metrics {list(names)}")


def display_names() -> Dict[str, str]:
    return {cls.name: cls.display_name for cls in METRIC_CLASSES}
