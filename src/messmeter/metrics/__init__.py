"""Metric calculators. Each turns a TokenStream into a MetricResult."""

from .base import Metric, MetricContext, clamp, linear_scale, saturating_scale
from .comments import CommentsMetric
from .complexity import ComplexityMetric
from .duplication import DuplicationIndex, DuplicationMetric, FileFragments, Occurrence
from .error_handling import ErrorHandlingMetric
from .naming import NamingMetric
from .registry import METRIC_CLASSES, create_local_metrics, display_names, validate_registry
from .state import StateMetric
from .structure import StructureMetric

__all__ = [
    "METRIC_CLASSES",
    "CommentsMetric",
    "ComplexityMetric",
    "DuplicationIndex",
    "DuplicationMetric",
    "ErrorHandlingMetric",
    "FileFragments",
    "Metric",
    "MetricContext",
    "NamingMetric",
    "Occurrence",
    "StateMetric",
    "StructureMetric",
    "clamp",
    "create_local_metrics",
    "display_names",
    "linear_scale",
    "saturating_scale",
    "validate_registry",
]
