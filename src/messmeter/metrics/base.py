"""Base class for metric calculators."""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable, Optional

from ..config import ThresholdConfig
from ..models import Finding, MetricResult, Severity
from ..scanning.tokens import TokenStream

if TYPE_CHECKING:
    from .duplication import DuplicationIndex


@dataclass(frozen=True)
class MetricContext:
    """Read-only inputs shared by every metric of one run."""

    thresholds: ThresholdConfig = field(default_factory=ThresholdConfig)
    index: Optional["DuplicationIndex"] = None


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    if math.isnan(value):
        return low
    return max(low, min(high, value))


def linear_scale(value: float, low: float, high: float) -> float:
    """0 at or below ``low``, 100 at or above ``high``."""
    if high <= low:
        return 100.0 if value > low else 0.0
    return clamp((value - low) / (high - low) * 100.0)


def saturating_scale(value: float, saturation: float) -> float:
    """0 at zero, 100 once ``value`` reaches ``saturation``."""
    if saturation <= 0:
        return 0.0
    return clamp(value / saturation * 100.0)


class Metric(ABC):
    name: str
    display_name: str
    description: str

    @abstractmethod
    def compute(self, stream: TokenStream, ctx: MetricContext) -> MetricResult:
        ...

    def finding(self, line: int, severity: Severity, message: str) -> Finding:
        return Finding(metric=self.name, line=max(line, 1), severity=severity, message=message)

    def result(self, score: float, findings: Iterable[Finding] = ()) -> MetricResult:
        return MetricResult(
            name=self.name,
            score=clamp(score),
            findings=tuple(sorted(findings, key=Finding.sort_key)),
        )
