"""Cyclomatic complexity per function."""

from typing import List, Tuple

from ..models import MetricResult, Severity
from ..scanning.tokens import TokenStream
from .base import Metric, MetricContext, linear_scale

TOP_LEVEL = "<top-level>"


class ComplexityMetric(Metric):
    name = "complexity"
    display_name = "Complexity"
    description = "Decision points per function (McCabe)"

    def compute(self, stream: TokenStream, ctx: MetricContext) -> MetricResult:
        t = ctx.thresholds
        units = self.function_complexities(stream)
        if not units:
            return self.result(0.0)

        values = [c for _, _, c in units]
        worst = max(values)
        average = sum(values) / len(values)
        share = t.complexity_max_share
        score = share * linear_scale(worst, t.complexity_low, t.complexity_high) + (
            1 - share
        ) * linear_scale(average, t.complexity_low, t.complexity_high)

        findings = []
        for name, line, value in units:
            if value > t.complexity_critical:
                severity = Severity.CRITICAL
            elif value > t.complexity_warn:
                severity = Severity.WARNING
            else:
                continue
            label = "top-level code" if name == TOP_LEVEL else f"function '{name}'"
            findings.append(self.finding(line, severity, f"{label} has cyclomatic complexity {value}"))

        return self.result(score, findings)

    @staticmethod
    def function_complexities(stream: TokenStream) -> List[Tuple[str, int, int]]:
        """(name, line, complexity) for every function plus a top-level pseudo-function.

        Each decision counts toward its innermost enclosing function only.
        """
        counts = [1] * len(stream.functions)
        top_level = 0
        top_line = 0
        for hit in stream.decisions:
            if hit.function is None:
                top_level += 1
                if not top_line or hit.line < top_line:
                    top_line = hit.line
            else:
                counts[hit.function] += 1

        units = [(fn.name, fn.start_line, counts[i]) for i, fn in enumerate(stream.functions)]
        if top_level:
            units.append((TOP_LEVEL, top_line, 1 + top_level))
        return units
