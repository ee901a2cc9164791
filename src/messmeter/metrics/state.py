"""Mutable shared state: globals, statics and global-state proxies."""

from ..models import MetricResult, Severity
from ..scanning.tokens import TokenStream
from .base import Metric, MetricContext, saturating_scale

_LABELS = {
    "global": "mutable global",
    "static": "static mutable state",
    "dom": "shared global-state access",
}


class StateMetric(Metric):
    name = "state"
    display_name = "State"
    description = "Mutable global and static declarations per 100 code lines"

    def compute(self, stream: TokenStream, ctx: MetricContext) -> MetricResult:
        t = ctx.thresholds
        code_lines = stream.code_line_count
        if code_lines == 0 or not stream.declarations:
            return self.result(0.0)

        weights = {"global": 1.0, "static": 1.0, "dom": t.dom_state_weight}
        weighted = sum(weights.get(d.kind, 1.0) for d in stream.declarations)
        density = weighted / code_lines * 100.0

        findings = [
            self.finding(
                d.line,
                Severity.INFO if d.kind == "dom" else Severity.WARNING,
                f"{_LABELS.get(d.kind, d.kind)} '{d.name}'",
            )
            for d in stream.declarations
        ]
        return self.result(saturating_scale(density, t.state_saturation_density), findings)
