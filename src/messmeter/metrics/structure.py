"""Nesting depth, oversized functions, long parameter lists and large forms."""

from typing import List, Optional, Tuple

from ..models import Finding, MetricResult, Severity
from ..scanning.languages import LANGUAGES
from ..scanning.tokens import FunctionSpan, TokenStream
from .base import Metric, MetricContext, clamp


class StructureMetric(Metric):
    name = "structure"
    display_name = "Structure"
    description = "Nesting depth, function size, parameter lists and form size"

    def compute(self, stream: TokenStream, ctx: MetricContext) -> MetricResult:
        t = ctx.thresholds
        findings: List[Finding] = []
        parts = [self._nesting_part(stream, ctx, findings)]

        if stream.profile.family == "markup":
            parts.append(self._embedded_functions_part(stream, ctx, findings))
            parts.append(self._embedded_rules_part(stream, ctx, findings))

        for block in stream.blocks:
            if block.kind != "form" or block.size <= t.form_field_limit:
                continue
            parts.append(clamp((block.size - t.form_field_limit) * t.form_field_step))
            label = f"form '{block.label}'" if block.label else "form"
            findings.append(
                self.finding(
                    block.start_line,
                    Severity.WARNING,
                    f"{label} has {block.size} fields (limit {t.form_field_limit})",
                )
            )

        for fn in stream.functions:
            findings.extend(self._size_findings(fn, ctx))

        return self.result(max(parts), findings)

    # ── nesting ──

    def _nesting_finding(self, depth: int, threshold: int, line: int, where: str) -> Finding:
        severity = Severity.CRITICAL if depth >= threshold + 2 else Severity.WARNING
        return self.finding(line, severity, f"nesting depth {depth} exceeds {threshold}{where}")

    def _nesting_part(self, stream: TokenStream, ctx: MetricContext, findings: List[Finding]) -> float:
        profile = stream.profile
        threshold = profile.nesting_threshold
        where = ""
        if profile.family in ("markup", "stylesheet") or not stream.functions:
            depth, line = stream.nesting_peak.depth, stream.nesting_peak.line
        else:
            own = [fn for fn in stream.functions if fn.language == profile.name]
            deepest = _deepest(own)
            loose = stream.loose_peak
            if deepest is None:
                depth, line = stream.nesting_peak.depth, stream.nesting_peak.line
            elif loose.depth > deepest.max_depth:
                # Top-level code, anonymous callbacks, class-level blocks.
                depth, line = loose.depth, loose.line
            else:
                depth, line = deepest.max_depth, deepest.deepest_line or deepest.start_line
                where = f" in '{deepest.name}'"

        if depth <= threshold:
            return 0.0
        findings.append(self._nesting_finding(depth, threshold, line, where))
        return clamp((depth - threshold) * ctx.thresholds.nesting_step)

    def _embedded_functions_part(self, stream: TokenStream, ctx: MetricContext, findings: List[Finding]) -> float:
        best = 0.0
        worst: Optional[Tuple[FunctionSpan, int]] = None
        for fn in stream.functions:
            profile = LANGUAGES.get(fn.language)
            threshold = profile.nesting_threshold if profile is not None else 4
            if fn.max_depth <= threshold:
                continue
            part = clamp((fn.max_depth - threshold) * ctx.thresholds.nesting_step)
            if part > best:
                best, worst = part, (fn, threshold)
        if worst is not None:
            fn, threshold = worst
            findings.append(
                self._nesting_finding(fn.max_depth, threshold, fn.deepest_line or fn.start_line, f" in '{fn.name}'")
            )
        return best

    def _embedded_rules_part(self, stream: TokenStream, ctx: MetricContext, findings: List[Finding]) -> float:
        rules = [b for b in stream.blocks if b.kind == "rule"]
        if not rules:
            return 0.0
        threshold = LANGUAGES["css"].nesting_threshold
        deepest = max(rules, key=lambda b: (b.size, -b.start_line))
        if deepest.size <= threshold:
            return 0.0
        findings.append(
            self._nesting_finding(deepest.size, threshold, deepest.start_line, " (selector chain)")
        )
        return clamp((deepest.size - threshold) * ctx.thresholds.nesting_step)

    # ── size ──

    def _size_findings(self, fn: FunctionSpan, ctx: MetricContext) -> List[Finding]:
        t = ctx.thresholds
        found = []
        if fn.length > t.very_long_function_lines:
            found.append(
                self.finding(fn.start_line, Severity.CRITICAL, f"function '{fn.name}' is {fn.length} lines long")
            )
        elif fn.length > t.long_function_lines:
            found.append(
                self.finding(fn.start_line, Severity.WARNING, f"function '{fn.name}' is {fn.length} lines long")
            )

        if fn.param_count > t.max_params_critical:
            severity = Severity.CRITICAL
        elif fn.param_count > t.max_params:
            severity = Severity.WARNING
        else:
            return found
        found.append(
            self.finding(fn.start_line, severity, f"function '{fn.name}' takes {fn.param_count} parameters")
        )
        return found


def _deepest(functions: List[FunctionSpan]) -> Optional[FunctionSpan]:
    best = None
    for fn in functions:
        if best is None or fn.max_depth > best.max_depth:
            best = fn
    return best
