"""Risky operations without error handling."""

import re
from typing import List, Optional

from ..models import MetricResult, Severity
from ..scanning.languages import LANGUAGES
from ..scanning.tokens import FunctionSpan, TokenStream
from .base import Metric, MetricContext

# Lines above a function searched for handling (decorators, attributes).
_LOOKBEHIND_LINES = 2

# Decorators and attributes: @retry, #[retry], [Retry].
_ANNOTATION = re.compile(r"^\s*(?:@|#!?\[|\[)")


class ErrorHandlingMetric(Metric):
    name = "error_handling"
    display_name = "Error Handling"
    description = "Share of risk-bearing functions without error handling"

    def compute(self, stream: TokenStream, ctx: MetricContext) -> MetricResult:
        risky = 0
        findings = []
        owners = stream.function_owners()
        for fn in stream.functions:
            profile = LANGUAGES.get(fn.language, stream.profile)
            patterns = profile.compiled
            if not patterns.risks:
                continue
            body = stream.code_text(fn.start_line, fn.end_line)
            if not any(p.search(body) for p in patterns.risks):
                continue
            risky += 1

            context = self._lookbehind(stream, fn, owners) + "\n" + body
            handled = any(p.search(context) for p in patterns.handlers)
            swallowed = any(p.search(body) for p in patterns.swallows)
            if swallowed:
                findings.append(
                    self.finding(fn.start_line, Severity.WARNING, f"function '{fn.name}' swallows errors")
                )
            elif not handled:
                findings.append(
                    self.finding(
                        fn.start_line,
                        Severity.WARNING,
                        f"function '{fn.name}' performs risky operations without error handling",
                    )
                )

        if risky == 0:
            return self.result(0.0)
        return self.result(100.0 * len(findings) / risky, findings)

    @staticmethod
    def _lookbehind(stream: TokenStream, fn: FunctionSpan, owners: List[Optional[int]]) -> str:
        """Code lines directly above ``fn`` that may carry its handling.

        Stops at the first line inside a preceding function. Lines of an
        enclosing function count only when they are annotations.
        """
        picked = []
        for line in range(fn.start_line - 1, max(fn.start_line - 1 - _LOOKBEHIND_LINES, 0), -1):
            owner = owners[line - 1]
            code = stream.code_lines[line - 1]
            if owner is not None:
                outer = stream.functions[owner]
                if outer.end_line < fn.end_line or not _ANNOTATION.match(code):
                    break
            picked.append(code)
        return "\n".join(reversed(picked))
