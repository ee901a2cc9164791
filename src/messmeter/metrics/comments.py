"""Comment ratio and undocumented large functions."""

from typing import List

from ..models import MetricResult, Severity
from ..scanning.tokens import CommentSpan, FunctionSpan, TokenStream
from .base import Metric, MetricContext, clamp


def _has_comment(fn: FunctionSpan, comments: List[CommentSpan], lookbehind: int) -> bool:
    lo = fn.start_line - lookbehind
    return any(c.start_line <= fn.end_line and c.end_line >= lo for c in comments)


class CommentsMetric(Metric):
    name = "comments"
    display_name = "Comments"
    description = "Comment lines relative to code lines"

    def compute(self, stream: TokenStream, ctx: MetricContext) -> MetricResult:
        t = ctx.thresholds
        code_lines = stream.code_line_count
        if code_lines == 0:
            return self.result(0.0)

        doc = stream.doc_line_count
        plain = stream.comment_line_count - doc
        ratio = (plain + doc * t.doc_comment_bonus) / code_lines
        score = clamp((1.0 - ratio / t.comment_target_ratio) * 100.0) if t.comment_target_ratio > 0 else 0.0

        findings = []
        for fn in stream.functions:
            if fn.length < t.large_function_lines:
                continue
            if not _has_comment(fn, stream.comments, t.comment_lookbehind_lines):
                findings.append(
                    self.finding(
                        fn.start_line,
                        Severity.WARNING,
                        f"function '{fn.name}' ({fn.length} lines) has no comments",
                    )
                )
        if ratio < t.comment_target_ratio / 4:
            findings.append(
                self.finding(
                    1,
                    Severity.INFO,
                    f"comment ratio {ratio:.0%} is far below the {t.comment_target_ratio:.0%} target",
                )
            )
        return self.result(score, findings)
