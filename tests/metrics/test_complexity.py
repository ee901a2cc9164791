"""Tests for the cyclomatic complexity metric."""

import pytest

from messmeter.metrics import ComplexityMetric
from messmeter.metrics.complexity import TOP_LEVEL
from messmeter.models import Severity

CANONICAL = """\
function check(a, b) {
  if (a && b) {
    for (const x of a) {
      use(x);
    }
  }
}
"""


def _busy_function(branches):
    body = "".join(f"  if (x === {i}) {{ x++; }}\n" for i in range(branches))
    return "function busy(x) {\n" + body + "}\n"


class TestFunctionComplexities:
    """Per-function McCabe counts."""

    def test_canonical_function(self, scan):
        stream = scan(CANONICAL, "javascript")
        assert ComplexityMetric.function_complexities(stream) == [("check", 1, 4)]

    def test_straight_line_function_is_one(self, scan):
        stream = scan("def f():\n    return 1\n", "python")
        assert ComplexityMetric.function_complexities(stream) == [("f", 1, 1)]

    def test_nested_function_decisions_are_not_double_counted(self, scan):
        text = (
            "def outer(x):\n"
            "    if x:\n"
            "        pass\n"
            "    def inner(y):\n"
            "        if y:\n"
            "            return 1\n"
            "        while y:\n"
            "            y -= 1\n"
            "    return inner\n"
        )
        stream = scan(text, "python")
        assert ComplexityMetric.function_complexities(stream) == [("outer", 1, 2), ("inner", 4, 3)]

    def test_top_level_pseudo_function(self, scan):
        stream = scan("if ready:\n    start()\nfor x in y:\n    pass\n", "python")
        assert ComplexityMetric.function_complexities(stream) == [(TOP_LEVEL, 1, 3)]

    def test_no_top_level_unit_without_decisions(self, scan):
        stream = scan("x = 1\ny = 2\n", "python")
        assert ComplexityMetric.function_complexities(stream) == []


class TestComplexityScore:
    """Score blends the worst and the average function."""

    def test_simple_code_scores_zero(self, scan, ctx):
        result = ComplexityMetric().compute(scan(CANONICAL, "javascript"), ctx)
        assert result.score == 0.0
        assert result.findings == ()

    def test_comment_only_file_scores_zero(self, scan, ctx):
        result = ComplexityMetric().compute(scan("# only\n# comments\n", "python"), ctx)
        assert result.score == 0.0

    def test_critical_finding(self, scan, ctx):
        result = ComplexityMetric().compute(scan(_busy_function(16), "javascript"), ctx)
        assert result.score == pytest.approx(48.0)
        assert len(result.findings) == 1
        finding = result.findings[0]
        assert finding.severity is Severity.CRITICAL
        assert finding.line == 1
        assert finding.message == "function 'busy' has cyclomatic complexity 17"

    def test_warning_finding(self, scan, ctx):
        result = ComplexityMetric().compute(scan(_busy_function(11), "javascript"), ctx)
        assert [f.severity for f in result.findings] == [Severity.WARNING]

    def test_at_warn_threshold_no_finding(self, scan, ctx):
        result = ComplexityMetric().compute(scan(_busy_function(9), "javascript"), ctx)
        assert result.findings == ()

    def test_saturates_at_100(self, scan, ctx):
        result = ComplexityMetric().compute(scan(_busy_function(40), "javascript"), ctx)
        assert result.score == 100.0
