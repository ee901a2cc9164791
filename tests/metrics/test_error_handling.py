"""Tests for the error handling metric."""

import pytest

from messmeter.metrics import ErrorHandlingMetric
from messmeter.models import Severity

PY_LOADERS = """\
def load(path):
    return open(path).read()


def safe_load(path):
    try:
        return open(path).read()
    except OSError:
        return None


def quiet_load(path):
    try:
        return open(path).read()
    except Exception:
        pass


def pure(x):
    return x + 1
"""


class TestErrorHandlingMetric:
    """Share of risky functions that lack proper handling."""

    def test_findings(self, scan, ctx):
        result = ErrorHandlingMetric().compute(scan(PY_LOADERS, "python"), ctx)
        assert [(f.line, f.message) for f in result.findings] == [
            (1, "function 'load' performs risky operations without error handling"),
            (12, "function 'quiet_load' swallows errors"),
        ]
        assert all(f.severity is Severity.WARNING for f in result.findings)

    def test_score_is_unhandled_share(self, scan, ctx):
        result = ErrorHandlingMetric().compute(scan(PY_LOADERS, "python"), ctx)
        assert result.score == pytest.approx(100.0 * 2 / 3)

    def test_no_risky_functions(self, scan, ctx):
        result = ErrorHandlingMetric().compute(scan("def pure(x):\n    return x + 1\n", "python"), ctx)
        assert result.score == 0.0
        assert result.findings == ()

    def test_risk_inside_string_is_ignored(self, scan, ctx):
        text = 'def label():\n    return "open(path)"\n'
        result = ErrorHandlingMetric().compute(scan(text, "python"), ctx)
        assert result.score == 0.0

    def test_go_error_check_counts_as_handling(self, scan, ctx):
        text = (
            "func read(p string) []byte {\n"
            "\tdata, err := os.ReadFile(p)\n"
            "\tif err != nil {\n"
            "\t\treturn nil\n"
            "\t}\n"
            "\treturn data\n"
            "}\n"
        )
        result = ErrorHandlingMetric().compute(scan(text, "go"), ctx)
        assert result.score == 0.0

    def test_go_unchecked_call(self, scan, ctx):
        text = "func readAll(p string) []byte {\n\tdata := os.ReadFile(p)\n\treturn data\n}\n"
        result = ErrorHandlingMetric().compute(scan(text, "go"), ctx)
        assert result.score == 100.0
        assert [f.message for f in result.findings] == [
            "function 'readAll' performs risky operations without error handling"
        ]


class TestLookbehind:
    """Handling above a function counts only when it belongs to that function."""

    def test_neighbour_catch_does_not_cover_next_function(self, scan, ctx):
        text = (
            "function a() { try { x(); } catch (e) { log(e); } }\n"
            "function b(url) { return fetch(url); }\n"
        )
        result = ErrorHandlingMetric().compute(scan(text, "javascript"), ctx)
        assert result.score == 100.0
        assert [(f.line, f.message) for f in result.findings] == [
            (2, "function 'b' performs risky operations without error handling")
        ]

    def test_neighbour_except_does_not_cover_next_function(self, scan, ctx):
        text = (
            "def parse(text):\n"
            "    try:\n"
            "        return int(text)\n"
            "    except ValueError:\n"
            "        return None\n"
            "def load(path):\n"
            "    return open(path).read()\n"
        )
        result = ErrorHandlingMetric().compute(scan(text, "python"), ctx)
        assert result.score == 100.0
        assert [f.message for f in result.findings] == [
            "function 'load' performs risky operations without error handling"
        ]

    def test_retry_decorator_counts(self, scan, ctx):
        text = "@retry(times=3)\ndef load(path):\n    return open(path).read()\n"
        result = ErrorHandlingMetric().compute(scan(text, "python"), ctx)
        assert result.score == 0.0

    def test_decorator_inside_enclosing_function_counts(self, scan, ctx):
        text = (
            "def build():\n"
            "    @retry\n"
            "    def load(path):\n"
            "        return open(path).read()\n"
            "    return load\n"
        )
        result = ErrorHandlingMetric().compute(scan(text, "python"), ctx)
        assert result.findings == ()
