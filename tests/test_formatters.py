"""Tests for the rich and JSON formatters."""

import json

import pytest

from messmeter.config import METRIC_NAMES, AnalysisConfig
from messmeter.formatters import JsonFormatter, RichFormatter, get_formatter
from messmeter.models import (
    AggregateReport,
    FileRecord,
    Finding,
    MetricResult,
    Severity,
    SkipReason,
    UnanalyzedFile,
)
from messmeter.scoring import Aggregator


@pytest.fixture
def report():
    aggregator = Aggregator(AnalysisConfig())
    metrics = {name: MetricResult(name, 40.0) for name in METRIC_NAMES}
    metrics["complexity"] = MetricResult(
        "complexity",
        60.0,
        (Finding("complexity", 3, Severity.CRITICAL, "function 'busy' has cyclomatic complexity 17"),),
    )
    record = FileRecord("pkg/busy.js", "javascript", total_lines=20, code_lines=15, comment_lines=2, blank_lines=3)
    return aggregator.aggregate(
        [aggregator.score_file(record, metrics)],
        [UnanalyzedFile("logo.png", SkipReason.UNSUPPORTED_LANGUAGE, ".png")],
    )


class TestGetFormatter:
    """Lookup by name."""

    def test_known(self):
        assert isinstance(get_formatter("rich"), RichFormatter)
        assert isinstance(get_formatter("json"), JsonFormatter)

    def test_unknown(self):
        with pytest.raises(ValueError):
            get_formatter("xml")


class TestJsonFormatter:
    """Machine readable output."""

    def test_round_values(self, report):
        data = json.loads(JsonFormatter().format(report))
        assert data["files"][0]["metrics"]["complexity"] == 60.0
        assert data["files"][0]["findings"][0]["severity"] == "critical"
        assert data["unanalyzed"][0]["reason"] == "unsupported_language"
        assert data["quality_level"]["label"] == report.quality_level.label

    def test_render_prints(self, report, capsys):
        JsonFormatter().render(report)
        assert json.loads(capsys.readouterr().out)["total_files"] == 1


class TestRichFormatter:
    """Terminal output captured as plain text."""

    def test_sections(self, report):
        text = RichFormatter().format(report)
        assert f"Mess score: {report.score:.1f} / 100" in text
        assert "Metrics" in text
        assert "Error Handling" in text
        assert "TOP 1 FILES REQUIRING ATTENTION" in text
        assert "1. pkg/busy.js" in text
        assert "L3 complexity function 'busy' has cyclomatic complexity 17" in text
        assert "Skipped 1 files: 1 unsupported_language" in text

    def test_empty_report(self):
        text = RichFormatter().format(AggregateReport.empty())
        assert "No analyzable source files found." in text
        assert "Mess score" not in text
