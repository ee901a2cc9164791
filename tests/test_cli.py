"""Tests for the command-line interface."""

import json

import pytest
from typer.testing import CliRunner

from messmeter import __version__
from messmeter.cli import app

runner = CliRunner()

SOURCE = """\
def load(path):
    data = open(path).read()
    if data:
        return data
    return None
"""


@pytest.fixture
def project(write_tree):
    return write_tree({"src/load.py": SOURCE, "notes.txt": "hello\n"})


class TestCliOptions:
    """Option validation and early exits."""

    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"messmeter version {__version__}" in result.stdout

    def test_invalid_format(self, project):
        result = runner.invoke(app, [str(project), "--format", "xml"])
        assert result.exit_code == 1

    def test_verbose_and_quiet_conflict(self, project):
        result = runner.invoke(app, [str(project), "-v", "-q"])
        assert result.exit_code == 1

    def test_missing_path(self, tmp_path):
        result = runner.invoke(app, [str(tmp_path / "missing"), "-q"])
        assert result.exit_code == 1

    def test_top_out_of_range(self, project):
        result = runner.invoke(app, [str(project), "--top", "0"])
        assert result.exit_code != 0


class TestCliReports:
    """End-to-end runs."""

    def test_rich_report(self, project):
        result = runner.invoke(app, [str(project), "-q"])
        assert result.exit_code == 0
        assert "Mess score:" in result.stdout
        assert "src/load.py" in result.stdout
        assert "Skipped 1 files: 1 unsupported_language" in result.stdout

    def test_json_stdout(self, project):
        result = runner.invoke(app, [str(project), "--format", "json", "-q"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["total_files"] == 1
        assert data["files"][0]["path"] == "src/load.py"
        assert set(data["metric_scores"]) == {
            "complexity", "state", "comments", "duplication", "structure", "error_handling", "naming",
        }

    def test_output_file(self, project, tmp_path):
        out = tmp_path / "report.json"
        result = runner.invoke(app, [str(project), "-f", "json", "-o", str(out), "-q"])
        assert result.exit_code == 0
        data = json.loads(out.read_text(encoding="utf-8"))
        assert data["unanalyzed"] == [{"path": "notes.txt", "reason": "unsupported_language", "detail": ".txt"}]

    def test_exclude(self, project):
        result = runner.invoke(app, [str(project), "-f", "json", "-q", "--exclude", "src/*"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["is_empty"] is True

    def test_fail_above(self, project):
        result = runner.invoke(app, [str(project), "-q", "--fail-above", "0"])
        assert result.exit_code == 1

    def test_fail_above_not_triggered(self, project):
        result = runner.invoke(app, [str(project), "-q", "--fail-above", "100"])
        assert result.exit_code == 0

    def test_config_file(self, project, tmp_path):
        config = tmp_path / "custom.toml"
        config.write_text("max_findings_per_file = 1\n")
        result = runner.invoke(app, [str(project), "-f", "json", "-q", "-c", str(config)])
        assert result.exit_code == 0
        assert len(json.loads(result.stdout)["files"][0]["findings"]) == 1

    def test_missing_config_file(self, project, tmp_path):
        result = runner.invoke(app, [str(project), "-q", "-c", str(tmp_path / "none.toml")])
        assert result.exit_code == 1

    def test_log_file(self, project, tmp_path):
        log = tmp_path / "run.log"
        result = runner.invoke(app, [str(project), "-q", "--log-file", str(log)])
        assert result.exit_code == 0
        assert "Analyzing codebase at" in log.read_text(encoding="utf-8")
