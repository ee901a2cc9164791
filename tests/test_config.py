"""Tests for configuration defaults, validation and loading."""

import os

import pytest

from messmeter.config import AnalysisConfig, MetricWeights, ThresholdConfig, load_config
from messmeter.exceptions import ConfigurationError, InvalidConfigError, InvalidWeightsError


@pytest.fixture
def isolated(tmp_path, monkeypatch):
    """No global or project config files and no MESSMETER_* variables."""
    home = tmp_path / "home"
    project = tmp_path / "project"
    home.mkdir()
    project.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(project)
    for key in list(os.environ):
        if key.startswith("MESSMETER_"):
            monkeypatch.delenv(key)
    return tmp_path


class TestMetricWeights:
    """Weight table validation."""

    def test_default_total(self):
        assert MetricWeights().total == 113.0

    def test_normalized_sums_to_one(self):
        assert sum(MetricWeights().normalized().values()) == pytest.approx(1.0)

    def test_negative_weight(self):
        with pytest.raises(InvalidWeightsError):
            MetricWeights(naming=-1)

    def test_all_zero(self):
        with pytest.raises(InvalidWeightsError):
            MetricWeights(0, 0, 0, 0, 0, 0, 0)


class TestThresholdConfig:
    """Threshold validation."""

    def test_defaults(self):
        t = ThresholdConfig()
        assert t.complexity_warn == 10
        assert t.complexity_critical == 15
        assert t.dup_shingle_size == 20

    def test_inverted_complexity_range(self):
        with pytest.raises(InvalidConfigError):
            ThresholdConfig(complexity_low=30, complexity_high=5)

    def test_ratio_out_of_range(self):
        with pytest.raises(InvalidConfigError):
            ThresholdConfig(dup_near_ratio=1.5)


class TestAnalysisConfig:
    """Run configuration validation."""

    def test_defaults(self):
        config = AnalysisConfig()
        assert config.workers is None
        assert config.top_files == 5
        assert config.max_file_size_bytes == 10 * 1024 * 1024
        assert "node_modules/*" in config.exclude_patterns

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"workers": 0},
            {"max_file_size_mb": 0},
            {"binary_ratio_threshold": 0.0},
            {"top_files": 0},
            {"max_findings_per_file": 0},
        ],
    )
    def test_invalid_values(self, kwargs):
        with pytest.raises(InvalidConfigError):
            AnalysisConfig(**kwargs)


class TestLoadConfig:
    """Merging of files, environment and overrides."""

    def test_defaults_when_nothing_configured(self, isolated):
        config = load_config()
        assert config == AnalysisConfig()

    def test_project_file(self, isolated):
        (isolated / "project" / "messmeter.toml").write_text(
            "top_files = 8\n\n[weights]\nnaming = 0\n\n[thresholds]\ncomplexity_warn = 12\n"
        )
        config = load_config()
        assert config.top_files == 8
        assert config.weights.naming == 0
        assert config.weights.total == 105.0
        assert config.thresholds.complexity_warn == 12

    def test_project_overrides_global(self, isolated):
        (isolated / "home" / ".messmeter.toml").write_text("top_files = 3\nmax_findings_per_file = 9\n")
        (isolated / "project" / "messmeter.toml").write_text("top_files = 7\n")
        config = load_config()
        assert config.top_files == 7
        assert config.max_findings_per_file == 9

    def test_env_overrides_files(self, isolated, monkeypatch):
        (isolated / "project" / "messmeter.toml").write_text("top_files = 7\n")
        monkeypatch.setenv("MESSMETER_TOP_FILES", "11")
        monkeypatch.setenv("MESSMETER_FOLLOW_SYMLINKS", "yes")
        config = load_config()
        assert config.top_files == 11
        assert config.follow_symlinks is True

    def test_overrides_win(self, isolated, monkeypatch):
        monkeypatch.setenv("MESSMETER_TOP_FILES", "11")
        assert load_config(top_files=2).top_files == 2

    def test_verbose_and_quiet_flags(self, isolated):
        assert load_config(verbose=True, quiet=False).verbosity == "verbose"
        assert load_config(verbose=False, quiet=True).verbosity == "quiet"
        assert load_config(verbose=False, quiet=False).verbosity == "normal"

    def test_explicit_file(self, isolated):
        path = isolated / "custom.toml"
        path.write_text("workers = 2\n")
        assert load_config(path).workers == 2

    def test_missing_explicit_file(self, isolated):
        with pytest.raises(ConfigurationError, match="not found"):
            load_config(isolated / "missing.toml")

    def test_malformed_toml(self, isolated):
        (isolated / "project" / "messmeter.toml").write_text("top_files = [\n")
        with pytest.raises(ConfigurationError):
            load_config()

    def test_unknown_key(self, isolated):
        (isolated / "project" / "messmeter.toml").write_text("colour = 'red'\n")
        with pytest.raises(ConfigurationError):
            load_config()

    def test_unknown_weight(self, isolated):
        (isolated / "project" / "messmeter.toml").write_text("[weights]\nspeed = 3\n")
        with pytest.raises(ConfigurationError):
            load_config()

    def test_bad_env_value(self, isolated, monkeypatch):
        monkeypatch.setenv("MESSMETER_WORKERS", "many")
        with pytest.raises(ConfigurationError):
            load_config()
