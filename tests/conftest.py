"""Shared test fixtures for messmeter tests."""

import pytest

from messmeter.config import AnalysisConfig
from messmeter.metrics import MetricContext
from messmeter.scanning import get_profile, scan_source


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


@pytest.fixture
def scan():
    """Scan source text with a named language profile."""

    def _scan(text, language, path=None):
        return scan_source(text, get_profile(language), path or f"sample.{language}")

    return _scan


@pytest.fixture
def ctx():
    """Metric context with default thresholds and a private duplication index."""
    return MetricContext()


@pytest.fixture
def write_tree(tmp_path):
    """Write a {relative path: content} mapping below tmp_path and return the root."""

    def _write(files):
        for rel, content in files.items():
            target = tmp_path / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                target.write_bytes(content)
            else:
                target.write_text(content, encoding="utf-8")
        return tmp_path

    return _write


@pytest.fixture
def config():
    """Deterministic single-worker configuration."""
    return AnalysisConfig(workers=1)