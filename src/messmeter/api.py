"""Public API for messmeter.

Example:
    >>> from messmeter import analyze
    >>>
    >>> report = analyze("/path/to/code")
    >>> report.score, report.quality_level.key
    (23.4, 'moderate')
    >>>
    >>> # With customization
    >>> report = analyze("/path/to/code", top_files=10, workers=4)
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from .config import load_config
from .core import AnalysisObserver, CodebaseAnalyzer
from .logging_config import get_logger
from .models import AggregateReport

logger = get_logger(__name__)


def analyze(
    path: "str | Path" = ".",
    config_file: Optional[Path] = None,
    observer: Optional[AnalysisObserver] = None,
    **overrides,
) -> AggregateReport:
    """Analyze a directory (or a single file) and return the aggregate report.

    Steps:
    1. Load configuration (auto-discover TOML + environment + overrides)
    2. Discover files under ``path``
    3. Score every file on a worker pool, resolve duplication across files
    4. Aggregate, rank and return

    Args:
        path: Directory or file to analyze (default: current directory)
        config_file: Optional explicit config file path
        observer: Optional progress observer (default: silent)
        **overrides: Configuration overrides (e.g. ``top_files=10``)

    Returns:
        AggregateReport; ``is_empty`` is set when nothing could be scored.

    Raises:
        ConfigurationError: If configuration is invalid
        InvalidPathError: If ``path`` does not exist
    """
    config = load_config(config_file=config_file, **overrides)
    logger.debug(f"Configuration loaded: {config.verbosity} mode")

    analyzer = CodebaseAnalyzer(config, observer=observer)
    report = analyzer.analyze_directory(Path(path))

    logger.info(
        f"Analysis complete: score {report.score:.1f} ({report.quality_level.key}), "
        f"{report.total_files} files, {len(report.unanalyzed)} skipped"
    )
    return report
