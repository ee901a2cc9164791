"""Main entry point: composes discovery, the worker pool, pass two and scoring."""

import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Iterable, List, Optional

from ..config import AnalysisConfig
from ..exceptions import EmptyRegistryError
from ..file_ops import discover_files
from ..logging_config import get_logger
from ..metrics import DuplicationIndex, validate_registry
from ..models import AggregateReport, FileReport, UnanalyzedFile
from ..scanning import LANGUAGES
from ..scoring import Aggregator
from .pipeline import FileOutcome, FileProcessor
from .progress import AnalysisObserver, FileCompleted, SilentObserver

logger = get_logger(__name__)


def _display_path(path: Path, root: Optional[Path]) -> str:
    if root is not None:
        try:
            return path.relative_to(root).as_posix()
        except ValueError:
            pass
    return path.as_posix()


class CodebaseAnalyzer:
    """Parallel orchestrator.

    Pass one runs one task per file on a thread pool: read, scan, the six
    local metrics and duplication fingerprinting into a shared index. After
    the pool drains, outcomes are sorted by path, pass two resolves
    duplication against the complete index and the aggregator builds the
    report. Results do not depend on worker count or completion order.
    """

    def __init__(self, config: Optional[AnalysisConfig] = None, observer: Optional[AnalysisObserver] = None):
        self.config = config or AnalysisConfig()
        validate_registry(self.config.weights)
        if not LANGUAGES:
            raise EmptyRegistryError()
        self.observer = observer or SilentObserver()
        self.aggregator = Aggregator(self.config)
        self.workers = self.config.workers or os.cpu_count() or 1
        logger.debug(f"Analyzer ready: workers={self.workers}, languages={len(LANGUAGES)}")

    def analyze_directory(self, root: "Path | str") -> AggregateReport:
        """Discover files under ``root`` (or the single file ``root``) and analyze them."""
        root = Path(root)
        logger.info(f"Analyzing codebase at: {root}")
        files = discover_files(root, self.config)
        base = root if root.is_dir() else root.parent
        return self.analyze_paths(files, root=base)

    def analyze_paths(self, paths: Iterable["Path | str"], root: "Path | str | None" = None) -> AggregateReport:
        """Analyze an already filtered list of files.

        Report paths are relative to ``root`` when given.
        """
        base = Path(root) if root is not None else None
        unique = list(dict.fromkeys(Path(p) for p in paths))

        index = DuplicationIndex(self.config.thresholds.dup_index_shards)
        processor = FileProcessor(self.config, index)
        outcomes = self._pass_one(processor, unique, base)
        outcomes.sort(key=lambda o: o.path)

        reports: List[FileReport] = []
        skipped: List[UnanalyzedFile] = []
        for outcome in outcomes:
            if not outcome.analyzed:
                skipped.append(outcome.skipped)
                continue
            metrics = dict(outcome.metrics)
            metrics[processor.duplication.name] = processor.duplication.finalize(
                outcome.fragments, index, processor.context
            )
            reports.append(self.aggregator.score_file(outcome.record, metrics))

        logger.info(
            f"Analyzed {len(reports)} files, skipped {len(skipped)}, "
            f"{len(index)} fingerprints indexed"
        )
        return self.aggregator.aggregate(reports, skipped)

    def _pass_one(self, processor: FileProcessor, paths: List[Path], root: Optional[Path]) -> List[FileOutcome]:
        total = len(paths)
        outcomes: List[FileOutcome] = []
        self.observer.on_start(total)
        try:
            if total == 0:
                return outcomes
            with ThreadPoolExecutor(max_workers=min(self.workers, total)) as executor:
                futures = [executor.submit(processor.run, p, _display_path(p, root)) for p in paths]
                for done, future in enumerate(as_completed(futures), 1):
                    outcome = future.result()
                    outcomes.append(outcome)
                    self.observer.on_file_completed(FileCompleted(outcome.path, done, total, outcome.analyzed))
        finally:
            self.observer.on_finish()
        return outcomes
