"""One file end to end on one worker: read, scan, local metrics, fingerprints."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from ..config import AnalysisConfig
from ..exceptions import (
    BinaryFileError,
    FileAccessError,
    FileTooLargeError,
    UnsupportedLanguageError,
)
from ..file_ops import read_source
from ..logging_config import get_logger
from ..metrics import DuplicationIndex, DuplicationMetric, FileFragments, Metric, MetricContext
from ..metrics import create_local_metrics
from ..models import FileRecord, MetricResult, SkipReason, UnanalyzedFile
from ..scanning import detect_language, scan_source

logger = get_logger(__name__)


@dataclass
class FileOutcome:
    """Pass-one result for one file: either scored locally or skipped."""

    path: str
    record: Optional[FileRecord] = None
    metrics: Dict[str, MetricResult] = field(default_factory=dict)
    fragments: Optional[FileFragments] = None
    skipped: Optional[UnanalyzedFile] = None

    @property
    def analyzed(self) -> bool:
        return self.skipped is None


class FileProcessor:
    """Runs the per-file stages. Shared by all workers; holds no per-file state."""

    def __init__(
        self,
        config: AnalysisConfig,
        index: DuplicationIndex,
        metrics: Optional[List[Metric]] = None,
    ):
        self.config = config
        self.index = index
        self.context = MetricContext(thresholds=config.thresholds, index=index)
        self.metrics = metrics if metrics is not None else create_local_metrics()
        self.duplication = DuplicationMetric()

    def process(self, filepath: Path, display_path: str) -> FileOutcome:
        """Analyze one file. Raises ``AnalysisError`` subclasses for skipped files."""
        profile = detect_language(filepath)
        if profile is None:
            raise UnsupportedLanguageError(filepath, filepath.suffix)

        text = read_source(filepath, self.config)
        stream = scan_source(text, profile, display_path)
        metrics = {m.name: m.compute(stream, self.context) for m in self.metrics}
        fragments = self.duplication.collect(stream, self.index, self.context)
        return FileOutcome(
            path=display_path,
            record=stream.record(),
            metrics=metrics,
            fragments=fragments,
        )

    def run(self, filepath: Path, display_path: str) -> FileOutcome:
        """Like ``process`` but converts every failure into a skipped outcome."""
        try:
            return self.process(filepath, display_path)
        except UnsupportedLanguageError as e:
            logger.debug(f"Skipping {display_path}: unsupported extension")
            return self._skip(display_path, SkipReason.UNSUPPORTED_LANGUAGE, e.extension or "")
        except BinaryFileError as e:
            logger.debug(f"Skipping {display_path}: binary content ({e.ratio:.0%} non-text)")
            return self._skip(display_path, SkipReason.BINARY, f"{e.ratio:.0%} non-text bytes")
        except FileTooLargeError as e:
            logger.debug(f"Skipping {display_path}: {e.size} bytes exceeds {e.limit}")
            return self._skip(display_path, SkipReason.TOO_LARGE, f"{e.size} bytes")
        except FileAccessError as e:
            logger.warning(f"Cannot read {display_path}: {e.reason}")
            return self._skip(display_path, SkipReason.IO_ERROR, e.reason)
        except Exception as e:
            logger.exception(f"Unexpected error analyzing {display_path}")
            return self._skip(display_path, SkipReason.INTERNAL_ERROR, f"{type(e).__name__}: {e}")

    @staticmethod
    def _skip(path: str, reason: SkipReason, detail: str) -> FileOutcome:
        return FileOutcome(path=path, skipped=UnanalyzedFile(path, reason, detail))
