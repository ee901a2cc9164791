"""Analysis orchestration."""

from .analyzer import CodebaseAnalyzer
from .pipeline import FileOutcome, FileProcessor
from .progress import AnalysisObserver, FileCompleted, RichProgressObserver, SilentObserver

__all__ = [
    "AnalysisObserver",
    "CodebaseAnalyzer",
    "FileCompleted",
    "FileOutcome",
    "FileProcessor",
    "RichProgressObserver",
    "SilentObserver",
]
