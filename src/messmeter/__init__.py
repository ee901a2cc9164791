"""
messmeter - multi-language static code-quality analyzer

Scores every source file of a mixed-language project on seven metrics
(complexity, state, comments, duplication, structure, error handling,
naming), combines them into a 0-100 mess score and ranks the worst files.
"""

__version__ = "0.1.0"

from .api import analyze
from .config import AnalysisConfig, MetricWeights, ThresholdConfig, load_config
from .core import AnalysisObserver, CodebaseAnalyzer, FileCompleted
from .models import (
    AggregateReport,
    FileRecord,
    FileReport,
    Finding,
    MetricResult,
    QualityLevel,
    Severity,
    SkipReason,
    UnanalyzedFile,
)

__all__ = [
    "analyze",  # Main entry point
    "CodebaseAnalyzer",  # Advanced usage (explicit file lists, observers)
    "AnalysisConfig",
    "MetricWeights",
    "ThresholdConfig",
    "load_config",
    "AnalysisObserver",
    "FileCompleted",
    "AggregateReport",
    "FileRecord",
    "FileReport",
    "Finding",
    "MetricResult",
    "QualityLevel",
    "Severity",
    "SkipReason",
    "UnanalyzedFile",
]
