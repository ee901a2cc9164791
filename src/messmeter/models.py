"""Data models for messmeter"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class Severity(str, Enum):
    """Finding severity. Ordered: info < warning < critical."""

    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    @property
    def weight(self) -> float:
        """Contribution of one finding to a file's issue score."""
        return _SEVERITY_WEIGHT[self]


_SEVERITY_RANK = {Severity.INFO: 0, Severity.WARNING: 1, Severity.CRITICAL: 2}
_SEVERITY_WEIGHT = {Severity.INFO: 0.25, Severity.WARNING: 1.0, Severity.CRITICAL: 2.0}


@dataclass(frozen=True)
class FileRecord:
    """Line accounting for one analyzed file.

    A line holding code and a trailing comment counts as code. Documentation
    comment lines are a subset of ``comment_lines``.
    """

    path: str
    language: str
    total_lines: int
    code_lines: int
    comment_lines: int
    blank_lines: int
    doc_comment_lines: int = 0


@dataclass(frozen=True)
class Finding:
    """A concrete issue at one line of one file."""

    metric: str
    line: int
    severity: Severity
    message: str

    def sort_key(self) -> Tuple[int, int, str, str]:
        """Severity descending, then line, then metric."""
        return (-self.severity.rank, self.line, self.metric, self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "metric": self.metric,
            "line": self.line,
            "severity": self.severity.value,
            "message": self.message,
        }


@dataclass(frozen=True)
class MetricResult:
    """Sub-score (0 = clean, 100 = worst) and findings of one metric."""

    name: str
    score: float
    findings: Tuple[Finding, ...] = ()

    def __post_init__(self) -> None:
        if not 0.0 <= self.score <= 100.0:
            raise ValueError(f"{self.name} score out of range: {self.score}")


@dataclass
class FileReport:
    """Scored file: its record, seven metric results and ranking data."""

    record: FileRecord
    metrics: Dict[str, MetricResult]
    composite_score: float = 0.0
    issue_score: float = 0.0
    findings: List[Finding] = field(default_factory=list)

    @property
    def path(self) -> str:
        return self.record.path

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.record.path,
            "language": self.record.language,
            "composite_score": round(self.composite_score, 2),
            "issue_score": round(self.issue_score, 2),
            "lines": {
                "total": self.record.total_lines,
                "code": self.record.code_lines,
                "comment": self.record.comment_lines,
                "blank": self.record.blank_lines,
                "doc_comment": self.record.doc_comment_lines,
            },
            "metrics": {name: round(r.score, 2) for name, r in self.metrics.items()},
            "findings": [f.to_dict() for f in self.findings],
        }


class SkipReason(str, Enum):
    """Why a file was left out of scoring."""

    IO_ERROR = "io_error"
    UNSUPPORTED_LANGUAGE = "unsupported_language"
    BINARY = "binary"
    TOO_LARGE = "too_large"
    INTERNAL_ERROR = "internal_error"


@dataclass(frozen=True)
class UnanalyzedFile:
    path: str
    reason: SkipReason
    detail: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {"path": self.path, "reason": self.reason.value, "detail": self.detail}


@dataclass(frozen=True)
class QualityLevel:
    """A band of the composite score scale."""

    key: str
    label: str
    upper_bound: Optional[float] = None


@dataclass(frozen=True)
class AggregateReport:
    """Project-level result of one analysis run.

    ``files`` holds the ranked top-K reports (each already truncated to its
    top-M findings). ``is_empty`` is set when no file could be scored.
    """

    score: float
    quality_level: QualityLevel
    is_empty: bool
    files: Tuple[FileReport, ...]
    metric_scores: Dict[str, float]
    total_files: int
    total_lines: int
    total_code_lines: int
    unanalyzed: Tuple[UnanalyzedFile, ...] = ()

    @classmethod
    def empty(cls, unanalyzed: Tuple[UnanalyzedFile, ...] = ()) -> "AggregateReport":
        return cls(
            score=0.0,
            quality_level=QualityLevel("empty", "Empty project"),
            is_empty=True,
            files=(),
            metric_scores={},
            total_files=0,
            total_lines=0,
            total_code_lines=0,
            unanalyzed=unanalyzed,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": round(self.score, 2),
            "quality_level": {"key": self.quality_level.key, "label": self.quality_level.label},
            "is_empty": self.is_empty,
            "total_files": self.total_files,
            "total_lines": self.total_lines,
            "total_code_lines": self.total_code_lines,
            "metric_scores": {k: round(v, 2) for k, v in self.metric_scores.items()},
            "files": [r.to_dict() for r in self.files],
            "unanalyzed": [u.to_dict() for u in self.unanalyzed],
        }
