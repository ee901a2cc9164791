"""Composite, issue and project scores.

Composite per file is the weighted mean of its metric sub-scores. The
nominal weight table sums to 113, so weights are renormalized here rather
than trusted to sum to 100. The project score is the code-line-weighted
mean of file composites.
"""

from dataclasses import replace
from typing import Dict, Iterable, List, Mapping, Sequence

import numpy as np

from ..config import METRIC_NAMES, AnalysisConfig
from ..logging_config import get_logger
from ..models import AggregateReport, FileRecord, FileReport, Finding, MetricResult, UnanalyzedFile
from .levels import quality_level

logger = get_logger(__name__)


def _clamp(value: float) -> float:
    return float(min(100.0, max(0.0, value)))


class Aggregator:
    """Scores files and folds them into an ``AggregateReport``."""

    def __init__(self, config: AnalysisConfig):
        self.config = config
        self.weights = config.weights.as_dict()

    # ── per file ──

    def composite(self, metrics: Mapping[str, MetricResult]) -> float:
        names = [n for n in METRIC_NAMES if n in metrics]
        if not names:
            return 0.0
        w = np.array([self.weights[n] for n in names], dtype=float)
        s = np.array([metrics[n].score for n in names], dtype=float)
        if w.sum() <= 0:
            return 0.0
        return _clamp(float(np.dot(w, s) / w.sum()))

    def issue_score(self, composite: float, findings: Iterable[Finding]) -> float:
        t = self.config.thresholds
        burden = min(t.issue_findings_cap, sum(f.severity.weight for f in findings))
        return _clamp(t.issue_composite_share * composite + burden)

    def score_file(self, record: FileRecord, metrics: Mapping[str, MetricResult]) -> FileReport:
        ordered: Dict[str, MetricResult] = {n: metrics[n] for n in METRIC_NAMES if n in metrics}
        findings = sorted(
            (f for result in ordered.values() for f in result.findings),
            key=Finding.sort_key,
        )
        composite = self.composite(ordered)
        return FileReport(
            record=record,
            metrics=ordered,
            composite_score=composite,
            issue_score=self.issue_score(composite, findings),
            findings=findings,
        )

    # ── project ──

    @staticmethod
    def rank(reports: Sequence[FileReport], top: int) -> List[FileReport]:
        """Worst files first (issue score descending, ties by path)."""
        ordered = sorted(reports, key=lambda r: (-r.issue_score, r.path))
        return ordered[: max(top, 0)]

    @staticmethod
    def _weighted_mean(values: np.ndarray, code_lines: np.ndarray) -> float:
        if values.size == 0:
            return 0.0
        if code_lines.sum() > 0:
            return _clamp(float(np.average(values, weights=code_lines)))
        return _clamp(float(np.mean(values)))

    def aggregate(
        self, reports: Sequence[FileReport], unanalyzed: Sequence[UnanalyzedFile] = ()
    ) -> AggregateReport:
        skipped = tuple(sorted(unanalyzed, key=lambda u: u.path))
        if not reports:
            logger.info("No analyzable files; returning empty report")
            return AggregateReport.empty(skipped)

        code_lines = np.array([r.record.code_lines for r in reports], dtype=float)
        composites = np.array([r.composite_score for r in reports], dtype=float)
        score = self._weighted_mean(composites, code_lines)

        metric_scores = {}
        for name in METRIC_NAMES:
            values = np.array(
                [r.metrics[name].score if name in r.metrics else 0.0 for r in reports], dtype=float
            )
            metric_scores[name] = self._weighted_mean(values, code_lines)

        m = self.config.max_findings_per_file
        ranked = tuple(
            replace(r, findings=list(r.findings[:m])) for r in self.rank(reports, self.config.top_files)
        )

        return AggregateReport(
            score=score,
            quality_level=quality_level(score),
            is_empty=False,
            files=ranked,
            metric_scores=metric_scores,
            total_files=len(reports),
            total_lines=sum(r.record.total_lines for r in reports),
            total_code_lines=int(code_lines.sum()),
            unanalyzed=skipped,
        )
