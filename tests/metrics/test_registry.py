"""Tests for the metric registry."""

from messmeter.config import METRIC_NAMES, MetricWeights
from messmeter.metrics import METRIC_CLASSES, DuplicationMetric, create_local_metrics, display_names, validate_registry


class TestMetricRegistry:
    """The registry lines up with the configured weights."""

    def test_canonical_order(self):
        assert tuple(cls.name for cls in METRIC_CLASSES) == METRIC_NAMES

    def test_local_metrics_exclude_duplication(self):
        metrics = create_local_metrics()
        assert len(metrics) == 6
        assert not any(isinstance(m, DuplicationMetric) for m in metrics)

    def test_local_metrics_are_fresh_instances(self):
        assert create_local_metrics()[0] is not create_local_metrics()[0]

    def test_default_weights_validate(self):
        validate_registry(MetricWeights())

    def test_display_names(self):
        names = display_names()
        assert set(names) == set(METRIC_NAMES)
        assert names["error_handling"] == "Error Handling"
