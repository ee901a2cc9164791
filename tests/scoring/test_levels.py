"""Tests for the quality level bands."""

import pytest

from messmeter.scoring import QUALITY_LEVELS, quality_level


class TestQualityLevel:
    """Eleven bands with exclusive upper bounds."""

    def test_eleven_levels(self):
        assert len(QUALITY_LEVELS) == 11
        assert QUALITY_LEVELS[0].key == "clean"
        assert QUALITY_LEVELS[-1].label == "Ultimate mess"

    @pytest.mark.parametrize(
        "score, key",
        [
            (0.0, "clean"),
            (4.99, "clean"),
            (5.0, "mild"),
            (24.9, "moderate"),
            (40.0, "terrible"),
            (64.0, "disaster"),
            (84.99, "very_bad"),
            (94.0, "extreme"),
            (99.9, "worst"),
            (100.0, "ultimate"),
        ],
    )
    def test_bands(self, score, key):
        assert quality_level(score).key == key

    def test_bounds_increase(self):
        bounds = [level.upper_bound for level in QUALITY_LEVELS[:-1]]
        assert bounds == sorted(bounds)
        assert QUALITY_LEVELS[-1].upper_bound is None
