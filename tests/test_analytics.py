"""
Analytics Tests
===============

Tests for path simplification statistics.
"""

import numpy as np
import pytest

from shoal_tracker.observability import analyze_path, max_deviation, polyline_length


class TestPolylineHelpers:
    """Tests for the numpy helpers."""

    def test_polyline_length(self):
        points = np.array([[0, 0], [3, 4], [3, 10]], dtype=float)
        assert polyline_length(points) == pytest.approx(11.0)

    def test_polyline_length_single_point(self):
        assert polyline_length(np.array([[1, 1]], dtype=float)) == 0.0

    def test_max_deviation(self):
        points = np.array([[0, 0], [5, 2], [10, 0]], dtype=float)
        polyline = np.array([[0, 0], [10, 0]], dtype=float)
        assert max_deviation(points, polyline) == pytest.approx(2.0)

    def test_max_deviation_beyond_segment_end(self):
        """Verify distances are clamped to the segment, not the line."""
        points = np.array([[13, 4]], dtype=float)
        polyline = np.array([[0, 0], [10, 0]], dtype=float)
        assert max_deviation(points, polyline) == pytest.approx(5.0)


    @pytest.mark.parametrize("chunk_size", [1, 7, 256, 10_000])
    def test_max_deviation_independent_of_chunking(self, chunk_size):
        """Verify chunked evaluation matches a single batch."""
        rng = np.random.default_rng(42)
        points = rng.uniform(-100, 100, size=(500, 2))
        polyline = rng.uniform(-100, 100, size=(12, 2))

        expected = max_deviation(points, polyline, chunk_size=len(points))
        assert max_deviation(points, polyline, chunk_size=chunk_size) == pytest.approx(expected)

    def test_max_deviation_chunk_validation(self):
        with pytest.raises(ValueError):
            max_deviation(np.zeros((1, 2)), np.zeros((2, 2)), chunk_size=0)


class TestAnalyzePath:
    """Tests for the analysis snapshot."""

    def test_collinear_run(self, make_waypoints):
        analysis = analyze_path(make_waypoints([(0, 0), (1, 0), (2, 0), (3, 0)]))
        assert analysis.original_count == 4
        assert analysis.simplified_count == 2
        assert analysis.removed_count == 2
        assert analysis.reduction_percent == pytest.approx(50.0)
        assert analysis.original_length == pytest.approx(3.0)
        assert analysis.simplified_length == pytest.approx(3.0)
        assert analysis.max_deviation == pytest.approx(0.0)

    def test_reports_lost_shape(self, make_waypoints):
        analysis = analyze_path(make_waypoints([(0, 0), (5, 1), (10, 0)]))
        assert analysis.simplified_count == 2
        assert analysis.max_deviation == pytest.approx(1.0)

    def test_counts_stop_points(self, make_waypoints):
        analysis = analyze_path(make_waypoints([(0, 0), (1, 0, True), (2, 0)]))
        assert analysis.stop_point_count == 1
        assert analysis.removed_count == 0

    def test_empty_path(self):
        analysis = analyze_path([])
        assert analysis.to_dict()["reduction_percent"] == 0.0
        assert analysis.max_deviation == 0.0
