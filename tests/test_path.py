"""
Path Tests
==========

Tests for the waypoint recorder and the simplifier.
"""

import math
import random

import pytest

from shoal_tracker.models.path import Waypoint
from shoal_tracker.models.position import Position
from shoal_tracker.path import PathRecorder, SimplifierThresholds, simplify
from shoal_tracker.path.simplifier import (
    cross_product,
    perpendicular_distance,
    slope,
    slopes_match,
)


def _record(recorder, points):
    for x, y in points:
        recorder.add_position(Position(x, y))
    return recorder


def _dwell_then_leave(held_ticks):
    """Arrive at (6, 0), hold it for held_ticks ticks in total, then leave."""
    points = [(0, 0), (3, 0)] + [(6, 0)] * held_ticks + [(9, 0)]
    return _record(PathRecorder(), points)


class TestPathRecorder:
    """Tests for the incremental waypoint recorder."""

    def test_validation(self):
        with pytest.raises(ValueError):
            PathRecorder(waypoint_tolerance=0)
        with pytest.raises(ValueError):
            PathRecorder(stop_dwell_ticks=0)

    def test_deduplicates_close_positions(self):
        """Verify positions within tolerance only grow the dwell counter."""
        recorder = _record(PathRecorder(), [(0, 0), (1, 0), (1, 1)])
        assert len(recorder) == 1
        assert recorder.dwell_ticks == 2

    def test_tolerance_is_inclusive(self):
        recorder = _record(PathRecorder(), [(0, 0), (2, 0)])
        assert len(recorder) == 2

    def test_six_tick_dwell_marks_stop(self):
        """Verify a 6-tick dwell flags the dwell waypoint retroactively."""
        recorder = _dwell_then_leave(6)
        waypoints = recorder.waypoints
        assert [w.position.x for w in waypoints] == [0, 3, 6, 9]
        assert waypoints[2].is_stop_point
        assert not waypoints[3].is_stop_point

    def test_plane_change_is_movement(self):
        """Verify a plane change at the same x, y is recorded, not dwelled."""
        recorder = PathRecorder()
        recorder.add_position(Position(6, 0, 0))
        for _ in range(5):
            recorder.add_position(Position(6, 0, 0))
        appended = recorder.add_position(Position(6, 0, 1))

        assert appended == Waypoint(Position(6, 0, 1))
        assert len(recorder) == 2
        assert recorder.dwell_ticks == 0
        assert recorder.waypoints[0].is_stop_point

    def test_plane_change_without_dwell(self):
        recorder = PathRecorder()
        recorder.add_position(Position(6, 0, 0))
        recorder.add_position(Position(6, 0, 1))
        assert len(recorder) == 2
        assert recorder.stop_point_count == 0

    def test_four_tick_dwell_is_not_a_stop(self):
        recorder = _dwell_then_leave(4)
        assert recorder.stop_point_count == 0

    def test_stop_flag_only_on_leaving(self):
        """Verify a dwell in progress is not flagged yet."""
        recorder = _record(PathRecorder(), [(0, 0)] * 10)
        assert recorder.stop_point_count == 0
        assert recorder.dwell_ticks == 9

    def test_minimum_points_for_valid_path(self):
        recorder = _record(PathRecorder(), [(3 * i, 0) for i in range(9)])
        assert not recorder.is_valid()
        assert recorder.teardown() is None
        assert len(recorder) == 0

        recorder = _record(PathRecorder(), [(3 * i, 0) for i in range(10)])
        assert recorder.is_valid()

    def test_export_rotates_to_first_stop(self):
        """Verify the export starts at a stop point and carries a margin."""
        points = (
            [(0, 0), (3, 0)]
            + [(6, 0)] * 6
            + [(3 * i, 0) for i in range(3, 11)]
        )
        recorder = _record(PathRecorder(category="marlin"), points)
        assert len(recorder) == 11

        export = recorder.teardown()
        assert export is not None
        assert export.category == "marlin"
        assert export.waypoints[0] == (6, 0, 0, True)
        assert export.waypoints[-1] == (3, 0, 0, False)
        assert export.stop_indices == [0]
        assert (export.area.min_x, export.area.max_x) == (-10, 40)
        assert (export.area.min_y, export.area.max_y) == (-10, 10)
        assert len(recorder) == 0

    def test_snapshot_is_immutable(self):
        recorder = _record(PathRecorder(), [(0, 0), (5, 5)])
        snapshot = recorder.snapshot()
        recorder.add_position(Position(10, 10))
        assert len(snapshot) == 2
        assert isinstance(snapshot, tuple)


class TestSimplifierGeometry:
    """Tests for the simplifier's geometric helpers."""

    def test_cross_product_collinear(self):
        assert cross_product(Position(0, 0), Position(1, 0), Position(2, 0)) == 0

    def test_perpendicular_distance(self):
        assert perpendicular_distance(Position(5, 3), Position(0, 0), Position(10, 0)) == 3.0

    def test_perpendicular_distance_zero_length_line(self):
        """Verify a degenerate line falls back to point distance."""
        distance = perpendicular_distance(Position(3, 4), Position(0, 0), Position(0, 0))
        assert distance == 5.0

    def test_slope_special_cases(self):
        assert slope(Position(0, 0), Position(0, 5)) == math.inf
        assert slope(Position(2, 2), Position(2, 2)) == 0.0
        assert slope(Position(0, 0), Position(4, 2)) == 0.5

    def test_infinite_slopes_only_match_each_other(self):
        assert slopes_match(math.inf, math.inf, 0.05)
        assert not slopes_match(math.inf, 1e9, 0.05)
        assert slopes_match(0.5, 0.52, 0.05)

    def test_thresholds_validation(self):
        with pytest.raises(ValueError):
            SimplifierThresholds(max_waypoint_distance=0)


class TestSimplify:
    """Tests for the waypoint simplifier."""

    def test_collinear_run_removed(self, make_waypoints):
        """Verify (0,0)..(3,0) simplifies to its endpoints."""
        waypoints = make_waypoints([(0, 0), (1, 0), (2, 0), (3, 0)])
        result = simplify(waypoints)
        assert [w.position for w in result] == [Position(0, 0), Position(3, 0)]

    def test_stop_point_survives(self, make_waypoints):
        waypoints = make_waypoints([(0, 0), (1, 0, True), (2, 0)])
        assert simplify(waypoints) == waypoints

    def test_long_segment_kept(self, make_waypoints):
        """Verify a midpoint 50 units from its predecessor is kept."""
        waypoints = make_waypoints([(0, 0), (50, 0), (100, 0)])
        assert len(simplify(waypoints)) == 3

    def test_small_deviation_dropped(self, make_waypoints):
        waypoints = make_waypoints([(0, 0), (5, 1), (10, 0)])
        assert len(simplify(waypoints)) == 2

    def test_corner_kept(self, make_waypoints):
        waypoints = make_waypoints([(0, 0), (5, 5), (10, 0)])
        assert len(simplify(waypoints)) == 3

    def test_similar_slopes_dropped(self, make_waypoints):
        """Verify near-equal slopes drop a point the deviation rule keeps."""
        waypoints = make_waypoints([(0, 0), (20, 0), (60, 1)])
        loose = SimplifierThresholds(deviation_threshold=0.1)
        strict = SimplifierThresholds(deviation_threshold=0.1, slope_tolerance=0.01)
        assert len(simplify(waypoints, loose)) == 2
        assert len(simplify(waypoints, strict)) == 3

    @pytest.mark.parametrize("count", [0, 1, 2])
    def test_short_input_unchanged(self, make_waypoints, count):
        waypoints = make_waypoints([(i * 7, i) for i in range(count)])
        result = simplify(waypoints)
        assert result == waypoints
        assert result is not waypoints

    def test_output_is_ordered_subsequence(self, make_waypoints):
        """Verify endpoints, stop points and order are preserved."""
        points = [(0, 0), (1, 0), (2, 1), (3, 1, True), (4, 1), (10, 8), (11, 8), (40, 8)]
        waypoints = make_waypoints(points)
        original = list(waypoints)

        result = simplify(waypoints)

        assert waypoints == original
        assert result[0] is waypoints[0]
        assert result[-1] is waypoints[-1]
        assert all(w in result for w in waypoints if w.is_stop_point)
        indices = [waypoints.index(w) for w in result]
        assert indices == sorted(indices)
        assert len(result) <= len(waypoints)

    @pytest.mark.parametrize("seed", range(20))
    def test_invariants_on_random_paths(self, seed):
        """Verify endpoints, stops, order and length on random walks."""
        rng = random.Random(seed)
        waypoints = []
        x, y = 0, 0
        for _ in range(rng.randint(0, 60)):
            x += rng.randint(-40, 40)
            y += rng.randint(-40, 40)
            waypoints.append(Waypoint(Position(x, y), rng.random() < 0.15))
        original = list(waypoints)

        result = simplify(waypoints)

        assert waypoints == original
        assert len(result) <= len(waypoints)
        if waypoints:
            assert result[0] is waypoints[0]
            assert result[-1] is waypoints[-1]
        assert all(any(r is w for r in result) for w in waypoints if w.is_stop_point)
        indices = [next(i for i, w in enumerate(waypoints) if w is r) for r in result]
        assert indices == sorted(set(indices))

    def test_accepts_recorder_snapshot(self):
        recorder = PathRecorder()
        for i in range(5):
            recorder.add_position(Position(3 * i, 0))
        result = simplify(recorder.snapshot())
        assert result == [Waypoint(Position(0, 0)), Waypoint(Position(12, 0))]
