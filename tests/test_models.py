"""
Model Tests
===========

Tests for value types, area models and the path export format.
"""

import pytest
from pydantic import ValidationError

from shoal_tracker.models.geometry import AreaTable, Bounds, SpeciesTiming
from shoal_tracker.models.path import PathBounds, PathExport, Waypoint
from shoal_tracker.models.position import Position, RebindEvent, TrackedEntity
from shoal_tracker.models.state import Depth, MovementState, TimerState


class TestDepth:
    """Tests for the discrete depth scale."""

    def test_shift_one_level(self):
        """Verify shallower/deeper move exactly one level."""
        assert Depth.MODERATE.deeper() is Depth.DEEP
        assert Depth.MODERATE.shallower() is Depth.SHALLOW

    def test_shift_is_clamped(self):
        """Verify shifts saturate at the ends of the scale."""
        assert Depth.DEEP.deeper() is Depth.DEEP
        assert Depth.SHALLOW.shallower() is Depth.SHALLOW

    def test_unknown_has_no_level(self):
        """Verify UNKNOWN is never shifted or ordered."""
        assert Depth.UNKNOWN.level is None
        assert Depth.UNKNOWN.deeper() is Depth.UNKNOWN
        assert Depth.UNKNOWN.shallower() is Depth.UNKNOWN
        assert not Depth.UNKNOWN.is_deeper_than(Depth.SHALLOW)
        assert not Depth.SHALLOW.is_shallower_than(Depth.UNKNOWN)

    def test_ordering(self):
        assert Depth.SHALLOW.is_shallower_than(Depth.DEEP)
        assert Depth.DEEP.is_deeper_than(Depth.MODERATE)
        assert not Depth.MODERATE.is_deeper_than(Depth.MODERATE)


class TestStateModels:
    """Tests for the immutable state models."""

    def test_movement_state_is_frozen(self):
        """Verify MovementState cannot be mutated in place."""
        state = MovementState()
        with pytest.raises(ValidationError):
            state.ticks_moving = 3

    def test_timer_change_tick_is_half_duration(self):
        """Verify the predicted change is at the midpoint of the dwell."""
        assert TimerState(total_duration=48, active=True).change_tick == 24
        assert TimerState(total_duration=7, active=True).change_tick == 3

    def test_timer_remaining_never_negative(self):
        state = TimerState(total_duration=10, elapsed=9, active=False)
        assert state.remaining == 0


class TestPosition:
    """Tests for positions and tracked entities."""

    def test_squared_distance(self):
        assert Position(0, 0).squared_distance_to(Position(3, 4)) == 25

    def test_equality_includes_plane(self):
        assert Position(1, 2, 0) == Position(1, 2)
        assert Position(1, 2, 1) != Position(1, 2, 0)

    def test_rebind_category_changed(self):
        """Verify RebindEvent reports a category change."""
        previous = TrackedEntity("a", "shoal", "marlin")
        current = TrackedEntity("b", "shoal", "halibut")
        event = RebindEvent(previous=previous, current=current, reason="appeared")
        assert event.category_changed


class TestAreaModels:
    """Tests for area / species validation."""

    def test_bounds_contains_is_half_open(self):
        """Verify the upper edges are excluded."""
        bounds = Bounds(x=10, y=20, width=5, height=5)
        assert bounds.contains(Position(10, 20))
        assert bounds.contains(Position(14, 24))
        assert not bounds.contains(Position(15, 20))
        assert not bounds.contains(Position(10, 25))

    def test_bounds_requires_same_plane(self):
        bounds = Bounds(x=0, y=0, width=10, height=10, plane=1)
        assert not bounds.contains(Position(5, 5, 0))
        assert bounds.contains(Position(5, 5, 1))

    def test_bounds_rejects_empty_rectangle(self):
        with pytest.raises(ValidationError):
            Bounds(x=0, y=0, width=0, height=10)

    def test_species_requires_both_depths(self):
        """Verify a half-specified depth pattern is rejected."""
        with pytest.raises(ValidationError):
            SpeciesTiming(name="bad", stop_duration=10, start_depth="SHALLOW")

    def test_species_rejects_unknown_depth(self):
        with pytest.raises(ValidationError):
            SpeciesTiming(
                name="bad", stop_duration=10, start_depth="UNKNOWN", end_depth="DEEP"
            )

    def test_species_without_duration_has_no_change(self):
        species = SpeciesTiming(
            name="still", stop_duration=0, start_depth="SHALLOW", end_depth="DEEP"
        )
        assert not species.has_depth_change

    def test_table_rejects_unknown_species(self, sample_area_table):
        """Verify areas must reference declared species."""
        sample_area_table["areas"][0]["species"] = "ghost"
        with pytest.raises(ValidationError):
            AreaTable.model_validate(sample_area_table)


class TestPathExport:
    """Tests for the path dump format."""

    def test_waypoint_stop_copy(self):
        """Verify flagging a stop returns a new waypoint."""
        waypoint = Waypoint(Position(1, 2))
        stop = waypoint.as_stop_point()
        assert stop.is_stop_point
        assert not waypoint.is_stop_point
        assert stop.position == waypoint.position

    def test_yaml_dump_is_reloadable(self):
        """Verify to_yaml output parses back to the same export."""
        export = PathExport(
            category="marlin",
            waypoints=[(2600, 3950, 0, True), (2610, 3950, 0, False)],
            stop_indices=[0],
            area=PathBounds(min_x=2590, max_x=2620, min_y=3940, max_y=3960),
        )

        text = export.to_yaml()
        assert "waypoint_count: 2" in text

        loaded = PathExport.from_yaml(text)
        assert loaded == export
        assert loaded.to_waypoints()[0] == Waypoint(Position(2600, 3950), True)
        assert loaded.area.width == 30

    def test_yaml_must_be_mapping(self):
        with pytest.raises(ValueError):
            PathExport.from_yaml("- just\n- a list\n")
