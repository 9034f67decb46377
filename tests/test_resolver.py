"""
Resolver and Area Tests
=======================

Tests for the required-depth resolver and the area lookup table.
"""

import json

import pytest

from shoal_tracker.agent import DepthRequirementResolver
from shoal_tracker.geometry import AreaManager
from shoal_tracker.models.position import Position
from shoal_tracker.models.state import Depth, DepthState, MovementDirection, TimerState


class TestDepthRequirementResolver:
    """Tests for the required depth derivation."""

    def test_inactive_has_no_requirement(self, area_manager):
        resolver = DepthRequirementResolver()
        species = area_manager.get_species("marlin")
        assert resolver.required_depth(DepthState(), TimerState(), species) is None

    def test_known_depth_wins(self, area_manager):
        """Verify a confirmed depth overrides the timed prediction."""
        resolver = DepthRequirementResolver()
        depth = DepthState(current=Depth.SHALLOW, active=True)
        timer = TimerState(total_duration=8, elapsed=1, active=True)
        species = area_manager.get_species("marlin")
        assert resolver.required_depth(depth, timer, species) is Depth.SHALLOW

    def test_timed_prediction(self, area_manager):
        """Verify start depth before the change point."""
        resolver = DepthRequirementResolver()
        depth = DepthState(active=True)
        species = area_manager.get_species("marlin")

        before = TimerState(total_duration=8, elapsed=1, active=True)
        assert resolver.required_depth(depth, before, species) is Depth.MODERATE

        inactive = TimerState(total_duration=8, elapsed=4, active=False)
        assert resolver.required_depth(depth, inactive, species) is None

    def test_species_without_change(self, area_manager):
        resolver = DepthRequirementResolver()
        depth = DepthState(active=True)
        timer = TimerState(total_duration=8, elapsed=1, active=True)
        assert resolver.required_depth(depth, timer, area_manager.get_species("krill")) is None

    @pytest.mark.parametrize("probe,required,expected", [
        (Depth.DEEP, Depth.MODERATE, MovementDirection.SHALLOWER),
        (Depth.SHALLOW, Depth.DEEP, MovementDirection.DEEPER),
        (Depth.MODERATE, Depth.MODERATE, MovementDirection.UNKNOWN),
        (None, Depth.MODERATE, MovementDirection.UNKNOWN),
        (Depth.SHALLOW, None, MovementDirection.UNKNOWN),
    ])
    def test_adjustment(self, probe, required, expected):
        assert DepthRequirementResolver().adjustment_for(probe, required) is expected


class TestAreaManager:
    """Tests for area lookup and stop durations."""

    def test_area_at(self, area_manager):
        assert area_manager.area_at(Position(50, 50)).id == "test_bay"
        assert area_manager.area_at(Position(250, 50)).id == "calm_cove"
        assert area_manager.area_at(Position(150, 50)) is None

    def test_area_requires_same_plane(self, area_manager):
        assert area_manager.area_at(Position(50, 50, 1)) is None

    def test_stop_duration_for(self, area_manager):
        assert area_manager.stop_duration_for(Position(50, 50)) == 8
        assert area_manager.stop_duration_for(Position(250, 50)) == 0
        assert area_manager.stop_duration_for(Position(500, 500)) is None

    def test_species_lookup_case_insensitive(self, area_manager):
        assert area_manager.get_species("Marlin").name == "marlin"
        assert area_manager.get_species("ghost") is None
        assert area_manager.get_species(None) is None

    def test_get_area(self, area_manager):
        assert area_manager.get_area("calm_cove").species == "krill"
        assert area_manager.get_area("missing") is None

    def test_empty_manager(self):
        manager = AreaManager()
        assert not manager.is_loaded
        assert manager.stop_duration_for(Position(0, 0)) is None

    def test_load_from_file(self, tmp_path, sample_area_table):
        path = tmp_path / "areas.json"
        path.write_text(json.dumps(sample_area_table))

        manager = AreaManager()
        manager.load_from_file(str(path))
        assert manager.is_loaded
        assert manager.table.table_id == "test_table"

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            AreaManager().load_from_file(str(tmp_path / "missing.json"))

    def test_bundled_table(self):
        """Verify the shipped area table loads and resolves a known area."""
        from shoal_tracker.config import resolve_areas_path, settings

        manager = AreaManager()
        manager.load_from_file(str(resolve_areas_path(settings)))
        assert manager.area_at(Position(2600, 3950)).id == "weissmere"
        assert manager.stop_duration_for(Position(2600, 3950)) == 48
