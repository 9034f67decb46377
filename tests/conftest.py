"""
Test Configuration
==================

Pytest fixtures and test configuration for ShoalTracker.
"""

from typing import List, Sequence, Tuple

import pytest

from shoal_tracker.models.path import Waypoint
from shoal_tracker.models.position import Position


@pytest.fixture
def sample_area_table():
    """
    Provide a small area table for testing.

    Layout (plane 0):
        test_bay:  x 0..99,    y 0..99   -> marlin (duration 8, change at 4)
        calm_cove: x 200..299, y 0..99   -> krill  (duration 0)
    """
    return {
        "table_id": "test_table",
        "species": [
            {
                "name": "marlin",
                "display_name": "Marlin",
                "stop_duration": 8,
                "area_type": "THREE_DEPTH",
                "start_depth": "MODERATE",
                "end_depth": "DEEP",
            },
            {
                "name": "krill",
                "stop_duration": 0,
            },
        ],
        "areas": [
            {
                "id": "test_bay",
                "name": "Test Bay",
                "species": "marlin",
                "bounds": {"x": 0, "y": 0, "width": 100, "height": 100},
            },
            {
                "id": "calm_cove",
                "name": "Calm Cove",
                "species": "krill",
                "bounds": {"x": 200, "y": 0, "width": 100, "height": 100},
            },
        ],
    }


@pytest.fixture
def area_manager(sample_area_table):
    """Provide an AreaManager loaded with the sample table."""
    from shoal_tracker.geometry import AreaManager
    from shoal_tracker.models.geometry import AreaTable

    return AreaManager(AreaTable.model_validate(sample_area_table))


@pytest.fixture
def tracker(area_manager):
    """Provide a TrackerGraph over the sample table."""
    from shoal_tracker.agent.graph import TrackerGraph

    return TrackerGraph(area_manager=area_manager)


@pytest.fixture
def make_waypoints():
    """Build waypoints from (x, y) or (x, y, is_stop_point) tuples."""

    def _make(points: Sequence[Tuple]) -> List[Waypoint]:
        waypoints = []
        for point in points:
            x, y = point[0], point[1]
            is_stop = point[2] if len(point) > 2 else False
            waypoints.append(Waypoint(Position(x, y), is_stop))
        return waypoints

    return _make


@pytest.fixture
def appear():
    """Build an APPEARED presence signal."""
    from shoal_tracker.models.signals import PresenceKind, PresenceSignal

    def _appear(entity_id="shoal-1", category="marlin", x=10, y=10, kind="shoal"):
        return PresenceSignal(
            kind=PresenceKind.APPEARED,
            entity_id=entity_id,
            entity_kind=kind,
            category=category,
            position=Position(x, y),
        )

    return _appear
