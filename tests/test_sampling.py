"""
Sampling Tests
==============

Tests for the in-memory scene and the per-tick position sampler.
"""

import pytest

from shoal_tracker.models.position import EntityLost, Position, PositionSample, TrackedEntity
from shoal_tracker.sampling import PositionSampler, SceneEntity, SceneRegistry


@pytest.fixture
def scene():
    """Scene with two shoals and a boat."""
    registry = SceneRegistry()
    registry.add(SceneEntity("shoal-1", "shoal", "marlin", Position(10, 10)))
    registry.add(SceneEntity("boat-1", "boat", None, Position(0, 0)))
    registry.add(SceneEntity("shoal-2", "shoal", "halibut", Position(50, 50)))
    return registry


class TestSceneRegistry:
    """Tests for the in-memory scene."""

    def test_move_and_read(self, scene):
        assert scene.move("shoal-1", Position(11, 10))
        assert scene.position_of("shoal-1") == Position(11, 10)

    def test_move_unknown(self, scene):
        assert not scene.move("ghost", Position(1, 1))

    def test_entities_of_kind_in_insertion_order(self, scene):
        ids = [e.entity_id for e in scene.entities_of_kind("shoal")]
        assert ids == ["shoal-1", "shoal-2"]

    def test_remove(self, scene):
        scene.remove("shoal-1")
        assert "shoal-1" not in scene
        assert len(scene) == 2
        assert scene.position_of("shoal-1") is None


class TestPositionSampler:
    """Tests for sampling, rescan and loss."""

    def test_validation(self, scene):
        with pytest.raises(ValueError):
            PositionSampler(scene, tracked_kind="")

    def test_sample_bound_entity(self, scene):
        sampler = PositionSampler(scene)
        assert sampler.bind(TrackedEntity("shoal-1", "shoal", "marlin")) is None

        result = sampler.sample(tick=1)
        assert isinstance(result, PositionSample)
        assert result.position == Position(10, 10)

    def test_nothing_bound_is_lost(self, scene):
        result = PositionSampler(scene).sample(tick=3)
        assert isinstance(result, EntityLost)
        assert result.entity_id is None

    def test_rescan_rebinds_first_match(self, scene):
        """Verify a stale handle rebinds to the first live entity of the kind."""
        sampler = PositionSampler(scene)
        sampler.bind(TrackedEntity("shoal-1", "shoal", "marlin"))
        scene.move("shoal-1", None)

        result = sampler.sample(tick=2)
        assert result.position == Position(50, 50)
        assert sampler.entity.entity_id == "shoal-2"

        event = sampler.last_rebind
        assert event.previous.entity_id == "shoal-1"
        assert event.current.entity_id == "shoal-2"
        assert event.category_changed
        assert event.reason == "rescan"

    def test_rescan_skips_other_kinds(self, scene):
        """Verify the rescan never binds an entity of another kind."""
        scene.remove("shoal-2")
        sampler = PositionSampler(scene)
        sampler.bind(TrackedEntity("shoal-1", "shoal", "marlin"))
        scene.remove("shoal-1")

        result = sampler.sample(tick=4)
        assert isinstance(result, EntityLost)
        assert result.entity_id == "shoal-1"
        assert not sampler.is_bound
        assert sampler.get_metrics()["losses"] == 1

    def test_rebind_same_entity_is_silent(self, scene):
        sampler = PositionSampler(scene)
        entity = TrackedEntity("shoal-1", "shoal", "marlin")
        sampler.bind(entity)
        assert sampler.bind(entity) is None

    def test_rebind_category_change(self, scene):
        """Verify a category change on the same handle is surfaced."""
        sampler = PositionSampler(scene)
        sampler.bind(TrackedEntity("shoal-1", "shoal", "marlin"))
        event = sampler.bind(TrackedEntity("shoal-1", "shoal", "bluefin"), reason="appeared")
        assert event is not None
        assert event.category_changed

    def test_unbind_marks_not_alive(self, scene):
        sampler = PositionSampler(scene)
        sampler.bind(TrackedEntity("shoal-1", "shoal", "marlin"))
        entity = sampler.unbind()
        assert not entity.alive
        assert sampler.entity is None
