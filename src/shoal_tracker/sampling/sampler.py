"""
Position Sampler
================

Reads the tracked entity's position once per tick.

This sampler:
    - Owns the single optional handle of the tracked entity
    - Exposes identity changes as explicit RebindEvents
    - Performs at most ONE bounded rescan per tick when the handle is stale
    - Returns EntityLost (not an exception) when the entity is gone

Sampling Flow:
    bound handle readable        -> PositionSample
    stale, rescan finds a match  -> rebind, PositionSample
    stale, no match              -> unbind, EntityLost
    nothing bound                -> EntityLost
"""

import logging
from dataclasses import replace
from typing import Any, Dict, Optional, Union

from shoal_tracker.models.position import EntityLost, PositionSample, RebindEvent, TrackedEntity
from shoal_tracker.sampling.scene import EntityScene


logger = logging.getLogger(__name__)


SampleResult = Union[PositionSample, EntityLost]


class PositionSampler:
    """
    Per-tick position reader with rescan on stale handles.

    Attributes:
        scene: Live entity view
        tracked_kind: Scene kind considered when rescanning

    Example:
        sampler = PositionSampler(scene, tracked_kind="shoal")
        sampler.bind(TrackedEntity("shoal-1", "shoal", "marlin"))

        result = sampler.sample(tick)
        if isinstance(result, EntityLost):
            tracker.teardown()
    """

    def __init__(self, scene: EntityScene, tracked_kind: str = "shoal") -> None:
        """
        Initialize the sampler.

        Args:
            scene: Live entity view
            tracked_kind: Kind of entity to follow
        """
        if not tracked_kind:
            raise ValueError("tracked_kind must be a non-empty string")

        self.scene = scene
        self.tracked_kind = tracked_kind

        self._entity: Optional[TrackedEntity] = None
        self._last_rebind: Optional[RebindEvent] = None
        self._samples: int = 0
        self._rescans: int = 0
        self._rebinds: int = 0
        self._losses: int = 0

        logger.info(f"PositionSampler initialized: kind={tracked_kind}")

    @property
    def entity(self) -> Optional[TrackedEntity]:
        """Currently bound entity, None when nothing is tracked."""
        return self._entity

    @property
    def is_bound(self) -> bool:
        return self._entity is not None

    @property
    def last_rebind(self) -> Optional[RebindEvent]:
        return self._last_rebind

    def bind(self, entity: TrackedEntity, reason: str = "bind") -> Optional[RebindEvent]:
        """
        Bind a handle.

        Args:
            entity: Entity to follow
            reason: Short label recorded on a RebindEvent

        Returns:
            RebindEvent when a different handle or category was bound before,
            None for a first bind or a repeat of the same handle
        """
        previous = self._entity

        if previous is None:
            self._entity = entity
            logger.info(
                f"Tracking entity {entity.entity_id} "
                f"(kind={entity.kind}, category={entity.category})"
            )
            return None

        if previous.entity_id == entity.entity_id and previous.category == entity.category:
            return None

        self._entity = entity
        event = RebindEvent(previous=previous, current=entity, reason=reason)
        self._last_rebind = event
        self._rebinds += 1

        logger.info(
            f"Rebound entity {previous.entity_id} ({previous.category}) -> "
            f"{entity.entity_id} ({entity.category}), reason={reason}"
        )
        return event

    def unbind(self) -> Optional[TrackedEntity]:
        """Drop the handle; returns the entity (marked not alive) if one was bound."""
        previous = self._entity
        self._entity = None
        if previous is None:
            return None
        return replace(previous, alive=False)

    def sample(self, tick: int) -> SampleResult:
        """
        Read the tracked entity's position for this tick.

        Args:
            tick: Current tick number

        Returns:
            PositionSample, or EntityLost when nothing can be read
        """
        entity = self._entity
        if entity is None:
            return EntityLost(tick=tick)

        position = self.scene.position_of(entity.entity_id)
        if position is not None:
            self._samples += 1
            return PositionSample(tick=tick, position=position)

        # Stale handle: a single bounded rescan
        self._rescans += 1
        for candidate in self.scene.entities_of_kind(self.tracked_kind):
            if candidate.position is None:
                continue
            self.bind(
                TrackedEntity(candidate.entity_id, candidate.kind, candidate.category),
                reason="rescan",
            )
            self._samples += 1
            return PositionSample(tick=tick, position=candidate.position)

        self._losses += 1
        self.unbind()
        logger.info(f"Entity {entity.entity_id} lost at tick {tick}")
        return EntityLost(tick=tick, entity_id=entity.entity_id)

    def reset(self) -> None:
        """Drop the handle and the last rebind event."""
        self._entity = None
        self._last_rebind = None

    def get_metrics(self) -> Dict[str, Any]:
        return {
            "entity_id": self._entity.entity_id if self._entity else None,
            "samples": self._samples,
            "rescans": self._rescans,
            "rebinds": self._rebinds,
            "losses": self._losses,
        }
