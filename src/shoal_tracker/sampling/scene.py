"""
Entity Scene
============

Boundary to the environment's live entities.

The sampler never talks to the environment directly. It reads positions
through an ``EntityScene``: a synchronous, in-memory view of the live
entities. The rescan performed when a handle goes stale is a bounded
lookup over this view, never network or disk I/O.

Implementations:
    - SceneRegistry: in-memory scene fed by presence and position signals
      (used by the service and by tests)
"""

import logging
from dataclasses import dataclass, replace
from typing import Dict, Iterable, Optional, Protocol

from shoal_tracker.models.position import Position


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SceneEntity:
    """
    Live entity as seen by the scene.

    Attributes:
        entity_id: Opaque handle
        kind: Scene kind (e.g. "shoal")
        category: Optional species / category
        position: Last known position, None while unreadable
    """

    entity_id: str
    kind: str
    category: Optional[str] = None
    position: Optional[Position] = None


class EntityScene(Protocol):
    """Read-only view of live entities."""

    def position_of(self, entity_id: str) -> Optional[Position]:
        """Current position of a live entity, None if stale or unreadable."""
        ...

    def entities_of_kind(self, kind: str) -> Iterable[SceneEntity]:
        """Live entities of one kind, in a stable order."""
        ...


class SceneRegistry:
    """
    In-memory EntityScene.

    Entities are kept in insertion order so that rescans are deterministic
    ("first match" is the earliest registered entity).

    Example:
        scene = SceneRegistry()
        scene.add(SceneEntity("shoal-1", "shoal", "marlin", Position(10, 20)))
        scene.move("shoal-1", Position(11, 20))
        assert scene.position_of("shoal-1") == Position(11, 20)
    """

    def __init__(self) -> None:
        self._entities: Dict[str, SceneEntity] = {}

    def add(self, entity: SceneEntity) -> None:
        """Register (or replace) a live entity."""
        self._entities[entity.entity_id] = entity
        logger.debug(f"Scene: added {entity.entity_id} ({entity.kind}/{entity.category})")

    def remove(self, entity_id: str) -> Optional[SceneEntity]:
        """Remove an entity; returns it if it was present."""
        entity = self._entities.pop(entity_id, None)
        if entity is not None:
            logger.debug(f"Scene: removed {entity_id}")
        return entity

    def move(self, entity_id: str, position: Optional[Position]) -> bool:
        """
        Update the position of a live entity.

        Args:
            entity_id: Handle of the entity
            position: New position, None to mark it unreadable

        Returns:
            False when the entity is not in the scene
        """
        entity = self._entities.get(entity_id)
        if entity is None:
            return False
        self._entities[entity_id] = replace(entity, position=position)
        return True

    def get(self, entity_id: str) -> Optional[SceneEntity]:
        return self._entities.get(entity_id)

    def position_of(self, entity_id: str) -> Optional[Position]:
        entity = self._entities.get(entity_id)
        return entity.position if entity else None

    def entities_of_kind(self, kind: str) -> Iterable[SceneEntity]:
        return [e for e in self._entities.values() if e.kind == kind]

    def clear(self) -> None:
        self._entities.clear()

    def __len__(self) -> int:
        return len(self._entities)

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._entities
