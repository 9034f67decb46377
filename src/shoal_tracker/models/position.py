"""
Position Models
===============

Value types for the position-per-tick stream produced by the sampler.

Core Concepts:
    - Position: A world tile (x, y, plane). Exact equality is what the
      movement window uses to decide "same position".
    - PositionSample: One successful read of the tracked entity on a tick.
    - EntityLost: The tracked entity could not be read and was not found by
      a rescan. This is a terminal outcome, not an I/O failure.
    - TrackedEntity: Identity of the entity currently being followed.

All types are immutable (frozen) so they can be shared between the movement
window, the path recorder and any snapshot consumer without copying.
"""

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True, slots=True)
class Position:
    """
    World position of the tracked entity.

    Attributes:
        x: Horizontal world coordinate (tiles)
        y: Vertical world coordinate (tiles)
        plane: Map plane / level
    """

    x: int
    y: int
    plane: int = 0

    def squared_distance_to(self, other: "Position") -> int:
        """
        Squared 2-D distance, ignoring the plane.

        Callers that treat a plane change as movement check the plane
        separately (see PathRecorder.add_position).
        """
        dx = self.x - other.x
        dy = self.y - other.y
        return dx * dx + dy * dy

    def as_tuple(self) -> Tuple[int, int, int]:
        return (self.x, self.y, self.plane)

    def __repr__(self) -> str:
        return f"Position({self.x}, {self.y}, {self.plane})"


@dataclass(frozen=True, slots=True)
class PositionSample:
    """
    Position read for a single tick.

    Ephemeral: consumed immediately by the movement window and the path
    recorder. The sampler keeps no history.
    """

    tick: int
    position: Position


@dataclass(frozen=True, slots=True)
class EntityLost:
    """
    Returned by the sampler when the entity is gone.

    Attributes:
        tick: Tick on which the loss was detected
        entity_id: Id of the entity that was bound before the loss, if any
    """

    tick: int
    entity_id: Optional[str] = None


@dataclass(frozen=True, slots=True)
class TrackedEntity:
    """
    Identity of the currently followed moving object.

    Attributes:
        entity_id: Opaque id supplied by the environment
        kind: Scene kind used when rescanning for a replacement handle
        category: Optional species/category (selects tables, names exports)
        alive: Liveness flag; False once the entity is confirmed lost
    """

    entity_id: str
    kind: str
    category: Optional[str] = None
    alive: bool = True


@dataclass(frozen=True, slots=True)
class RebindEvent:
    """
    Explicit identity change of the tracked entity.

    Emitted when the sampler binds a new handle while another was bound,
    e.g. one visual variant replacing another at the same logical entity,
    or a rescan finding the entity under a new id.
    """

    previous: TrackedEntity
    current: TrackedEntity
    reason: str

    @property
    def category_changed(self) -> bool:
        return self.previous.category != self.current.category
