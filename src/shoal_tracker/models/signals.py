"""
Signal Models
=============

Typed environment signals and the edges / events passed between the
tracker's state machines.

Inputs:
    - PresenceSignal: entity appeared / departed
    - Text notifications (classified into TextSignalKind)
    - Tick pulses (no payload)

Internal:
    - MovementEdge: emitted by the movement window
    - DepthEvent: consumed by the depth inference machine
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from shoal_tracker.models.position import Position


class PresenceKind(str, Enum):
    """Entity presence change."""

    APPEARED = "APPEARED"
    DEPARTED = "DEPARTED"


@dataclass(frozen=True, slots=True)
class PresenceSignal:
    """
    Entity appeared in or departed from the scene.

    Attributes:
        kind: APPEARED or DEPARTED
        entity_id: Opaque handle of the entity
        entity_kind: Scene kind (only the tracked kind is followed)
        category: Optional species / category
        position: Position at the time of the signal, if known
    """

    kind: PresenceKind
    entity_id: str
    entity_kind: str
    category: Optional[str] = None
    position: Optional[Position] = None


class TextSignalKind(str, Enum):
    """
    Classification of a text notification.

    Definitive kinds describe the entity's own state change.
    Informational kinds only relate a probe to the entity and never
    change the entity's depth.
    """

    DEFINITIVE_SHALLOWER = "DEFINITIVE_SHALLOWER"
    DEFINITIVE_DEEPER = "DEFINITIVE_DEEPER"
    CONFIRMED_DEPTH = "CONFIRMED_DEPTH"
    INFORMATIONAL_TOO_DEEP = "INFORMATIONAL_TOO_DEEP"
    INFORMATIONAL_TOO_SHALLOW = "INFORMATIONAL_TOO_SHALLOW"
    UNRELATED = "UNRELATED"

    @property
    def is_informational(self) -> bool:
        return self in (
            TextSignalKind.INFORMATIONAL_TOO_DEEP,
            TextSignalKind.INFORMATIONAL_TOO_SHALLOW,
        )


class MovementEdge(str, Enum):
    """Edges emitted by the movement window."""

    STOPPED = "STOPPED"
    RESUMED_MOVING = "RESUMED_MOVING"


class DepthEvent(str, Enum):
    """Events consumed by the depth inference machine."""

    ACTIVATE = "ACTIVATE"
    CLEAR = "CLEAR"
    SHALLOWER = "SHALLOWER"
    DEEPER = "DEEPER"
    CONFIRMED = "CONFIRMED"
    INFORMATIONAL = "INFORMATIONAL"

    @classmethod
    def from_text(cls, kind: TextSignalKind) -> Optional["DepthEvent"]:
        """Map a classified text signal to a depth event (None if unrelated)."""
        return _TEXT_TO_DEPTH_EVENT.get(kind)


_TEXT_TO_DEPTH_EVENT = {
    TextSignalKind.DEFINITIVE_SHALLOWER: DepthEvent.SHALLOWER,
    TextSignalKind.DEFINITIVE_DEEPER: DepthEvent.DEEPER,
    TextSignalKind.CONFIRMED_DEPTH: DepthEvent.CONFIRMED,
    TextSignalKind.INFORMATIONAL_TOO_DEEP: DepthEvent.INFORMATIONAL,
    TextSignalKind.INFORMATIONAL_TOO_SHALLOW: DepthEvent.INFORMATIONAL,
}
