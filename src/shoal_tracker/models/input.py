"""
Input Message Schemas
=====================

Pydantic models for signals delivered to the tracker service.

Any payload that does not conform to these schemas is rejected with
HTTP 422 before it reaches the tracker.

Input Contract:
    POST /signals/presence
        {"kind": "APPEARED", "entity_id": "shoal-7", "entity_kind": "shoal",
         "category": "marlin", "x": 2600, "y": 3950, "plane": 0}
    POST /signals/position
        {"entity_id": "shoal-7", "x": 2601, "y": 3950, "plane": 0}
    POST /signals/text
        {"text": "The shoal swims deeper."}
    POST /signals/tick
        {"count": 1}
    POST /signals/probe
        {"probe": "PORT", "raw": 2}
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from shoal_tracker.models.position import Position
from shoal_tracker.models.signals import PresenceKind, PresenceSignal
from shoal_tracker.signals.probe_depth import Probe


class PositionMessage(BaseModel):
    """
    New position of a live entity.

    Attributes:
        entity_id: Handle of the entity
        x: World x (omit x and y to mark the entity unreadable)
        y: World y
        plane: Map plane
    """

    entity_id: str = Field(..., min_length=1, description="Entity handle")
    x: Optional[int] = Field(default=None, description="World x")
    y: Optional[int] = Field(default=None, description="World y")
    plane: int = Field(default=0, description="Map plane")

    def to_position(self) -> Optional[Position]:
        if self.x is None or self.y is None:
            return None
        return Position(self.x, self.y, self.plane)


class PresenceMessage(BaseModel):
    """Entity appeared / departed."""

    kind: PresenceKind = Field(..., description="APPEARED or DEPARTED")
    entity_id: str = Field(..., min_length=1, description="Entity handle")
    entity_kind: str = Field(default="shoal", min_length=1, description="Scene kind")
    category: Optional[str] = Field(default=None, description="Species / category")
    x: Optional[int] = Field(default=None)
    y: Optional[int] = Field(default=None)
    plane: int = Field(default=0)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "kind": "APPEARED",
                "entity_id": "shoal-7",
                "entity_kind": "shoal",
                "category": "marlin",
                "x": 2600,
                "y": 3950,
                "plane": 0,
            }
        }
    )

    def to_signal(self) -> PresenceSignal:
        position = None
        if self.x is not None and self.y is not None:
            position = Position(self.x, self.y, self.plane)
        return PresenceSignal(
            kind=self.kind,
            entity_id=self.entity_id,
            entity_kind=self.entity_kind,
            category=self.category,
            position=position,
        )


class TextMessage(BaseModel):
    """Unstructured text notification."""

    text: str = Field(..., description="One line of notification text")


class TickMessage(BaseModel):
    """Tick pulses to process, in order."""

    count: int = Field(default=1, ge=1, le=10_000, description="Number of ticks")


class ProbeMessage(BaseModel):
    """Raw probe depth reading (0 = not lowered, 1..3 = SHALLOW..DEEP)."""

    probe: Probe = Field(..., description="PORT or STARBOARD")
    raw: int = Field(..., description="Raw reading")
