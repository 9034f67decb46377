"""
Tracker Output Models
=====================

This module defines the read-only output contract consumed by presentation
collaborators. Nothing in this contract is ever read back by the tracker.

Output Contract:
    {
        "tick": 1042,
        "entity": {"entity_id": "shoal-7", "kind": "shoal", "category": "marlin"},
        "area": "weissmere",
        "movement": {"is_moving": false, "ticks_at_same_position": 9, ...},
        "timer": {"status": "TIMING", "ticks_remaining": 15, ...},
        "depth": {
            "current": "UNKNOWN",
            "active": true,
            "required": "MODERATE",
            "probe_adjustments": ["DEEPER", null]
        },
        "path": {"waypoint_count": 37, "stop_point_count": 4, "is_valid": true}
    }

Design Rules:
    - Timer "ticks_remaining" is present only while status is TIMING
    - Depth "current" is UNKNOWN whenever "active" is false
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from shoal_tracker.models.path import Waypoint
from shoal_tracker.models.state import Depth, MovementDirection, TimerStatus


class EntityOutput(BaseModel):
    """Identity of the tracked entity."""

    entity_id: str = Field(..., description="Opaque entity handle")
    kind: str = Field(..., description="Scene kind")
    category: Optional[str] = Field(default=None, description="Species / category")


class MovementOutput(BaseModel):
    """
    Movement window snapshot.

    Attributes:
        is_moving: Classified as MOVING
        has_been_moving: A STOPPED edge is armed
        ticks_at_same_position: Consecutive stationary ticks
        ticks_moving: Consecutive moving ticks
    """

    is_moving: bool = Field(default=False)
    has_been_moving: bool = Field(default=False)
    ticks_at_same_position: int = Field(default=0, ge=0)
    ticks_moving: int = Field(default=0, ge=0)


class TimerOutput(BaseModel):
    """
    Timer tri-state for "ticks until next phase change".

    Attributes:
        status: WAITING, TIMING or INACTIVE (None when nothing is tracked)
        ticks_remaining: Ticks until the predicted change (TIMING only)
        total_duration: Full dwell duration of the current episode
        elapsed: Ticks counted in the current episode
    """

    status: Optional[TimerStatus] = Field(
        default=None,
        description="Timer tri-state, None when no entity is tracked",
    )

    ticks_remaining: Optional[int] = Field(
        default=None,
        ge=0,
        description="Ticks until the predicted depth change",
    )

    total_duration: int = Field(default=0, ge=0)
    elapsed: int = Field(default=0, ge=0)


class DepthOutput(BaseModel):
    """
    Depth estimate and the derived requirement.

    Attributes:
        current: Confirmed entity depth or UNKNOWN
        active: Depth tracking active
        required: Depth a probe should be at right now, if derivable
        probe_depths: Current depth of each probe (None = not lowered)
        probe_adjustments: Direction each probe must move (None = no hint)
    """

    current: Depth = Field(default=Depth.UNKNOWN)
    active: bool = Field(default=False)
    required: Optional[Depth] = Field(default=None)

    probe_depths: List[Optional[Depth]] = Field(default_factory=list)

    probe_adjustments: List[Optional[MovementDirection]] = Field(
        default_factory=list,
        description="Per-probe adjustment hint",
    )


class WaypointOutput(BaseModel):
    """Waypoint as exposed to consumers."""

    x: int
    y: int
    plane: int
    is_stop_point: bool

    @classmethod
    def from_waypoint(cls, waypoint: Waypoint) -> "WaypointOutput":
        return cls(
            x=waypoint.position.x,
            y=waypoint.position.y,
            plane=waypoint.position.plane,
            is_stop_point=waypoint.is_stop_point,
        )


class PathSummary(BaseModel):
    """Path recorder summary."""

    waypoint_count: int = Field(default=0, ge=0)
    stop_point_count: int = Field(default=0, ge=0)
    is_valid: bool = Field(default=False)


class TrackerOutput(BaseModel):
    """
    Complete tracker snapshot.

    Attributes:
        tick: Ticks processed since start
        entity: Tracked entity (None when nothing is tracked)
        area: Id of the area containing the last position
        movement: Movement window snapshot
        timer: Timer tri-state
        depth: Depth estimate and requirement
        path: Path recorder summary
    """

    tick: int = Field(default=0, ge=0, description="Ticks processed")
    entity: Optional[EntityOutput] = Field(default=None)
    area: Optional[str] = Field(default=None, description="Current area id")
    movement: MovementOutput = Field(default_factory=MovementOutput)
    timer: TimerOutput = Field(default_factory=TimerOutput)
    depth: DepthOutput = Field(default_factory=DepthOutput)
    path: PathSummary = Field(default_factory=PathSummary)
