"""
Tracker State Models
====================

This module defines the per-entity state machines of the tracker.

Core Concepts:
    - Depth: Discrete phase of the entity (SHALLOW, MODERATE, DEEP, UNKNOWN)
    - MovementState: Hysteresis counters for MOVING / STATIONARY detection
    - TimerState: Countdown toward the predicted mid-dwell depth change
    - DepthState: Best-effort estimate of the entity's current depth

Each state is an immutable pydantic model. Transitions never mutate a state;
they produce a new one via ``model_copy(update=...)`` in
``shoal_tracker.agent.transitions``.

Invariants:
    MovementState: ticks_at_same_position and ticks_moving are never both
        non-zero.
    TimerState: elapsed is never negative and is not carried over between
        stationary episodes.
    DepthState: current only moves one level at a time and is clamped at
        SHALLOW / DEEP; it is UNKNOWN whenever active is False.

Example:
    from shoal_tracker.models.state import Depth, DepthState

    state = DepthState(current=Depth.MODERATE, active=True)
    assert state.current.deeper() is Depth.DEEP
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from shoal_tracker.models.position import Position


class Depth(str, Enum):
    """
    Discrete depth phase of the tracked entity.

    SHALLOW, MODERATE and DEEP are ordered by level. UNKNOWN is held until a
    definitive signal confirms an absolute depth; it has no level.
    """

    SHALLOW = "SHALLOW"
    MODERATE = "MODERATE"
    DEEP = "DEEP"
    UNKNOWN = "UNKNOWN"

    @property
    def level(self) -> Optional[int]:
        return _DEPTH_LEVELS.get(self)

    @property
    def is_known(self) -> bool:
        return self is not Depth.UNKNOWN

    def shallower(self) -> "Depth":
        """One level shallower, clamped at SHALLOW. UNKNOWN stays UNKNOWN."""
        if self.level is None:
            return self
        return _DEPTHS_BY_LEVEL[max(0, self.level - 1)]

    def deeper(self) -> "Depth":
        """One level deeper, clamped at DEEP. UNKNOWN stays UNKNOWN."""
        if self.level is None:
            return self
        return _DEPTHS_BY_LEVEL[min(len(_DEPTHS_BY_LEVEL) - 1, self.level + 1)]

    def is_shallower_than(self, other: "Depth") -> bool:
        if self.level is None or other.level is None:
            return False
        return self.level < other.level

    def is_deeper_than(self, other: "Depth") -> bool:
        if self.level is None or other.level is None:
            return False
        return self.level > other.level


_DEPTHS_BY_LEVEL = (Depth.SHALLOW, Depth.MODERATE, Depth.DEEP)
_DEPTH_LEVELS = {depth: level for level, depth in enumerate(_DEPTHS_BY_LEVEL)}


class MovementDirection(str, Enum):
    """Which way a probe has to move to match a required depth."""

    SHALLOWER = "SHALLOWER"
    DEEPER = "DEEPER"
    UNKNOWN = "UNKNOWN"


class TimerStatus(str, Enum):
    """
    Tri-state exposed to consumers of the stop-duration timer.

    Attributes:
        WAITING: Entity is moving; no dwell has started yet
        TIMING: Counting down toward the predicted depth change
        INACTIVE: Entity is stationary but no countdown is running
            (first stop, change already reached, or uncalibrated location)
    """

    WAITING = "WAITING"
    TIMING = "TIMING"
    INACTIVE = "INACTIVE"


class MovementState(BaseModel):
    """
    Hysteresis state of the movement window.

    Attributes:
        last_position: Last recorded (changed-to) position
        ticks_at_same_position: Consecutive ticks at last_position
        ticks_moving: Consecutive ticks with a position change
        has_been_moving: Entity moved long enough to arm a STOPPED edge
        is_moving: Entity currently classified as MOVING
    """

    model_config = ConfigDict(frozen=True)

    last_position: Optional[Position] = Field(
        default=None,
        description="Last position the entity changed to",
    )

    ticks_at_same_position: int = Field(
        default=0,
        ge=0,
        description="Consecutive ticks without a position change",
    )

    ticks_moving: int = Field(
        default=0,
        ge=0,
        description="Consecutive ticks with a position change",
    )

    has_been_moving: bool = Field(
        default=False,
        description="Moved for at least the movement threshold since the last stop",
    )

    is_moving: bool = Field(
        default=False,
        description="Currently classified as MOVING",
    )


class TimerState(BaseModel):
    """
    Countdown toward the predicted depth change of one stationary episode.

    The depth change is predicted at the midpoint of the dwell
    (``total_duration // 2``), not at its end.

    Attributes:
        total_duration: Full dwell duration for the area (ticks)
        elapsed: Ticks counted since the STOPPED edge
        active: Whether the countdown is running
    """

    model_config = ConfigDict(frozen=True)

    total_duration: int = Field(default=0, ge=0, description="Full dwell duration (ticks)")
    elapsed: int = Field(default=0, ge=0, description="Ticks since the dwell started")
    active: bool = Field(default=False, description="Countdown running")

    @property
    def change_tick(self) -> int:
        """Elapsed tick at which the depth change is predicted."""
        return self.total_duration // 2

    @property
    def remaining(self) -> int:
        """Ticks left until the predicted change, never negative."""
        return max(0, self.change_tick - self.elapsed)


class DepthState(BaseModel):
    """
    Best-effort estimate of the entity's depth.

    Attributes:
        current: Current depth, UNKNOWN until confirmed
        active: Whether an entity is present and signals are processed
    """

    model_config = ConfigDict(frozen=True)

    current: Depth = Field(default=Depth.UNKNOWN, description="Current depth estimate")
    active: bool = Field(default=False, description="Entity present")
