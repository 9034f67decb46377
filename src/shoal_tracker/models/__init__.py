"""
Data Models
===========

Value types for the shoal tracker.

This module re-exports all data models for convenient access.

Models:
    Position:
        - Position, PositionSample, EntityLost, TrackedEntity, RebindEvent

    State:
        - Depth, MovementDirection, TimerStatus
        - MovementState, TimerState, DepthState

    Signals:
        - PresenceKind, PresenceSignal, TextSignalKind, MovementEdge, DepthEvent

    Geometry:
        - Bounds, SpeciesTiming, FishingArea, AreaTable

    Path:
        - Waypoint, PathBounds, PathExport

    Output:
        - TrackerOutput and its sections
"""

from shoal_tracker.models.position import (
    EntityLost,
    Position,
    PositionSample,
    RebindEvent,
    TrackedEntity,
)
from shoal_tracker.models.state import (
    Depth,
    DepthState,
    MovementDirection,
    MovementState,
    TimerState,
    TimerStatus,
)
from shoal_tracker.models.signals import (
    DepthEvent,
    MovementEdge,
    PresenceKind,
    PresenceSignal,
    TextSignalKind,
)
from shoal_tracker.models.geometry import AreaTable, AreaType, Bounds, FishingArea, SpeciesTiming
from shoal_tracker.models.path import PathBounds, PathExport, Waypoint
from shoal_tracker.models.output import TrackerOutput
from shoal_tracker.models.reason_codes import ReasonCode

__all__ = [
    # Position
    "Position",
    "PositionSample",
    "EntityLost",
    "TrackedEntity",
    "RebindEvent",
    # State
    "Depth",
    "MovementDirection",
    "TimerStatus",
    "MovementState",
    "TimerState",
    "DepthState",
    # Signals
    "PresenceKind",
    "PresenceSignal",
    "TextSignalKind",
    "MovementEdge",
    "DepthEvent",
    # Geometry
    "AreaType",
    "Bounds",
    "SpeciesTiming",
    "FishingArea",
    "AreaTable",
    # Path
    "Waypoint",
    "PathBounds",
    "PathExport",
    # Output
    "TrackerOutput",
    "ReasonCode",
]
