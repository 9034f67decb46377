"""
Area Models
===========

This module defines the static area / stop-duration lookup table.

Design Philosophy:
    Fishing areas are EXPLICITLY DECLARED geometry, NOT discovered at
    runtime. They are loaded from JSON configuration and remain fixed for
    the lifetime of the tracker.

Supported Definitions:
    - Bounds: Axis-aligned rectangle on a single plane
    - SpeciesTiming: Stop duration and depth pattern of one species
    - FishingArea: Named rectangle bound to a species
    - AreaTable: Complete lookup table (species + areas)

Example Area Table:
    {
        "table_id": "sailing_trawling",
        "species": [
            {
                "name": "marlin",
                "stop_duration": 48,
                "area_type": "THREE_DEPTH",
                "start_depth": "MODERATE",
                "end_depth": "DEEP"
            }
        ],
        "areas": [
            {
                "id": "weissmere",
                "name": "Weissmere",
                "species": "marlin",
                "bounds": {"x": 2590, "y": 3945, "width": 281, "height": 202}
            }
        ]
    }

Note:
    Bounds are half-open: a point is inside when
    x <= px < x + width and y <= py < y + height on the same plane.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from shoal_tracker.models.position import Position
from shoal_tracker.models.state import Depth


class AreaType(str, Enum):
    """Number of depth phases a species cycles through."""

    ONE_DEPTH = "ONE_DEPTH"
    TWO_DEPTH = "TWO_DEPTH"
    THREE_DEPTH = "THREE_DEPTH"


class Bounds(BaseModel):
    """
    Axis-aligned world rectangle.

    Attributes:
        x: Minimum x coordinate (inclusive)
        y: Minimum y coordinate (inclusive)
        width: Extent along x (tiles)
        height: Extent along y (tiles)
        plane: Plane the rectangle lies on
    """

    x: int = Field(..., description="Minimum x (inclusive)")
    y: int = Field(..., description="Minimum y (inclusive)")
    width: int = Field(..., gt=0, description="Width in tiles")
    height: int = Field(..., gt=0, description="Height in tiles")
    plane: int = Field(default=0, description="Map plane")

    def contains(self, position: Position) -> bool:
        """Half-open containment test on the same plane."""
        return (
            position.plane == self.plane
            and self.x <= position.x < self.x + self.width
            and self.y <= position.y < self.y + self.height
        )


class SpeciesTiming(BaseModel):
    """
    Stop duration and depth pattern for one species.

    Attributes:
        name: Species key referenced by areas and exports
        display_name: Human-readable name
        stop_duration: Full dwell duration in ticks (0 = never changes depth)
        area_type: Number of depth phases
        start_depth: Required depth before the mid-dwell change
        end_depth: Required depth after the mid-dwell change
    """

    name: str = Field(..., description="Species key")

    display_name: Optional[str] = Field(
        default=None,
        description="Human-readable name",
    )

    stop_duration: int = Field(
        ...,
        ge=0,
        description="Total dwell duration in ticks",
    )

    area_type: AreaType = Field(
        default=AreaType.ONE_DEPTH,
        description="Number of depth phases",
    )

    start_depth: Optional[Depth] = Field(
        default=None,
        description="Depth required before the change point",
    )

    end_depth: Optional[Depth] = Field(
        default=None,
        description="Depth required after the change point",
    )

    @model_validator(mode="after")
    def validate_depth_pattern(self) -> "SpeciesTiming":
        """Both change depths are set together, and never to UNKNOWN."""
        if (self.start_depth is None) != (self.end_depth is None):
            raise ValueError(
                f"Species {self.name}: start_depth and end_depth must be set together"
            )
        if Depth.UNKNOWN in (self.start_depth, self.end_depth):
            raise ValueError(f"Species {self.name}: depth pattern cannot be UNKNOWN")
        return self

    @property
    def has_depth_change(self) -> bool:
        return self.start_depth is not None and self.stop_duration > 0


class FishingArea(BaseModel):
    """
    Rectangular area bound to a species.

    Attributes:
        id: Unique identifier
        name: Human-readable name for logging
        species: Key of the SpeciesTiming used for this area
        bounds: World rectangle
        stop_indices: Waypoint indices of known stops on the area's route
    """

    id: str = Field(..., description="Unique area identifier")
    name: str = Field(..., description="Human-readable name")
    species: str = Field(..., description="Species key")
    bounds: Bounds = Field(..., description="World rectangle")

    stop_indices: List[int] = Field(
        default_factory=list,
        description="Indices of stop waypoints on the recorded route",
    )


class AreaTable(BaseModel):
    """
    Complete area / duration lookup table loaded from JSON.

    Attributes:
        table_id: Identifier of this table
        species: Species timing definitions
        areas: Fishing areas, in lookup priority order
    """

    table_id: str = Field(..., description="Identifier of this table")

    species: List[SpeciesTiming] = Field(
        default_factory=list,
        description="Species timing definitions",
    )

    areas: List[FishingArea] = Field(
        default_factory=list,
        description="Areas in lookup priority order (first match wins)",
    )

    @model_validator(mode="after")
    def validate_references(self) -> "AreaTable":
        """Every area must reference a declared species."""
        known = {s.name for s in self.species}
        for area in self.areas:
            if area.species not in known:
                raise ValueError(
                    f"Area {area.id} references unknown species '{area.species}'"
                )
        return self
