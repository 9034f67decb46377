"""
Path Models
===========

Value types for recorded and simplified entity paths.

Core Concepts:
    - Waypoint: A recorded position plus a stop flag. Frozen; the recorder
      marks a stop retroactively by replacing its most recent waypoint
      with a flagged copy, never by mutating one in place.
    - PathBounds: Bounding rectangle of a path, widened by a margin
    - PathExport: Human-reviewable dump of a finished path, suitable for
      reuse as a new area-table entry

Export Format (YAML):
    category: marlin
    waypoint_count: 3
    waypoints:
    - [2600, 3950, 0, true]
    - [2610, 3950, 0, false]
    - [2620, 3960, 0, false]
    stop_indices: [0]
    area: {min_x: 2590, max_x: 2630, min_y: 3940, max_y: 3970}
"""

from dataclasses import dataclass, replace
from typing import List, Optional, Sequence, Tuple

import yaml
from pydantic import BaseModel, Field

from shoal_tracker.models.position import Position


WaypointTuple = Tuple[int, int, int, bool]


@dataclass(frozen=True, slots=True)
class Waypoint:
    """
    One point on a recorded path.

    Attributes:
        position: World position
        is_stop_point: Entity dwelled here long enough to count as a stop
    """

    position: Position
    is_stop_point: bool = False

    def as_stop_point(self) -> "Waypoint":
        """Copy of this waypoint flagged as a stop point."""
        return replace(self, is_stop_point=True)

    def to_tuple(self) -> WaypointTuple:
        return (self.position.x, self.position.y, self.position.plane, self.is_stop_point)

    @classmethod
    def from_tuple(cls, values: Sequence) -> "Waypoint":
        x, y, plane, stop = values
        return cls(Position(int(x), int(y), int(plane)), bool(stop))

    def __repr__(self) -> str:
        marker = " STOP" if self.is_stop_point else ""
        return f"Waypoint({self.position.x}, {self.position.y}, {self.position.plane}{marker})"


class PathBounds(BaseModel):
    """
    Bounding rectangle of an exported path.

    Attributes:
        min_x: Smallest x minus the margin
        max_x: Largest x plus the margin
        min_y: Smallest y minus the margin
        max_y: Largest y plus the margin
    """

    min_x: int
    max_x: int
    min_y: int
    max_y: int

    @property
    def width(self) -> int:
        return self.max_x - self.min_x

    @property
    def height(self) -> int:
        return self.max_y - self.min_y


class PathExport(BaseModel):
    """
    Finished path dump.

    Attributes:
        category: Species / category of the entity that travelled the path
        waypoints: Ordered (x, y, plane, is_stop_point) tuples
        stop_indices: Indices into waypoints that are stop points
        area: Bounding rectangle widened by the export margin
    """

    category: Optional[str] = Field(
        default=None,
        description="Entity category the path belongs to",
    )

    waypoints: List[WaypointTuple] = Field(
        default_factory=list,
        description="Ordered (x, y, plane, is_stop_point) tuples",
    )

    stop_indices: List[int] = Field(
        default_factory=list,
        description="Indices of stop points within waypoints",
    )

    area: Optional[PathBounds] = Field(
        default=None,
        description="Bounding area of the path plus margin",
    )

    def to_waypoints(self) -> List[Waypoint]:
        return [Waypoint.from_tuple(values) for values in self.waypoints]

    def to_yaml(self) -> str:
        """Render as a human-reviewable YAML document."""
        document = {
            "category": self.category,
            "waypoint_count": len(self.waypoints),
            "waypoints": [list(values) for values in self.waypoints],
            "stop_indices": list(self.stop_indices),
            "area": self.area.model_dump() if self.area else None,
        }
        return yaml.safe_dump(document, sort_keys=False, default_flow_style=None)

    @classmethod
    def from_yaml(cls, text: str) -> "PathExport":
        """
        Parse a YAML dump produced by ``to_yaml``.

        Raises:
            ValueError: If the document is not a mapping
            pydantic.ValidationError: If fields are malformed
        """
        data = yaml.safe_load(text)
        if not isinstance(data, dict):
            raise ValueError("Path export must be a YAML mapping")
        data.pop("waypoint_count", None)
        return cls.model_validate(data)
