"""
Path Recorder
=============

Accumulates the entity's positions into an ordered waypoint list.

Recording Rules (per sampled position p):
    1. First position of the episode: append Waypoint(p)
    2. |p - last recorded| >= tolerance (compared squared), or p is on a
       different plane:
         if the dwell counter reached stop_dwell_ticks, flag the most
         recent waypoint as a stop point; append Waypoint(p); dwell = 0
    3. Otherwise: dwell += 1

Waypoints are frozen. Flagging a stop replaces the most recent waypoint
with a flagged copy; earlier waypoints are never touched again.

A path is valid (exportable) once it holds at least min_path_points
waypoints. Shorter paths are discarded on teardown, not reported as errors.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from shoal_tracker.models.path import PathBounds, PathExport, Waypoint
from shoal_tracker.models.position import Position


logger = logging.getLogger(__name__)


class PathRecorder:
    """
    Incremental waypoint recorder.

    Example:
        recorder = PathRecorder(category="marlin")

        for position in positions:
            recorder.add_position(position)

        export = recorder.teardown()   # None when too short
    """

    def __init__(
        self,
        waypoint_tolerance: int = 2,
        stop_dwell_ticks: int = 5,
        min_path_points: int = 10,
        area_margin: int = 10,
        category: Optional[str] = None,
    ) -> None:
        """
        Initialize the recorder.

        Args:
            waypoint_tolerance: Minimum distance to record a new waypoint
            stop_dwell_ticks: Dwell ticks that turn a waypoint into a stop point
            min_path_points: Waypoints required for a valid path
            area_margin: Margin added around the exported bounding area
            category: Category of the recorded entity
        """
        if waypoint_tolerance <= 0:
            raise ValueError("waypoint_tolerance must be positive")
        if stop_dwell_ticks < 1:
            raise ValueError("stop_dwell_ticks must be >= 1")
        if min_path_points < 1:
            raise ValueError("min_path_points must be >= 1")
        if area_margin < 0:
            raise ValueError("area_margin must be non-negative")

        self.waypoint_tolerance = waypoint_tolerance
        self.stop_dwell_ticks = stop_dwell_ticks
        self.min_path_points = min_path_points
        self.area_margin = area_margin
        self.category = category

        self._tolerance_sq = waypoint_tolerance * waypoint_tolerance
        self._waypoints: List[Waypoint] = []
        self._last_recorded: Optional[Position] = None
        self._dwell_ticks: int = 0
        self._exports: int = 0
        self._discarded: int = 0

    def add_position(self, position: Position) -> Optional[Waypoint]:
        """
        Record one sampled position.

        Args:
            position: Position sampled this tick

        Returns:
            The appended waypoint, or None if the position was absorbed
            into the current dwell
        """
        if self._last_recorded is None:
            return self._append(position)

        changed_plane = position.plane != self._last_recorded.plane
        if changed_plane or position.squared_distance_to(self._last_recorded) >= self._tolerance_sq:
            if self._dwell_ticks >= self.stop_dwell_ticks:
                self._waypoints[-1] = self._waypoints[-1].as_stop_point()
                logger.debug(
                    f"Stop point at {self._waypoints[-1].position} "
                    f"after {self._dwell_ticks} ticks"
                )
            return self._append(position)

        self._dwell_ticks += 1
        return None

    def _append(self, position: Position) -> Waypoint:
        waypoint = Waypoint(position)
        self._waypoints.append(waypoint)
        self._last_recorded = position
        self._dwell_ticks = 0
        return waypoint

    @property
    def waypoints(self) -> Tuple[Waypoint, ...]:
        """Immutable snapshot of the recorded waypoints."""
        return tuple(self._waypoints)

    def snapshot(self) -> Tuple[Waypoint, ...]:
        """Immutable snapshot, safe to hand to the simplifier."""
        return tuple(self._waypoints)

    @property
    def dwell_ticks(self) -> int:
        return self._dwell_ticks

    @property
    def stop_point_count(self) -> int:
        return sum(1 for waypoint in self._waypoints if waypoint.is_stop_point)

    def is_valid(self) -> bool:
        return len(self._waypoints) >= self.min_path_points

    def export(self) -> PathExport:
        """
        Build a dump of the current path.

        When the path has a stop point it is rotated so that the first
        waypoint is a stop point.
        """
        waypoints = list(self._waypoints)

        first_stop = next(
            (i for i, waypoint in enumerate(waypoints) if waypoint.is_stop_point),
            None,
        )
        if first_stop:
            waypoints = waypoints[first_stop:] + waypoints[:first_stop]

        area = None
        if waypoints:
            xs = [w.position.x for w in waypoints]
            ys = [w.position.y for w in waypoints]
            m = self.area_margin
            area = PathBounds(
                min_x=min(xs) - m,
                max_x=max(xs) + m,
                min_y=min(ys) - m,
                max_y=max(ys) + m,
            )

        return PathExport(
            category=self.category,
            waypoints=[w.to_tuple() for w in waypoints],
            stop_indices=[i for i, w in enumerate(waypoints) if w.is_stop_point],
            area=area,
        )

    def teardown(self) -> Optional[PathExport]:
        """
        End the episode.

        Returns:
            The export when the path is valid, None otherwise.
            The recorder is empty afterwards either way.
        """
        export: Optional[PathExport] = None

        if self.is_valid():
            export = self.export()
            self._exports += 1
            logger.info(
                f"Exported path: category={self.category}, "
                f"waypoints={len(export.waypoints)}, stops={len(export.stop_indices)}"
            )
        elif self._waypoints:
            self._discarded += 1
            logger.debug(
                f"Path too short to export (need {self.min_path_points}, "
                f"have {len(self._waypoints)})"
            )

        self.reset()
        return export

    def reset(self) -> None:
        self._waypoints = []
        self._last_recorded = None
        self._dwell_ticks = 0

    def __len__(self) -> int:
        return len(self._waypoints)

    def get_metrics(self) -> Dict[str, Any]:
        return {
            "waypoints": len(self._waypoints),
            "stop_points": self.stop_point_count,
            "dwell_ticks": self._dwell_ticks,
            "is_valid": self.is_valid(),
            "exports": self._exports,
            "discarded": self._discarded,
        }
