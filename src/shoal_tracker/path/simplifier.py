"""
Path Simplifier
===============

Removes waypoints that do not meaningfully change a path's shape.

This is a conservative, single-pass variant of polyline simplification.
Unlike a global-tolerance Douglas-Peucker pass, it only looks at 3-point
neighborhoods and never reconsiders a decision:

    a = previous KEPT waypoint
    c = candidate (interior) waypoint
    b = next ORIGINAL waypoint

Decision per interior waypoint, first matching rule wins:
    1. c is a stop point                             -> keep
    2. |a c| >= max_waypoint_distance                -> keep
    3. |cross((c - a), (b - c))| < collinear_threshold -> drop
    4. distance(c, line a-b) < deviation_threshold   -> drop
    5. slope(a, c) ~= slope(c, b) within tolerance   -> drop
    6. otherwise                                     -> keep

The first and last waypoints are always kept. The input is never mutated.
Inputs with fewer than three waypoints are returned unchanged (as a new list).
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

from shoal_tracker.models.path import Waypoint
from shoal_tracker.models.position import Position


@dataclass
class SimplifierThresholds:
    """
    Numeric thresholds for the simplifier.

    Attributes:
        max_waypoint_distance: Segments at least this long are always kept
        collinear_threshold: Absolute cross product below which a, c, b are collinear
        deviation_threshold: Perpendicular distance below which c is noise
        slope_tolerance: Absolute tolerance for equal slopes
    """

    max_waypoint_distance: float = 30.0
    collinear_threshold: float = 1.0
    deviation_threshold: float = 1.5
    slope_tolerance: float = 0.05

    def __post_init__(self) -> None:
        if self.max_waypoint_distance <= 0:
            raise ValueError("max_waypoint_distance must be positive")
        if self.collinear_threshold < 0:
            raise ValueError("collinear_threshold must be non-negative")
        if self.deviation_threshold < 0:
            raise ValueError("deviation_threshold must be non-negative")
        if self.slope_tolerance < 0:
            raise ValueError("slope_tolerance must be non-negative")


def cross_product(a: Position, c: Position, b: Position) -> float:
    """2-D cross product of (c - a) and (b - c)."""
    return (c.x - a.x) * (b.y - c.y) - (c.y - a.y) * (b.x - c.x)


def perpendicular_distance(point: Position, start: Position, end: Position) -> float:
    """
    Distance from ``point`` to the infinite line through start and end.

    Falls back to the distance to ``start`` when start and end coincide.
    """
    dx = end.x - start.x
    dy = end.y - start.y
    length = math.hypot(dx, dy)
    if length == 0:
        return math.hypot(point.x - start.x, point.y - start.y)
    return abs(dx * (start.y - point.y) - (start.x - point.x) * dy) / length


def slope(start: Position, end: Position) -> float:
    """
    Slope dy/dx of a segment.

    Vertical segments give +inf; coincident points give 0.0.
    """
    dx = end.x - start.x
    dy = end.y - start.y
    if dx == 0:
        return math.inf if dy != 0 else 0.0
    return dy / dx


def slopes_match(first: float, second: float, tolerance: float) -> bool:
    """Equal within tolerance; an infinite slope only matches another."""
    if math.isinf(first) or math.isinf(second):
        return math.isinf(first) and math.isinf(second)
    return math.isclose(first, second, rel_tol=0.0, abs_tol=tolerance)


def simplify(
    waypoints: Sequence[Waypoint],
    thresholds: Optional[SimplifierThresholds] = None,
) -> List[Waypoint]:
    """
    Simplify a waypoint sequence.

    Args:
        waypoints: Snapshot of a recorded path (not mutated)
        thresholds: Numeric thresholds (defaults if None)

    Returns:
        New list containing the first and last waypoint, every stop point,
        and every interior waypoint that changes the path's shape
    """
    if len(waypoints) < 3:
        return list(waypoints)

    th = thresholds or SimplifierThresholds()
    max_distance_sq = th.max_waypoint_distance ** 2

    kept: List[Waypoint] = [waypoints[0]]

    for i in range(1, len(waypoints) - 1):
        candidate = waypoints[i]
        a = kept[-1].position
        c = candidate.position
        b = waypoints[i + 1].position

        if candidate.is_stop_point:
            kept.append(candidate)
            continue

        if a.squared_distance_to(c) >= max_distance_sq:
            kept.append(candidate)
            continue

        if abs(cross_product(a, c, b)) < th.collinear_threshold:
            continue

        if perpendicular_distance(c, a, b) < th.deviation_threshold:
            continue

        if slopes_match(slope(a, c), slope(c, b), th.slope_tolerance):
            continue

        kept.append(candidate)

    kept.append(waypoints[-1])
    return kept
