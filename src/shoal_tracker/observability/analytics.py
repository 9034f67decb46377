"""
Path Analytics
==============

Compute derived statistics for a recorded path and its simplification.

This module computes analytics for observability ONLY.
Analytics do NOT influence tracking decisions.

Reported:
    - Original / simplified / removed waypoint counts
    - Reduction percentage
    - Stop point count
    - Polyline lengths (original and simplified)
    - Maximum deviation of any original waypoint from the simplified
      polyline (how much shape the simplifier gave up)
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence

import numpy as np

from shoal_tracker.models.path import Waypoint
from shoal_tracker.path.simplifier import SimplifierThresholds, simplify


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PathAnalysis:
    """
    Statistics for one path.

    All values are DERIVED from the waypoint list.
    """

    original_count: int
    simplified_count: int
    removed_count: int
    reduction_percent: float
    stop_point_count: int
    original_length: float
    simplified_length: float
    max_deviation: float

    def __repr__(self) -> str:
        return (
            f"PathAnalysis({self.original_count} -> {self.simplified_count}, "
            f"-{self.reduction_percent:.1f}%, stops={self.stop_point_count}, "
            f"max_dev={self.max_deviation:.2f})"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Export as dictionary for logging/serialization."""
        return {
            "original_count": self.original_count,
            "simplified_count": self.simplified_count,
            "removed_count": self.removed_count,
            "reduction_percent": round(self.reduction_percent, 2),
            "stop_point_count": self.stop_point_count,
            "original_length": round(self.original_length, 3),
            "simplified_length": round(self.simplified_length, 3),
            "max_deviation": round(self.max_deviation, 4),
        }


def _as_array(waypoints: Sequence[Waypoint]) -> np.ndarray:
    return np.array(
        [(w.position.x, w.position.y) for w in waypoints],
        dtype=float,
    ).reshape(-1, 2)


def polyline_length(points: np.ndarray) -> float:
    """Total length of a polyline given as an (n, 2) array."""
    if len(points) < 2:
        return 0.0
    return float(np.linalg.norm(np.diff(points, axis=0), axis=1).sum())


def max_deviation(
    points: np.ndarray,
    polyline: np.ndarray,
    chunk_size: int = 256,
) -> float:
    """
    Largest distance from any point to the nearest segment of a polyline.

    Points are processed in chunks so memory stays bounded by
    chunk_size * segments regardless of the path length.

    Args:
        points: (n, 2) array of points
        polyline: (m, 2) array of polyline vertices
        chunk_size: Points evaluated per vectorised batch

    Returns:
        Maximum over points of the minimum point-to-segment distance
    """
    if chunk_size < 1:
        raise ValueError("chunk_size must be >= 1")

    if len(points) == 0 or len(polyline) == 0:
        return 0.0

    if len(polyline) == 1:
        return float(np.linalg.norm(points - polyline[0], axis=1).max())

    starts = polyline[:-1]                       # (m-1, 2)
    segments = polyline[1:] - starts             # (m-1, 2)
    lengths_sq = (segments ** 2).sum(axis=1)     # (m-1,)
    safe_lengths = np.where(lengths_sq > 0, lengths_sq, 1.0)

    worst = 0.0
    for begin in range(0, len(points), chunk_size):
        chunk = points[begin:begin + chunk_size]                  # (k, 2)

        offsets = chunk[:, None, :] - starts[None, :, :]          # (k, m-1, 2)
        dots = (offsets * segments[None, :, :]).sum(axis=2)       # (k, m-1)
        t = np.where(lengths_sq > 0, np.clip(dots / safe_lengths, 0.0, 1.0), 0.0)

        nearest = starts[None, :, :] + t[:, :, None] * segments[None, :, :]
        distances = np.linalg.norm(chunk[:, None, :] - nearest, axis=2)  # (k, m-1)

        worst = max(worst, float(distances.min(axis=1).max()))

    return worst


def analyze_path(
    waypoints: Sequence[Waypoint],
    thresholds: Optional[SimplifierThresholds] = None,
) -> PathAnalysis:
    """
    Simplify a path and report what the simplification did.

    Args:
        waypoints: Recorded waypoints (not mutated)
        thresholds: Simplifier thresholds (defaults if None)

    Returns:
        PathAnalysis for the path
    """
    simplified = simplify(waypoints, thresholds)

    original_points = _as_array(waypoints)
    simplified_points = _as_array(simplified)

    original_count = len(waypoints)
    simplified_count = len(simplified)
    removed = original_count - simplified_count
    reduction = (removed / original_count * 100.0) if original_count else 0.0

    analysis = PathAnalysis(
        original_count=original_count,
        simplified_count=simplified_count,
        removed_count=removed,
        reduction_percent=reduction,
        stop_point_count=sum(1 for w in waypoints if w.is_stop_point),
        original_length=polyline_length(original_points),
        simplified_length=polyline_length(simplified_points),
        max_deviation=max_deviation(original_points, simplified_points),
    )

    logger.debug(f"Path analysis: {analysis}")
    return analysis
