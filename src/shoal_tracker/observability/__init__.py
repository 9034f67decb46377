"""
Observability Module
====================

Path analytics for the shoal tracker.

This module provides:
    - analyze_path: Simplification statistics for a waypoint list
    - PathAnalysis: The resulting snapshot

DESIGN RULES:
    - Does NOT import agent logic
    - Does NOT influence tracking decisions
"""

from shoal_tracker.observability.analytics import (
    PathAnalysis,
    analyze_path,
    max_deviation,
    polyline_length,
)


__all__ = [
    "PathAnalysis",
    "analyze_path",
    "max_deviation",
    "polyline_length",
]
