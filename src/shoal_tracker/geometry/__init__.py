"""
Geometry Module
===============

Area / stop-duration lookup for the tracker.

This module provides utilities for working with the explicitly declared
fishing areas loaded from config.
"""

from shoal_tracker.geometry.regions import AreaManager

__all__ = [
    "AreaManager",
]
