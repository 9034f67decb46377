"""
Path Module
===========

Path recording and simplification.

    - recorder.py: PathRecorder (dedup, retroactive stop points, export)
    - simplifier.py: simplify() and its thresholds
"""

from shoal_tracker.path.recorder import PathRecorder
from shoal_tracker.path.simplifier import SimplifierThresholds, simplify

__all__ = [
    "PathRecorder",
    "SimplifierThresholds",
    "simplify",
]
