"""
Sampling Module
===============

Per-tick position sampling of the tracked entity.

    - sampler.py: PositionSampler with explicit bind / rebind / loss
    - scene.py: EntityScene protocol and the in-memory SceneRegistry
"""

from shoal_tracker.sampling.sampler import PositionSampler, SampleResult
from shoal_tracker.sampling.scene import EntityScene, SceneEntity, SceneRegistry

__all__ = [
    "PositionSampler",
    "SampleResult",
    "EntityScene",
    "SceneEntity",
    "SceneRegistry",
]
