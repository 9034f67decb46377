"""
ShoalTracker
============

Moving-target tracking and path-simplification engine.

Given a noisy, sparse stream of positions and text notifications about an
entity that moves, stops, and periodically changes depth, the tracker:
    - Maintains a best-effort estimate of the entity's current depth
    - Detects movement / stationary transitions and predicts the tick of
      the next depth change
    - Records the entity's path as a minimal set of waypoints, keeping
      stop points and dropping redundant ones

Components:
    - sampling: Per-tick position reads with rescan on stale handles
    - signals: Movement window, stop timer, depth engine, text rules
    - path: Waypoint recorder and simplifier
    - geometry: Area / stop-duration lookup
    - agent: Pure transitions and the LangGraph per-tick pipeline

Example:
    from shoal_tracker.agent.graph import TrackerGraph
    from shoal_tracker.geometry import AreaManager

    manager = AreaManager()
    manager.load_from_file("./data/areas/fishing_areas.json")
    tracker = TrackerGraph(manager)
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
