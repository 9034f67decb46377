"""
ShoalTracker Main Application
=============================

FastAPI entry point for the shoal tracker.

Signals are delivered in environment order and applied synchronously;
nothing in the tracker blocks or waits on I/O.

Endpoints:
    GET  /                  - Service information
    GET  /health            - Liveness probe
    GET  /ready             - Readiness probe (area table loaded?)
    GET  /metrics           - Component metrics
    GET  /output            - Full tracker snapshot
    GET  /path              - Raw waypoint list
    GET  /path/simplified   - Simplified waypoint list
    GET  /path/export       - Dump of the in-progress path (JSON + YAML)
    GET  /path/analysis     - Simplification statistics
    GET  /path/last-export  - Dump produced by the last teardown
    POST /signals/presence  - Entity appeared / departed
    POST /signals/position  - Entity position update
    POST /signals/text      - Text notification
    POST /signals/tick      - Tick pulse(s)
    POST /signals/probe     - Raw probe depth reading
"""

import logging
import os
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from shoal_tracker.config import settings
from shoal_tracker.agent.graph import TrackerGraph, create_tracker_graph
from shoal_tracker.models.input import (
    PositionMessage,
    PresenceMessage,
    ProbeMessage,
    TextMessage,
    TickMessage,
)
from shoal_tracker.models.output import WaypointOutput
from shoal_tracker.observability import analyze_path


logger = logging.getLogger(__name__)


# =============================================================================
# Global State
# =============================================================================

_tracker: Optional[TrackerGraph] = None
_startup_time: float = 0.0


# =============================================================================
# Getters
# =============================================================================

def get_tracker() -> Optional[TrackerGraph]:
    return _tracker

def is_ready() -> bool:
    return _tracker is not None and _tracker.area_manager.is_loaded


def _not_ready() -> JSONResponse:
    return JSONResponse({"error": "Tracker not initialized"}, status_code=503)


# =============================================================================
# Lifespan Management
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager."""
    global _tracker, _startup_time

    _startup_time = time.time()
    logger.info(f"Starting {settings.agent.name} {settings.agent.version}")

    # Fails fast on a missing or malformed area table
    _tracker = create_tracker_graph(settings)

    logger.info("Tracker started")

    yield

    logger.info("Shutting down...")
    if _tracker is not None and _tracker.sampler.is_bound:
        _tracker.teardown(reason="shutdown")
    _tracker = None
    logger.info("Shutdown complete")


# =============================================================================
# FastAPI Application
# =============================================================================

app = FastAPI(
    title="ShoalTracker",
    description="Moving-target tracking and path simplification service",
    version=settings.agent.version,
    lifespan=lifespan,
)


# =============================================================================
# HTTP Endpoints
# =============================================================================

@app.get("/")
async def root() -> JSONResponse:
    """Service information endpoint."""
    return JSONResponse({
        "service": "ShoalTracker",
        "version": settings.agent.version,
        "name": settings.agent.name,
        "status": "running",
        "entity_kind": settings.tracking.entity_kind,
    })


@app.get("/health")
async def health() -> JSONResponse:
    """
    Liveness probe - is the process alive?

    Always returns 200 if the service is running.
    """
    return JSONResponse({
        "status": "healthy",
        "uptime_seconds": round(time.time() - _startup_time, 1),
    })


@app.get("/ready")
async def ready() -> JSONResponse:
    """
    Readiness probe - is the area table loaded?

    Returns 503 if not ready.
    """
    if is_ready():
        return JSONResponse({"status": "ready", "tick": _tracker.tick})
    return JSONResponse({"status": "not_ready"}, status_code=503)


@app.get("/metrics")
async def metrics() -> JSONResponse:
    """Detailed metrics for observability."""
    tracker = get_tracker()
    if tracker is None:
        return _not_ready()

    return JSONResponse({
        "uptime_seconds": round(time.time() - _startup_time, 1),
        **tracker.get_metrics(),
    })


@app.get("/output")
async def output() -> JSONResponse:
    """Get full tracker snapshot."""
    tracker = get_tracker()
    if tracker is None:
        return _not_ready()
    return JSONResponse(tracker.snapshot().model_dump(mode="json"))


@app.get("/path")
async def path() -> JSONResponse:
    """Raw waypoint list."""
    tracker = get_tracker()
    if tracker is None:
        return _not_ready()
    waypoints = [WaypointOutput.from_waypoint(w).model_dump() for w in tracker.waypoints()]
    return JSONResponse({"count": len(waypoints), "waypoints": waypoints})


@app.get("/path/simplified")
async def path_simplified() -> JSONResponse:
    """Simplified waypoint list."""
    tracker = get_tracker()
    if tracker is None:
        return _not_ready()
    waypoints = [
        WaypointOutput.from_waypoint(w).model_dump() for w in tracker.simplified_waypoints()
    ]
    return JSONResponse({"count": len(waypoints), "waypoints": waypoints})


@app.get("/path/export")
async def path_export() -> JSONResponse:
    """Dump of the in-progress path."""
    tracker = get_tracker()
    if tracker is None:
        return _not_ready()
    export = tracker.export_path()
    return JSONResponse({
        "export": export.model_dump(mode="json"),
        "yaml": export.to_yaml(),
    })


@app.get("/path/last-export")
async def path_last_export() -> JSONResponse:
    """Dump produced by the most recent teardown of a valid path."""
    tracker = get_tracker()
    if tracker is None:
        return _not_ready()
    export = tracker.last_export
    if export is None:
        return JSONResponse({"error": "No path exported yet"}, status_code=404)
    return JSONResponse({
        "export": export.model_dump(mode="json"),
        "yaml": export.to_yaml(),
    })


@app.get("/path/analysis")
async def path_analysis() -> JSONResponse:
    """Simplification statistics of the in-progress path."""
    tracker = get_tracker()
    if tracker is None:
        return _not_ready()
    analysis = analyze_path(tracker.waypoints(), tracker.simplifier_thresholds)
    return JSONResponse(analysis.to_dict())


# =============================================================================
# Signal Endpoints
# =============================================================================

@app.post("/signals/presence")
async def signal_presence(message: PresenceMessage) -> JSONResponse:
    """Entity appeared / departed."""
    tracker = get_tracker()
    if tracker is None:
        return _not_ready()

    event = tracker.on_presence(message.to_signal())
    entity = tracker.sampler.entity
    return JSONResponse({
        "tracked_entity": entity.entity_id if entity else None,
        "rebind": (
            {
                "previous": event.previous.entity_id,
                "current": event.current.entity_id,
                "category_changed": event.category_changed,
            }
            if event else None
        ),
    })


@app.post("/signals/position")
async def signal_position(message: PositionMessage) -> JSONResponse:
    """Entity position update (read on the next tick)."""
    tracker = get_tracker()
    if tracker is None:
        return _not_ready()

    if not tracker.on_position(message.entity_id, message.to_position()):
        return JSONResponse({"error": f"Unknown entity: {message.entity_id}"}, status_code=404)
    return JSONResponse({"accepted": True})


@app.post("/signals/text")
async def signal_text(message: TextMessage) -> JSONResponse:
    """Text notification."""
    tracker = get_tracker()
    if tracker is None:
        return _not_ready()

    kind, result = tracker.on_text(message.text)
    return JSONResponse({
        "classification": kind.value,
        "reason_code": result.reason_code.value if result else None,
        "depth": tracker.depth.current.value,
    })


@app.post("/signals/tick")
async def signal_tick(message: TickMessage) -> JSONResponse:
    """Tick pulse(s); returns the snapshot after the last one."""
    tracker = get_tracker()
    if tracker is None:
        return _not_ready()

    snapshot = None
    for _ in range(message.count):
        snapshot = tracker.on_tick()
    return JSONResponse(snapshot.model_dump(mode="json"))


@app.post("/signals/probe")
async def signal_probe(message: ProbeMessage) -> JSONResponse:
    """Raw probe depth reading."""
    tracker = get_tracker()
    if tracker is None:
        return _not_ready()

    depth = tracker.on_probe(message.probe, message.raw)
    return JSONResponse({
        "probe": message.probe.value,
        "depth": depth.value if depth else None,
    })


# =============================================================================
# Main Entry Point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    port = int(os.environ.get("PORT", settings.server.port))

    uvicorn.run(
        "shoal_tracker.main:app",
        host=settings.server.host,
        port=port,
        reload=False,
    )
