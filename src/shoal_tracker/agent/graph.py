"""
Tracker Graph Definition
========================

LangGraph per-tick pipeline for the shoal tracker.

LangGraph is used for CONTROL FLOW only. Every decision is made by the
deterministic transition functions behind the per-entity components.

Graph Structure (one invocation per tick):

    START -> sample_position -+-> teardown_entity -> END       (EntityLost)
                              +-> update_movement -> advance_timer
                              |       -> record_path -> END    (PositionSample)
                              +-> END                          (nothing tracked)

Signals that are not ticks (presence, text, probe readings) are applied
synchronously by the TrackerGraph methods, in delivery order.

Teardown is one logical reset: sampler unbind, movement reset, timer reset,
path export (when valid) and depth clear always happen together.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple, TypedDict

from langgraph.graph import StateGraph, END

from shoal_tracker.agent.resolver import DepthRequirementResolver
from shoal_tracker.agent.transitions import DepthResult, MovementThresholds
from shoal_tracker.config import Settings, resolve_areas_path
from shoal_tracker.geometry.regions import AreaManager
from shoal_tracker.models.geometry import SpeciesTiming
from shoal_tracker.models.output import (
    DepthOutput,
    EntityOutput,
    MovementOutput,
    PathSummary,
    TimerOutput,
    TrackerOutput,
)
from shoal_tracker.models.path import PathExport, Waypoint
from shoal_tracker.models.position import EntityLost, Position, PositionSample, RebindEvent, TrackedEntity
from shoal_tracker.models.reason_codes import ReasonCode
from shoal_tracker.models.signals import MovementEdge, PresenceKind, PresenceSignal, TextSignalKind
from shoal_tracker.models.state import Depth
from shoal_tracker.path.recorder import PathRecorder
from shoal_tracker.path.simplifier import SimplifierThresholds, simplify
from shoal_tracker.sampling.sampler import PositionSampler
from shoal_tracker.sampling.scene import SceneEntity, SceneRegistry
from shoal_tracker.signals.depth_engine import DepthInferenceEngine
from shoal_tracker.signals.movement_window import MovementWindow
from shoal_tracker.signals.probe_depth import Probe, ProbeDepthTracker
from shoal_tracker.signals.stop_timer import StopDurationTimer
from shoal_tracker.signals.text_classifier import TextSignalClassifier


logger = logging.getLogger(__name__)


class TickGraphState(TypedDict):
    """
    Transient state passed through one tick of the graph.

    Attributes:
        tick: Current tick number
        sample: Position read this tick
        lost: Set when the entity could not be read or re-acquired
        edges: Movement edges emitted this tick
        timer_reason: Reason code of the timer after this tick
        appended: A waypoint was appended this tick
        export: Path export produced by a teardown
    """
    tick: int
    sample: Optional[PositionSample]
    lost: Optional[EntityLost]
    edges: List[MovementEdge]
    timer_reason: Optional[ReasonCode]
    appended: bool
    export: Optional[PathExport]


def create_initial_state(tick: int) -> TickGraphState:
    """Create the input state for one tick."""
    return {
        "tick": tick,
        "sample": None,
        "lost": None,
        "edges": [],
        "timer_reason": None,
        "appended": False,
        "export": None,
    }


class TrackerGraph:
    """
    LangGraph-based tracker for one "current" entity.

    Owns the per-entity components and wires them together:
        PositionSampler -> MovementWindow -> StopDurationTimer
                        -> PathRecorder   (-> simplify on demand)
        text / presence -> DepthInferenceEngine

    Example:
        tracker = TrackerGraph(area_manager)
        tracker.on_presence(PresenceSignal(PresenceKind.APPEARED, "s1", "shoal", "marlin", pos))
        tracker.on_position("s1", pos)
        output = tracker.on_tick()
    """

    def __init__(
        self,
        area_manager: Optional[AreaManager] = None,
        scene: Optional[SceneRegistry] = None,
        entity_kind: str = "shoal",
        movement_thresholds: Optional[MovementThresholds] = None,
        simplifier_thresholds: Optional[SimplifierThresholds] = None,
        waypoint_tolerance: int = 2,
        stop_dwell_ticks: int = 5,
        min_path_points: int = 10,
        area_margin: int = 10,
        log_every_n_ticks: int = 100,
    ) -> None:
        """
        Initialize the tracker graph.

        Args:
            area_manager: Area / duration lookup (empty table if None)
            scene: In-memory scene fed by presence / position signals
            entity_kind: Scene kind of the tracked entity
            movement_thresholds: Movement hysteresis (defaults if None)
            simplifier_thresholds: Simplifier thresholds (defaults if None)
            waypoint_tolerance: Path recorder tolerance
            stop_dwell_ticks: Path recorder dwell for stop points
            min_path_points: Waypoints required for a valid path
            area_margin: Margin of the exported bounding area
            log_every_n_ticks: Log a summary every N ticks
        """
        if log_every_n_ticks < 1:
            raise ValueError("log_every_n_ticks must be >= 1")

        self.area_manager = area_manager or AreaManager()
        self.scene = scene if scene is not None else SceneRegistry()
        self.entity_kind = entity_kind
        self.simplifier_thresholds = simplifier_thresholds or SimplifierThresholds()
        self.log_every_n_ticks = log_every_n_ticks

        self.sampler = PositionSampler(self.scene, tracked_kind=entity_kind)
        self.movement = MovementWindow(movement_thresholds, log_every_n_ticks=log_every_n_ticks)
        self.timer = StopDurationTimer(self.area_manager.stop_duration_for)
        self.depth = DepthInferenceEngine()
        self.classifier = TextSignalClassifier()
        self.probes = ProbeDepthTracker()
        self.recorder = PathRecorder(
            waypoint_tolerance=waypoint_tolerance,
            stop_dwell_ticks=stop_dwell_ticks,
            min_path_points=min_path_points,
            area_margin=area_margin,
        )
        self.resolver = DepthRequirementResolver()

        self._graph = self._build_graph()

        self._tick: int = 0
        self._last_position: Optional[Position] = None
        self._last_export: Optional[PathExport] = None
        self._teardowns: int = 0

        logger.info(f"TrackerGraph initialized: kind={entity_kind}")

    # =========================================================================
    # Graph
    # =========================================================================

    def _build_graph(self) -> StateGraph:
        """Build the LangGraph workflow."""
        workflow = StateGraph(TickGraphState)

        workflow.add_node("sample_position", self._sample_node)
        workflow.add_node("update_movement", self._movement_node)
        workflow.add_node("advance_timer", self._timer_node)
        workflow.add_node("record_path", self._path_node)
        workflow.add_node("teardown_entity", self._teardown_node)

        workflow.set_entry_point("sample_position")
        workflow.add_conditional_edges(
            "sample_position",
            self._route_after_sample,
            {
                "lost": "teardown_entity",
                "live": "update_movement",
                "idle": END,
            },
        )
        workflow.add_edge("update_movement", "advance_timer")
        workflow.add_edge("advance_timer", "record_path")
        workflow.add_edge("record_path", END)
        workflow.add_edge("teardown_entity", END)

        return workflow.compile()

    def _sample_node(self, state: TickGraphState) -> Dict[str, Any]:
        """Read the tracked entity's position (with one rescan)."""
        if not self.sampler.is_bound:
            return {"sample": None, "lost": None}

        previous_id = self.sampler.entity.entity_id
        result = self.sampler.sample(state["tick"])
        if isinstance(result, EntityLost):
            return {"sample": None, "lost": result}

        # Rescan picked up a different entity: its movement history starts now
        if self.sampler.entity.entity_id != previous_id:
            self.movement.reset()
            self.timer.reset()
        return {"sample": result, "lost": None}

    def _route_after_sample(self, state: TickGraphState) -> str:
        if state.get("lost") is not None:
            return "lost"
        if state.get("sample") is not None:
            return "live"
        return "idle"

    def _movement_node(self, state: TickGraphState) -> Dict[str, Any]:
        """Advance the movement window."""
        position = state["sample"].position
        self._last_position = position
        edges = self.movement.update(position, timer_active=self.timer.is_active)
        return {"edges": edges}

    def _timer_node(self, state: TickGraphState) -> Dict[str, Any]:
        """
        Apply movement edges to the timer, then advance it.

        A countdown started by this tick's STOPPED edge is advanced on the
        same tick (elapsed == 1 after the stop tick).
        """
        edges = state.get("edges", [])

        if MovementEdge.RESUMED_MOVING in edges:
            self.timer.cancel()
        if MovementEdge.STOPPED in edges:
            self.timer.start(state["sample"].position)

        result = self.timer.tick()
        return {"timer_reason": result.reason_code}

    def _path_node(self, state: TickGraphState) -> Dict[str, Any]:
        """Record the position on the path."""
        entity = self.sampler.entity
        if entity is not None:
            self.recorder.category = entity.category

        appended = self.recorder.add_position(state["sample"].position) is not None
        return {"appended": appended}

    def _teardown_node(self, state: TickGraphState) -> Dict[str, Any]:
        lost = state["lost"]
        export = self.teardown(reason=f"lost at tick {lost.tick}")
        return {"export": export}

    # =========================================================================
    # Signal entry points
    # =========================================================================

    def on_tick(self) -> TrackerOutput:
        """
        Process one tick pulse.

        Returns:
            Snapshot of the tracker after the tick
        """
        self._tick += 1
        result = self._graph.invoke(create_initial_state(self._tick))

        if self._tick % self.log_every_n_ticks == 0:
            logger.info(
                f"Tracker [tick {self._tick}]: "
                f"entity={self.sampler.entity.entity_id if self.sampler.entity else None}, "
                f"depth={self.depth.current.value}, "
                f"timer={self.timer.ticks_until_change()}, "
                f"waypoints={len(self.recorder)}"
            )
        elif result.get("sample") is not None:
            logger.debug(f"Tick {self._tick}: {result['sample'].position}")

        return self.snapshot()

    def on_presence(self, signal: PresenceSignal) -> Optional[RebindEvent]:
        """
        Apply an entity presence signal.

        APPEARED of the tracked kind binds (or rebinds) the sampler, resets
        the movement window and timer for the new entity and activates depth
        tracking. DEPARTED of the bound entity tears everything down.

        Returns:
            RebindEvent when the bound identity changed
        """
        if signal.entity_kind != self.entity_kind:
            logger.debug(f"Ignoring presence of kind {signal.entity_kind}")
            return None

        if signal.kind is PresenceKind.DEPARTED:
            self.scene.remove(signal.entity_id)
            bound = self.sampler.entity
            if bound is not None and bound.entity_id == signal.entity_id:
                self.teardown(reason="departed")
            return None

        # A restated APPEARED without a position keeps the known one
        position = signal.position
        if position is None:
            position = self.scene.position_of(signal.entity_id)

        self.scene.add(SceneEntity(
            entity_id=signal.entity_id,
            kind=signal.entity_kind,
            category=signal.category,
            position=position,
        ))

        previous = self.sampler.entity
        entity = TrackedEntity(signal.entity_id, signal.entity_kind, signal.category)
        event = self.sampler.bind(entity, reason="appeared")

        is_new_entity = previous is None or previous.entity_id != entity.entity_id
        if is_new_entity:
            self.movement.reset()
            self.timer.reset()

        self.recorder.category = entity.category
        self.depth.activate()
        return event

    def on_position(self, entity_id: str, position: Optional[Position]) -> bool:
        """
        Update an entity's position in the scene (read on the next tick).

        Returns:
            False when the entity is unknown to the scene
        """
        return self.scene.move(entity_id, position)

    def on_text(self, text: str) -> Tuple[TextSignalKind, Optional[DepthResult]]:
        """
        Classify and apply a text notification.

        Returns:
            Tuple of (classification, depth_result); depth_result is None
            for unrelated text
        """
        kind = self.classifier.classify(text)
        result = self.depth.on_text(kind, probe_depth=self.probes.corroborating_depth())
        return kind, result

    def on_probe(self, probe: Probe, raw: int) -> Optional[Depth]:
        """Record a raw probe depth reading."""
        return self.probes.update_raw(probe, raw)

    def teardown(self, reason: str = "teardown") -> Optional[PathExport]:
        """
        Clear all per-entity state as one logical reset.

        Returns:
            Path export when the recorded path was valid
        """
        entity = self.sampler.unbind()
        self.movement.reset()
        self.timer.reset()
        export = self.recorder.teardown()
        self.depth.clear()
        self._last_position = None
        self._teardowns += 1

        if export is not None:
            self._last_export = export

        logger.info(
            f"Tracker teardown ({reason}): "
            f"entity={entity.entity_id if entity else None}, "
            f"exported={export is not None}"
        )
        return export

    # =========================================================================
    # Read-only outputs
    # =========================================================================

    @property
    def tick(self) -> int:
        return self._tick

    @property
    def last_export(self) -> Optional[PathExport]:
        """Export produced by the most recent teardown of a valid path."""
        return self._last_export

    def current_species(self) -> Optional[SpeciesTiming]:
        """Species by current area, falling back to the entity category."""
        if self._last_position is not None:
            species = self.area_manager.species_at(self._last_position)
            if species is not None:
                return species
        entity = self.sampler.entity
        return self.area_manager.get_species(entity.category if entity else None)

    def waypoints(self) -> Tuple[Waypoint, ...]:
        return self.recorder.snapshot()

    def simplified_waypoints(self) -> List[Waypoint]:
        return simplify(self.recorder.snapshot(), self.simplifier_thresholds)

    def export_path(self) -> PathExport:
        """Export of the in-progress path (recording continues)."""
        return self.recorder.export()

    def snapshot(self) -> TrackerOutput:
        """Build the full read-only output."""
        entity = self.sampler.entity
        movement_state = self.movement.state

        timer_output = TimerOutput()
        if entity is not None:
            is_moving = movement_state.is_moving or movement_state.last_position is None
            timer_state = self.timer.state
            timer_output = TimerOutput(
                status=self.timer.status(is_moving),
                ticks_remaining=self.timer.ticks_until_change(),
                total_duration=timer_state.total_duration,
                elapsed=timer_state.elapsed,
            )

        required = self.resolver.required_depth(
            self.depth.state, self.timer.state, self.current_species()
        )
        probe_depths = list(self.probes.depths())
        adjustments = [
            self.resolver.adjustment_for(probe_depth, required) if probe_depth else None
            for probe_depth in probe_depths
        ]

        area = self.area_manager.area_at(self._last_position) if self._last_position else None

        return TrackerOutput(
            tick=self._tick,
            entity=(
                EntityOutput(entity_id=entity.entity_id, kind=entity.kind, category=entity.category)
                if entity else None
            ),
            area=area.id if area else None,
            movement=MovementOutput(
                is_moving=movement_state.is_moving,
                has_been_moving=movement_state.has_been_moving,
                ticks_at_same_position=movement_state.ticks_at_same_position,
                ticks_moving=movement_state.ticks_moving,
            ),
            timer=timer_output,
            depth=DepthOutput(
                current=self.depth.current,
                active=self.depth.is_active,
                required=required,
                probe_depths=probe_depths,
                probe_adjustments=adjustments,
            ),
            path=PathSummary(
                waypoint_count=len(self.recorder),
                stop_point_count=self.recorder.stop_point_count,
                is_valid=self.recorder.is_valid(),
            ),
        )

    def reset(self) -> None:
        """Reset the tracker to its initial state (discards the path)."""
        self.sampler.reset()
        self.movement.reset()
        self.timer.reset()
        self.recorder.reset()
        self.depth.reset()
        self.probes.reset()
        self.scene.clear()
        self._tick = 0
        self._last_position = None
        self._last_export = None
        logger.info("TrackerGraph reset")

    def get_metrics(self) -> Dict[str, Any]:
        """Get tracker metrics for observability."""
        return {
            "tick": self._tick,
            "teardowns": self._teardowns,
            "sampler": self.sampler.get_metrics(),
            "movement": self.movement.get_metrics(),
            "timer": self.timer.get_metrics(),
            "depth": self.depth.get_metrics(),
            "probes": self.probes.get_metrics(),
            "path": self.recorder.get_metrics(),
            "text": self.classifier.get_metrics(),
        }


def create_tracker_graph(settings: Settings) -> TrackerGraph:
    """
    Create the tracker graph from configuration.

    Args:
        settings: Loaded settings

    Returns:
        Configured TrackerGraph

    Raises:
        FileNotFoundError: If the area table does not exist
        pydantic.ValidationError: If the area table is malformed
    """
    area_manager = AreaManager()
    area_manager.load_from_file(str(resolve_areas_path(settings)))

    return TrackerGraph(
        area_manager=area_manager,
        entity_kind=settings.tracking.entity_kind,
        movement_thresholds=MovementThresholds(
            stopped_threshold_ticks=settings.movement.stopped_threshold_ticks,
            movement_threshold_ticks=settings.movement.movement_threshold_ticks,
        ),
        simplifier_thresholds=SimplifierThresholds(
            max_waypoint_distance=settings.simplifier.max_waypoint_distance,
            collinear_threshold=settings.simplifier.collinear_threshold,
            deviation_threshold=settings.simplifier.deviation_threshold,
            slope_tolerance=settings.simplifier.slope_tolerance,
        ),
        waypoint_tolerance=settings.path.waypoint_tolerance,
        stop_dwell_ticks=settings.path.stop_dwell_ticks,
        min_path_points=settings.path.min_path_points,
        area_margin=settings.path.area_margin,
        log_every_n_ticks=settings.tracking.log_every_n_ticks,
    )
