"""
State Transition Logic
======================

Deterministic, side-effect free transition functions for the three
tracker state machines.

Each machine is an immutable state model plus pure functions of the form:

    apply(state, event, ...) -> (new_state, result)

The result carries the emitted effects (edges) and exactly one reason code.
Stateful holders in ``shoal_tracker.signals`` own the current state, call
these functions, and log. Nothing here logs or mutates.

Transition Rules:
    Movement (tick-based hysteresis):
        same position:     ticks_at_same_position += 1, ticks_moving = 0
                           STOPPED once at == stopped_threshold if armed
        changed position:  RESUMED_MOVING first if the timer is active,
                           ticks_moving += 1, armed at >= movement_threshold

    Timer:
        STOPPED:        start with the area duration (<= 0 / None: uncalibrated)
        tick:           elapsed += 1, ends at elapsed >= total_duration // 2
        RESUMED_MOVING: cancel regardless of elapsed

    Depth:
        ACTIVATE:         active = True (current untouched)
        CLEAR:            UNKNOWN / inactive, unconditionally
        SHALLOWER/DEEPER: one level, clamped, no-op while UNKNOWN
        CONFIRMED:        current = corroborating probe depth, else no-op
        INFORMATIONAL:    never changes current
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from shoal_tracker.models.position import Position
from shoal_tracker.models.reason_codes import ReasonCode
from shoal_tracker.models.signals import DepthEvent, MovementEdge
from shoal_tracker.models.state import Depth, DepthState, MovementState, TimerState


@dataclass
class MovementThresholds:
    """
    Hysteresis thresholds for the movement window.

    The asymmetry (2 ticks to call a stop, 5 ticks to call real movement)
    keeps single-tick stutters from starting a timer.
    """

    stopped_threshold_ticks: int = 2
    movement_threshold_ticks: int = 5

    def __post_init__(self) -> None:
        if self.stopped_threshold_ticks < 1:
            raise ValueError("stopped_threshold_ticks must be >= 1")
        if self.movement_threshold_ticks < 1:
            raise ValueError("movement_threshold_ticks must be >= 1")


@dataclass
class MovementResult:
    """Result of a movement transition."""

    reason_code: ReasonCode
    edges: List[MovementEdge] = field(default_factory=list)

    @property
    def stopped(self) -> bool:
        return MovementEdge.STOPPED in self.edges

    @property
    def resumed(self) -> bool:
        return MovementEdge.RESUMED_MOVING in self.edges

    def __repr__(self) -> str:
        edges = ",".join(edge.value for edge in self.edges) or "-"
        return f"MovementResult({self.reason_code.value}, edges={edges})"


@dataclass
class TimerResult:
    """Result of a timer transition."""

    reason_code: ReasonCode
    started: bool = False
    cancelled: bool = False
    phase_change_reached: bool = False

    def __repr__(self) -> str:
        return f"TimerResult({self.reason_code.value})"


@dataclass
class DepthResult:
    """Result of a depth transition."""

    previous: Depth
    current: Depth
    reason_code: ReasonCode

    @property
    def changed(self) -> bool:
        return self.previous != self.current

    def __repr__(self) -> str:
        return (
            f"DepthResult({self.previous.value} -> {self.current.value}, "
            f"{self.reason_code.value})"
        )


# =============================================================================
# Movement window
# =============================================================================


def apply_movement(
    state: MovementState,
    position: Position,
    timer_active: bool = False,
    thresholds: Optional[MovementThresholds] = None,
) -> Tuple[MovementState, MovementResult]:
    """
    Advance the movement window by one sampled position.

    Args:
        state: Current movement state
        position: Position sampled this tick
        timer_active: Whether a stop-duration countdown is running
        thresholds: Hysteresis thresholds (defaults if None)

    Returns:
        Tuple of (new_state, movement_result)
    """
    th = thresholds or MovementThresholds()

    # First sample of an episode: counts as movement, nothing to resume from
    if state.last_position is None:
        ticks_moving = 1
        new_state = MovementState(
            last_position=position,
            ticks_at_same_position=0,
            ticks_moving=ticks_moving,
            has_been_moving=ticks_moving >= th.movement_threshold_ticks,
            is_moving=True,
        )
        return new_state, MovementResult(reason_code=ReasonCode.MOVING)

    if position == state.last_position:
        ticks_at_same = state.ticks_at_same_position + 1
        edges: List[MovementEdge] = []
        has_been_moving = state.has_been_moving

        if ticks_at_same == th.stopped_threshold_ticks and has_been_moving:
            edges.append(MovementEdge.STOPPED)
            has_been_moving = False

        new_state = state.model_copy(update={
            "ticks_at_same_position": ticks_at_same,
            "ticks_moving": 0,
            "has_been_moving": has_been_moving,
            "is_moving": ticks_at_same < th.stopped_threshold_ticks,
        })

        if edges:
            reason = ReasonCode.STOP_DETECTED
        elif ticks_at_same >= th.stopped_threshold_ticks:
            reason = ReasonCode.STATIONARY
        else:
            reason = ReasonCode.SETTLING

        return new_state, MovementResult(reason_code=reason, edges=edges)

    # Position changed
    edges = [MovementEdge.RESUMED_MOVING] if timer_active else []
    ticks_moving = state.ticks_moving + 1

    new_state = state.model_copy(update={
        "last_position": position,
        "ticks_at_same_position": 0,
        "ticks_moving": ticks_moving,
        "has_been_moving": (
            state.has_been_moving or ticks_moving >= th.movement_threshold_ticks
        ),
        "is_moving": True,
    })

    reason = ReasonCode.MOVEMENT_RESUMED if edges else ReasonCode.MOVING
    return new_state, MovementResult(reason_code=reason, edges=edges)


# =============================================================================
# Stop-duration timer
# =============================================================================


def start_timer(
    state: TimerState,
    total_duration: Optional[int],
) -> Tuple[TimerState, TimerResult]:
    """
    Start a countdown on a STOPPED edge.

    Elapsed ticks from any previous episode are discarded.

    Args:
        state: Current timer state (only replaced)
        total_duration: Dwell duration for the stop location, None if the
            location is not covered by the area table

    Returns:
        Tuple of (new_state, timer_result)
    """
    if total_duration is None or total_duration <= 0:
        return TimerState(), TimerResult(reason_code=ReasonCode.UNCALIBRATED_LOCATION)

    new_state = TimerState(total_duration=total_duration, elapsed=0, active=True)
    return new_state, TimerResult(reason_code=ReasonCode.COUNTING_DOWN, started=True)


def tick_timer(state: TimerState) -> Tuple[TimerState, TimerResult]:
    """
    Advance an active countdown by one tick.

    The countdown ends (active = False) on the tick where
    elapsed reaches total_duration // 2.
    """
    if not state.active:
        return state, TimerResult(reason_code=ReasonCode.WAITING_FOR_STOP)

    elapsed = state.elapsed + 1
    if elapsed >= state.change_tick:
        new_state = state.model_copy(update={"elapsed": elapsed, "active": False})
        return new_state, TimerResult(
            reason_code=ReasonCode.PHASE_CHANGE_REACHED,
            phase_change_reached=True,
        )

    new_state = state.model_copy(update={"elapsed": elapsed})
    return new_state, TimerResult(reason_code=ReasonCode.COUNTING_DOWN)


def cancel_timer(state: TimerState) -> Tuple[TimerState, TimerResult]:
    """Cancel a running countdown on RESUMED_MOVING."""
    if not state.active:
        return state, TimerResult(reason_code=ReasonCode.WAITING_FOR_STOP)

    new_state = state.model_copy(update={"active": False})
    return new_state, TimerResult(reason_code=ReasonCode.MOVEMENT_RESUMED, cancelled=True)


# =============================================================================
# Depth inference
# =============================================================================


def apply_depth(
    state: DepthState,
    event: DepthEvent,
    probe_depth: Optional[Depth] = None,
) -> Tuple[DepthState, DepthResult]:
    """
    Apply a depth event.

    Args:
        state: Current depth state
        event: Presence or classified text event
        probe_depth: Corroborating probe depth for CONFIRMED events

    Returns:
        Tuple of (new_state, depth_result)
    """
    previous = state.current

    if event is DepthEvent.CLEAR:
        return DepthState(), DepthResult(previous, Depth.UNKNOWN, ReasonCode.ENTITY_CLEARED)

    if event is DepthEvent.ACTIVATE:
        new_state = state.model_copy(update={"active": True})
        return new_state, DepthResult(previous, previous, ReasonCode.ENTITY_PRESENT)

    # Everything below only applies while tracking is active
    if not state.active:
        return state, DepthResult(previous, previous, ReasonCode.IGNORED_INACTIVE)

    if event is DepthEvent.INFORMATIONAL:
        return state, DepthResult(previous, previous, ReasonCode.INFORMATIONAL)

    if event is DepthEvent.CONFIRMED:
        if probe_depth is None or not probe_depth.is_known:
            return state, DepthResult(
                previous, previous, ReasonCode.CONFIRMATION_UNCORROBORATED
            )
        new_state = state.model_copy(update={"current": probe_depth})
        return new_state, DepthResult(previous, probe_depth, ReasonCode.DEPTH_CONFIRMED)

    # Relative shifts never guess a starting depth
    if not previous.is_known:
        return state, DepthResult(previous, previous, ReasonCode.IGNORED_UNKNOWN_DEPTH)

    if event is DepthEvent.SHALLOWER:
        current, reason = previous.shallower(), ReasonCode.DEPTH_SHALLOWER
    else:
        current, reason = previous.deeper(), ReasonCode.DEPTH_DEEPER

    if current == previous:
        return state, DepthResult(previous, previous, ReasonCode.DEPTH_CLAMPED)

    new_state = state.model_copy(update={"current": current})
    return new_state, DepthResult(previous, current, reason)
