"""
Movement Window
===============

Classifies the tracked entity as MOVING or STATIONARY from the
position-per-tick stream and emits movement edges.

This holder:
    - Owns the current MovementState
    - Delegates every decision to ``apply_movement`` (pure)
    - Logs edges and periodic summaries

Edges:
    STOPPED:        entity held position for stopped_threshold ticks after
                    having moved for at least movement_threshold ticks
                    (exactly once per stationary episode)
    RESUMED_MOVING: entity moved while a stop-duration timer was running
"""

import logging
from typing import Any, Dict, List, Optional

from shoal_tracker.agent.transitions import MovementResult, MovementThresholds, apply_movement
from shoal_tracker.models.position import Position
from shoal_tracker.models.signals import MovementEdge
from shoal_tracker.models.state import MovementState


logger = logging.getLogger(__name__)


class MovementWindow:
    """
    Tick-based hysteresis over sampled positions.

    Example:
        window = MovementWindow()

        for position in positions:
            edges = window.update(position, timer_active=timer.is_active)
            if MovementEdge.STOPPED in edges:
                timer.start(position)
    """

    def __init__(
        self,
        thresholds: Optional[MovementThresholds] = None,
        log_every_n_ticks: int = 100,
    ) -> None:
        """
        Initialize the movement window.

        Args:
            thresholds: Hysteresis thresholds (defaults if None)
            log_every_n_ticks: Log a summary every N samples
        """
        if log_every_n_ticks < 1:
            raise ValueError("log_every_n_ticks must be >= 1")

        self.thresholds = thresholds or MovementThresholds()
        self.log_every_n_ticks = log_every_n_ticks

        self._state = MovementState()
        self._last_result: Optional[MovementResult] = None
        self._tick_count: int = 0
        self._stop_count: int = 0

        logger.info(
            f"MovementWindow initialized: "
            f"stopped={self.thresholds.stopped_threshold_ticks} ticks, "
            f"moving={self.thresholds.movement_threshold_ticks} ticks"
        )

    def update(self, position: Position, timer_active: bool = False) -> List[MovementEdge]:
        """
        Process one sampled position.

        Args:
            position: Position sampled this tick
            timer_active: Whether a stop-duration countdown is running

        Returns:
            Edges emitted on this tick (possibly empty)
        """
        self._tick_count += 1

        self._state, result = apply_movement(
            self._state, position, timer_active, self.thresholds
        )
        self._last_result = result

        if result.stopped:
            self._stop_count += 1
            logger.info(f"Entity stopped at {position} (stop #{self._stop_count})")
        if result.resumed:
            logger.info(f"Entity resumed moving at {position}")

        if self._tick_count % self.log_every_n_ticks == 0:
            logger.info(
                f"MovementWindow [tick {self._tick_count}]: "
                f"moving={self._state.is_moving}, "
                f"same={self._state.ticks_at_same_position}, "
                f"moving_ticks={self._state.ticks_moving}"
            )
        else:
            logger.debug(f"Movement: {position} -> {result}")

        return list(result.edges)

    @property
    def state(self) -> MovementState:
        return self._state

    @property
    def last_result(self) -> Optional[MovementResult]:
        return self._last_result

    def reset(self) -> None:
        """Reset all counters (entity lost or new entity)."""
        self._state = MovementState()
        self._last_result = None
        logger.debug("MovementWindow reset")

    def get_metrics(self) -> Dict[str, Any]:
        """Get window metrics for observability."""
        return {
            "tick_count": self._tick_count,
            "stop_count": self._stop_count,
            "is_moving": self._state.is_moving,
            "has_been_moving": self._state.has_been_moving,
            "ticks_at_same_position": self._state.ticks_at_same_position,
            "ticks_moving": self._state.ticks_moving,
        }
