"""
Stop Duration Timer
===================

Predicts the tick of the next depth change while the entity dwells.

On a STOPPED edge the total dwell duration is looked up for the stop
position. The countdown then runs toward the MIDPOINT of the dwell
(``total_duration // 2``): the entity starts its depth transition well
before it visibly departs.

Timer Tri-State:
    WAITING:  entity moving, no dwell yet
    TIMING:   counting down (ticks_until_change() is available)
    INACTIVE: stationary without a countdown (change already reached,
              first stop of the episode, or uncalibrated location)

An unmatched location is not a fault: the timer simply does not start and
reports INACTIVE with an UNCALIBRATED_LOCATION reason.
"""

import logging
from typing import Any, Callable, Dict, Optional

from shoal_tracker.agent.transitions import TimerResult, cancel_timer, start_timer, tick_timer
from shoal_tracker.models.position import Position
from shoal_tracker.models.reason_codes import ReasonCode
from shoal_tracker.models.state import TimerState, TimerStatus


logger = logging.getLogger(__name__)


DurationLookup = Callable[[Position], Optional[int]]


class StopDurationTimer:
    """
    Countdown toward the predicted mid-dwell depth change.

    Attributes:
        duration_lookup: Maps a stop position to its total dwell duration
            (None when no area covers it)

    Example:
        timer = StopDurationTimer(area_manager.stop_duration_for)

        timer.start(position)          # on STOPPED
        timer.tick()                   # once per tick
        timer.ticks_until_change()     # None unless TIMING
    """

    def __init__(self, duration_lookup: DurationLookup) -> None:
        """
        Initialize the timer.

        Args:
            duration_lookup: Callable returning the dwell duration for a position
        """
        self.duration_lookup = duration_lookup

        self._state = TimerState()
        self._last_reason: ReasonCode = ReasonCode.WAITING_FOR_STOP
        self._episodes_started: int = 0
        self._changes_reached: int = 0
        self._uncalibrated_stops: int = 0

    def start(self, position: Position) -> TimerResult:
        """
        Start a countdown for a stop at the given position.

        Args:
            position: Position where the entity stopped

        Returns:
            Timer result (started or UNCALIBRATED_LOCATION)
        """
        duration = self.duration_lookup(position)
        self._state, result = start_timer(self._state, duration)
        self._last_reason = result.reason_code

        if result.started:
            self._episodes_started += 1
            logger.info(
                f"Stop timer started at {position}: "
                f"duration={duration}, change in {self._state.change_tick} ticks"
            )
        else:
            self._uncalibrated_stops += 1
            logger.warning(f"No stop duration for {position}; timer not started")

        return result

    def tick(self) -> TimerResult:
        """Advance the countdown by one tick (no-op while inactive)."""
        if not self._state.active:
            return TimerResult(reason_code=self._last_reason)

        self._state, result = tick_timer(self._state)
        self._last_reason = result.reason_code

        if result.phase_change_reached:
            self._changes_reached += 1
            logger.info(
                f"Predicted depth change reached after {self._state.elapsed} ticks"
            )
        else:
            logger.debug(f"Stop timer: {self._state.remaining} ticks remaining")

        return result

    def cancel(self) -> TimerResult:
        """Cancel a running countdown (entity resumed moving)."""
        if not self._state.active:
            return TimerResult(reason_code=self._last_reason)

        remaining = self._state.remaining
        self._state, result = cancel_timer(self._state)
        self._last_reason = result.reason_code
        logger.info(f"Stop timer cancelled with {remaining} ticks remaining")
        return result

    @property
    def is_active(self) -> bool:
        return self._state.active

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def last_reason(self) -> ReasonCode:
        return self._last_reason

    def ticks_until_change(self) -> Optional[int]:
        """Ticks until the predicted change, None unless counting down."""
        if not self._state.active:
            return None
        return self._state.remaining

    def status(self, is_moving: bool) -> TimerStatus:
        """
        Timer tri-state.

        Args:
            is_moving: Current movement classification of the entity
        """
        if self._state.active:
            return TimerStatus.TIMING
        if is_moving:
            return TimerStatus.WAITING
        return TimerStatus.INACTIVE

    def reset(self) -> None:
        """Discard the current episode."""
        self._state = TimerState()
        self._last_reason = ReasonCode.WAITING_FOR_STOP
        logger.debug("StopDurationTimer reset")

    def get_metrics(self) -> Dict[str, Any]:
        """Get timer metrics for observability."""
        return {
            "active": self._state.active,
            "total_duration": self._state.total_duration,
            "elapsed": self._state.elapsed,
            "ticks_until_change": self.ticks_until_change(),
            "episodes_started": self._episodes_started,
            "changes_reached": self._changes_reached,
            "uncalibrated_stops": self._uncalibrated_stops,
            "last_reason": self._last_reason.value,
        }
