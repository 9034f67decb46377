"""
Depth Requirement Resolver
==========================

Combines the depth estimate and the stop-duration timer into the depth a
probe should currently be at, and the direction each probe must move.

Resolution Order:
    1. Confirmed entity depth (not UNKNOWN) wins
    2. While the timer is active: the species' start depth before the
       midpoint of the dwell, its end depth at / after it
    3. Otherwise: no requirement (None)

The resolver reads the two state machines; it never changes them.
"""

import logging
from typing import Optional

from shoal_tracker.models.geometry import SpeciesTiming
from shoal_tracker.models.state import Depth, DepthState, MovementDirection, TimerState


logger = logging.getLogger(__name__)


class DepthRequirementResolver:
    """Stateless resolver for the currently required depth."""

    def required_depth(
        self,
        depth_state: DepthState,
        timer_state: TimerState,
        species: Optional[SpeciesTiming] = None,
    ) -> Optional[Depth]:
        """
        Depth a probe should be at right now.

        Args:
            depth_state: Current depth estimate
            timer_state: Current stop-duration timer state
            species: Timing of the tracked species, if known

        Returns:
            Required depth, or None when it cannot be derived
        """
        if not depth_state.active:
            return None

        if depth_state.current.is_known:
            return depth_state.current

        if not timer_state.active or species is None or not species.has_depth_change:
            return None

        if timer_state.elapsed < timer_state.change_tick:
            return species.start_depth
        return species.end_depth

    def adjustment_for(
        self,
        probe_depth: Optional[Depth],
        required: Optional[Depth],
    ) -> MovementDirection:
        """
        Direction a probe has to move to reach the required depth.

        Returns:
            SHALLOWER or DEEPER, UNKNOWN when already matching or not derivable
        """
        if probe_depth is None or required is None:
            return MovementDirection.UNKNOWN
        if probe_depth.is_deeper_than(required):
            return MovementDirection.SHALLOWER
        if probe_depth.is_shallower_than(required):
            return MovementDirection.DEEPER
        return MovementDirection.UNKNOWN
