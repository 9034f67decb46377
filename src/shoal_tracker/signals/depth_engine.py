"""
Depth Inference Engine
======================

Finite-state estimator of the entity's discrete depth.

Inputs:
    - Presence: APPEARED activates tracking (depth stays UNKNOWN),
      loss / departure clears to UNKNOWN and inactive
    - Classified text notifications: definitive shifts move one level,
      confirmations set the depth from a corroborating probe reading,
      informational notifications never change the depth

Only signals received while active are processed. There is no buffering
or replay of signals that arrive while inactive.

Example:
    engine = DepthInferenceEngine()
    engine.activate()
    engine.on_text(TextSignalKind.CONFIRMED_DEPTH, probe_depth=Depth.MODERATE)
    engine.on_text(TextSignalKind.DEFINITIVE_DEEPER)
    assert engine.current is Depth.DEEP
"""

import logging
from typing import Any, Dict, Optional

from shoal_tracker.agent.transitions import DepthResult, apply_depth
from shoal_tracker.models.reason_codes import ReasonCode
from shoal_tracker.models.signals import DepthEvent, TextSignalKind
from shoal_tracker.models.state import Depth, DepthState


logger = logging.getLogger(__name__)


class DepthInferenceEngine:
    """Holder of the DepthState machine."""

    def __init__(self) -> None:
        self._state = DepthState()
        self._last_result: Optional[DepthResult] = None
        self._signals_processed: int = 0
        self._signals_ignored: int = 0
        self._depth_changes: int = 0

    def apply(self, event: DepthEvent, probe_depth: Optional[Depth] = None) -> DepthResult:
        """
        Apply one depth event.

        Args:
            event: Depth event
            probe_depth: Corroborating probe depth (CONFIRMED only)

        Returns:
            Depth transition result
        """
        self._state, result = apply_depth(self._state, event, probe_depth)
        self._last_result = result

        if result.reason_code in (
            ReasonCode.IGNORED_INACTIVE,
            ReasonCode.IGNORED_UNKNOWN_DEPTH,
            ReasonCode.CONFIRMATION_UNCORROBORATED,
        ):
            self._signals_ignored += 1
            logger.debug(f"Depth signal {event.value} ignored: {result.reason_code.value}")
        else:
            self._signals_processed += 1

        if result.changed and result.current.is_known:
            self._depth_changes += 1
            logger.info(
                f"Depth changed: {result.previous.value} -> {result.current.value} "
                f"(reason: {result.reason_code.value})"
            )
        elif event is DepthEvent.CLEAR:
            logger.info("Depth state cleared")

        return result

    def on_text(
        self,
        kind: TextSignalKind,
        probe_depth: Optional[Depth] = None,
    ) -> Optional[DepthResult]:
        """
        Apply a classified text notification.

        Returns:
            Depth result, or None for unrelated text
        """
        event = DepthEvent.from_text(kind)
        if event is None:
            return None
        return self.apply(event, probe_depth)

    def activate(self) -> DepthResult:
        return self.apply(DepthEvent.ACTIVATE)

    def clear(self) -> DepthResult:
        return self.apply(DepthEvent.CLEAR)

    @property
    def state(self) -> DepthState:
        return self._state

    @property
    def current(self) -> Depth:
        return self._state.current

    @property
    def is_active(self) -> bool:
        return self._state.active

    @property
    def last_result(self) -> Optional[DepthResult]:
        return self._last_result

    def reset(self) -> None:
        """Reset to UNKNOWN / inactive without counting a signal."""
        self._state = DepthState()
        self._last_result = None

    def get_metrics(self) -> Dict[str, Any]:
        return {
            "current": self._state.current.value,
            "active": self._state.active,
            "signals_processed": self._signals_processed,
            "signals_ignored": self._signals_ignored,
            "depth_changes": self._depth_changes,
        }
