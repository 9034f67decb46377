"""
Probe Depth Tracker
===================

Holds the current depth of the two probes (nets) that are matched against
the entity's depth.

Raw readings are small integers reported by the environment:

    0 = probe not lowered
    1 = SHALLOW
    2 = MODERATE
    3 = DEEP

Any other value decodes to "not lowered" with a warning.

The tracker also supplies the corroborating depth used by "confirmed at
depth" notifications: both probes lowered at the same depth give that
depth, a single lowered probe gives its depth, anything else gives None.
"""

import logging
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from shoal_tracker.models.state import Depth


logger = logging.getLogger(__name__)


class Probe(str, Enum):
    """The two probes."""

    PORT = "PORT"
    STARBOARD = "STARBOARD"


_RAW_TO_DEPTH = {
    0: None,
    1: Depth.SHALLOW,
    2: Depth.MODERATE,
    3: Depth.DEEP,
}


def decode_raw_depth(raw: int) -> Optional[Depth]:
    """
    Decode a raw probe reading.

    Args:
        raw: Raw integer reading

    Returns:
        Depth, or None when not lowered / unknown
    """
    if raw not in _RAW_TO_DEPTH:
        logger.warning(f"Unknown raw probe depth value: {raw}")
        return None
    return _RAW_TO_DEPTH[raw]


class ProbeDepthTracker:
    """
    Current depth of each probe.

    Example:
        probes = ProbeDepthTracker()
        probes.update_raw(Probe.PORT, 2)
        assert probes.depth_of(Probe.PORT) is Depth.MODERATE
    """

    def __init__(self) -> None:
        self._depths: Dict[Probe, Optional[Depth]] = {probe: None for probe in Probe}
        self._update_count: int = 0

    def update_raw(self, probe: Probe, raw: int) -> Optional[Depth]:
        """Record a raw reading for one probe and return the decoded depth."""
        return self.set_depth(probe, decode_raw_depth(raw))

    def set_depth(self, probe: Probe, depth: Optional[Depth]) -> Optional[Depth]:
        """Record a decoded depth (None = not lowered) for one probe."""
        if depth is Depth.UNKNOWN:
            depth = None

        previous = self._depths[probe]
        self._depths[probe] = depth
        self._update_count += 1

        if previous != depth:
            logger.info(
                f"Probe {probe.value} depth: "
                f"{previous.value if previous else 'raised'} -> "
                f"{depth.value if depth else 'raised'}"
            )
        return depth

    def depth_of(self, probe: Probe) -> Optional[Depth]:
        return self._depths[probe]

    def depths(self) -> Tuple[Optional[Depth], ...]:
        """Depths in probe order (PORT, STARBOARD)."""
        return tuple(self._depths[probe] for probe in Probe)

    def same_depth(self) -> bool:
        """Both probes lowered at the same depth."""
        port, starboard = self.depths()
        return port is not None and port == starboard

    def corroborating_depth(self) -> Optional[Depth]:
        """
        Depth that corroborates a "confirmed at depth" notification.

        Returns:
            Shared depth of both probes, or the single lowered probe's depth,
            or None when no probe is lowered or the probes disagree
        """
        lowered = [depth for depth in self.depths() if depth is not None]
        if not lowered:
            return None
        if len(lowered) == 1 or self.same_depth():
            return lowered[0]
        return None

    def reset(self) -> None:
        """Mark both probes as raised."""
        self._depths = {probe: None for probe in Probe}
        logger.debug("ProbeDepthTracker reset")

    def get_metrics(self) -> Dict[str, Any]:
        return {
            "update_count": self._update_count,
            **{
                probe.value.lower(): (depth.value if depth else None)
                for probe, depth in self._depths.items()
            },
        }
