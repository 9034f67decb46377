"""
Reason Codes
============

Fixed set of machine-readable reason codes for tracker transitions.

Every transition function returns exactly ONE reason code that explains
why the state machine ended up where it is.

Rules:
    - No free-text explanations
    - One clear cause per code
    - "Failures" (no entity, uncalibrated location) are codes, not exceptions
"""

from enum import Enum


class ReasonCode(str, Enum):
    """
    Machine-readable transition explanation codes.

    Attributes:
        NO_ENTITY: Nothing is tracked
        MOVING: Entity changed position this tick
        SETTLING: Entity held position but the stop is not confirmed yet
        STATIONARY: Entity holds position after a confirmed stop
        STOP_DETECTED: Entity became stationary after having moved
        MOVEMENT_RESUMED: Entity moved while the timer was running
        WAITING_FOR_STOP: Timer idle, entity still moving
        UNCALIBRATED_LOCATION: No stop duration covers the stop position
        COUNTING_DOWN: Timer running
        PHASE_CHANGE_REACHED: Timer reached the predicted depth change
        ENTITY_PRESENT: Depth tracking activated by a presence signal
        ENTITY_CLEARED: Depth state reset by a loss / departure
        DEPTH_SHALLOWER: Depth moved one level toward the surface
        DEPTH_DEEPER: Depth moved one level down
        DEPTH_CLAMPED: Definitive shift at an extreme, depth unchanged
        DEPTH_CONFIRMED: Depth set from a corroborating probe reading
        CONFIRMATION_UNCORROBORATED: Confirmation without a probe reading
        INFORMATIONAL: Probe-relative signal, depth unchanged
        IGNORED_INACTIVE: Signal arrived while depth tracking is inactive
        IGNORED_UNKNOWN_DEPTH: Relative shift while depth is UNKNOWN
        UNRELATED: Text did not match any rule
    """

    # Shared
    NO_ENTITY = "NO_ENTITY"

    # Movement window
    MOVING = "MOVING"
    SETTLING = "SETTLING"
    STATIONARY = "STATIONARY"
    STOP_DETECTED = "STOP_DETECTED"
    MOVEMENT_RESUMED = "MOVEMENT_RESUMED"

    # Stop-duration timer
    WAITING_FOR_STOP = "WAITING_FOR_STOP"
    UNCALIBRATED_LOCATION = "UNCALIBRATED_LOCATION"
    COUNTING_DOWN = "COUNTING_DOWN"
    PHASE_CHANGE_REACHED = "PHASE_CHANGE_REACHED"

    # Depth inference
    ENTITY_PRESENT = "ENTITY_PRESENT"
    ENTITY_CLEARED = "ENTITY_CLEARED"
    DEPTH_SHALLOWER = "DEPTH_SHALLOWER"
    DEPTH_DEEPER = "DEPTH_DEEPER"
    DEPTH_CLAMPED = "DEPTH_CLAMPED"
    DEPTH_CONFIRMED = "DEPTH_CONFIRMED"
    CONFIRMATION_UNCORROBORATED = "CONFIRMATION_UNCORROBORATED"
    INFORMATIONAL = "INFORMATIONAL"
    IGNORED_INACTIVE = "IGNORED_INACTIVE"
    IGNORED_UNKNOWN_DEPTH = "IGNORED_UNKNOWN_DEPTH"
    UNRELATED = "UNRELATED"
