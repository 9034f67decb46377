"""
Signals Module
==============

Stateful holders for the tracker's state machines.

This module provides the per-entity components that own the current state,
delegate decisions to the pure transition functions, and log:
    - MovementWindow: MOVING / STATIONARY hysteresis
    - StopDurationTimer: mid-dwell depth change countdown
    - DepthInferenceEngine: depth estimate from presence and text
    - TextSignalClassifier: substring rules for text notifications
    - ProbeDepthTracker: probe depths from raw readings
"""

from shoal_tracker.signals.depth_engine import DepthInferenceEngine
from shoal_tracker.signals.movement_window import MovementWindow
from shoal_tracker.signals.probe_depth import Probe, ProbeDepthTracker, decode_raw_depth
from shoal_tracker.signals.stop_timer import StopDurationTimer
from shoal_tracker.signals.text_classifier import DEFAULT_RULES, TextRule, TextSignalClassifier

__all__ = [
    "DepthInferenceEngine",
    "MovementWindow",
    "Probe",
    "ProbeDepthTracker",
    "decode_raw_depth",
    "StopDurationTimer",
    "DEFAULT_RULES",
    "TextRule",
    "TextSignalClassifier",
]
