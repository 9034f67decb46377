"""
Agent Module
============

Deterministic control flow for the shoal tracker.

    - transitions.py: Pure transition functions for each state machine
    - resolver.py: Required depth and probe adjustment hints
    - graph.py: LangGraph per-tick pipeline (import from
      ``shoal_tracker.agent.graph``)

Key Design Decisions:
    - LangGraph is used for STRUCTURE, not LLM reasoning
    - All transitions are deterministic and inspectable
    - Tick-based hysteresis prevents false stops on single-tick stutters
"""

from shoal_tracker.agent.resolver import DepthRequirementResolver
from shoal_tracker.agent.transitions import (
    MovementThresholds,
    apply_depth,
    apply_movement,
    cancel_timer,
    start_timer,
    tick_timer,
)

__all__ = [
    "DepthRequirementResolver",
    "MovementThresholds",
    "apply_depth",
    "apply_movement",
    "cancel_timer",
    "start_timer",
    "tick_timer",
]
