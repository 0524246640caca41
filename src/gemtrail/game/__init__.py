"""Game simulation: movement, tail, gems and the per-frame step."""

from gemtrail.game.movement import MovementController, MoveResult, PlayerState, shortest_angle_between, speed_for_tail
from gemtrail.game.trail import TailTrail, segment_style
from gemtrail.game.gems import Gem, GemField, GemLook, GemStatus
from gemtrail.game.simulation import (
    FrameInput,
    Simulation,
    SimulationState,
    SpeedCurve,
    TickReport,
    new_state,
    restart,
    step,
    tail_segment_count,
)

__all__ = [
    "MovementController",
    "MoveResult",
    "PlayerState",
    "shortest_angle_between",
    "speed_for_tail",
    "TailTrail",
    "segment_style",
    "Gem",
    "GemField",
    "GemLook",
    "GemStatus",
    "FrameInput",
    "Simulation",
    "SimulationState",
    "SpeedCurve",
    "TickReport",
    "new_state",
    "restart",
    "step",
    "tail_segment_count",
]
