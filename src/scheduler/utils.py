from __future__ import annotations

from .interface import ElevatorSnapshot, MotionState


def floor_distance(elevator: ElevatorSnapshot, floor: int) -> int:
    return abs(elevator.current_floor - floor)


def directionally_opposed(elevator: ElevatorSnapshot, floor: int) -> bool:
    """True when reaching ``floor`` means reversing the elevator's travel.

    An idle elevator is never opposed.
    """

    if elevator.motion_state is MotionState.UP:
        return floor < elevator.current_floor
    if elevator.motion_state is MotionState.DOWN:
        return floor > elevator.current_floor
    return False
