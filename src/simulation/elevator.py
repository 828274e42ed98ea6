from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Tuple

from scheduler import ElevatorSnapshot, MotionState, Stop, StopKind, TaskQueue

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ArrivalEvent:
    """An elevator reached a floor that had stops; ``served`` were flushed."""

    elevator_id: int
    floor: int
    served: Tuple[Stop, ...]


@dataclass
class Elevator:
    """A car that moves one floor per step toward its most urgent stop."""

    elevator_id: int
    current_floor: int = 1
    initial_state: MotionState = MotionState.IDLE
    decay_per_tick: int = 1
    task_queue: TaskQueue = field(default_factory=TaskQueue)
    _motion_state: MotionState = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._motion_state = self.initial_state

    @property
    def motion_state(self) -> MotionState:
        return self._motion_state

    def add_request(self, floor: int, passenger_id: int, kind: StopKind) -> Stop:
        priority = kind.weight + abs(self.current_floor - floor)
        return self.task_queue.insert(priority, floor, passenger_id, kind)

    def step(self) -> Optional[ArrivalEvent]:
        if self.task_queue.is_empty():
            return self._update_motion_state()

        self.task_queue.decay_all(self.decay_per_tick)
        target = self.task_queue.peek_min().floor
        if self.current_floor < target:
            self.current_floor += 1
        elif self.current_floor > target:
            self.current_floor -= 1
        return self._update_motion_state()

    def _update_motion_state(self) -> Optional[ArrivalEvent]:
        if self.task_queue.is_empty():
            self._motion_state = MotionState.IDLE
            return None

        if self.task_queue.has_floor(self.current_floor):
            served = tuple(self.task_queue.stops_at_floor(self.current_floor))
            self.task_queue.remove_all_at_floor(self.current_floor)
            self._motion_state = MotionState.IDLE
            logger.debug(
                "Elevator %s stopped at floor %s serving %s stop(s)",
                self.elevator_id,
                self.current_floor,
                len(served),
            )
            return ArrivalEvent(self.elevator_id, self.current_floor, served)

        target = self.task_queue.peek_min().floor
        if target > self.current_floor:
            self._motion_state = MotionState.UP
        elif target < self.current_floor:
            self._motion_state = MotionState.DOWN
        else:
            self._motion_state = MotionState.IDLE
        return None

    def snapshot(self) -> ElevatorSnapshot:
        return ElevatorSnapshot(
            elevator_id=self.elevator_id,
            current_floor=self.current_floor,
            motion_state=self._motion_state,
            stops=self.task_queue.snapshot(),
        )
