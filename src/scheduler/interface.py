from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol, Sequence, Tuple

from .task_queue import Stop


class MotionState(Enum):
    UP = "up"
    DOWN = "down"
    IDLE = "idle"


@dataclass(frozen=True)
class Request:
    """A passenger's trip from ``origin`` to ``destination``."""

    origin: int
    destination: int
    passenger_id: int

    def as_dict(self) -> dict:
        return {
            "origin": self.origin,
            "destination": self.destination,
            "passenger_id": self.passenger_id,
        }


@dataclass(frozen=True)
class ElevatorSnapshot:
    """Read-only view of an elevator for scheduling and display."""

    elevator_id: int
    current_floor: int
    motion_state: MotionState
    stops: Tuple[Stop, ...] = ()

    @property
    def queue_size(self) -> int:
        return len(self.stops)

    @property
    def next_stop(self) -> Optional[Stop]:
        return self.stops[0] if self.stops else None

    def as_dict(self) -> dict:
        return {
            "id": self.elevator_id,
            "current_floor": self.current_floor,
            "motion_state": self.motion_state.name,
            "queue": [stop.as_dict() for stop in self.stops],
        }


class Scheduler(Protocol):
    """Strategy interface for choosing the elevator that serves a request."""

    def select_elevator(
        self,
        elevators: Sequence[ElevatorSnapshot],
        request: Request,
    ) -> Optional[int]:
        """
        Return the id of the elevator that should pick up ``request``.

        Returns None only when ``elevators`` is empty.
        """
        ...
