from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class Passenger:
    """Timeline of one rider, in ticks."""

    passenger_id: int
    origin: int
    destination: int
    dispatch_time: int
    elevator_id: Optional[int] = None
    board_time: Optional[int] = None
    alight_time: Optional[int] = None

    def record_boarding(self, time_step: int, elevator_id: int) -> None:
        self.board_time = time_step
        self.elevator_id = elevator_id

    def record_alighting(self, time_step: int) -> None:
        self.alight_time = time_step

    @property
    def wait_time(self) -> Optional[int]:
        if self.board_time is None:
            return None
        return self.board_time - self.dispatch_time

    @property
    def ride_time(self) -> Optional[int]:
        if self.board_time is None or self.alight_time is None:
            return None
        return self.alight_time - self.board_time
