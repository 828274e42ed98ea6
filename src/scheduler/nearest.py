from __future__ import annotations

from typing import Optional, Sequence

from .interface import ElevatorSnapshot, Request
from .utils import floor_distance


class NearestCarScheduler:
    """Assigns each request to the closest elevator, ignoring load and direction."""

    def __init__(self, total_floors: int) -> None:
        self.total_floors = total_floors

    def select_elevator(
        self,
        elevators: Sequence[ElevatorSnapshot],
        request: Request,
    ) -> Optional[int]:
        if not elevators:
            return None
        # min() keeps the first of equally distant elevators.
        closest = min(elevators, key=lambda e: floor_distance(e, request.origin))
        return closest.elevator_id
