from __future__ import annotations

import logging
from typing import Optional, Sequence

from .interface import ElevatorSnapshot, Request
from .utils import directionally_opposed, floor_distance

logger = logging.getLogger(__name__)

BUSY_QUEUE_THRESHOLD = 3


class ScoringScheduler:
    """Greedy cost heuristic: distance, load, next-stop fit and direction.

    Every request is scored against every elevator on its own; the lowest
    score wins and the first elevator seen wins ties. Requests already
    assigned are never revisited.
    """

    def __init__(self, total_floors: int) -> None:
        self.total_floors = total_floors

    def select_elevator(
        self,
        elevators: Sequence[ElevatorSnapshot],
        request: Request,
    ) -> Optional[int]:
        best_id: Optional[int] = None
        best_score: Optional[int] = None
        for elevator in elevators:
            score = self.score(elevator, request)
            if best_score is None or score < best_score:
                best_id, best_score = elevator.elevator_id, score
        if best_id is not None:
            logger.debug(
                "Passenger %s (%s -> %s) scored %s on elevator %s",
                request.passenger_id,
                request.origin,
                request.destination,
                best_score,
                best_id,
            )
        return best_id

    def score(self, elevator: ElevatorSnapshot, request: Request) -> int:
        queue_size = elevator.queue_size
        score = floor_distance(elevator, request.origin) + queue_size
        if queue_size >= BUSY_QUEUE_THRESHOLD:
            score += queue_size
        if elevator.next_stop is not None:
            # Cheaper when the car is already heading to the caller's floor.
            score += 1 if elevator.next_stop.floor == request.origin else 2
        if directionally_opposed(elevator, request.origin):
            score += self.total_floors // 3
        return score
