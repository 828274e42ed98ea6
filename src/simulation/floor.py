from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, List

from scheduler import Request


@dataclass
class FloorBuffer:
    """Requests dispatched from a floor whose passengers have not boarded yet."""

    number: int
    waiting: Deque[Request] = field(default_factory=deque)

    def add(self, request: Request) -> None:
        self.waiting.append(request)

    def board_all(self) -> List[Request]:
        boarded = list(self.waiting)
        self.waiting.clear()
        return boarded

    def snapshot(self) -> dict:
        return {
            "floor": self.number,
            "waiting": [request.as_dict() for request in self.waiting],
        }

    def __len__(self) -> int:
        return len(self.waiting)
