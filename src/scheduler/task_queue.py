from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Tuple


class StopKind(Enum):
    """Reason an elevator stops at a floor; the value is the priority weight."""

    PICK_UP = 0
    DROP_OFF = 1

    @property
    def weight(self) -> int:
        return self.value


class EmptyQueueError(LookupError):
    """Raised when reading the minimum of an empty task queue."""


@dataclass(order=True)
class Stop:
    """A scheduled stop ordered by (priority, insertion sequence)."""

    priority: int
    sequence: int
    floor: int = field(compare=False)
    passenger_id: int = field(compare=False)
    kind: StopKind = field(compare=False)

    def as_dict(self) -> dict:
        return {
            "priority": self.priority,
            "floor": self.floor,
            "passenger_id": self.passenger_id,
            "kind": self.kind.name,
        }


class TaskQueue:
    """Min-heap of stops whose priorities age toward urgency.

    Lower priority is served first. Equal priorities are served in insertion
    order. Decay subtracts the same amount from every key, which keeps the heap
    invariant intact, so it runs in place without re-heapifying.
    """

    def __init__(self) -> None:
        self._heap: List[Stop] = []
        self._counter = itertools.count()

    def insert(self, priority: int, floor: int, passenger_id: int, kind: StopKind) -> Stop:
        stop = Stop(priority, next(self._counter), floor, passenger_id, kind)
        heapq.heappush(self._heap, stop)
        return stop

    def pop_min(self) -> Stop:
        if not self._heap:
            raise EmptyQueueError("pop_min() on an empty task queue")
        return heapq.heappop(self._heap)

    def peek_min(self) -> Stop:
        if not self._heap:
            raise EmptyQueueError("peek_min() on an empty task queue")
        return self._heap[0]

    def decay_all(self, amount: int = 1) -> None:
        for stop in self._heap:
            stop.priority -= amount

    def remove_all_at_floor(self, floor: int) -> int:
        remaining = [stop for stop in self._heap if stop.floor != floor]
        removed = len(self._heap) - len(remaining)
        if removed:
            heapq.heapify(remaining)
            self._heap = remaining
        return removed

    def stops_at_floor(self, floor: int) -> List[Stop]:
        return sorted(stop for stop in self._heap if stop.floor == floor)

    def has_floor(self, floor: int) -> bool:
        return any(stop.floor == floor for stop in self._heap)

    def is_empty(self) -> bool:
        return not self._heap

    def snapshot(self) -> Tuple[Stop, ...]:
        """Copies of the stops in service order, detached from the queue."""
        return tuple(
            Stop(s.priority, s.sequence, s.floor, s.passenger_id, s.kind)
            for s in sorted(self._heap)
        )

    def __len__(self) -> int:
        return len(self._heap)

    def __iter__(self) -> Iterator[Stop]:
        # Heap order, not service order.
        return iter(list(self._heap))

    def __repr__(self) -> str:
        stops = ", ".join(
            f"({s.priority}, {s.floor}, {s.passenger_id}, {s.kind.name})" for s in sorted(self._heap)
        )
        return f"TaskQueue([{stops}])"
