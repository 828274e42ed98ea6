from __future__ import annotations

from typing import Dict, Type

from .interface import ElevatorSnapshot, MotionState, Request, Scheduler
from .nearest import NearestCarScheduler
from .scoring import ScoringScheduler
from .task_queue import EmptyQueueError, Stop, StopKind, TaskQueue

__all__ = [
    "ElevatorSnapshot",
    "EmptyQueueError",
    "MotionState",
    "NearestCarScheduler",
    "Request",
    "Scheduler",
    "ScoringScheduler",
    "Stop",
    "StopKind",
    "TaskQueue",
    "get_scheduler",
]


SCHEDULER_REGISTRY: Dict[str, Type[Scheduler]] = {
    "scoring": ScoringScheduler,
    "nearest": NearestCarScheduler,
}


def get_scheduler(name: str, total_floors: int, **kwargs) -> Scheduler:
    cls = SCHEDULER_REGISTRY.get(name.lower())
    if cls is None:
        raise ValueError(f"Unknown scheduler '{name}'. Available: {', '.join(SCHEDULER_REGISTRY)}")
    return cls(total_floors=total_floors, **kwargs)
