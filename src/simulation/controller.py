from __future__ import annotations

import logging
import queue
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from scheduler import Request, Scheduler, StopKind, get_scheduler

from .config import ConfigurationError, validate_request
from .elevator import ArrivalEvent, Elevator
from .floor import FloorBuffer
from .metrics import MetricsTracker

logger = logging.getLogger(__name__)


@dataclass
class TickReport:
    """What happened during one controller tick."""

    tick: int
    dispatched: List[Tuple[Request, Optional[int]]] = field(default_factory=list)
    arrivals: List[ArrivalEvent] = field(default_factory=list)
    boarded: List[Tuple[int, Request]] = field(default_factory=list)


class ElevatorController:
    """Owns the elevators, the inbound request channel and the floor buffers.

    ``submit`` may be called from any thread. Everything else runs on the
    thread that calls ``tick``; ticks must not overlap.
    """

    def __init__(
        self,
        total_floors: int,
        elevators: List[Elevator],
        scheduler_name: str = "scoring",
        scheduler_options: Optional[dict] = None,
        request_channel: Optional["queue.Queue[Request]"] = None,
    ) -> None:
        if total_floors < 2:
            raise ConfigurationError(f"total_floors must be at least 2, got {total_floors}")
        if not elevators:
            raise ConfigurationError("at least one elevator is required")
        ids = [elevator.elevator_id for elevator in elevators]
        if len(set(ids)) != len(ids):
            raise ConfigurationError(f"elevator ids must be unique, got {sorted(ids)}")
        for elevator in elevators:
            if not 1 <= elevator.current_floor <= total_floors:
                raise ConfigurationError(
                    f"elevator {elevator.elevator_id} starts on floor {elevator.current_floor}, "
                    f"outside [1, {total_floors}]"
                )
        self.total_floors = total_floors
        self.elevators = sorted(elevators, key=lambda e: e.elevator_id)
        self.scheduler_name = scheduler_name
        self.scheduler: Scheduler = get_scheduler(
            scheduler_name, total_floors, **(scheduler_options or {})
        )
        self.request_channel: "queue.Queue[Request]" = (
            request_channel if request_channel is not None else queue.Queue()
        )
        self.floors = [FloorBuffer(number) for number in range(1, total_floors + 1)]
        self.metrics = MetricsTracker()
        self.current_tick = 0

    @classmethod
    def build(
        cls,
        total_floors: int,
        elevator_count: int,
        decay_per_tick: int = 1,
        **kwargs,
    ) -> "ElevatorController":
        elevators = [Elevator(i, decay_per_tick=decay_per_tick) for i in range(elevator_count)]
        return cls(total_floors, elevators, **kwargs)

    def set_scheduler(self, name: str, **options) -> None:
        self.scheduler = get_scheduler(name, self.total_floors, **options)
        self.scheduler_name = name
        logger.info("Scheduler switched to %s", name)

    def get_floor(self, floor_number: int) -> FloorBuffer:
        return self.floors[floor_number - 1]

    def get_elevator(self, elevator_id: int) -> Optional[Elevator]:
        for elevator in self.elevators:
            if elevator.elevator_id == elevator_id:
                return elevator
        return None

    def submit(self, request: Request, timeout: Optional[float] = None) -> None:
        validate_request(request, self.total_floors)
        self.request_channel.put(request, timeout=timeout)

    def drain_requests(self) -> List[Request]:
        """Take what is in the channel right now without waiting for more."""
        drained: List[Request] = []
        for _ in range(self.request_channel.qsize()):
            try:
                drained.append(self.request_channel.get_nowait())
            except queue.Empty:
                break
        return drained

    def dispatch(self, request: Request) -> Optional[int]:
        self.get_floor(request.origin).add(request)
        self.metrics.record_dispatch(request, self.current_tick)
        snapshots = [elevator.snapshot() for elevator in self.elevators]
        elevator_id = self.scheduler.select_elevator(snapshots, request)
        elevator = self.get_elevator(elevator_id) if elevator_id is not None else None
        if elevator is None:
            logger.warning("No elevator selected for passenger %s", request.passenger_id)
            return None
        elevator.add_request(request.origin, request.passenger_id, StopKind.PICK_UP)
        logger.debug(
            "Passenger %s (%s -> %s) assigned to elevator %s",
            request.passenger_id,
            request.origin,
            request.destination,
            elevator_id,
        )
        return elevator_id

    def on_arrival(self, event: ArrivalEvent) -> List[Request]:
        elevator = self.get_elevator(event.elevator_id)
        if elevator is None:
            return []
        for stop in event.served:
            if stop.kind is StopKind.DROP_OFF:
                self.metrics.record_alighting(stop.passenger_id, self.current_tick)
        boarded = self.get_floor(event.floor).board_all()
        for request in boarded:
            elevator.add_request(request.destination, request.passenger_id, StopKind.DROP_OFF)
            self.metrics.record_boarding(request.passenger_id, self.current_tick, elevator.elevator_id)
        if boarded:
            logger.debug(
                "Elevator %s boarded %s passenger(s) at floor %s",
                elevator.elevator_id,
                len(boarded),
                event.floor,
            )
        return boarded

    def tick(self) -> TickReport:
        report = TickReport(tick=self.current_tick)
        for request in self.drain_requests():
            report.dispatched.append((request, self.dispatch(request)))

        for elevator in self.elevators:
            event = elevator.step()
            if event is None:
                continue
            report.arrivals.append(event)
            for request in self.on_arrival(event):
                report.boarded.append((event.elevator_id, request))

        self.current_tick += 1
        return report

    def snapshot(self) -> dict:
        return {
            "tick": self.current_tick,
            "scheduler": self.scheduler_name,
            "elevators": [elevator.snapshot().as_dict() for elevator in self.elevators],
            "floors": [floor.snapshot() for floor in self.floors],
        }
