from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, List, Optional

from scheduler import Request

from .passenger import Passenger


@dataclass
class MetricsSnapshot:
    tick: int
    dispatched: int
    boarded: int
    delivered: int
    average_wait: float
    wait_p95: float
    average_ride: float
    ride_p95: float


class MetricsTracker:
    """Wait and ride times in ticks, keyed by passenger id."""

    def __init__(self) -> None:
        self.passengers: Dict[int, Passenger] = {}
        self.wait_times: List[int] = []
        self.ride_times: List[int] = []

    def record_dispatch(self, request: Request, tick: int) -> None:
        self.passengers[request.passenger_id] = Passenger(
            passenger_id=request.passenger_id,
            origin=request.origin,
            destination=request.destination,
            dispatch_time=tick,
        )

    def record_boarding(self, passenger_id: int, tick: int, elevator_id: int) -> None:
        passenger = self.passengers.get(passenger_id)
        if passenger is None:
            return
        passenger.record_boarding(tick, elevator_id)
        if passenger.wait_time is not None:
            self.wait_times.append(passenger.wait_time)

    def record_alighting(self, passenger_id: int, tick: int) -> None:
        passenger = self.passengers.get(passenger_id)
        if passenger is None or passenger.board_time is None:
            return
        passenger.record_alighting(tick)
        if passenger.ride_time is not None:
            self.ride_times.append(passenger.ride_time)

    def passenger(self, passenger_id: int) -> Optional[Passenger]:
        return self.passengers.get(passenger_id)

    def _average(self, values: List[int]) -> float:
        if not values:
            return 0.0
        return sum(values) / len(values)

    def _percentile(self, values: List[int], percentile: float) -> float:
        if not values:
            return 0.0
        sorted_vals = sorted(values)
        k = (len(sorted_vals) - 1) * percentile
        f = math.floor(k)
        c = math.ceil(k)
        if f == c:
            return float(sorted_vals[int(k)])
        d0 = sorted_vals[int(f)] * (c - k)
        d1 = sorted_vals[int(c)] * (k - f)
        return float(d0 + d1)

    def snapshot(self, tick: int) -> MetricsSnapshot:
        return MetricsSnapshot(
            tick=tick,
            dispatched=len(self.passengers),
            boarded=len(self.wait_times),
            delivered=len(self.ride_times),
            average_wait=self._average(self.wait_times),
            wait_p95=self._percentile(self.wait_times, 0.95),
            average_ride=self._average(self.ride_times),
            ride_p95=self._percentile(self.ride_times, 0.95),
        )
