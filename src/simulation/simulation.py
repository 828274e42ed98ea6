from __future__ import annotations

import logging
import threading
import time
from dataclasses import asdict
from typing import Callable, Dict, List, Optional

from .config import SimulationConfig
from .controller import ElevatorController, TickReport
from .traffic import RequestGenerator

logger = logging.getLogger(__name__)


class Simulation:
    """Fixed-cadence tick loop around an :class:`ElevatorController`.

    ``step`` and ``current_state`` share a lock, so observers only ever see
    the state between two ticks. ``start``/``stop`` run the loop on a
    background thread; ``run`` advances synchronously for tests and
    offline scenarios.
    """

    def __init__(self, controller: ElevatorController, tick_interval: float = 0.5) -> None:
        self.controller = controller
        self.tick_interval = tick_interval
        self.event_hooks: Dict[str, List[Callable[[object], None]]] = {}
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @classmethod
    def from_config(cls, config: SimulationConfig) -> "Simulation":
        controller = ElevatorController.build(
            total_floors=config.total_floors,
            elevator_count=config.elevator_count,
            decay_per_tick=config.decay_per_tick,
            scheduler_name=config.scheduler_name,
            scheduler_options=config.scheduler_options,
        )
        return cls(controller, tick_interval=config.tick_interval)

    @property
    def current_tick(self) -> int:
        return self.controller.current_tick

    def on_event(self, event: str, callback: Callable[[object], None]) -> None:
        self.event_hooks.setdefault(event, []).append(callback)

    def step(self) -> TickReport:
        with self._lock:
            report = self.controller.tick()
            state = self.controller.snapshot()
        for request, elevator_id in report.dispatched:
            self._emit("dispatch", {"request": request, "elevator_id": elevator_id})
        for arrival in report.arrivals:
            self._emit("arrival", arrival)
        self._emit("tick", {"report": report, "state": state})
        return report

    def run(self, ticks: int) -> None:
        for _ in range(ticks):
            self.step()

    def current_state(self) -> dict:
        with self._lock:
            state = self.controller.snapshot()
            state["metrics"] = asdict(self.controller.metrics.snapshot(self.controller.current_tick))
        return state

    def start(self) -> None:
        if self._thread is not None:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run_loop, name="elevator-controller", daemon=True)
        self._thread.start()
        logger.info("Simulation started with a %.3fs tick", self.tick_interval)

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        logger.info("Simulation stopped at tick %s", self.current_tick)

    def run_for(self, duration: float, generator: Optional[RequestGenerator] = None) -> None:
        """Run in real time for ``duration`` seconds, then shut down in order."""
        if generator is not None:
            generator.start()
        self.start()
        try:
            time.sleep(duration)
        finally:
            if generator is not None:
                generator.stop()
            self.stop()

    def _run_loop(self) -> None:
        deadline = time.monotonic()
        while not self._stop_event.is_set():
            self.step()
            # Late ticks run back to back instead of being dropped.
            deadline += self.tick_interval
            delay = max(0.0, deadline - time.monotonic())
            if self._stop_event.wait(delay):
                break

    def _emit(self, event: str, payload: object) -> None:
        for callback in self.event_hooks.get(event, []):
            callback(payload)
