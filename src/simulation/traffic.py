from __future__ import annotations

import logging
import random
import threading
from typing import Callable, Optional

from scheduler import Request

logger = logging.getLogger(__name__)


class RequestGenerator:
    """Produces random trips on a worker thread until stopped.

    Origins are uniform over the building and the destination always differs
    from the origin. Passenger ids count up from ``first_passenger_id``.
    """

    def __init__(
        self,
        total_floors: int,
        submit: Optional[Callable[[Request], None]] = None,
        min_delay: float = 0.3,
        max_delay: float = 2.5,
        random_seed: Optional[int] = None,
        first_passenger_id: int = 0,
    ) -> None:
        if total_floors < 2:
            raise ValueError("a generator needs at least two floors")
        self.total_floors = total_floors
        self.submit = submit
        self.min_delay = min_delay
        self.max_delay = max_delay
        self.random = random.Random(random_seed)
        self.generated = 0
        self._next_passenger_id = first_passenger_id
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def next_request(self) -> Request:
        origin = self.random.randint(1, self.total_floors)
        destination = self._choose_destination(origin)
        request = Request(origin=origin, destination=destination, passenger_id=self._next_passenger_id)
        self._next_passenger_id += 1
        return request

    def _choose_destination(self, origin: int) -> int:
        possible_floors = [f for f in range(1, self.total_floors + 1) if f != origin]
        return self.random.choice(possible_floors)

    def start(self) -> None:
        if self._thread is not None:
            return
        if self.submit is None:
            raise RuntimeError("RequestGenerator.start() needs a submit callable")
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="request-generator", daemon=True)
        self._thread.start()
        logger.info("Request generator started")

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        logger.info("Request generator stopped after %s request(s)", self.generated)

    def _run(self) -> None:
        while not self._stop_event.is_set():
            self.submit(self.next_request())
            self.generated += 1
            if self._stop_event.wait(self.random.uniform(self.min_delay, self.max_delay)):
                break
