from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Optional

from scheduler import SCHEDULER_REGISTRY, Request


class ConfigurationError(ValueError):
    """Raised for settings that make the simulation impossible to start."""


class InvalidRequestError(ValueError):
    """Raised for a request whose floors are outside the building."""


@dataclass
class SimulationConfig:
    """Startup settings for a simulation run. Fixed once the run begins."""

    total_floors: int = 12
    elevator_count: int = 2
    tick_interval: float = 0.5
    run_duration: float = 30.0
    scheduler_name: str = "scoring"
    scheduler_options: dict = field(default_factory=dict)
    decay_per_tick: int = 1
    random_seed: Optional[int] = None
    min_request_delay: float = 0.3
    max_request_delay: float = 2.5

    def __post_init__(self) -> None:
        if self.total_floors < 2:
            raise ConfigurationError(f"total_floors must be at least 2, got {self.total_floors}")
        if self.elevator_count < 1:
            raise ConfigurationError(f"elevator_count must be at least 1, got {self.elevator_count}")
        if self.tick_interval <= 0:
            raise ConfigurationError(f"tick_interval must be positive, got {self.tick_interval}")
        if self.run_duration < 0:
            raise ConfigurationError(f"run_duration cannot be negative, got {self.run_duration}")
        if self.decay_per_tick < 1:
            raise ConfigurationError(f"decay_per_tick must be at least 1, got {self.decay_per_tick}")
        if self.min_request_delay < 0 or self.min_request_delay > self.max_request_delay:
            raise ConfigurationError(
                f"invalid request delay range [{self.min_request_delay}, {self.max_request_delay}]"
            )
        if self.scheduler_name.lower() not in SCHEDULER_REGISTRY:
            raise ConfigurationError(
                f"Unknown scheduler '{self.scheduler_name}'. Available: {', '.join(SCHEDULER_REGISTRY)}"
            )

    @classmethod
    def from_dict(cls, data: dict) -> "SimulationConfig":
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})


def validate_request(request: Request, total_floors: int) -> None:
    for name, floor in (("origin", request.origin), ("destination", request.destination)):
        if not 1 <= floor <= total_floors:
            raise InvalidRequestError(
                f"{name} floor {floor} of passenger {request.passenger_id} "
                f"is outside [1, {total_floors}]"
            )
