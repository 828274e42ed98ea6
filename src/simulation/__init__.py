"""Simulation primitives for the elevator dispatcher."""

from scheduler import Request

from .config import ConfigurationError, InvalidRequestError, SimulationConfig, validate_request
from .controller import ElevatorController, TickReport
from .elevator import ArrivalEvent, Elevator
from .floor import FloorBuffer
from .metrics import MetricsSnapshot, MetricsTracker
from .passenger import Passenger
from .simulation import Simulation
from .traffic import RequestGenerator

__all__ = [
    "ArrivalEvent",
    "ConfigurationError",
    "Elevator",
    "ElevatorController",
    "FloorBuffer",
    "InvalidRequestError",
    "MetricsSnapshot",
    "MetricsTracker",
    "Passenger",
    "Request",
    "RequestGenerator",
    "Simulation",
    "SimulationConfig",
    "TickReport",
    "validate_request",
]
