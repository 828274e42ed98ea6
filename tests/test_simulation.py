import time

import pytest

from scheduler import Request
from simulation import (
    ConfigurationError,
    InvalidRequestError,
    RequestGenerator,
    Simulation,
    SimulationConfig,
    validate_request,
)


def _wait_until(predicate, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


class TestSimulationConfig:

    def test_defaults_match_reference_building(self):
        config = SimulationConfig()
        assert (config.total_floors, config.elevator_count) == (12, 2)
        assert config.tick_interval == 0.5
        assert config.scheduler_name == "scoring"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"total_floors": 1},
            {"total_floors": 0},
            {"elevator_count": 0},
            {"tick_interval": 0},
            {"run_duration": -1},
            {"decay_per_tick": 0},
            {"min_request_delay": 3.0, "max_request_delay": 1.0},
            {"scheduler_name": "elevator-saga"},
        ],
    )
    def test_invalid_settings_fail_at_startup(self, overrides):
        with pytest.raises(ConfigurationError):
            SimulationConfig(**overrides)

    def test_configuration_error_is_a_value_error(self):
        assert issubclass(ConfigurationError, ValueError)

    def test_from_dict_ignores_unknown_keys(self):
        config = SimulationConfig.from_dict({"total_floors": 20, "elevator_count": 4, "colour": "red"})
        assert (config.total_floors, config.elevator_count) == (20, 4)

    def test_validate_request_bounds(self):
        validate_request(Request(1, 10, 1), total_floors=10)
        # Same-floor trips are the generator's problem, not an error here.
        validate_request(Request(4, 4, 2), total_floors=10)
        with pytest.raises(InvalidRequestError, match="destination floor 11"):
            validate_request(Request(1, 11, 3), total_floors=10)


class TestSimulationSteps:

    def test_from_config_builds_controller(self):
        simulation = Simulation.from_config(
            SimulationConfig(total_floors=9, elevator_count=3, scheduler_name="nearest")
        )
        assert simulation.controller.total_floors == 9
        assert len(simulation.controller.elevators) == 3
        assert simulation.controller.scheduler_name == "nearest"

    def test_hooks_fire_for_dispatch_arrival_and_tick(self):
        simulation = Simulation.from_config(SimulationConfig(total_floors=5, elevator_count=1))
        seen = {"dispatch": [], "arrival": [], "tick": []}
        for event, bucket in seen.items():
            simulation.on_event(event, bucket.append)
        simulation.controller.submit(Request(3, 1, 7))
        simulation.run(2)
        assert [payload["elevator_id"] for payload in seen["dispatch"]] == [0]
        assert [arrival.floor for arrival in seen["arrival"]] == [3]
        assert [payload["state"]["tick"] for payload in seen["tick"]] == [1, 2]

    def test_current_state_includes_metrics(self):
        simulation = Simulation.from_config(SimulationConfig(total_floors=5, elevator_count=1))
        simulation.controller.submit(Request(3, 1, 7))
        simulation.run(4)
        state = simulation.current_state()
        assert state["tick"] == 4
        assert state["metrics"]["delivered"] == 1


class TestSimulationThreads:

    def test_background_loop_delivers_passenger(self):
        simulation = Simulation.from_config(
            SimulationConfig(total_floors=5, elevator_count=1, tick_interval=0.01)
        )
        simulation.start()
        try:
            simulation.controller.submit(Request(3, 1, 7))
            assert _wait_until(lambda: simulation.current_state()["metrics"]["delivered"] == 1)
        finally:
            simulation.stop()
        tick = simulation.current_tick
        time.sleep(0.05)
        assert simulation.current_tick == tick

    def test_stop_interrupts_a_long_tick_wait(self):
        simulation = Simulation.from_config(SimulationConfig(tick_interval=30.0))
        simulation.start()
        started = time.monotonic()
        simulation.stop()
        assert time.monotonic() - started < 5.0

    def test_run_for_stops_generator_then_loop(self):
        simulation = Simulation.from_config(
            SimulationConfig(total_floors=6, elevator_count=2, tick_interval=0.01)
        )
        generator = RequestGenerator(
            total_floors=6,
            submit=simulation.controller.submit,
            min_delay=0.01,
            max_delay=0.02,
            random_seed=3,
        )
        simulation.run_for(0.3, generator)
        assert generator.generated > 0
        assert simulation.current_tick > 0
        generated, tick = generator.generated, simulation.current_tick
        time.sleep(0.05)
        assert (generator.generated, simulation.current_tick) == (generated, tick)


class TestRequestGenerator:

    def test_destination_always_differs_from_origin(self):
        generator = RequestGenerator(total_floors=4, random_seed=11)
        for _ in range(200):
            request = generator.next_request()
            assert 1 <= request.origin <= 4
            assert 1 <= request.destination <= 4
            assert request.origin != request.destination

    def test_ids_are_sequential(self):
        generator = RequestGenerator(total_floors=8, random_seed=1, first_passenger_id=40)
        assert [generator.next_request().passenger_id for _ in range(3)] == [40, 41, 42]

    def test_seed_makes_traffic_repeatable(self):
        first = RequestGenerator(total_floors=12, random_seed=5)
        second = RequestGenerator(total_floors=12, random_seed=5)
        assert [first.next_request() for _ in range(10)] == [second.next_request() for _ in range(10)]

    def test_start_requires_a_submit_callable(self):
        with pytest.raises(RuntimeError):
            RequestGenerator(total_floors=5).start()

    def test_rejects_single_floor_building(self):
        with pytest.raises(ValueError):
            RequestGenerator(total_floors=1)

    def test_thread_submits_until_stopped(self):
        received = []
        generator = RequestGenerator(
            total_floors=5, submit=received.append, min_delay=0.0, max_delay=0.01, random_seed=2
        )
        generator.start()
        assert _wait_until(lambda: len(received) >= 3)
        generator.stop()
        count = len(received)
        time.sleep(0.05)
        assert len(received) == count
        assert [request.passenger_id for request in received] == list(range(count))
