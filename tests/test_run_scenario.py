import json
import random
from pathlib import Path

from scheduler import Request
from run_scenario import _arrival_coin, build_config, build_simulation, render_state, run_simulation, save_results

SCENARIO = Path(__file__).resolve().parents[1] / "scenarios" / "lobby_morning.json"

TRIP = Request(origin=3, destination=1, passenger_id=7)

SINGLE_TRIP = {
    "building": {"total_floors": 5, "elevator_count": 1},
    "duration": 4,
    "metrics_interval": 1,
    "requests": [{"tick": 0, "origin": 3, "destination": 1, "passenger_id": 7}],
}


class TestScenarioRunner:

    def test_build_config_reads_sections(self):
        config = build_config(
            {
                "building": {"total_floors": 20, "elevator_count": 4},
                "scheduler": {"name": "nearest"},
                "simulation": {"tick_interval": 0.25},
            }
        )
        assert (config.total_floors, config.elevator_count) == (20, 4)
        assert config.scheduler_name == "nearest"
        assert config.tick_interval == 0.25

    def test_scripted_trip_is_delivered(self):
        simulation = build_simulation(SINGLE_TRIP)
        snapshots = run_simulation(simulation, SINGLE_TRIP)
        assert [s["tick"] for s in snapshots] == [1, 2, 3, 4]
        assert snapshots[-1]["delivered"] == 1
        assert snapshots[-1]["average_wait"] == 1.0

    def test_bundled_scenario_runs(self):
        config = json.loads(SCENARIO.read_text())
        simulation = build_simulation(config)
        snapshots = run_simulation(simulation, config)
        assert len(snapshots) == config["duration"] // config["metrics_interval"]
        assert snapshots[-1]["dispatched"] >= len(config["requests"])

    def test_bundled_scenario_is_repeatable(self):
        config = json.loads(SCENARIO.read_text())
        first = run_simulation(build_simulation(config), config)
        second = run_simulation(build_simulation(config), config)
        assert first == second

    def test_arrival_coin_is_independent_of_trip_stream(self):
        config = {"traffic": {"random_seed": 7}}
        coin, trips = _arrival_coin(config), random.Random(7)
        assert [coin.random() for _ in range(5)] != [trips.random() for _ in range(5)]
        assert _arrival_coin(config).random() == _arrival_coin(config).random()

    def test_save_results_writes_json(self, tmp_path):
        output = tmp_path / "out" / "metrics.json"
        save_results(output, {"ticks": 3})
        assert json.loads(output.read_text()) == {"ticks": 3}


class TestRenderState:

    def test_render_shows_elevators_floors_and_shafts(self):
        simulation = build_simulation(SINGLE_TRIP)
        simulation.controller.submit(TRIP)
        simulation.step()
        text = render_state(simulation.current_state())
        assert "Elevator 0:" in text
        assert "Direction: UP" in text
        assert "From Floor: 3, To Floor: 1, Passenger ID: 7" in text
        assert "Floor  2:  []" in text
        assert "Riding elevator 0: -" in text

    def test_render_lists_riders(self):
        simulation = build_simulation(SINGLE_TRIP)
        simulation.controller.submit(TRIP)
        simulation.run(2)
        assert "Riding elevator 0: 7" in render_state(simulation.current_state())
