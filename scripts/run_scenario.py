"""CLI for running elevator dispatch scenarios defined in JSON configs."""
from __future__ import annotations

import argparse
import json
import logging
import random
from dataclasses import asdict
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from simulation import Request, RequestGenerator, Simulation, SimulationConfig


def build_config(config: Dict) -> SimulationConfig:
    building_cfg = config.get("building", {})
    scheduler_cfg = config.get("scheduler", {})
    return SimulationConfig.from_dict(
        {
            "total_floors": building_cfg.get("total_floors", 12),
            "elevator_count": building_cfg.get("elevator_count", 2),
            "scheduler_name": scheduler_cfg.get("name", "scoring"),
            "scheduler_options": scheduler_cfg.get("options", {}),
            **config.get("simulation", {}),
        }
    )


def build_simulation(config: Dict) -> Simulation:
    return Simulation.from_config(build_config(config))


def _scripted_requests(config: Dict) -> Dict[int, List[Request]]:
    scheduled: Dict[int, List[Request]] = {}
    for index, entry in enumerate(config.get("requests", [])):
        request = Request(
            origin=entry["origin"],
            destination=entry["destination"],
            passenger_id=entry.get("passenger_id", index),
        )
        scheduled.setdefault(entry.get("tick", 0), []).append(request)
    return scheduled


def _random_traffic(config: Dict, total_floors: int, offset: int) -> Optional[RequestGenerator]:
    traffic_cfg = config.get("traffic")
    if not traffic_cfg:
        return None
    return RequestGenerator(
        total_floors=total_floors,
        random_seed=traffic_cfg.get("random_seed"),
        first_passenger_id=offset,
    )


def _arrival_coin(config: Dict) -> random.Random:
    """Decides whether a random trip arrives this tick; seeded apart from the trip generator."""
    seed = config.get("traffic", {}).get("random_seed")
    return random.Random(None if seed is None else f"arrivals-{seed}")


def run_simulation(simulation: Simulation, config: Dict) -> List[Dict]:
    duration = config.get("duration", 60)
    metrics_interval = max(1, config.get("metrics_interval", 10))
    scheduled = _scripted_requests(config)
    controller = simulation.controller
    generator = _random_traffic(config, controller.total_floors, offset=len(config.get("requests", [])))
    rate = config.get("traffic", {}).get("requests_per_tick", 0.0)
    coin = _arrival_coin(config)
    snapshots: List[Dict] = []

    for _ in range(duration):
        for request in scheduled.get(simulation.current_tick, []):
            controller.submit(request)
        if generator is not None and coin.random() < rate:
            controller.submit(generator.next_request())
        simulation.step()
        if simulation.current_tick % metrics_interval == 0:
            snapshots.append(asdict(controller.metrics.snapshot(simulation.current_tick)))
    return snapshots


def run_realtime(simulation: Simulation, sim_config: SimulationConfig) -> None:
    generator = RequestGenerator(
        total_floors=sim_config.total_floors,
        submit=simulation.controller.submit,
        min_delay=sim_config.min_request_delay,
        max_delay=sim_config.max_request_delay,
        random_seed=sim_config.random_seed,
    )
    simulation.on_event("tick", lambda payload: print(render_state(payload["state"])))
    simulation.run_for(sim_config.run_duration, generator)


def render_state(state: Dict) -> str:
    """Text view of a controller snapshot: elevator list, floor queues and a shaft diagram."""
    lines: List[str] = [f"Tick {state['tick']} ({state['scheduler']})", "Elevator Information:"]
    for elevator in state["elevators"]:
        lines.append(f"Elevator {elevator['id']}:")
        lines.append(f"  Current Floor: {elevator['current_floor']}")
        lines.append(f"  Direction: {elevator['motion_state']}")
        lines.append("  Requests:")
        for stop in elevator["queue"]:
            lines.append(
                f"    Floor: {stop['floor']}, Passenger ID: {stop['passenger_id']}, "
                f"Purpose: {stop['kind']}, Priority: {stop['priority']}"
            )

    lines.append("Information about people waiting on the floors:")
    for floor in reversed(state["floors"]):
        lines.append(f"Floor {floor['floor']} Requests:")
        for request in floor["waiting"]:
            lines.append(
                f"  From Floor: {request['origin']}, To Floor: {request['destination']}, "
                f"Passenger ID: {request['passenger_id']}"
            )

    lines.append("")
    lines.append("Floors     Elevators  Waiting")
    for floor in reversed(state["floors"]):
        shafts = "".join(
            "[]" if elevator["current_floor"] == floor["floor"] else "| "
            for elevator in state["elevators"]
        )
        lines.append(f"Floor {floor['floor']:2d}:  {shafts:<10} {'P' * len(floor['waiting'])}")
    for elevator in state["elevators"]:
        riders = _riders(elevator["queue"])
        lines.append(f"Riding elevator {elevator['id']}: {' '.join(map(str, riders)) or '-'}")
    return "\n".join(lines)


def _riders(queue: Iterable[Dict]) -> List[int]:
    return [stop["passenger_id"] for stop in queue if stop["kind"] == "DROP_OFF"]


def save_results(output_path: Optional[Path], data: Dict) -> None:
    if not output_path:
        return
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(data, indent=2))


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("config", type=Path, help="Path to a JSON scenario configuration file")
    parser.add_argument(
        "--output",
        type=Path,
        help="Optional file path to write metrics snapshots as JSON",
    )
    parser.add_argument("--realtime", action="store_true", help="Run threaded with random traffic")
    parser.add_argument("--show-state", action="store_true", help="Print the final building state")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every assignment and arrival")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = json.loads(args.config.read_text())
    sim_config = build_config(config)
    simulation = Simulation.from_config(sim_config)

    if args.realtime:
        run_realtime(simulation, sim_config)
        snapshots: List[Dict] = []
    else:
        snapshots = run_simulation(simulation, config)

    final_metrics = asdict(simulation.controller.metrics.snapshot(simulation.current_tick))
    results = {
        "scenario": config.get("name", args.config.stem),
        "description": config.get("description"),
        "ticks": simulation.current_tick,
        "scheduler": simulation.controller.scheduler_name,
        "final_metrics": final_metrics,
        "metrics_over_time": snapshots,
    }

    save_results(args.output, results)

    print(f"Scenario: {results['scenario']}")
    if results["description"]:
        print(results["description"])
    print(f"Scheduler: {results['scheduler']}")
    print(f"Duration: {results['ticks']} ticks")
    print("Final metrics:")
    for key, value in final_metrics.items():
        print(f"  {key}: {value}")
    if args.show_state:
        print(render_state(simulation.current_state()))
    if args.output:
        print(f"Saved metrics to {args.output}")


if __name__ == "__main__":
    main()
