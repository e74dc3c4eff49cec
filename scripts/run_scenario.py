"""CLI for running offline dispatch scenarios defined in JSON configs."""
from __future__ import annotations

import argparse
import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Dict, List, Optional

from dispatch import DispatchConfig
from simulation import Building, Elevator, ElevatorConstraints, Simulation


def build_simulation(config: Dict) -> Simulation:
    building_cfg = config.get("building", {})
    num_floors = building_cfg.get("num_floors", 10)
    elevator_count = building_cfg.get("elevator_count", 2)
    constraints = ElevatorConstraints(**building_cfg.get("constraints", {}))

    building = Building(
        num_floors=num_floors,
        elevators=[Elevator(i) for i in range(elevator_count)],
        elevator_constraints=constraints,
        dispatch_config=DispatchConfig.from_dict(config.get("dispatch", {})),
    )
    return Simulation(
        building=building,
        arrival_rate_per_floor=config.get("arrival_rate_per_floor", 0.05),
        random_seed=config.get("random_seed"),
        metrics_hook_interval=config.get("metrics_hook_interval", 10),
    )


def run_simulation(simulation: Simulation, config: Dict) -> Dict[str, List[Dict]]:
    """Run the scenario and collect the periodic metrics and per-tick arrival counts."""
    duration = config.get("duration", 300)
    snapshots: List[Dict] = []
    arrivals: List[Dict] = []
    simulation.on_event("metrics", lambda payload: snapshots.append(asdict(payload["metrics"])))
    simulation.on_event("arrival", arrivals.append)
    simulation.run(duration)
    drain = config.get("drain", 0)
    if drain and not simulation.drain(drain):
        logging.getLogger(__name__).warning(
            "%d passengers still waiting or riding after draining for %d ticks",
            simulation.building.waiting_count() + simulation.building.riding_count(),
            drain,
        )
    return {"metrics_over_time": snapshots, "arrivals": arrivals}


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
    parser.add_argument("--log-level", default="WARNING", help="Logging level, e.g. DEBUG to trace every decision")
    args = parser.parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    config = json.loads(args.config.read_text())
    simulation = build_simulation(config)
    recorded = run_simulation(simulation, config)

    final_metrics = asdict(simulation.metrics.snapshot(simulation.current_time))
    results = {
        "scenario": config.get("name", args.config.stem),
        "description": config.get("description"),
        "duration": simulation.current_time,
        "picker": simulation.building.picker_name,
        "final_metrics": final_metrics,
        "total_arrivals": sum(item["count"] for item in recorded["arrivals"]),
        **recorded,
    }

    save_results(args.output, results)

    print(f"Scenario: {results['scenario']}")
    if results["description"]:
        print(results["description"])
    print(f"Picker: {results['picker']}")
    print(f"Duration: {results['duration']} ticks")
    print(f"Arrivals: {results['total_arrivals']} passengers")
    print("Final metrics:")
    for key, value in final_metrics.items():
        print(f"  {key}: {value}")
    if args.output:
        print(f"Saved metrics to {args.output}")


if __name__ == "__main__":
    main()
