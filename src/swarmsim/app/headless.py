from __future__ import annotations

import argparse
import csv
import json
import logging
from dataclasses import asdict, replace
from pathlib import Path
from typing import Any, List, Optional

import yaml

from ..config import AppConfig, SimulationConfig
from ..sim.core.driver import GenerationDriver
from ..sim.core.errors import InvalidStateError
from ..sim.core.robot import Robot
from ..sim.core.simulation import Simulation
from ..sim.systems.metrics import create_metrics
from ..sim.types.generation import Generation
from ..sim.types.metrics import GenerationMetrics

logger = logging.getLogger(__name__)

_ROBOT_HEADER = ["iter", "label", "x", "y", "faulty", "colour"]

_METRICS_HEADER = ["iter", "population", "faulty", "moved", "max_step", "spread", "chains"]

# spread below which the swarm counts as gathered
CONVERGENCE_TOLERANCE = 1e-6


def load_scenario(path: Path) -> List[Robot]:
    """Read an initial robot list in the wire shape, from JSON or YAML."""

    text = Path(path).read_text()
    raw: Any = json.loads(text) if Path(path).suffix == ".json" else yaml.safe_load(text)
    if isinstance(raw, dict):
        raw = raw.get("robots")
    if not isinstance(raw, list):
        raise InvalidStateError(f"Scenario {path} must be a list of robots or contain a 'robots' list")
    return [Robot.from_payload(item) for item in raw]


def _format_robot_row(generation: Generation, robot: Robot) -> list[object]:
    return [
        generation.iteration,
        robot.label,
        f"{robot.x:.6f}",
        "" if robot.y is None else f"{robot.y:.6f}",
        int(robot.faulty),
        robot.colour or "",
    ]


def _format_metrics_row(metrics: GenerationMetrics) -> list[object]:
    return [
        metrics.iteration,
        metrics.population,
        metrics.faulty,
        metrics.moved,
        f"{metrics.max_step:.6f}",
        f"{metrics.spread:.6f}",
        metrics.chains,
    ]


def run_headless(
    scenario: List[Robot],
    generations: int,
    config: Optional[SimulationConfig] = None,
    log_path: Optional[Path] = None,
    metrics_path: Optional[Path] = None,
    summary_path: Optional[Path] = None,
) -> Generation:
    config = config or SimulationConfig()
    simulation = Simulation(config)
    driver = GenerationDriver(simulation)
    initial = driver.start(scenario)
    logger.info(
        "Running %d generation(s) of %d robot(s) in %dD with range %s",
        generations,
        len(initial.robots),
        config.dimension,
        config.vision_range,
    )

    robot_writer = None
    robot_file = None
    if log_path:
        robot_file = Path(log_path).open("w", newline="")
        robot_writer = csv.writer(robot_file)
        robot_writer.writerow(_ROBOT_HEADER)
        for robot in initial.robots:
            robot_writer.writerow(_format_robot_row(initial, robot))

    metrics_writer = None
    metrics_file = None
    if metrics_path:
        metrics_file = Path(metrics_path).open("w", newline="")
        metrics_writer = csv.writer(metrics_file)
        metrics_writer.writerow(_METRICS_HEADER)

    history: List[GenerationMetrics] = []
    previous = initial
    try:
        for _ in range(generations):
            generation = driver.next_generation()
            metrics = create_metrics(generation, previous, config.vision_range)
            history.append(metrics)
            if robot_writer:
                for robot in generation.robots:
                    robot_writer.writerow(_format_robot_row(generation, robot))
            if metrics_writer:
                metrics_writer.writerow(_format_metrics_row(metrics))
            previous = generation
    finally:
        if robot_file:
            robot_file.close()
        if metrics_file:
            metrics_file.close()

    if summary_path:
        initial_metrics = create_metrics(initial, None, config.vision_range)
        final = history[-1] if history else initial_metrics
        converged_at = next((m.iteration for m in history if m.spread <= CONVERGENCE_TOLERANCE), None)
        summary = {
            "generations": generations,
            "dimension": config.dimension,
            "vision_range": config.vision_range,
            "next_position": config.next_position.value,
            "preserve_connectivity": config.preserve_connectivity,
            "seed": config.seed,
            "initial": asdict(initial_metrics),
            "final": asdict(final),
            "converged": converged_at is not None,
            "converged_at": converged_at,
            "final_state": [robot.to_payload() for robot in previous.robots],
        }
        Path(summary_path).write_text(json.dumps(summary, indent=2))

    logger.info("Finished at iteration %d", previous.iteration)
    return previous


def main() -> None:
    parser = argparse.ArgumentParser(description="Headless swarm convergence simulation")
    parser.add_argument("--scenario", type=Path, required=True, help="JSON or YAML list of robots")
    parser.add_argument("--generations", type=int, default=50)
    parser.add_argument("--config", type=Path, default=None, help="YAML simulation config")
    parser.add_argument("--dimension", type=int, choices=[1, 2], default=None)
    parser.add_argument("--range", dest="vision_range", type=float, default=None, help="Vision range of every robot")
    parser.add_argument("--next-position", choices=["all", "extremes"], default=None)
    parser.add_argument(
        "--no-connectivity",
        action="store_true",
        help="In 2D, move straight to the enclosing disc centre instead of the bounded step.",
    )
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--log", type=Path, default=None, help="CSV file to write robot positions")
    parser.add_argument("--metrics", type=Path, default=None, help="CSV file to write per-generation metrics")
    parser.add_argument("--summary", type=Path, default=None, help="Optional JSON file to write a run summary.")
    args = parser.parse_args()

    app_config = AppConfig.from_yaml(args.config) if args.config else AppConfig()
    logging.basicConfig(level=app_config.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    overrides: dict[str, Any] = {
        "dimension": args.dimension,
        "vision_range": args.vision_range,
        "next_position": args.next_position,
        "seed": args.seed,
    }
    if args.no_connectivity:
        overrides["preserve_connectivity"] = False
    config = replace(app_config.simulation, **{k: v for k, v in overrides.items() if v is not None})

    run_headless(
        load_scenario(args.scenario),
        args.generations,
        config=config,
        log_path=args.log,
        metrics_path=args.metrics,
        summary_path=args.summary,
    )


if __name__ == "__main__":
    main()
