from __future__ import annotations

import math
from typing import Optional

from ..core.errors import DegenerateInputError
from ..geometry.enclosing import minimal_enclosing_disc
from ..types.generation import Generation
from ..types.metrics import GenerationMetrics
from ..utils.rng import DeterministicRng
from .chains import count_chains
from .visibility import unique_positions


def create_metrics(
    generation: Generation,
    previous: Optional[Generation],
    vision_range: float,
    rng: Optional[DeterministicRng] = None,
) -> GenerationMetrics:
    robots = generation.robots
    planar = any(robot.y is not None for robot in robots)
    before = {robot.label: robot for robot in previous.robots} if previous is not None else {}

    moved = 0
    max_step = 0.0
    for robot in robots:
        old = before.get(robot.label)
        if old is None:
            continue
        step = math.hypot(robot.x - old.x, (robot.y or 0.0) - (old.y or 0.0))
        if step > 0.0:
            moved += 1
            max_step = max(max_step, step)

    return GenerationMetrics(
        iteration=generation.iteration,
        population=len(robots),
        faulty=sum(1 for robot in robots if robot.faulty),
        moved=moved,
        max_step=max_step,
        spread=_planar_spread(generation, rng) if planar else _line_spread(generation),
        chains=0 if planar else count_chains(robots, vision_range),
    )


def _line_spread(generation: Generation) -> float:
    if not generation.robots:
        return 0.0
    xs = [robot.x for robot in generation.robots]
    return max(xs) - min(xs)


def _planar_spread(generation: Generation, rng: Optional[DeterministicRng]) -> float:
    distinct = unique_positions(generation.robots)
    if len(distinct) < 2:
        return 0.0
    try:
        disc = minimal_enclosing_disc([robot.position for robot in distinct], rng)
    except DegenerateInputError:
        # rounding can drive the solver into a collinear triple; use the bounding box diagonal
        xs = [robot.x for robot in distinct]
        ys = [robot.y or 0.0 for robot in distinct]
        return math.hypot(max(xs) - min(xs), max(ys) - min(ys))
    return 2.0 * disc.radius
