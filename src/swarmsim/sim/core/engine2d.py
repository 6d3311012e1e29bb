from __future__ import annotations

import math
from typing import List, Optional, Sequence

from pygame.math import Vector2

from ..geometry.enclosing import minimal_enclosing_disc
from ..geometry.vector import Vector2D
from ..systems.visibility import unique_positions, visible_2d
from ..utils.rng import DeterministicRng
from .generations import validate_range, validate_state
from .robot import Robot


def max_step_towards(robot: Robot, target: Vector2, neighbors: Sequence[Robot], vision_range: float) -> Vector2:
    """
    Point on the segment robot -> target as far as every neighbour allows.

    Each neighbour j at distance d_j bounds the step to
    l_j = (d_j / 2) cos θ_j + sqrt((v / 2)² - (d_j / 2 · sin θ_j)²),
    which keeps the robot within v / 2 of the midpoint it shares with j.
    A negative radicand is clamped to 0 and so is a negative bound.
    """

    current = robot.position
    heading = Vector2D(current, target)
    if heading.norm == 0.0:
        return current

    half_range = vision_range / 2
    limit = heading.norm
    for neighbor in neighbors:
        if neighbor.label == robot.label:
            continue
        towards = Vector2D(current, neighbor.position)
        if towards.norm == 0.0:
            continue
        cos_theta, sin_theta = heading.cos_and_sin(towards)
        half_distance = towards.norm / 2
        radicand = half_range * half_range - (half_distance * sin_theta) ** 2
        bound = half_distance * cos_theta + math.sqrt(max(0.0, radicand))
        limit = min(limit, max(0.0, bound))

    return heading.resize(limit).end


def next_position(
    state: Sequence[Robot],
    robot: Robot,
    vision_range: float,
    preserve_connectivity: bool,
    rng: Optional[DeterministicRng] = None,
) -> Optional[Vector2]:
    visible = visible_2d(state, robot, vision_range)
    distinct = unique_positions(visible)
    if len(distinct) < 2:
        return None
    target = minimal_enclosing_disc([other.position for other in distinct], rng).center
    if preserve_connectivity:
        return max_step_towards(robot, target, visible, vision_range)
    return target


def step(
    state: Sequence[Robot],
    vision_range: float,
    preserve_connectivity: bool = True,
    rng: Optional[DeterministicRng] = None,
) -> List[Robot]:
    vision_range = validate_range(vision_range)
    validate_state(state, planar=True)

    moved: List[Robot] = []
    for robot in state:
        if robot.faulty:
            moved.append(robot)
            continue
        target = next_position(state, robot, vision_range, preserve_connectivity, rng)
        moved.append(robot if target is None else robot.moved_to(target.x, target.y))
    return moved
