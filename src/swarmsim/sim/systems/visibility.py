from __future__ import annotations

from typing import List, NamedTuple, Sequence

from ..core.robot import Robot

# Robots closer than 1e-10 are the same point for the disc solver.
DUPLICATE_DISTANCE_SQ = 1e-20


class LineNeighbors(NamedTuple):
    lefts: List[Robot]
    rights: List[Robot]


def visible_1d(state: Sequence[Robot], index: int, vision_range: float) -> LineNeighbors:
    """
    Robots visible to ``state[index]`` on a line sorted by ``x``.

    ``lefts[0]`` is the leftmost visible robot and ``rights[-1]`` the rightmost.
    Robots sharing the reference position fall on the side given by their index.
    """

    reference = state[index]
    lefts = [robot for robot in state[:index] if reference.x - robot.x <= vision_range]
    rights: List[Robot] = []
    for robot in state[index + 1 :]:
        if robot.x - reference.x > vision_range:
            break
        rights.append(robot)
    return LineNeighbors(lefts, rights)


def extremes_1d(state: Sequence[Robot], index: int, vision_range: float) -> tuple[Robot, Robot]:
    reference = state[index]
    lefts, rights = visible_1d(state, index, vision_range)
    left_most = lefts[0] if lefts else reference
    right_most = rights[-1] if rights else reference
    return left_most, right_most


def visible_2d(state: Sequence[Robot], reference: Robot, vision_range: float) -> List[Robot]:
    range_sq = vision_range * vision_range
    ref_x = reference.x
    ref_y = reference.y or 0.0
    visible: List[Robot] = []
    for robot in state:
        offset_x = robot.x - ref_x
        offset_y = (robot.y or 0.0) - ref_y
        if offset_x * offset_x + offset_y * offset_y <= range_sq:
            visible.append(robot)
    return visible


def unique_positions(robots: Sequence[Robot]) -> List[Robot]:
    kept: List[Robot] = []
    for robot in robots:
        y = robot.y or 0.0
        duplicate = False
        for other in kept:
            offset_x = robot.x - other.x
            offset_y = y - (other.y or 0.0)
            if offset_x * offset_x + offset_y * offset_y <= DUPLICATE_DISTANCE_SQ:
                duplicate = True
                break
        if not duplicate:
            kept.append(robot)
    return kept
