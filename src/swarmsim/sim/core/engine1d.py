from __future__ import annotations

from typing import List, Sequence

from ..systems.chains import PALETTE, classify_chains
from ..systems.visibility import visible_1d
from ..types.policy import NextPosition
from .generations import validate_range, validate_state
from .robot import Robot


def next_position(state: Sequence[Robot], index: int, vision_range: float, policy: NextPosition) -> float:
    robot = state[index]
    lefts, rights = visible_1d(state, index, vision_range)
    if policy is NextPosition.ALL_VISIBLE:
        considered = [*lefts, robot, *rights]
        return sum(other.x for other in considered) / len(considered)
    left_most = lefts[0] if lefts else robot
    right_most = rights[-1] if rights else robot
    return (left_most.x + right_most.x) / 2


def step(
    state: Sequence[Robot],
    vision_range: float,
    policy: NextPosition = NextPosition.EXTREMES,
    palette: Sequence[str] = PALETTE,
) -> List[Robot]:
    vision_range = validate_range(vision_range)
    validate_state(state)
    ordered = sorted(state, key=lambda robot: robot.x)

    # every target is read from the previous snapshot before anything moves
    targets = [
        robot.x if robot.faulty else next_position(ordered, index, vision_range, policy)
        for index, robot in enumerate(ordered)
    ]
    moved = [robot.moved_to(x) for robot, x in zip(ordered, targets)]
    moved.sort(key=lambda robot: robot.x)

    return classify_chains(moved, vision_range, palette)
