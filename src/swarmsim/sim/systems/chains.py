from __future__ import annotations

from typing import Dict, List, Sequence, Set

from ..core.robot import Robot
from .visibility import extremes_1d

PALETTE: tuple[str, ...] = (
    "blue",
    "lime",
    "crimson",
    "brown",
    "turquoise",
    "indigo",
    "olive",
    "teal",
    "cyan",
    "cornflowerblue",
    "pink",
    "orange",
    "silver",
    "black",
)


def chain_indices(state: Sequence[Robot], vision_range: float) -> List[int]:
    """
    Mutual chain index of every robot, scanning left to right over ``state`` sorted by ``x``.

    A robot joins the chain of its leftmost neighbour when that neighbour sees
    it as its own rightmost neighbour; otherwise it starts a new chain.

    Example with a vision range of 10 and x = [0, 10, 20, 25, 30, 32, 34, 36]:
    chains are (0, 10, 20, 30, 36), (25, 34) and (32).
    """

    # rightmost label -> labels for which it is the rightmost visible robot
    right_mosts: Dict[str, Set[str]] = {}
    chain_of: Dict[str, int] = {}
    indices: List[int] = []
    next_chain = 0

    for index, robot in enumerate(state):
        left_most, right_most = extremes_1d(state, index, vision_range)

        right_most_to = right_mosts.get(robot.label)
        if right_most_to and left_most.label in right_most_to:
            chain = chain_of[left_most.label]
        else:
            chain = next_chain
            next_chain += 1
        chain_of[robot.label] = chain
        indices.append(chain)

        right_mosts.setdefault(right_most.label, set()).add(robot.label)

    return indices


def classify_chains(
    state: Sequence[Robot],
    vision_range: float,
    palette: Sequence[str] = PALETTE,
) -> List[Robot]:
    # Colours cycle once the palette is exhausted.
    indices = chain_indices(state, vision_range)
    return [robot.with_colour(palette[chain % len(palette)]) for robot, chain in zip(state, indices)]


def count_chains(state: Sequence[Robot], vision_range: float) -> int:
    indices = chain_indices(state, vision_range)
    return max(indices) + 1 if indices else 0
