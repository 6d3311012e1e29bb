from __future__ import annotations

from typing import List, Optional, Sequence

from pygame.math import Vector2

from ..core.errors import DegenerateInputError
from ..utils.rng import DeterministicRng
from .disc import Disc

_DEFAULT_RNG = DeterministicRng()


def minimal_enclosing_disc(points: Sequence[Vector2], rng: Optional[DeterministicRng] = None) -> Disc:
    """
    Smallest disc containing every point, by the randomized incremental algorithm.

    The input is copied before shuffling; the expected running time is linear
    for a uniformly random order.
    """

    if len(points) < 2:
        raise DegenerateInputError(f"An enclosing disc needs at least 2 points, got {len(points)}")
    shuffled = (rng or _DEFAULT_RNG).shuffled([Vector2(point) for point in points])

    disc = Disc.from_two_points(shuffled[0], shuffled[1])
    for i in range(2, len(shuffled)):
        if not disc.contains(shuffled[i]):
            disc = _min_disc_with_point(shuffled[:i], shuffled[i])
    return disc


def _min_disc_with_point(points: List[Vector2], q: Vector2) -> Disc:
    disc = Disc.from_two_points(points[0], q)
    for j in range(1, len(points)):
        if not disc.contains(points[j]):
            disc = _min_disc_with_two_points(points[:j], points[j], q)
    return disc


def _min_disc_with_two_points(points: List[Vector2], q1: Vector2, q2: Vector2) -> Disc:
    disc = Disc.from_two_points(q1, q2)
    for point in points:
        if not disc.contains(point):
            disc = Disc.from_three_points(q1, q2, point)
    return disc
