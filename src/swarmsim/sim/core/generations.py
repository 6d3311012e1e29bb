from __future__ import annotations

import math
from typing import Any, Callable, Iterator, List, Sequence, Set

from ..types.generation import Generation
from .errors import InvalidStateError
from .robot import Robot

Stepper = Callable[[Sequence[Robot]], List[Robot]]


def validate_range(vision_range: Any) -> float:
    if isinstance(vision_range, bool) or not isinstance(vision_range, (int, float)):
        raise InvalidStateError(f"Vision range must be a number, got {vision_range!r}")
    value = float(vision_range)
    if not math.isfinite(value) or value <= 0:
        raise InvalidStateError(f"Vision range must be positive and finite, got {vision_range!r}")
    return value


def validate_state(state: Sequence[Robot], planar: bool = False) -> None:
    if not state:
        raise InvalidStateError("State must contain at least one robot")
    seen: Set[str] = set()
    for robot in state:
        if robot.label in seen:
            raise InvalidStateError(f"Duplicate robot label {robot.label!r}")
        seen.add(robot.label)
        if not math.isfinite(robot.x):
            raise InvalidStateError(f"Robot {robot.label!r}: x must be finite")
        if planar:
            if robot.y is None:
                raise InvalidStateError(f"Robot {robot.label!r}: y is required in 2D")
            if not math.isfinite(robot.y):
                raise InvalidStateError(f"Robot {robot.label!r}: y must be finite")


def iter_generations(iteration: int, todo: int, state: Sequence[Robot], step: Stepper) -> Iterator[Generation]:
    """
    Yield ``todo`` successive generations starting at ``iteration``.

    Each generation is derived only from the one before it and is yielded as
    soon as it is computed.
    """

    current: Sequence[Robot] = state
    for offset in range(todo):
        current = step(current)
        yield Generation(iteration=iteration + offset, robots=tuple(current))
