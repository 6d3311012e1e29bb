from __future__ import annotations

import logging
from typing import Iterator, Optional, Sequence

from ...config import SimulationConfig
from ..types.generation import Generation
from ..types.policy import NextPosition
from ..utils.rng import DeterministicRng
from . import engine1d, engine2d
from .errors import InvalidStateError
from .generations import Stepper, iter_generations, validate_range, validate_state
from .robot import Robot

logger = logging.getLogger(__name__)


class Simulation:
    def __init__(self, config: SimulationConfig):
        self.config = config
        self.policy = config.next_position
        self._rng = DeterministicRng(config.seed)

    def reset(self) -> None:
        self.policy = self.config.next_position
        self._rng.reset()

    def set_policy(self, value: object) -> NextPosition:
        policy = NextPosition.from_value(value)
        if policy is not self.policy:
            logger.info("Next position policy changed from %s to %s", self.policy.value, policy.value)
        self.policy = policy
        return policy

    def stepper(
        self,
        vision_range: float,
        dimension: Optional[int] = None,
        preserve_connectivity: Optional[bool] = None,
    ) -> Stepper:
        dimension = self.config.dimension if dimension is None else dimension
        if dimension == 1:
            palette = self.config.palette
            # self.policy is read when each generation starts
            return lambda state: engine1d.step(state, vision_range, self.policy, palette)
        if dimension == 2:
            preserve = self.config.preserve_connectivity if preserve_connectivity is None else preserve_connectivity
            return lambda state: engine2d.step(state, vision_range, preserve, self._rng)
        raise InvalidStateError(f"Dimension must be 1 or 2, got {dimension!r}")

    def initial_generation(self, robots: Sequence[Robot], dimension: Optional[int] = None) -> Generation:
        dimension = self.config.dimension if dimension is None else dimension
        if len(robots) < self.config.min_robots:
            raise InvalidStateError(f"At least {self.config.min_robots} robots are required, got {len(robots)}")
        validate_state(robots, planar=dimension == 2)
        ordered = sorted(robots, key=lambda robot: robot.x) if dimension == 1 else list(robots)
        return Generation(iteration=0, robots=tuple(ordered))

    def generate(
        self,
        iteration: int,
        todo: int,
        state: Sequence[Robot],
        vision_range: Optional[float] = None,
        dimension: Optional[int] = None,
        preserve_connectivity: Optional[bool] = None,
    ) -> Iterator[Generation]:
        if iteration < 1:
            raise InvalidStateError(f"Iteration must be at least 1, got {iteration}")
        if todo < 0:
            raise InvalidStateError(f"Generation count must not be negative, got {todo}")
        vision_range = validate_range(self.config.vision_range if vision_range is None else vision_range)
        step = self.stepper(vision_range, dimension, preserve_connectivity)
        logger.debug("Generating %d generation(s) from iteration %d with range %s", todo, iteration, vision_range)
        return iter_generations(iteration, todo, state, step)
