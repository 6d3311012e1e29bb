from __future__ import annotations

import logging
from typing import Dict, Optional, Sequence

from ..types.generation import Generation
from .robot import Robot
from .simulation import Simulation

logger = logging.getLogger(__name__)


class GenerationDriver:
    """
    Caches generations and asks the simulation for them one batch at a time.

    When the last generation of a batch is consumed the next batch is computed
    from it, so the following generation is already cached when asked for.
    """

    def __init__(self, simulation: Simulation, vision_range: Optional[float] = None):
        self.simulation = simulation
        self.vision_range = simulation.config.vision_range if vision_range is None else vision_range
        self.batch_size = simulation.config.batch_size
        self.iteration = 0
        self.states: Dict[int, Generation] = {}

    def start(self, robots: Sequence[Robot]) -> Generation:
        self.states.clear()
        self.iteration = 0
        initial = self.simulation.initial_generation(robots)
        self.states[0] = initial
        self._request(1)
        return initial

    def next_generation(self) -> Generation:
        if 0 not in self.states:
            raise RuntimeError("GenerationDriver.start() must be called first")
        self.iteration += 1
        i = self.iteration
        if i not in self.states:
            self._request(i)
        generation = self.states[i]
        if i % self.batch_size == 0 and i + 1 not in self.states:
            self._request(i + 1)
        return generation

    def generation(self, iteration: int) -> Generation:
        return self.states[iteration]

    @property
    def latest(self) -> Generation:
        return self.states[max(self.states)]

    def _request(self, first_iteration: int) -> None:
        base = self.states[first_iteration - 1]
        logger.debug("Requesting generations %d..%d", first_iteration, first_iteration + self.batch_size - 1)
        for generation in self.simulation.generate(first_iteration, self.batch_size, base.robots, self.vision_range):
            self.states[generation.iteration] = generation
