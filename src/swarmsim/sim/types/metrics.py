from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class GenerationMetrics:
    iteration: int
    population: int
    faulty: int
    moved: int
    max_step: float
    spread: float
    chains: int
