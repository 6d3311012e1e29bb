from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Tuple

from ..core.robot import Robot


@dataclass(frozen=True, slots=True)
class Generation:
    iteration: int
    robots: Tuple[Robot, ...]

    def labels(self) -> Tuple[str, ...]:
        return tuple(robot.label for robot in self.robots)

    def robot(self, label: str) -> Robot:
        for robot in self.robots:
            if robot.label == label:
                return robot
        raise KeyError(label)

    def to_message(self) -> Dict[str, Any]:
        return {
            "type": "generate",
            "response": {
                "iter": self.iteration,
                "newState": [robot.to_payload() for robot in self.robots],
            },
        }
