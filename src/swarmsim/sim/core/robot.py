from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional

from pygame.math import Vector2

from .errors import InvalidStateError


@dataclass(frozen=True, slots=True)
class Robot:
    label: str
    x: float
    y: Optional[float] = None
    faulty: bool = False
    colour: Optional[str] = None

    @property
    def position(self) -> Vector2:
        return Vector2(self.x, 0.0 if self.y is None else self.y)

    def moved_to(self, x: float, y: Optional[float] = None) -> "Robot":
        if self.faulty:
            return self
        if y is None:
            return replace(self, x=x)
        return replace(self, x=x, y=y)

    def with_colour(self, colour: Optional[str]) -> "Robot":
        return replace(self, colour=colour)

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"label": self.label, "x": self.x}
        if self.y is not None:
            payload["y"] = self.y
        payload["faulty"] = self.faulty
        if self.colour is not None:
            payload["colour"] = self.colour
        return payload

    @classmethod
    def from_payload(cls, raw: Any) -> "Robot":
        if not isinstance(raw, dict):
            raise InvalidStateError(f"Robot must be an object, got {type(raw).__name__}")
        label = raw.get("label")
        if not isinstance(label, str) or not label:
            raise InvalidStateError(f"Robot label must be a non-empty string, got {label!r}")
        x = _coordinate(raw.get("x"), label, "x")
        y = None if raw.get("y") is None else _coordinate(raw.get("y"), label, "y")
        faulty = raw.get("faulty", False)
        if not isinstance(faulty, bool):
            raise InvalidStateError(f"Robot {label!r}: faulty must be a boolean")
        colour = raw.get("colour")
        return cls(label=label, x=x, y=y, faulty=faulty, colour=colour if isinstance(colour, str) else None)


def _coordinate(value: Any, label: str, axis: str) -> float:
    # bool is an int subclass but never a coordinate
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidStateError(f"Robot {label!r}: {axis} must be a number, got {value!r}")
    coordinate = float(value)
    if not math.isfinite(coordinate):
        raise InvalidStateError(f"Robot {label!r}: {axis} must be finite")
    return coordinate
