from __future__ import annotations

import math

from pygame.math import Vector2


class Vector2D:
    """Directed segment from ``start`` to ``end``."""

    __slots__ = ("start", "end", "delta", "norm")

    def __init__(self, start: Vector2, end: Vector2):
        self.start = Vector2(start)
        self.end = Vector2(end)
        self.delta = self.end - self.start
        self.norm = math.sqrt(self.delta.x * self.delta.x + self.delta.y * self.delta.y)

    def scalar_product(self, other: "Vector2D") -> float:
        return self.delta.x * other.delta.x + self.delta.y * other.delta.y

    def cos_and_sin(self, other: "Vector2D") -> tuple[float, float]:
        cos_theta = self.scalar_product(other) / (self.norm * other.norm)
        cos_theta = max(-1.0, min(1.0, cos_theta))
        sin_theta = math.sqrt(1.0 - cos_theta * cos_theta)
        return cos_theta, sin_theta

    def resize(self, new_norm: float) -> "Vector2D":
        if self.norm == new_norm:
            return Vector2D(self.start, self.end)
        scale = new_norm / self.norm
        return Vector2D(self.start, self.start + self.delta * scale)
