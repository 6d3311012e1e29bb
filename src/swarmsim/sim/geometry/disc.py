from __future__ import annotations

import math
import sys
from dataclasses import dataclass
from typing import Sequence

from pygame.math import Vector2

from ..core.errors import DegenerateInputError

# Relative slack for points that land on the boundary up to rounding.
CONTAINS_EPSILON = 1e-9

# Rounding of a coordinate difference, relative to the coordinates.
SUBTRACTION_EPSILON = 16 * sys.float_info.epsilon


@dataclass(frozen=True)
class Disc:
    center: Vector2
    radius_squared: float

    @classmethod
    def from_two_points(cls, p1: Vector2, p2: Vector2) -> "Disc":
        center = Vector2((p1.x + p2.x) / 2, (p1.y + p2.y) / 2)
        return cls(center, (p1.x - center.x) ** 2 + (p1.y - center.y) ** 2)

    @classmethod
    def from_three_points(cls, p1: Vector2, p2: Vector2, p3: Vector2) -> "Disc":
        """
        Circumscribed disc of three points.

        Expands the determinant of the 4x4 matrix whose rows are
        (x² + y², x, y, 1) for a generic point and the three given points,
        using its cofactors along the first row. Coordinates are taken relative
        to p1, which drops every term of p1 and keeps far-off points precise.
        """

        x2, y2 = p2.x - p1.x, p2.y - p1.y
        x3, y3 = p3.x - p1.x, p3.y - p1.y
        a2 = x2 * x2 + y2 * y2
        a3 = x3 * x3 + y3 * y3

        m11 = x2 * y3 - y2 * x3
        if m11 == 0.0:
            raise DegenerateInputError(f"Points {tuple(p1)}, {tuple(p2)}, {tuple(p3)} are collinear")
        m12 = a2 * y3 - y2 * a3
        m13 = a2 * x3 - x2 * a3

        x = m12 / m11 / 2
        y = -m13 / m11 / 2
        # p1 is the origin and lies on the circle
        radius_squared = x * x + y * y
        if not (math.isfinite(x) and math.isfinite(y) and math.isfinite(radius_squared)):
            raise DegenerateInputError(f"Points {tuple(p1)}, {tuple(p2)}, {tuple(p3)} are nearly collinear")
        return cls(Vector2(p1.x + x, p1.y + y), radius_squared)

    @property
    def radius(self) -> float:
        return math.sqrt(self.radius_squared)

    def contains(self, point: Vector2) -> bool:
        dx = point.x - self.center.x
        dy = point.y - self.center.y
        scale = max(abs(point.x), abs(point.y), abs(self.center.x), abs(self.center.y))
        slack = CONTAINS_EPSILON * self.radius_squared + SUBTRACTION_EPSILON * scale * self.radius
        return dx * dx + dy * dy <= self.radius_squared + slack


def compute_disc(points: Sequence[Vector2]) -> Disc:
    if len(points) == 2:
        return Disc.from_two_points(points[0], points[1])
    if len(points) == 3:
        return Disc.from_three_points(points[0], points[1], points[2])
    raise DegenerateInputError(f"A boundary disc needs 2 or 3 points, got {len(points)}")
