from __future__ import annotations

from enum import Enum
from typing import Any


class NextPosition(str, Enum):
    ALL_VISIBLE = "all"
    EXTREMES = "extremes"

    @classmethod
    def from_value(cls, value: Any) -> "NextPosition":
        # anything but "all" selects the leftmost/rightmost average
        if isinstance(value, NextPosition):
            return value
        return cls.ALL_VISIBLE if value == "all" else cls.EXTREMES
