from __future__ import annotations

import random
from typing import List, Optional, TypeVar

T = TypeVar("T")


class DeterministicRng:
    def __init__(self, seed: Optional[int] = None):
        self._seed = seed
        self._random = random.Random(seed)

    def reset(self) -> None:
        self._random.seed(self._seed)

    def shuffled(self, items: List[T]) -> List[T]:
        owned = list(items)
        self._random.shuffle(owned)
        return owned
