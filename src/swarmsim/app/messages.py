from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..sim.core.errors import InvalidStateError
from ..sim.core.generations import validate_range
from ..sim.core.robot import Robot


@dataclass(frozen=True)
class GenerateRequest:
    iteration: int
    todo: int
    state: List[Robot]
    vision_range: float
    dimension: Optional[int] = None
    preserve_connectivity: Optional[bool] = None


def _integer(payload: Dict[str, Any], key: str, minimum: int) -> int:
    value = payload.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidStateError(f"{key!r} must be an integer, got {value!r}")
    if value < minimum:
        raise InvalidStateError(f"{key!r} must be at least {minimum}, got {value}")
    return value


def parse_generate_request(payload: Dict[str, Any]) -> GenerateRequest:
    state = payload.get("state")
    if not isinstance(state, list):
        raise InvalidStateError("'state' must be a list of robots")
    dimension = payload.get("dimension")
    if dimension is not None and dimension not in (1, 2):
        raise InvalidStateError(f"'dimension' must be 1 or 2, got {dimension!r}")
    connectivity = payload.get("connectivity")
    if connectivity is not None and not isinstance(connectivity, bool):
        raise InvalidStateError("'connectivity' must be a boolean")
    return GenerateRequest(
        iteration=_integer(payload, "iter", 1),
        todo=_integer(payload, "todo", 0),
        state=[Robot.from_payload(raw) for raw in state],
        vision_range=validate_range(payload.get("range")),
        dimension=dimension,
        preserve_connectivity=connectivity,
    )


def error_message(message: str) -> Dict[str, Any]:
    return {"type": "error", "message": message}
