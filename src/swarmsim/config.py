from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import yaml

from .sim.systems.chains import PALETTE
from .sim.types.policy import NextPosition


@dataclass
class SimulationConfig:
    dimension: int = 1
    vision_range: float = 100.0
    next_position: NextPosition = NextPosition.EXTREMES
    preserve_connectivity: bool = True
    batch_size: int = 10
    min_robots: int = 2
    seed: Optional[int] = None
    palette: List[str] = field(default_factory=lambda: list(PALETTE))

    def __post_init__(self) -> None:
        self.next_position = NextPosition.from_value(self.next_position)
        if self.dimension not in (1, 2):
            raise ValueError(f"dimension must be 1 or 2, got {self.dimension}")
        if self.vision_range <= 0:
            raise ValueError(f"vision_range must be positive, got {self.vision_range}")
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {self.batch_size}")
        if not self.palette:
            raise ValueError("palette must contain at least one colour")

    @staticmethod
    def from_yaml(path: Path) -> "SimulationConfig":
        return load_app_config(yaml.safe_load(Path(path).read_text()) or {}).simulation


@dataclass
class AppConfig:
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    log_level: str = "INFO"

    @staticmethod
    def from_yaml(path: Path) -> "AppConfig":
        return load_app_config(yaml.safe_load(Path(path).read_text()) or {})


def load_config(raw: dict) -> SimulationConfig:
    values = dict(raw)
    if "palette" in values:
        values["palette"] = [str(colour) for colour in values["palette"]]
    if "vision_range" in values:
        values["vision_range"] = float(values["vision_range"])
    return SimulationConfig(**values)


def load_app_config(raw: dict) -> AppConfig:
    # a bare simulation mapping is accepted as well as {simulation: ..., log_level: ...}
    if "simulation" not in raw and "log_level" not in raw:
        return AppConfig(simulation=load_config(raw))
    return AppConfig(
        simulation=load_config(raw.get("simulation") or {}),
        log_level=str(raw.get("log_level", "INFO")).upper(),
    )
