from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from .errors import DimensionError

VARIANTS = ("hedge", "anti_bot", "challenge")

# Hedge mazes need room for a lattice; adversarial variants need room for traps.
MIN_SIZE = {"hedge": 5, "anti_bot": 10, "challenge": 10}


@dataclass
class PlacementWeights:
    """Tunable scoring constants for start/end placement.

    ``path_weight`` dominates so path distance is the primary signal and the
    physical distance only breaks ties. ``mode`` is ``"weighted"`` (absolute
    score) or ``"ratio"`` (path length over Manhattan distance).
    """

    path_weight: float = 3.0
    physical_weight: float = 1.0
    alignment_window: int = 2
    alignment_penalty: float = 15.0
    alignment_step: float = 5.0
    separation_bonus: float = 100.0
    mode: str = "weighted"


@dataclass
class MazeConfig:
    width: int = 21
    height: int = 21
    variant: str = "hedge"
    seed: Optional[int] = None
    max_attempts: int = 20
    enable_metrics: bool = True
    placement_weights: Optional[PlacementWeights] = field(default=None)

    def validate(self) -> None:
        if self.variant not in VARIANTS:
            raise ValueError(f"unknown maze variant {self.variant!r}; expected one of {', '.join(VARIANTS)}")
        minimum = MIN_SIZE[self.variant]
        if self.width < minimum or self.height < minimum:
            raise DimensionError(self.width, self.height, minimum)
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

    def weights(self) -> PlacementWeights:
        if self.placement_weights is not None:
            return self.placement_weights
        # Anti-bot mazes rank pairs by detour ratio rather than raw length
        if self.variant == "anti_bot":
            return PlacementWeights(path_weight=10.0, physical_weight=0.01, mode="ratio")
        return PlacementWeights()

    @classmethod
    def from_env(cls, **overrides: Any) -> "MazeConfig":
        """Build a config from ``MAZEGEN_*`` variables (and a .env file if present).

        Explicit keyword overrides take precedence over the environment.
        """
        load_dotenv()
        env_map = {
            "MAZEGEN_WIDTH": ("width", int),
            "MAZEGEN_HEIGHT": ("height", int),
            "MAZEGEN_VARIANT": ("variant", str),
            "MAZEGEN_SEED": ("seed", int),
            "MAZEGEN_MAX_ATTEMPTS": ("max_attempts", int),
            "MAZEGEN_ENABLE_METRICS": ("enable_metrics", _parse_bool),
        }
        values: Dict[str, Any] = {}
        for env_key, (attr, conv) in env_map.items():
            raw = os.environ.get(env_key)
            if raw is None or raw.strip() == "":
                continue
            try:
                values[attr] = conv(raw.strip())
            except ValueError as exc:
                raise ValueError(f"invalid value for {env_key}: {raw!r}") from exc
        known = {f.name for f in fields(cls)}
        unknown = set(overrides) - known
        if unknown:
            raise TypeError(f"unknown config fields: {', '.join(sorted(unknown))}")
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


def _parse_bool(raw: str) -> bool:
    return raw.lower() not in {"0", "false", "no", "off"}


__all__ = ["MazeConfig", "PlacementWeights", "VARIANTS", "MIN_SIZE"]
