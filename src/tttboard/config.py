"""Game configuration.

Environment-first, with built-in fallbacks; command-line flags override both.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_X_KIND = "human"
DEFAULT_O_KIND = "optimal"


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    if value < 0:
        raise ValueError(f"{name} must be >= 0, got {value}")
    return value


def _env_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def default_think_delay() -> float:
    return _env_float("TTTBOARD_THINK_DELAY", 0.0)


def default_seed() -> Optional[int]:
    return _env_int("TTTBOARD_SEED")


@dataclass
class GameConfig:
    x_kind: str = DEFAULT_X_KIND
    o_kind: str = DEFAULT_O_KIND
    x_name: str = "X"
    o_name: str = "O"
    seed: Optional[int] = None
    think_delay: float = 0.0

    @classmethod
    def from_env(cls, **overrides) -> "GameConfig":
        """Environment defaults, then any non-None overrides."""
        cfg = cls(seed=default_seed(), think_delay=default_think_delay())
        for k, v in overrides.items():
            if not hasattr(cfg, k):
                raise TypeError(f"unknown config field: {k}")
            if v is not None:
                setattr(cfg, k, v)
        return cfg

    def player_seeds(self) -> tuple:
        """Distinct per-player seeds derived from the game seed."""
        if self.seed is None:
            return (None, None)
        return (self.seed, self.seed + 1)
