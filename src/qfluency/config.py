"""Simulator configuration, with environment overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

# Every gate is O(2^n) in time and space; the ceiling is a resource bound.
MAX_QUBITS_CEILING = 8
DEFAULT_EPSILON = 1e-10


@dataclass(frozen=True)
class SimulatorConfig:
    """
    Settings shared by the simulator, the executor and the dashboard.

    Attributes
    ----------
    max_qubits : int
        Largest register ``initialize`` accepts. May be lowered, never
        raised above ``MAX_QUBITS_CEILING``.
    epsilon : float
        Threshold below which an amplitude is treated as zero for display.
    seed : int | None
        Seed for the default measurement random generator.
    log_level : str
        Level used by the CLI and dashboard when configuring logging.
    """

    max_qubits: int = MAX_QUBITS_CEILING
    epsilon: float = DEFAULT_EPSILON
    seed: Optional[int] = None
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        if not 1 <= self.max_qubits <= MAX_QUBITS_CEILING:
            raise ValueError(
                f"max_qubits must be between 1 and {MAX_QUBITS_CEILING}, "
                f"got {self.max_qubits}"
            )
        if self.epsilon <= 0:
            raise ValueError(f"epsilon must be positive, got {self.epsilon}")

    @classmethod
    def from_env(cls, **overrides) -> "SimulatorConfig":
        """
        Build a config from ``QFLUENCY_*`` environment variables.

        Keyword overrides win over the environment; a variable that is
        overridden is never read. Unset or empty variables keep the default.
        """
        values = {}
        for name, (var, convert) in _ENV_VARS.items():
            if name in overrides:
                continue
            raw = os.getenv(var)
            if raw in (None, ""):
                continue
            try:
                values[name] = convert(raw)
            except ValueError:
                raise ValueError(f"{var}={raw!r} is not a valid {name}") from None
        values.update(overrides)
        return cls(**values)


_ENV_VARS = {
    "max_qubits": ("QFLUENCY_MAX_QUBITS", int),
    "epsilon": ("QFLUENCY_EPSILON", float),
    "seed": ("QFLUENCY_SEED", int),
    "log_level": ("QFLUENCY_LOG_LEVEL", str.upper),
}


__all__ = ["SimulatorConfig", "MAX_QUBITS_CEILING", "DEFAULT_EPSILON"]
