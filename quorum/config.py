"""
Configuration
Reconstruction settings, with optional overrides from the environment.
"""

import os
from dataclasses import dataclass
from typing import Mapping

from quorum.errors import MalformedInputError
from quorum.selector import DEFAULT_CHUNK_SIZE, Strategy

ENV_PREFIX = "QUORUM_"


@dataclass
class ReconstructionConfig:
    """How a batch of containers should be reconstructed."""
    strategy: Strategy = Strategy.MAJORITY_VOTE
    workers: int = 1
    max_combinations: int | None = None  # None = no cap
    chunk_size: int = DEFAULT_CHUNK_SIZE

    def __post_init__(self):
        try:
            self.strategy = Strategy(self.strategy)
        except ValueError:
            choices = ", ".join(s.value for s in Strategy)
            raise MalformedInputError(
                f"Unknown strategy {self.strategy!r} (expected one of: {choices})"
            )
        if self.workers < 1:
            raise MalformedInputError("workers must be at least 1")
        if self.chunk_size < 1:
            raise MalformedInputError("chunk_size must be at least 1")
        if self.max_combinations is not None and self.max_combinations < 1:
            raise MalformedInputError("max_combinations must be at least 1")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] = None) -> "ReconstructionConfig":
        """
        Build a config from ``QUORUM_*`` variables.

        Recognised: QUORUM_STRATEGY, QUORUM_WORKERS,
        QUORUM_MAX_COMBINATIONS, QUORUM_CHUNK_SIZE. Unset variables
        keep their defaults.
        """
        environ = os.environ if environ is None else environ
        values = {}

        strategy = environ.get(ENV_PREFIX + "STRATEGY")
        if strategy:
            values["strategy"] = strategy.strip().lower()

        for name in ("workers", "max_combinations", "chunk_size"):
            raw = environ.get(ENV_PREFIX + name.upper())
            if raw:
                values[name] = _parse_int(ENV_PREFIX + name.upper(), raw)

        return cls(**values)

    def options(self) -> dict:
        """Keyword arguments for ``selector.reconstruct``."""
        return {
            "workers": self.workers,
            "max_combinations": self.max_combinations,
            "chunk_size": self.chunk_size,
        }


def _parse_int(name: str, raw: str) -> int:
    try:
        return int(raw.strip())
    except ValueError:
        raise MalformedInputError(f"{name} must be an integer, got {raw!r}")
