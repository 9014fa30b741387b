"""
Agent configuration and presets.

Parameters can be built in code, taken from a preset, or loaded from
JSON/YAML files.
"""
from __future__ import annotations

import json
import logging
import math
import os
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)


@dataclass
class AgentConfig:
    """
    Learning parameters for a BayesianAgent.

    Attributes:
        learning_rate: How far new information overrides old estimates.
            Typically in [0, 1] but may exceed 1.
        discount_factor: Importance of future rewards (>= 0)
        priming_threshold: Observations of an action needed before its own
            value is trusted as much as the mean of its siblings
        prng_seed: Seed for tie-breaking (None = nondeterministic)
    """
    learning_rate: float = 0.5
    discount_factor: float = 0.9
    priming_threshold: int = 10
    prng_seed: Optional[int] = None

    def __post_init__(self):
        """Validate parameters."""
        for name in ("learning_rate", "discount_factor", "priming_threshold"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"{name} must be a number, got {value!r}")
            if not math.isfinite(value) or value < 0:
                raise ValueError(f"{name} must be finite and >= 0, got {value!r}")
        if self.prng_seed is not None and not isinstance(self.prng_seed, int):
            raise ValueError(f"prng_seed must be an int or None, got {self.prng_seed!r}")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AgentConfig":
        """Create from dictionary, ignoring unknown keys."""
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})

    def save(self, path: str) -> None:
        """Save config to a JSON file."""
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, path: str) -> Optional["AgentConfig"]:
        """
        Load config from a JSON or YAML file.

        Returns None if the file does not exist. Malformed files and invalid
        parameter values raise.
        """
        if not os.path.exists(path):
            return None

        with open(path, "r", encoding="utf-8") as f:
            content = f.read()

        if path.endswith((".yaml", ".yml")):
            data = yaml.safe_load(content)
        else:
            data = json.loads(content)

        if not isinstance(data, dict):
            raise ValueError(f"config file {path} must contain a mapping")

        logger.debug(f"Loaded agent config from {path}")
        return cls.from_dict(data)


DEFAULT_AGENT_CONFIG = AgentConfig()


class AgentPresets:
    """Pre-configured parameter sets."""

    @staticmethod
    def cautious() -> AgentConfig:
        """Slow learning; defers to the sibling mean for longer."""
        return AgentConfig(
            learning_rate=0.1,
            discount_factor=0.9,
            priming_threshold=25,
        )

    @staticmethod
    def balanced() -> AgentConfig:
        """Recommended defaults."""
        return AgentConfig(
            learning_rate=0.5,
            discount_factor=0.9,
            priming_threshold=10,
        )

    @staticmethod
    def greedy() -> AgentConfig:
        """Trusts every observation immediately."""
        return AgentConfig(
            learning_rate=1.0,
            discount_factor=0.5,
            priming_threshold=0,
        )

    @staticmethod
    def deterministic_test(seed: int = 42) -> AgentConfig:
        """Seeded configuration for testing."""
        return AgentConfig(
            learning_rate=0.5,
            discount_factor=0.9,
            priming_threshold=10,
            prng_seed=seed,
        )
