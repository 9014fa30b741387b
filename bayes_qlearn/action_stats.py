"""
Per-(state, action) statistics record.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict


@dataclass
class ActionStats:
    """
    Value container for one action observed (or primed) in one state.

    Attributes:
        calls: Number of learning updates applied to this pair
        q_raw: Raw Bellman-updated value
        q_weighted: Bayesian-smoothed value used for comparisons. Derived
            from q_raw, calls and the sibling mean; recomputed by the agent's
            weighting pass and stale after any sibling's q_raw changes.
    """
    calls: int = 0
    q_raw: float = 0.0
    q_weighted: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the persisted field names."""
        return {
            "calls": self.calls,
            "qRaw": self.q_raw,
            "qWeighted": self.q_weighted,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ActionStats":
        return cls(
            calls=int(data.get("calls", 0)),
            q_raw=float(data.get("qRaw", 0.0)),
            q_weighted=float(data.get("qWeighted", 0.0)),
        )
