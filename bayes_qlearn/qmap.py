"""
Value table mapping state ids to action ids to ActionStats.

The table never evicts; it is the agent's entire memory. Reads through
get_stats() are pure. ensure_state() is the one operation that creates an
empty per-state entry, so enumeration afterwards is stable.
"""
from __future__ import annotations

from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from .action_stats import ActionStats
from .errors import SnapshotFormatError

_STAT_FIELDS = ("calls", "qRaw", "qWeighted")


class QMap:
    """Two-level store of ActionStats keyed by opaque state and action ids."""

    def __init__(self, data: Optional[Dict[str, Dict[str, ActionStats]]] = None):
        self._data: Dict[str, Dict[str, ActionStats]] = data if data is not None else {}

    def get_stats(self, state_id: str, action_id: str) -> Tuple[ActionStats, bool]:
        """
        Look up the record for a pair without creating anything.

        Returns:
            (stats, found). When found is False, stats is a fresh zero record
            that is not stored in the table.
        """
        actions = self._data.get(state_id)
        if actions is not None:
            stats = actions.get(action_id)
            if stats is not None:
                return stats, True
        return ActionStats(), False

    def update_stats(self, state_id: str, action_id: str, stats: ActionStats) -> None:
        """Store (or overwrite) the record for a pair."""
        self.ensure_state(state_id)[action_id] = stats

    def ensure_state(self, state_id: str) -> Dict[str, ActionStats]:
        """
        Return the live action mapping for a state, creating an empty one
        if the state has never been seen.
        """
        actions = self._data.get(state_id)
        if actions is None:
            actions = {}
            self._data[state_id] = actions
        return actions

    # Enumeration of a state's actions goes through the lazy-create path.
    actions_for_state = ensure_state

    def has_state(self, state_id: str) -> bool:
        return state_id in self._data

    def states(self) -> List[str]:
        return list(self._data.keys())

    def clear(self) -> None:
        self._data = {}

    def __len__(self) -> int:
        """Number of recorded (state, action) pairs."""
        return sum(len(actions) for actions in self._data.values())

    def __iter__(self) -> Iterator[Tuple[str, str, ActionStats]]:
        for state_id, actions in self._data.items():
            for action_id, stats in actions.items():
                yield state_id, action_id, stats

    def to_dict(self) -> Dict[str, Dict[str, Dict[str, Any]]]:
        """Nested plain-dict snapshot: state id -> action id -> stats."""
        return {
            state_id: {
                action_id: stats.to_dict()
                for action_id, stats in actions.items()
            }
            for state_id, actions in self._data.items()
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "QMap":
        """
        Build a table from a snapshot produced by to_dict().

        The whole document is validated before anything is built.

        Raises:
            SnapshotFormatError: if the document has the wrong shape
        """
        if not isinstance(data, Mapping):
            raise SnapshotFormatError(
                f"snapshot must be a mapping of state ids, got {type(data).__name__}"
            )

        table: Dict[str, Dict[str, ActionStats]] = {}
        for state_id, actions in data.items():
            if not isinstance(actions, Mapping):
                raise SnapshotFormatError(
                    f"actions for state '{state_id}' must be a mapping"
                )
            table[str(state_id)] = {
                str(action_id): _parse_stats(state_id, action_id, record)
                for action_id, record in actions.items()
            }
        return cls(table)


def _parse_stats(state_id: Any, action_id: Any, record: Any) -> ActionStats:
    if not isinstance(record, Mapping):
        raise SnapshotFormatError(
            f"stats for ({state_id}, {action_id}) must be a mapping"
        )

    for name in _STAT_FIELDS:
        if name not in record:
            raise SnapshotFormatError(
                f"stats for ({state_id}, {action_id}) missing field '{name}'"
            )
        value = record[name]
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise SnapshotFormatError(
                f"field '{name}' for ({state_id}, {action_id}) is not numeric: {value!r}"
            )

    calls = record["calls"]
    if calls < 0 or (isinstance(calls, float) and not calls.is_integer()):
        raise SnapshotFormatError(
            f"calls for ({state_id}, {action_id}) must be a non-negative integer"
        )
    return ActionStats.from_dict(record)
