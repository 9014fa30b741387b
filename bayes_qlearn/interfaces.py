"""
Capabilities the agent expects from domain states and actions.

Any object exposing these methods qualifies; no base class is required.
"""
from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable


@runtime_checkable
class Action(Protocol):
    """An action that can be applied to a state."""

    def id(self) -> str:
        """Stable identifier. Equal actions must return equal ids."""
        ...


@runtime_checkable
class State(Protocol):
    """A state of the environment being learned."""

    def id(self) -> str:
        """Stable identifier (a canonical string or content hash)."""
        ...

    def possible_actions(self) -> Sequence[Action]:
        """Actions applicable to this state."""
        ...

    def action_is_compatible(self, action: Action) -> bool:
        """Whether the action may be applied to this state."""
        ...

    def apply(self, action: Action) -> "State":
        """Apply an action, producing the resulting state."""
        ...


@runtime_checkable
class Rewarder(Protocol):
    """Computes the reward for a completed transition."""

    def reward(self, state: State, action: Action, new_state: State) -> float:
        ...
