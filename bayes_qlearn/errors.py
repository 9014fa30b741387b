"""
Exceptions raised by the Q-learning agent.
"""
from __future__ import annotations


class QLearningError(Exception):
    """Base class for recoverable agent errors."""
    pass


class NoActionsError(QLearningError):
    """Raised when a recommendation is requested for a state with no actions."""

    def __init__(self, state_id: str):
        self.state_id = state_id
        super().__init__(f"state '{state_id}' reports no possible actions")


class IncompatibleActionError(QLearningError):
    """Raised when an action is applied to a state that rejects it."""

    def __init__(self, state_id: str, action_id: str):
        self.state_id = state_id
        self.action_id = action_id
        super().__init__(
            f"action {action_id} is not compatible with state {state_id}"
        )


class SnapshotFormatError(QLearningError, ValueError):
    """Raised when a model snapshot does not have the expected shape."""
    pass


class LearningContractError(RuntimeError):
    """
    Raised when learn() is called with a previous state and action but no
    resulting state.

    This is caller misuse and deliberately not a QLearningError.
    """
    pass
