"""
Bayesian Q-learning agent.

The agent keeps a table of per-(state, action) Q-values, refines them with
a Bellman update after each observed transition, and recommends actions by
comparing a Bayesian-smoothed value rather than the raw one.

Initial conditions are the hard part of tabular Q-learning: when an action
has been taken few (or zero) times there is little evidence about its
value. The agent assumes such an action is probably worth about as much as
its siblings, so its weighted value sits near the mean raw value of the
state's other actions. As the action is observed more often, its own raw
value takes over. The priming threshold is the number of observations at
which the two are trusted equally.

Every action of a state is primed with a zero record before it is compared.
A state that has never been seen therefore ties across all of its actions,
and the first recommendation for it is a uniform random pick. That tie is
the agent's only exploration mechanism.
"""
from __future__ import annotations

import json
import logging
import math
import random
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from .config import AgentConfig
from .errors import (
    IncompatibleActionError,
    LearningContractError,
    NoActionsError,
    SnapshotFormatError,
)
from .interfaces import Action, Rewarder, State
from .logging_config import log_event
from .qmap import QMap
from .qmath import bayesian_average, bellman, nan_to_zero, safe_divide

logger = logging.getLogger(__name__)

# Receives the number of tied actions, returns the index of the winner.
TieBreaker = Callable[[int], int]


@dataclass
class AgentContext:
    """
    Point-in-time view of an agent's parameters and learned values.

    Attributes:
        learning_rate: Agent learning rate
        discount_factor: Agent discount factor
        priming_threshold: Agent priming threshold
        q_values: Copy of the value table snapshot
    """
    learning_rate: float
    discount_factor: float
    priming_threshold: float
    q_values: Dict[str, Dict[str, Dict[str, Any]]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "learningRate": self.learning_rate,
            "discountFactor": self.discount_factor,
            "primingThreshold": self.priming_threshold,
            "qValues": self.q_values,
        }


class BayesianAgent:
    """
    Tabular Q-learning agent with Bayesian-smoothed action values.

    Not safe for concurrent use. Callers sharing an agent across threads
    must serialize learn/recommend_action themselves.

    Example:
        >>> agent = BayesianAgent(priming_threshold=10, learning_rate=0.5,
        ...                       discount_factor=0.9)
        >>> action = agent.recommend_action(state)
        >>> new_state = agent.transition(state, action)
        >>> agent.learn(state, action, new_state, reward=1.0)
    """

    def __init__(
        self,
        priming_threshold: float = 10,
        learning_rate: float = 0.5,
        discount_factor: float = 0.9,
        tie_breaker: Optional[TieBreaker] = None,
        prng_seed: Optional[int] = None,
    ):
        """
        Initialize the agent.

        Args:
            priming_threshold: Observations required of an action before its
                raw value is trusted more than the mean of its siblings
            learning_rate: To what extent new information overrides old
                information. Usually in [0, 1], may exceed 1.
                See https://en.wikipedia.org/wiki/Q-learning#Learning_Rate
            discount_factor: Importance of future rewards.
                See https://en.wikipedia.org/wiki/Q-learning#Discount_factor
            tie_breaker: Callable choosing among tied actions. Defaults to
                a PRNG seeded with prng_seed.
            prng_seed: Seed for the default tie-breaker (None = random)
        """
        self.config = AgentConfig(
            learning_rate=learning_rate,
            discount_factor=discount_factor,
            priming_threshold=priming_threshold,
            prng_seed=prng_seed,
        )
        self.rng = random.Random(prng_seed)
        self.tie_breaker: TieBreaker = tie_breaker if tie_breaker is not None else self.rng.randrange
        self.qmap = QMap()

    @classmethod
    def from_config(
        cls,
        config: AgentConfig,
        tie_breaker: Optional[TieBreaker] = None,
    ) -> "BayesianAgent":
        return cls(
            priming_threshold=config.priming_threshold,
            learning_rate=config.learning_rate,
            discount_factor=config.discount_factor,
            tie_breaker=tie_breaker,
            prng_seed=config.prng_seed,
        )

    @property
    def learning_rate(self) -> float:
        return self.config.learning_rate

    @property
    def discount_factor(self) -> float:
        return self.config.discount_factor

    @property
    def priming_threshold(self) -> float:
        return self.config.priming_threshold

    def learn(
        self,
        previous_state: Optional[State],
        action_taken: Optional[Action],
        current_state: Optional[State],
        reward: float,
    ) -> None:
        """
        Update the model for a transition from previous_state through
        action_taken to current_state.

        When the system is bootstrapping there is no previous transition;
        passing None for previous_state or action_taken makes this a no-op.

        Args:
            previous_state: State the action was taken from
            action_taken: Action that was taken
            current_state: State the transition produced
            reward: Positive, negative or neutral impact of the transition

        Raises:
            LearningContractError: if current_state is None while
                previous_state and action_taken are given
        """
        if previous_state is None or action_taken is None:
            return

        if current_state is None:
            raise LearningContractError(
                "current_state must not be None when previous_state and action_taken are given"
            )

        state_id = previous_state.id()
        action_id = action_taken.id()

        stats, _ = self.qmap.get_stats(state_id, action_id)
        best_next = self._best_value(current_state)

        # Seeded from the weighted value, so smoothing compounds across updates.
        new_value = bellman(
            stats.q_weighted,
            self.learning_rate,
            reward,
            self.discount_factor,
            best_next,
        )
        stats.calls += 1
        stats.q_raw = new_value
        self.qmap.update_stats(state_id, action_id, stats)
        self.apply_action_weights(previous_state)

        log_event(
            logger,
            "learn",
            f"q_raw={new_value} after reward={reward}",
            state_id=state_id,
            action_id=action_id,
            best_next=best_next,
            calls=stats.calls,
        )

    def recommend_action(self, state: State) -> Action:
        """
        Recommend the action with the greatest weighted Q-value.

        Ties (including the all-primed tie of a never-seen state) are
        broken with the agent's tie-breaker.

        Returns:
            The winning action, taken from state.possible_actions()

        Raises:
            NoActionsError: if the state reports no possible actions
        """
        state_id = state.id()
        candidates = self._unique_actions(state)
        if not candidates:
            raise NoActionsError(state_id)

        self.apply_action_weights(state)
        recorded = self.qmap.ensure_state(state_id)

        best_value = -math.inf
        best_actions: List[Action] = []
        for action_id, action in candidates.items():
            value = nan_to_zero(recorded[action_id].q_weighted)
            if value > best_value:
                best_value = value
                best_actions = [action]
            elif value == best_value:
                best_actions.append(action)

        if len(best_actions) == 1:
            chosen = best_actions[0]
        else:
            index = self.tie_breaker(len(best_actions))
            if not 0 <= index < len(best_actions):
                raise IndexError(
                    f"tie-breaker returned {index} for {len(best_actions)} tied actions"
                )
            chosen = best_actions[index]

        log_event(
            logger,
            "recommend",
            f"recommended with q_weighted={best_value}",
            state_id=state_id,
            action_id=chosen.id(),
            tied=len(best_actions),
        )
        return chosen

    def apply_action_weights(self, state: State) -> None:
        """
        Recompute the weighted value of every recorded action of a state.

        Actions of the state that have no record yet are primed with a zero
        record first. The sibling mean is taken over the raw values of the
        actions that already had a record.
        """
        state_id = state.id()
        raw_value_sum = 0.0
        existing_count = 0
        primed: List[str] = []

        for action_id in self._unique_actions(state):
            stats, found = self.qmap.get_stats(state_id, action_id)
            if not found:
                self.qmap.update_stats(state_id, action_id, stats)
                primed.append(action_id)
            else:
                raw_value_sum += nan_to_zero(stats.q_raw)
                existing_count += 1

        if primed:
            logger.debug(f"primed {len(primed)} actions for {state_id}: {primed}")

        mean = nan_to_zero(safe_divide(raw_value_sum, existing_count))
        for stats in self.qmap.ensure_state(state_id).values():
            stats.q_weighted = bayesian_average(
                self.priming_threshold,
                stats.calls,
                mean,
                nan_to_zero(stats.q_raw),
            )

    def transition(self, state: State, action: Action) -> State:
        """
        Apply an action to a state.

        Errors raised by state.apply() propagate unchanged.

        Raises:
            IncompatibleActionError: if the state rejects the action
        """
        if not state.action_is_compatible(action):
            raise IncompatibleActionError(state.id(), action.id())
        return state.apply(action)

    def step(self, state: State, rewarder: Rewarder) -> Tuple[Action, State, float]:
        """
        Run one recommend/transition/reward/learn cycle.

        Returns:
            (action taken, resulting state, reward)
        """
        action = self.recommend_action(state)
        new_state = self.transition(state, action)
        reward = rewarder.reward(state, action, new_state)
        self.learn(state, action, new_state, reward)
        return action, new_state, reward

    def value(self, state: State, action: Action) -> float:
        """Current weighted Q-value for a pair, 0.0 if never recorded."""
        stats, _ = self.qmap.get_stats(state.id(), action.id())
        return stats.q_weighted

    def snapshot(self) -> Dict[str, Dict[str, Dict[str, Any]]]:
        """Nested mapping of state id -> action id -> {calls, qRaw, qWeighted}."""
        return self.qmap.to_dict()

    def restore(self, snapshot: Mapping[str, Any]) -> None:
        """
        Replace the value table with a snapshot.

        The snapshot is validated first; on error the current table is kept.

        Raises:
            SnapshotFormatError: if the snapshot has the wrong shape
        """
        qmap = QMap.from_dict(snapshot)
        self.qmap = qmap
        logger.info(f"Restored model with {len(qmap)} state/action pairs")

    def to_json(self, indent: Optional[int] = 2) -> str:
        """Serialize the value table to JSON."""
        return json.dumps(self.snapshot(), indent=indent)

    def load_json(self, model: str) -> None:
        """
        Replace the value table with a JSON model from to_json().

        Raises:
            SnapshotFormatError: if the text is not a valid model
        """
        try:
            data = json.loads(model)
        except json.JSONDecodeError as e:
            raise SnapshotFormatError(f"model is not valid JSON: {e}") from e
        self.restore(data)

    def get_agent_context(self) -> AgentContext:
        return AgentContext(
            learning_rate=self.learning_rate,
            discount_factor=self.discount_factor,
            priming_threshold=self.priming_threshold,
            q_values=self.snapshot(),
        )

    def _best_value(self, state: State) -> float:
        """Greatest weighted value among the state's actions, 0.0 if none."""
        self.apply_action_weights(state)
        values = [
            nan_to_zero(stats.q_weighted)
            for stats in self.qmap.ensure_state(state.id()).values()
        ]
        return max(values) if values else 0.0

    @staticmethod
    def _unique_actions(state: State) -> Dict[str, Action]:
        actions: Dict[str, Action] = {}
        for action in state.possible_actions():
            actions.setdefault(action.id(), action)
        return actions

    def __repr__(self) -> str:
        return (
            f"BayesianAgent(priming_threshold={self.priming_threshold}, "
            f"learning_rate={self.learning_rate}, "
            f"discount_factor={self.discount_factor}, "
            f"pairs={len(self.qmap)})"
        )
