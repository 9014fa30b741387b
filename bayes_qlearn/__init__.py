"""
Tabular Q-learning with Bayesian-smoothed action values.

The agent learns per-(state, action) values from observed transitions and
recommends actions by comparing values that are blended with the mean of
each state's sibling actions until enough observations accumulate.

Key principles:
- States and actions are supplied by the caller and identified by id()
- Never-seen actions are primed so they take part in every comparison
- Ties are broken at random, which is how unseen states get explored
- The value table is the whole model and can be checkpointed at any time
"""

from .action_stats import ActionStats
from .agent import AgentContext, BayesianAgent, TieBreaker
from .config import AgentConfig, AgentPresets, DEFAULT_AGENT_CONFIG
from .errors import (
    IncompatibleActionError,
    LearningContractError,
    NoActionsError,
    QLearningError,
    SnapshotFormatError,
)
from .interfaces import Action, Rewarder, State
from .logging_config import configure_logging, log_event
from .persistence import ModelPersistence, MODEL_FORMAT_VERSION
from .qmap import QMap
from .qmath import bayesian_average, bellman, nan_to_zero, safe_divide

__version__ = "1.0.0"

__all__ = [
    # Agent
    "BayesianAgent",
    "AgentContext",
    "TieBreaker",

    # Value store
    "QMap",
    "ActionStats",

    # Collaborator interfaces
    "State",
    "Action",
    "Rewarder",

    # Errors
    "QLearningError",
    "NoActionsError",
    "IncompatibleActionError",
    "SnapshotFormatError",
    "LearningContractError",

    # Configuration
    "AgentConfig",
    "AgentPresets",
    "DEFAULT_AGENT_CONFIG",

    # Persistence
    "ModelPersistence",
    "MODEL_FORMAT_VERSION",

    # Logging
    "configure_logging",
    "log_event",

    # Numeric helpers
    "bellman",
    "bayesian_average",
    "safe_divide",
    "nan_to_zero",
]
