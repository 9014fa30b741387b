"""
Checkpoint files for learned models.

Each checkpoint holds the agent's parameters and its value table so a
training run can be resumed later.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from .agent import BayesianAgent, TieBreaker
from .config import AgentConfig
from .errors import SnapshotFormatError

logger = logging.getLogger(__name__)

MODEL_FORMAT_VERSION = 1


class ModelPersistence:
    """
    Directory-backed store of agent checkpoints.

    Features:
    - Atomic writes (temp file + rename)
    - Format version checking
    - Missing or unreadable checkpoints load as None
    """

    def __init__(self, base_path: str):
        """
        Args:
            base_path: Directory for storing checkpoints
        """
        self.base_path = Path(base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)

    def save(self, model_id: str, agent: BayesianAgent) -> bool:
        """
        Write a checkpoint for an agent.

        Returns:
            True if the save succeeded
        """
        document = {
            "version": MODEL_FORMAT_VERSION,
            "config": agent.config.to_dict(),
            "qValues": agent.snapshot(),
        }

        path = self._get_path(model_id)
        temp_path = path.with_suffix(".tmp")
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2)
            temp_path.replace(path)
        except OSError as e:
            logger.warning(f"Failed to save model {model_id}: {e}")
            return False

        logger.info(f"Saved model {model_id} ({len(agent.qmap)} pairs) to {path}")
        return True

    def load(self, model_id: str) -> Optional[Dict[str, Any]]:
        """
        Read a checkpoint document.

        Returns:
            The document, or None if missing, unreadable or incompatible
        """
        path = self._get_path(model_id)
        if not path.exists():
            logger.debug(f"No saved model found for {model_id}")
            return None

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to read model {model_id}: {e}")
            return None

        if not isinstance(data, dict):
            logger.warning(f"Model {model_id} is not a JSON object")
            return None

        version = data.get("version")
        if version != MODEL_FORMAT_VERSION:
            logger.warning(f"Incompatible model format version for {model_id}: {version}")
            return None

        return data

    def restore_agent(
        self,
        model_id: str,
        tie_breaker: Optional[TieBreaker] = None,
    ) -> Optional[BayesianAgent]:
        """
        Rebuild an agent from a checkpoint.

        Returns:
            The agent, or None if no usable checkpoint exists
        """
        data = self.load(model_id)
        if data is None:
            return None

        try:
            config = AgentConfig.from_dict(data.get("config") or {})
            agent = BayesianAgent.from_config(config, tie_breaker=tie_breaker)
            agent.restore(data.get("qValues", {}))
        except (SnapshotFormatError, ValueError, TypeError, AttributeError) as e:
            logger.warning(f"Model {model_id} could not be restored: {e}")
            return None

        logger.info(f"Restored agent from model {model_id}")
        return agent

    def exists(self, model_id: str) -> bool:
        return self._get_path(model_id).exists()

    def delete(self, model_id: str) -> bool:
        """
        Delete a checkpoint.

        Returns:
            True if deletion succeeded or the file didn't exist
        """
        path = self._get_path(model_id)
        try:
            if path.exists():
                path.unlink()
                logger.debug(f"Deleted model {model_id}")
            return True
        except OSError as e:
            logger.warning(f"Failed to delete model {model_id}: {e}")
            return False

    def _get_path(self, model_id: str) -> Path:
        safe_id = "".join(c if c.isalnum() else "_" for c in model_id)
        return self.base_path / f"{safe_id}_model.json"
