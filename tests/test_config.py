"""
Tests for agent configuration.
"""
import json
import os
import tempfile

import pytest
import yaml

from bayes_qlearn import AgentConfig, AgentPresets, DEFAULT_AGENT_CONFIG


class TestAgentConfig:
    """Test AgentConfig dataclass."""

    def test_default_values(self):
        config = AgentConfig()

        assert config.learning_rate == 0.5
        assert config.discount_factor == 0.9
        assert config.priming_threshold == 10
        assert config.prng_seed is None
        assert DEFAULT_AGENT_CONFIG == config

    def test_learning_rate_may_exceed_one(self):
        assert AgentConfig(learning_rate=1.5).learning_rate == 1.5

    @pytest.mark.parametrize("kwargs", [
        {"learning_rate": -0.01},
        {"discount_factor": -0.5},
        {"priming_threshold": -1},
        {"priming_threshold": float("inf")},
        {"learning_rate": "fast"},
        {"discount_factor": True},
        {"prng_seed": "abc"},
    ])
    def test_validation(self, kwargs):
        with pytest.raises(ValueError):
            AgentConfig(**kwargs)

    def test_from_dict_ignores_extra_fields(self):
        config = AgentConfig.from_dict({
            "learning_rate": 0.2,
            "unknown_field": "ignored",
        })
        assert config.learning_rate == 0.2
        assert config.discount_factor == 0.9

    def test_save_and_load_json(self):
        with tempfile.TemporaryDirectory() as d:
            path = os.path.join(d, "nested", "agent.json")
            original = AgentConfig(learning_rate=0.25, priming_threshold=3, prng_seed=9)
            original.save(path)

            with open(path, "r", encoding="utf-8") as f:
                assert json.load(f)["priming_threshold"] == 3

            assert AgentConfig.load(path) == original

    def test_load_yaml(self):
        with tempfile.TemporaryDirectory() as d:
            path = os.path.join(d, "agent.yaml")
            with open(path, "w", encoding="utf-8") as f:
                yaml.safe_dump({"learning_rate": 0.1, "discount_factor": 0.95}, f)

            config = AgentConfig.load(path)

            assert config.learning_rate == 0.1
            assert config.discount_factor == 0.95
            assert config.priming_threshold == 10

    def test_load_missing_file(self):
        assert AgentConfig.load("/nonexistent/path.json") is None

    def test_load_invalid_values_raises(self):
        with tempfile.TemporaryDirectory() as d:
            path = os.path.join(d, "agent.yml")
            with open(path, "w", encoding="utf-8") as f:
                f.write("learning_rate: -3\n")

            with pytest.raises(ValueError):
                AgentConfig.load(path)

    def test_load_non_mapping_raises(self):
        with tempfile.TemporaryDirectory() as d:
            path = os.path.join(d, "agent.json")
            with open(path, "w", encoding="utf-8") as f:
                f.write("[1, 2, 3]")

            with pytest.raises(ValueError):
                AgentConfig.load(path)


class TestAgentPresets:
    """Test built-in presets."""

    def test_presets_are_valid(self):
        for preset in (
            AgentPresets.cautious(),
            AgentPresets.balanced(),
            AgentPresets.greedy(),
            AgentPresets.deterministic_test(),
        ):
            assert isinstance(preset, AgentConfig)

    def test_cautious_primes_longer_than_greedy(self):
        assert AgentPresets.cautious().priming_threshold > AgentPresets.greedy().priming_threshold

    def test_deterministic_seed(self):
        assert AgentPresets.deterministic_test(5).prng_seed == 5
