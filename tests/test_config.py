"""Tests for EngineConfig."""

import pytest
from pydantic import ValidationError

from minic import EngineConfig


class TestDefaults:
    def test_defaults(self):
        config = EngineConfig()
        assert config.loop_budget == 100_000
        assert config.max_output_chars == 1_000_000

    def test_frozen(self):
        config = EngineConfig()
        with pytest.raises(ValidationError):
            config.loop_budget = 5

    @pytest.mark.parametrize("field", ["loop_budget", "max_output_chars"])
    def test_must_be_positive(self, field):
        with pytest.raises(ValidationError):
            EngineConfig(**{field: 0})


class TestFromEnv:
    def test_empty_environment(self):
        assert EngineConfig.from_env({}) == EngineConfig()

    def test_reads_prefixed_variables(self):
        config = EngineConfig.from_env({
            "MINIC_LOOP_BUDGET": "500",
            "MINIC_MAX_OUTPUT_CHARS": "2000",
            "LOOP_BUDGET": "1",
        })
        assert config.loop_budget == 500
        assert config.max_output_chars == 2000

    def test_invalid_value(self):
        with pytest.raises(ValidationError):
            EngineConfig.from_env({"MINIC_LOOP_BUDGET": "lots"})

    def test_process_environment(self, monkeypatch):
        monkeypatch.setenv("MINIC_LOOP_BUDGET", "42")
        assert EngineConfig.from_env().loop_budget == 42
