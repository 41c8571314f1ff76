# tests/config/test_env_vars.py
"""Tests for environment variable helpers."""

from __future__ import annotations

import pytest

from agentcfg.config.env_vars import EnvVar, get_env, is_set


class TestEnvVar:
    """Tests for EnvVar enum."""

    def test_env_var_values(self) -> None:
        assert EnvVar.IN_MEMORY_CONFIG.value == "AGENTCFG_IN_MEMORY_CONFIG"
        assert EnvVar.DISABLE_KEYRING.value == "AGENTCFG_DISABLE_KEYRING"
        assert EnvVar.LOG_LEVEL.value == "AGENTCFG_LOG_LEVEL"


class TestGetEnv:
    def test_get_env_returns_value(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AGENTCFG_LOG_LEVEL", "DEBUG")
        assert get_env(EnvVar.LOG_LEVEL) == "DEBUG"

    def test_get_env_default(self) -> None:
        assert get_env(EnvVar.LOG_LEVEL, "INFO") == "INFO"
        assert get_env(EnvVar.LOG_LEVEL) is None


class TestIsSet:
    def test_empty_string_counts_as_set(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """The storage switches only care about presence."""
        monkeypatch.setenv("AGENTCFG_IN_MEMORY_CONFIG", "")
        assert is_set(EnvVar.IN_MEMORY_CONFIG)

    @pytest.mark.parametrize("value", ["0", "false", "no"])
    def test_falsy_text_counts_as_set(
        self, monkeypatch: pytest.MonkeyPatch, value: str
    ) -> None:
        monkeypatch.setenv("AGENTCFG_DISABLE_KEYRING", value)
        assert is_set(EnvVar.DISABLE_KEYRING)

    def test_not_set(self) -> None:
        assert not is_set(EnvVar.IN_MEMORY_CONFIG)
