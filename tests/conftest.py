"""Common test fixtures for agentcfg tests."""

import logging
import sys
from unittest.mock import MagicMock

import pytest

from agentcfg.config.backends import reset_memory_values
from agentcfg.config.base import reset_config
from agentcfg.config.storage import reset_storage_selection


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Keep every test away from the real home directory and keyring switches."""
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.delenv("AGENTCFG_IN_MEMORY_CONFIG", raising=False)
    monkeypatch.delenv("AGENTCFG_DISABLE_KEYRING", raising=False)
    monkeypatch.delenv("AGENTCFG_LOG_LEVEL", raising=False)

    reset_memory_values()
    reset_config()
    reset_storage_selection()
    yield
    reset_memory_values()
    reset_config()
    reset_storage_selection()


@pytest.fixture
def restore_root_logger():
    """setup_logging() replaces root handlers; put them back afterwards."""
    root = logging.getLogger()
    package_logger = logging.getLogger("agentcfg")
    handlers = root.handlers[:]
    level = root.level
    package_level = package_logger.level
    yield root
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        if handler not in handlers:
            handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
    package_logger.setLevel(package_level)


@pytest.fixture
def fake_keyring(monkeypatch):
    """In-process stand-in for the ``keyring`` module.

    Behaves like a real keyring: ``get_password`` returns None for a
    missing credential.
    """
    vault: dict[tuple[str, str], str] = {}

    mock = MagicMock()
    mock.get_password.side_effect = lambda service, user: vault.get((service, user))
    mock.set_password.side_effect = lambda service, user, value: vault.__setitem__(
        (service, user), value
    )
    mock.vault = vault

    monkeypatch.setitem(sys.modules, "keyring", mock)
    return mock
