# tests/config/test_storage.py
"""Tests for storage mode selection and the config directory."""

from __future__ import annotations

from pathlib import Path

import pytest

from agentcfg.config.errors import DirectoryError
from agentcfg.config.paths import app_config_dir, default_config_dir
from agentcfg.config.storage import (
    FileStorage,
    KeyringStorage,
    MemoryStorage,
    get_storage_selection,
    reset_storage_selection,
    select_storage,
)


class TestDefaultConfigDir:
    def test_uses_xdg_config_home(self, tmp_path: Path) -> None:
        assert default_config_dir() == tmp_path / "xdg" / "agentcfg"

    def test_falls_back_to_home(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("XDG_CONFIG_HOME")
        assert default_config_dir() == tmp_path / "home" / ".config" / "agentcfg"

    def test_relative_xdg_is_ignored(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("XDG_CONFIG_HOME", "relative/dir")
        assert default_config_dir() == tmp_path / "home" / ".config" / "agentcfg"

    def test_windows_appdata(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr("agentcfg.config.paths.sys.platform", "win32")
        monkeypatch.setenv("APPDATA", str(tmp_path / "roaming"))
        assert default_config_dir() == tmp_path / "roaming" / "agentcfg" / "config"

    def test_no_home_raises_directory_error(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("XDG_CONFIG_HOME")

        def no_home():
            raise RuntimeError("Could not determine home directory.")

        monkeypatch.setattr(Path, "home", staticmethod(no_home))
        with pytest.raises(DirectoryError, match="home directory"):
            default_config_dir()


class TestAppConfigDir:
    def test_creates_directory(self, tmp_path: Path) -> None:
        path = app_config_dir()
        assert path.is_dir()

    def test_explicit_directory(self, tmp_path: Path) -> None:
        target = tmp_path / "custom" / "nested"
        assert app_config_dir(target) == target
        assert target.is_dir()

    def test_uncreatable_directory(self, tmp_path: Path) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")
        with pytest.raises(DirectoryError):
            app_config_dir(blocker / "sub")


class TestSelectStorage:
    def test_defaults_to_file_and_keyring(self, tmp_path: Path) -> None:
        selection = select_storage(tmp_path)
        assert selection.config == FileStorage(path=tmp_path / "config.yaml")
        assert selection.secrets == KeyringStorage(service="agentcfg")
        assert selection.permissions == FileStorage(
            path=tmp_path / "tool_permissions.json"
        )
        assert not selection.in_memory

    def test_disable_keyring_uses_secrets_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("AGENTCFG_DISABLE_KEYRING", "1")
        selection = select_storage(tmp_path)
        assert selection.config == FileStorage(path=tmp_path / "config.yaml")
        assert selection.secrets == FileStorage(path=tmp_path / "secrets.yaml")

    def test_in_memory_overrides_everything(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("AGENTCFG_IN_MEMORY_CONFIG", "true")
        monkeypatch.setenv("AGENTCFG_DISABLE_KEYRING", "1")
        target = tmp_path / "never-created"

        selection = select_storage(target)

        assert selection.config == MemoryStorage()
        assert selection.secrets == MemoryStorage()
        assert selection.permissions == MemoryStorage()
        assert selection.in_memory
        assert not target.exists()

    def test_storage_models_are_tagged(self, tmp_path: Path) -> None:
        assert MemoryStorage().kind == "memory"
        assert FileStorage(path=tmp_path).kind == "file"
        assert KeyringStorage().kind == "keyring"


class TestGetStorageSelection:
    def test_memoized_for_process(self, monkeypatch: pytest.MonkeyPatch) -> None:
        first = get_storage_selection()
        monkeypatch.setenv("AGENTCFG_IN_MEMORY_CONFIG", "1")
        assert get_storage_selection() is first

        reset_storage_selection()
        assert get_storage_selection().in_memory
