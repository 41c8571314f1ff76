"""Platform-specific application directory.

- macOS/Linux: ``$XDG_CONFIG_HOME/agentcfg`` or ``~/.config/agentcfg``
- Windows:     ``%APPDATA%\\agentcfg\\config``
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from agentcfg.config.defaults import APP_NAME
from agentcfg.config.env_vars import EnvVar, get_env
from agentcfg.config.errors import DirectoryError

logger = logging.getLogger(__name__)

# Platform names (from sys.platform)
PLATFORM_WINDOWS = "win32"


def default_config_dir() -> Path:
    """Return the config directory for this platform without creating it.

    Raises:
        DirectoryError: If no home directory can be determined
    """
    try:
        if sys.platform == PLATFORM_WINDOWS:
            appdata = get_env(EnvVar.APPDATA)
            root = (
                Path(appdata) if appdata else Path.home() / "AppData" / "Roaming"
            )
            return root / APP_NAME / "config"

        xdg = get_env(EnvVar.XDG_CONFIG_HOME)
        if xdg and Path(xdg).is_absolute():
            return Path(xdg) / APP_NAME
        return Path.home() / ".config" / APP_NAME
    except RuntimeError as exc:
        # Path.home() raises RuntimeError when HOME cannot be resolved
        raise DirectoryError(f"{APP_NAME} requires a home directory: {exc}") from exc


def app_config_dir(config_dir: Path | None = None) -> Path:
    """Return the config directory, creating it if needed.

    Args:
        config_dir: Explicit directory, defaults to :func:`default_config_dir`

    Raises:
        DirectoryError: If the directory cannot be determined or created
    """
    path = Path(config_dir).expanduser() if config_dir else default_config_dir()
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise DirectoryError(f"{path}: {exc}") from exc

    logger.debug(f"Using config directory {path}")
    return path
