"""Atomic whole-file writes."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from agentcfg.config.errors import DirectoryError, FileError

logger = logging.getLogger(__name__)


TEMP_SUFFIX = ".tmp"


def temp_path_for(path: Path) -> Path:
    """Sibling temp file used while writing ``path``.

    Raises:
        FileError: If ``path`` itself has the temp suffix
    """
    if path.suffix == TEMP_SUFFIX:
        raise FileError(f"{path}: target must not use the {TEMP_SUFFIX} suffix")
    return path.with_suffix(TEMP_SUFFIX)


def atomic_write_text(path: Path, content: str) -> None:
    """Write ``content`` to a sibling temp file, then rename it over ``path``.

    Readers never observe a partially written file. Concurrent writers in
    other processes are not coordinated: the last rename wins.

    Raises:
        DirectoryError: If the parent directory cannot be created
        FileError: If writing or renaming fails, or ``path`` ends in ``.tmp``
    """
    tmp = temp_path_for(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise DirectoryError(f"{path.parent}: {exc}") from exc

    try:
        tmp.write_text(content, encoding="utf-8")
        os.replace(tmp, path)
    except OSError as exc:
        logger.error("Failed to write %s: %s", path, exc)
        try:
            tmp.unlink(missing_ok=True)
        except OSError:
            logger.debug("Could not remove temp file %s", tmp)
        raise FileError(f"{path}: {exc}") from exc
