from __future__ import annotations

import logging
import os
from pathlib import Path

from platformdirs import user_data_dir

__all__ = [
    "APP_NAME",
    "LEDGER_FILENAME",
    "get_data_dir",
    "default_ledger_path",
    "ensure_dir",
]

APP_NAME = "memoy"
LEDGER_FILENAME = "memoy_highscores.txt"

_logger = logging.getLogger(__name__)


def get_data_dir() -> Path:
    """Return the directory used for persistent game data.

    MEMOY_DATA_DIR overrides the OS-specific default from platformdirs:
    Linux:   ~/.local/share/memoy
    macOS:   ~/Library/Application Support/memoy
    Windows: %LOCALAPPDATA%\\memoy
    """
    override = os.getenv("MEMOY_DATA_DIR", "").strip()
    if override:
        return Path(override).expanduser()
    return Path(user_data_dir(APP_NAME, appauthor=False))


def default_ledger_path() -> Path:
    """Return the default high-score file location. Nothing is created here."""
    return get_data_dir() / LEDGER_FILENAME


def ensure_dir(path: Path) -> Path:
    """Create the directory if it doesn't exist. Log and raise on failure."""
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        _logger.error("Failed to create directory '%s': %s", path, exc)
        raise
    return path
