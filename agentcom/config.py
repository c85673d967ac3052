"""Location of the agentcom home directory and the files kept in it."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_DIR_NAME = ".agentcom"
"""Directory created under the user's home when no override is given."""

ENV_HOME = "AGENTCOM_HOME"
"""Environment variable that overrides the base directory."""

DB_FILE_NAME = "agentcom.db"
"""File name of the SQLite database."""

SOCKETS_DIR = "sockets"
"""Subdirectory holding the agents' Unix domain sockets."""


@dataclass(frozen=True)
class Config:
    """Resolved paths used by agentcom."""

    home_dir: str
    db_path: str
    sockets_path: str

    def ensure_dirs(self) -> None:
        """Create the base directory and every required subdirectory."""
        for directory in (self.home_dir, self.sockets_path):
            os.makedirs(directory, mode=0o755, exist_ok=True)


def load() -> Config:
    """Resolve the configuration from the environment and defaults.

    Directories are not created; call :meth:`Config.ensure_dirs` for that.
    """
    home_dir = _resolve_home_dir()
    return Config(
        home_dir=home_dir,
        db_path=os.path.join(home_dir, DB_FILE_NAME),
        sockets_path=os.path.join(home_dir, SOCKETS_DIR),
    )


def _resolve_home_dir() -> str:
    """Return ``$AGENTCOM_HOME`` if set and non-empty, else ``~/.agentcom``."""
    override = os.environ.get(ENV_HOME, "")
    if override:
        return override
    return os.path.join(str(Path.home()), DEFAULT_DIR_NAME)