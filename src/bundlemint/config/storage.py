"""Where the identifier counter store lives."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import optional_env_var

APP_DIR_NAME: Final[str] = "bundlemint"
COUNTER_DB_FILENAME: Final[str] = "identifiers.db"
DATA_DIR_ENV_VAR: Final[str] = "BUNDLEMINT_DATA_DIR"
DATABASE_URI_ENV_VAR: Final[str] = "DATABASE_URI"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    """On-disk location of the counter database, used when no URI is configured."""

    data_dir: Path
    database_filename: str = COUNTER_DB_FILENAME

    @property
    def database_path(self) -> Path:
        return self.data_dir.expanduser().resolve() / self.database_filename

    def database_uri(self, *, create_dir: bool = True) -> str:
        path = self.database_path
        if create_dir:
            path.parent.mkdir(parents=True, exist_ok=True)
        return f"sqlite+pysqlite:///{path}"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def default_data_dir() -> Path:
    """Per-user data directory (``%LOCALAPPDATA%`` on Windows, XDG elsewhere)."""

    if os.name == "nt":
        root = optional_env_var("LOCALAPPDATA") or str(Path.home() / "AppData" / "Local")
    else:
        root = optional_env_var("XDG_DATA_HOME") or str(Path.home() / ".local" / "share")
    return Path(root).expanduser().resolve() / APP_DIR_NAME


def get_storage_config() -> StorageConfig:
    data_dir = optional_env_var(DATA_DIR_ENV_VAR)
    return StorageConfig(data_dir=Path(data_dir) if data_dir else default_data_dir())


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    uri = optional_env_var(DATABASE_URI_ENV_VAR)
    if uri is None:
        uri = (storage or get_storage_config()).database_uri()
    return DatabaseConfig(uri=uri)
