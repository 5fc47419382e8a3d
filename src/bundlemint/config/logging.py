"""Shared logging helpers for bundlemint."""

from __future__ import annotations

import logging

from .env import optional_env_var

LOG_LEVEL_ENV_VAR = "BUNDLEMINT_LOG_LEVEL"


def configure_logging(*, level: int | None = None, force: bool = False) -> None:
    """Initialise the root logger once with sensible defaults.

    Parameters mirror ``logging.basicConfig`` with a simplified contract: the
    level defaults to ``BUNDLEMINT_LOG_LEVEL`` (a level name) or INFO, with a
    terse format suitable for CLI output. Pass ``force=True`` to reconfigure
    during tests or specialised entry points.
    """

    logging.basicConfig(
        level=level if level is not None else _level_from_environment(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )


def _level_from_environment() -> int:
    name = optional_env_var(LOG_LEVEL_ENV_VAR)
    if name is None:
        return logging.INFO
    level = logging.getLevelNamesMapping().get(name.upper())
    return level if level is not None else logging.INFO
