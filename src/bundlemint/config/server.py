"""Configuration of the server whose identifier space bundles are imported into."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .env import require_env_var
from .errors import InvalidConfigurationError

BASE_URL_ENV_VAR: Final[str] = "BUNDLEMINT_BASE_URL"


@dataclass(frozen=True, slots=True)
class ServerConfig:
    """Holds the base URL this server is reachable at."""

    base_url: str


def get_server_config(*, base_url: str | None = None) -> ServerConfig:
    """Build the server config, preferring an explicit ``base_url`` over the environment."""

    name = "--base-url" if base_url else BASE_URL_ENV_VAR
    value = base_url or require_env_var(BASE_URL_ENV_VAR)
    if not value.startswith(("http://", "https://")):
        raise InvalidConfigurationError(name, value, "expected an absolute http(s) URL")
    return ServerConfig(base_url=value.rstrip("/"))
