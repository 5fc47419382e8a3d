"""Configuration error definitions."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Raised when configuration values are invalid."""


class MissingConfigurationError(ConfigurationError):
    """Raised when required configuration values are absent or blank."""


class InvalidConfigurationError(ConfigurationError):
    """Raised when a configuration value is present but malformed."""

    def __init__(self, name: str, value: str, reason: str) -> None:
        super().__init__(f"Invalid configuration for {name}={value!r}: {reason}")
        self.name = name
        self.value = value
