"""Configuration exceptions: settings files, environment, git colour config."""

from typing import Any

from .base import ChangestatError


class ConfigurationError(ChangestatError):
    """Base class for configuration-related errors."""

    pass


class InvalidConfigError(ConfigurationError):
    """Raised when configuration values are invalid."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            f"Invalid configuration for {key}: {value}",
            details={"key": key, "value": str(value), "reason": reason},
        )
        self.key = key
        self.value = value
        self.reason = reason


class ColorParseError(ConfigurationError):
    """Raised when a colour setting cannot be parsed."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            f"Invalid color value for {key}: {value}",
            details={"key": key, "reason": reason},
        )
        self.key = key
        self.value = value
        self.reason = reason
