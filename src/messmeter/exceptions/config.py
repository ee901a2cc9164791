"""Configuration exceptions: paths, settings, weight tables, language registry.

These are fatal and raised before any file is processed.
"""

from pathlib import Path
from typing import Any, Mapping

from .base import MessMeterError


class ConfigurationError(MessMeterError):
    """Base class for configuration-related errors."""

    pass


class InvalidPathError(ConfigurationError):
    """Raised when a provided path is invalid."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Invalid path: {path}", details={"path": str(path), "reason": reason})
        self.path = path
        self.reason = reason


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


class InvalidWeightsError(ConfigurationError):
    """Raised when the metric weight table cannot be used for scoring."""

    def __init__(self, weights: Mapping[str, float], reason: str):
        table = ", ".join(f"{k}={v}" for k, v in weights.items())
        super().__init__(
            f"Invalid metric weights: {reason}",
            details={"weights": table, "reason": reason},
        )
        self.weights = dict(weights)
        self.reason = reason


class EmptyRegistryError(ConfigurationError):
    """Raised when no language profiles are registered."""

    def __init__(self) -> None:
        super().__init__("Language registry is empty; nothing can be analyzed")
