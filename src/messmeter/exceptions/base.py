"""Root of the messmeter exception hierarchy."""

from typing import Any, Dict, Mapping, Optional


class MessMeterError(Exception):
    """Base exception for all messmeter errors.

    ``details`` holds structured context (paths, limits, offending values)
    as strings. ``str()`` appends only the details the message does not
    already show, e.g. ``Invalid path: src (reason: does not exist)``.
    """

    def __init__(self, message: str, details: Optional[Mapping[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details: Dict[str, str] = {key: str(value) for key, value in (details or {}).items()}

    @property
    def context(self) -> Dict[str, str]:
        """Details whose value is not already part of the message."""
        return {key: value for key, value in self.details.items() if value and value not in self.message}

    def __str__(self) -> str:
        context = self.context
        if not context:
            return self.message
        rendered = "; ".join(f"{key.replace('_', ' ')}: {value}" for key, value in context.items())
        return f"{self.message} ({rendered})"
