"""Exception hierarchy for messmeter."""

from .analysis import (
    AnalysisError,
    BinaryFileError,
    FileAccessError,
    FileTooLargeError,
    UnsupportedLanguageError,
)
from .base import MessMeterError
from .config import (
    ConfigurationError,
    EmptyRegistryError,
    InvalidConfigError,
    InvalidPathError,
    InvalidWeightsError,
)

__all__ = [
    "MessMeterError",
    "AnalysisError",
    "FileAccessError",
    "UnsupportedLanguageError",
    "BinaryFileError",
    "FileTooLargeError",
    "ConfigurationError",
    "InvalidPathError",
    "InvalidConfigError",
    "InvalidWeightsError",
    "EmptyRegistryError",
]
