"""Per-file analysis exceptions: file access, language support, binary content.

None of these abort a run. The orchestrator converts them into
``UnanalyzedFile`` records.
"""

from pathlib import Path

from .base import MessMeterError


class AnalysisError(MessMeterError):
    """Base class for analysis-related errors."""
    pass


class FileAccessError(AnalysisError):
    """Raised when a file cannot be accessed or read."""

    def __init__(self, filepath: Path, reason: str):
        super().__init__(
            f"Cannot access file: {filepath}",
            details={"filepath": str(filepath), "reason": reason},
        )
        self.filepath = filepath
        self.reason = reason


class UnsupportedLanguageError(AnalysisError):
    """Raised when no LanguageProfile matches a file's extension."""

    def __init__(self, filepath: Path, extension: str):
        super().__init__(
            f"Unsupported language for {filepath}",
            details={"filepath": str(filepath), "extension": extension or "<none>"},
        )
        self.filepath = filepath
        self.extension = extension


class BinaryFileError(AnalysisError):
    """Raised when file content looks binary rather than text."""

    def __init__(self, filepath: Path, ratio: float):
        super().__init__(
            f"Binary content in {filepath}",
            details={"filepath": str(filepath), "non_text_ratio": f"{ratio:.2f}"},
        )
        self.filepath = filepath
        self.ratio = ratio


class FileTooLargeError(AnalysisError):
    """Raised when a file exceeds the configured size limit."""

    def __init__(self, filepath: Path, size: int, limit: int):
        super().__init__(
            f"File too large: {filepath}",
            details={"filepath": str(filepath), "size": str(size), "limit": str(limit)},
        )
        self.filepath = filepath
        self.size = size
        self.limit = limit
