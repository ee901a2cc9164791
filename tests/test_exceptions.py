"""Tests for exception messages and details."""

from pathlib import Path

from messmeter.exceptions import (
    BinaryFileError,
    EmptyRegistryError,
    FileTooLargeError,
    InvalidConfigError,
    InvalidPathError,
    MessMeterError,
)


class TestMessMeterError:
    """Rendering of the message plus the details it does not already show."""

    def test_plain_message(self):
        error = MessMeterError("nothing to analyze")
        assert str(error) == "nothing to analyze"
        assert error.details == {}

    def test_details_are_strings(self):
        error = MessMeterError("too many workers", details={"workers": 64, "limit": 32})
        assert error.details == {"workers": "64", "limit": "32"}

    def test_details_already_in_message_are_not_repeated(self):
        error = InvalidPathError(Path("src"), "does not exist")
        assert str(error) == "Invalid path: src (reason: does not exist)"
        assert error.details["path"] == "src"

    def test_size_limit_rendered(self):
        error = FileTooLargeError(Path("big.py"), 2048, 1024)
        assert str(error) == "File too large: big.py (size: 2048; limit: 1024)"

    def test_underscores_become_spaces(self):
        error = BinaryFileError(Path("blob.bin"), 0.5)
        assert str(error) == "Binary content in blob.bin (non text ratio: 0.50)"

    def test_config_value_and_reason(self):
        error = InvalidConfigError("workers", 0, "must be at least 1")
        assert str(error) == "Invalid configuration for workers: 0 (reason: must be at least 1)"

    def test_empty_values_skipped(self):
        error = MessMeterError("bad weights", details={"reason": ""})
        assert str(error) == "bad weights"

    def test_no_details(self):
        assert str(EmptyRegistryError()) == "Language registry is empty; nothing can be analyzed"
