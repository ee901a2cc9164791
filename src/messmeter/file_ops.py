"""
File intake for messmeter.

Directory discovery with exclusion globs, size-limited reads and the binary
content heuristic.
"""

import fnmatch
import os
from pathlib import Path
from typing import Optional

from .config import AnalysisConfig
from .exceptions import BinaryFileError, FileAccessError, FileTooLargeError, InvalidPathError
from .logging_config import get_logger

logger = get_logger(__name__)

# Control bytes that legitimately appear in text files.
_TEXT_CONTROL_BYTES = frozenset(b"\t\n\r\f\b\x1b")


def sniff_binary(data: bytes, threshold: float = 0.3) -> Optional[float]:
    """
    Decide whether a byte sample looks binary.

    Args:
        data: Leading bytes of the file
        threshold: Share of non-text bytes above which the sample is binary

    Returns:
        The non-text byte ratio when the sample is binary, else None.
        A NUL byte always marks the sample binary (ratio 1.0).
    """
    if not data:
        return None
    if b"\x00" in data:
        return 1.0

    non_text = sum(1 for b in data if (b < 0x20 and b not in _TEXT_CONTROL_BYTES) or b == 0x7F)
    ratio = non_text / len(data)
    if ratio > threshold:
        return ratio
    return None


def read_source(filepath: Path, config: AnalysisConfig) -> str:
    """
    Read a source file as text after size and binary checks.

    Invalid UTF-8 sequences are replaced rather than rejected, so legacy
    encodings still scan.

    Raises:
        FileAccessError: If the file cannot be read
        FileTooLargeError: If the file exceeds ``config.max_file_size_mb``
        BinaryFileError: If the content sniff says binary
    """
    try:
        size = filepath.stat().st_size
    except OSError as e:
        raise FileAccessError(filepath, f"stat failed: {e}")

    limit = config.max_file_size_bytes
    if size > limit:
        raise FileTooLargeError(filepath, size, limit)

    try:
        with open(filepath, "rb") as f:
            data = f.read()
    except OSError as e:
        raise FileAccessError(filepath, f"OS error: {e}")

    ratio = sniff_binary(data[: config.sniff_bytes], config.binary_ratio_threshold)
    if ratio is not None:
        raise BinaryFileError(filepath, ratio)

    text = data.decode("utf-8", errors="replace")
    if text.startswith("\ufeff"):
        text = text[1:]
    return text


def should_skip_file(filepath: Path, exclude_patterns: list[str], root: Optional[Path] = None) -> bool:
    """
    Check if a file should be skipped based on exclusion patterns.

    A pattern of the form ``dir/*`` excludes every file below any directory
    named ``dir``. Other patterns are matched against the file name and the
    path relative to ``root``.

    Args:
        filepath: File to check
        exclude_patterns: List of glob patterns to exclude
        root: Directory the patterns are relative to

    Returns:
        True if file should be skipped
    """
    rel = filepath
    if root is not None:
        try:
            rel = filepath.relative_to(root)
        except ValueError:
            rel = filepath
    rel_posix = rel.as_posix()
    dir_parts = rel.parts[:-1]

    for pattern in exclude_patterns:
        if pattern.endswith("/*") and "/" not in pattern[:-2]:
            dir_pattern = pattern[:-2]
            if any(fnmatch.fnmatch(part, dir_pattern) for part in dir_parts):
                return True
        if fnmatch.fnmatch(filepath.name, pattern) or fnmatch.fnmatch(rel_posix, pattern):
            return True
        if rel.match(pattern):
            return True
    return False


def discover_files(root: Path, config: AnalysisConfig) -> list[Path]:
    """
    Enumerate candidate files below ``root`` in sorted order.

    Language support is not checked here: unsupported files are reported as
    unanalyzed by the orchestrator. Hidden entries are skipped unless
    ``config.allow_hidden_files`` is set.

    Raises:
        InvalidPathError: If ``root`` does not exist
    """
    root = Path(root)
    if not root.exists():
        raise InvalidPathError(root, "does not exist")
    if root.is_file():
        return [root]
    if not root.is_dir():
        raise InvalidPathError(root, "not a file or directory")

    found: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root, followlinks=config.follow_symlinks):
        current = Path(dirpath)
        if not config.allow_hidden_files:
            dirnames[:] = [d for d in dirnames if not d.startswith(".")]
        dirnames.sort()

        for name in sorted(filenames):
            if not config.allow_hidden_files and name.startswith("."):
                continue
            path = current / name
            if path.is_symlink() and not config.follow_symlinks:
                continue
            if should_skip_file(path, config.exclude_patterns, root):
                logger.debug(f"Excluded by pattern: {path}")
                continue
            found.append(path)

    found.sort()
    logger.debug(f"Discovered {len(found)} files under {root}")
    return found
