"""Exceptions raised while compiling patterns or walking a tree."""

from __future__ import annotations

from pathlib import Path


class InvalidPatternError(ValueError):
    """
    A file pattern could not be compiled under its declared syntax.
    `pattern` is the raw string exactly as the user supplied it.
    """

    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(f"Invalid pattern {pattern!r}: {reason}")
        self.pattern: str = pattern
        self.reason: str = reason


class ScanEntryError(OSError):
    """An entry under the scan root could not be read. The walk continues past it."""

    def __init__(self, path: Path, cause: OSError) -> None:
        super().__init__(f"Cannot read {path}: {cause.strerror or cause}")
        self.path: Path = path
        self.cause: OSError = cause


class RootUnavailableError(OSError):
    """The scan root itself cannot be opened as a directory."""

    def __init__(self, root: Path, reason: str) -> None:
        super().__init__(f"Cannot scan {root}: {reason}")
        self.root: Path = root
        self.reason: str = reason
