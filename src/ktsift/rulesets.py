"""
Rule-set archives: check that each path exists and turn it into a locator
(an absolute `file://` URI) the lint engine can load.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from ktsift.paths import expand_tilde


class MissingArchiveError(FileNotFoundError):
    """A rule-set archive path does not exist. `path` is the path as given."""

    def __init__(self, path: str) -> None:
        super().__init__(f"{path} does not exist")
        self.path: str = path


def to_locators(paths: Sequence[str]) -> list[str]:
    """
    Convert archive paths to `file://` URIs, expanding a leading `~` first.
    Raises `MissingArchiveError` for the first path that does not exist.
    """
    locators: list[str] = []
    for raw_path in paths:
        archive = Path(expand_tilde(raw_path))
        if not archive.exists():
            raise MissingArchiveError(raw_path)
        locators.append(archive.resolve().as_uri())
    return locators
