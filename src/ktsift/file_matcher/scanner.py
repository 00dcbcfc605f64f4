"""
Lazy top-down walk of a root directory, yielding the files a `Selector` accepts.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from pathlib import Path

from ktsift.file_matcher.errors import RootUnavailableError, ScanEntryError
from ktsift.file_matcher.selector import Selector

OnError = Callable[[ScanEntryError], None]


@dataclass(frozen=True)
class ScanResult:
    """A selected file. `path` is absolute; `root` is the canonical scan root."""

    path: Path
    root: Path

    @property
    def relative_path(self) -> Path:
        return self.path.relative_to(self.root)

    def location(self, relative: bool) -> str:
        """Render the path relative to the scan root, or as an absolute path."""
        return str(self.relative_path) if relative else str(self.path)


class TreeScanner:
    """
    Walks `root` and yields every regular file the patterns select.

    Patterns are compiled on construction, so `InvalidPatternError` is raised
    before any filesystem access. The walk itself is a generator: each step does
    only the I/O needed for the next result, and stopping early leaves no open
    directory handles.

    Entries are visited in name order. Symlinks to directories are not followed;
    symlinks to files are treated as files. A directory or entry that cannot be
    read is reported to `on_error` as a `ScanEntryError` and skipped. Failing to
    open the root raises `RootUnavailableError`.
    """

    def __init__(
        self,
        root: str | Path,
        patterns: Sequence[str] = (),
        on_error: OnError | None = None,
    ) -> None:
        self._selector: Selector = Selector.from_patterns(patterns)
        self._root: Path = Path(root).resolve()
        self._on_error: OnError | None = on_error

    @property
    def root(self) -> Path:
        return self._root

    @property
    def selector(self) -> Selector:
        return self._selector

    def scan(self) -> Iterator[ScanResult]:
        try:
            root_iter = os.scandir(self._root)
        except OSError as e:
            raise RootUnavailableError(self._root, e.strerror or str(e)) from e
        with root_iter as it:
            try:
                entries = sorted(it, key=lambda entry: entry.name)
            except OSError as e:
                raise RootUnavailableError(self._root, e.strerror or str(e)) from e

        # One iterator per open directory level, innermost last. A subdirectory
        # is listed only when the walk reaches it.
        pending: list[Iterator[os.DirEntry[str]]] = [iter(entries)]
        while pending:
            entry = next(pending[-1], None)
            if entry is None:
                pending.pop()
                continue

            path = Path(entry.path)
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
                is_file = not is_dir and entry.is_file()
            except OSError as e:
                self._report(path, e)
                continue

            if is_dir:
                children = self._list(path)
                if children:
                    pending.append(iter(children))
            elif is_file and self._selector.matches(path.relative_to(self._root)):
                yield ScanResult(path=path, root=self._root)

    def _list(self, directory: Path) -> list[os.DirEntry[str]]:
        try:
            with os.scandir(directory) as it:
                return sorted(it, key=lambda entry: entry.name)
        except OSError as e:
            self._report(directory, e)
            return []

    def _report(self, path: Path, error: OSError) -> None:
        if self._on_error is not None:
            self._on_error(ScanEntryError(path, error))


def scan(
    root: str | Path,
    patterns: Sequence[str] = (),
    on_error: OnError | None = None,
) -> Iterator[ScanResult]:
    """Convenience wrapper: `TreeScanner(root, patterns, on_error).scan()`."""
    return TreeScanner(root, patterns, on_error).scan()
