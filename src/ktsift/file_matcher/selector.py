"""Ordered include/exclude evaluation of a single path against a `PatternSet`."""

from __future__ import annotations

from collections.abc import Sequence
from os import PathLike

from ktsift.file_matcher.patterns import PatternSet, compile_patterns


class Selector:
    """
    Decides whether a root-relative path is selected by an ordered pattern list.

    This is not "last match wins". Evaluation carries a `selected` flag from left
    to right and only the pattern kind relevant to the current state can act:

    - While unselected, an include pattern sets the flag to its match result and
      an exclude pattern is skipped.
    - While selected, a matching exclude pattern clears the flag and an include
      pattern is skipped.

    So a later include can re-select a path that an earlier exclude dropped, and
    a pattern that never matches a path has no effect on it. A list of only
    exclude patterns selects nothing.

    Paths must be relative to the same root the patterns are written against.
    """

    def __init__(self, pattern_set: PatternSet) -> None:
        self._pattern_set: PatternSet = pattern_set

    @classmethod
    def from_patterns(cls, raw_patterns: Sequence[str]) -> Selector:
        """Compile `raw_patterns` (or the defaults, if empty) and wrap them."""
        return cls(compile_patterns(raw_patterns))

    @property
    def pattern_set(self) -> PatternSet:
        return self._pattern_set

    def matches(self, path: str | PathLike[str]) -> bool:
        selected = False
        for pattern in self._pattern_set:
            if selected:
                if pattern.is_exclude and pattern.matches(path):
                    selected = False
            elif not pattern.is_exclude:
                selected = pattern.matches(path)
        return selected
