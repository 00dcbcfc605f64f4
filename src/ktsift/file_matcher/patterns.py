"""
Compilation of raw pattern strings into an ordered `PatternSet`.

A raw pattern looks like one of::

    src/**/*.kt          include, glob
    !**/build/**         exclude, glob
    glob:**/*.kts        include, glob (explicit prefix)
    regex:.*Test\\.kt     include, regex
    regex:!gen/.*        exclude, regex

Glob syntax, matched against the whole root-relative path with `/` separators:

- `**` matches any run of characters, slashes included. `**/` at the start of
  the pattern or right after a `/` also matches zero directories. This differs
  from the JVM `glob:` syntax, where `**/*.kt` needs at least one directory.
- `*` matches any run of characters within one path segment.
- `?` matches a single character within one path segment.
- `[abc]`, `[a-z]`, `[!abc]` are bracket classes. They never match `/`.
- `{kt,kts}` matches any of the comma separated alternatives. Groups do not nest.
- `\\` escapes the next character.

Regex syntax is a Python regular expression that must match the full path.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from enum import Enum
from os import PathLike

from pathspec.pattern import RegexPattern
from pathspec.util import normalize_file

from ktsift.file_matcher.defaults import DEFAULT_PATTERNS
from ktsift.file_matcher.errors import InvalidPatternError


class Polarity(Enum):
    include = "include"
    exclude = "exclude"


class Syntax(Enum):
    glob = "glob"
    regex = "regex"


def glob_to_regex(glob: str) -> str:
    """
    Translate a glob into an anchored regular expression string.
    Raises `ValueError` on malformed input.
    """
    if not glob:
        raise ValueError("empty pattern")

    out = ["^"]
    in_group = False
    i, end = 0, len(glob)
    while i < end:
        start = i
        char = glob[i]
        i += 1

        if char == "\\":
            if i >= end:
                raise ValueError("escape character at end of pattern")
            out.append(re.escape(glob[i]))
            i += 1

        elif char == "*":
            if i < end and glob[i] == "*":
                i += 1
                at_segment_start = start == 0 or glob[start - 1] == "/"
                if at_segment_start and i < end and glob[i] == "/":
                    i += 1
                    out.append("(?:.*/)?")
                else:
                    out.append(".*")
            else:
                out.append("[^/]*")

        elif char == "?":
            out.append("[^/]")

        elif char == "[":
            expr, i = _translate_bracket(glob, i)
            out.append(expr)

        elif char == "{":
            if in_group:
                raise ValueError("nested '{' groups are not supported")
            in_group = True
            out.append("(?:")

        elif char == "}" and in_group:
            in_group = False
            out.append(")")

        elif char == "," and in_group:
            out.append("|")

        else:
            out.append(re.escape(char))

    if in_group:
        raise ValueError("missing '}'")

    out.append(r"\Z")
    return "".join(out)


def _translate_bracket(glob: str, i: int) -> tuple[str, int]:
    """
    Translate the bracket class whose body starts at index `i` (just past the `[`).
    Returns the regex class and the index just past the closing `]`.
    """
    end = len(glob)
    expr = "["
    if i < end and glob[i] in "!^":
        # Negated classes must still stay within one path segment.
        expr += "^/"
        i += 1
    if i < end and glob[i] == "]":
        expr += "\\]"
        i += 1

    while i < end and glob[i] != "]":
        char = glob[i]
        if char == "/":
            raise ValueError("'/' is not allowed in a bracket class")
        if char == "\\":
            i += 1
            if i >= end:
                break
            expr += re.escape(glob[i])
        elif char == "-":
            expr += "-"
        else:
            expr += re.escape(char)
        i += 1

    if i >= end:
        raise ValueError("missing ']'")

    return expr + "]", i + 1


class GlobPattern(RegexPattern):
    """A pathspec pattern for the glob syntax above. Always an include pattern."""

    __slots__ = ()

    @classmethod
    def pattern_to_regex(cls, pattern: str) -> tuple[str, bool]:  # pyright: ignore[reportIncompatibleMethodOverride]
        return glob_to_regex(pattern), True


class FullRegexPattern(RegexPattern):
    """A pathspec pattern for a regex that must match the entire path."""

    __slots__ = ()

    @classmethod
    def pattern_to_regex(cls, pattern: str) -> tuple[str, bool]:  # pyright: ignore[reportIncompatibleMethodOverride]
        if not pattern:
            raise ValueError("empty pattern")
        return f"^(?:{pattern})\\Z", True


_MATCHER_TYPES: dict[Syntax, type[RegexPattern]] = {
    Syntax.glob: GlobPattern,
    Syntax.regex: FullRegexPattern,
}


@dataclass(frozen=True)
class Pattern:
    """
    One compiled inclusion or exclusion rule. `raw` is kept for diagnostics only.
    """

    polarity: Polarity
    syntax: Syntax
    matcher: RegexPattern
    raw: str

    @property
    def is_exclude(self) -> bool:
        return self.polarity is Polarity.exclude

    def matches(self, path: str | PathLike[str]) -> bool:
        """Test a root-relative path. OS separators are normalized to `/`."""
        return self.matcher.match_file(normalize_file(path)) is not None


@dataclass(frozen=True)
class PatternSet:
    """Ordered, immutable sequence of compiled patterns."""

    patterns: tuple[Pattern, ...]

    def __iter__(self) -> Iterator[Pattern]:
        return iter(self.patterns)

    def __len__(self) -> int:
        return len(self.patterns)

    @property
    def raw(self) -> list[str]:
        return [p.raw for p in self.patterns]


def compile_pattern(raw: str) -> Pattern:
    """
    Compile a single raw pattern, reading its optional `regex:` / `glob:` prefix
    and then its optional `!` negation.
    """
    syntax = Syntax.glob
    body = raw
    for candidate in Syntax:
        prefix = f"{candidate.value}:"
        if body.startswith(prefix):
            syntax = candidate
            body = body[len(prefix) :]
            break

    polarity = Polarity.include
    if body.startswith("!"):
        polarity = Polarity.exclude
        body = body[1:]

    try:
        matcher = _MATCHER_TYPES[syntax](body)
    except (ValueError, re.error) as e:
        raise InvalidPatternError(raw, str(e)) from e

    return Pattern(polarity=polarity, syntax=syntax, matcher=matcher, raw=raw)


def compile_patterns(raw_patterns: Sequence[str]) -> PatternSet:
    """
    Compile raw patterns in order. An empty sequence yields `DEFAULT_PATTERNS`.
    Raises `InvalidPatternError` on the first pattern that fails to compile.
    """
    if not raw_patterns:
        raw_patterns = DEFAULT_PATTERNS
    return PatternSet(tuple(compile_pattern(raw) for raw in raw_patterns))
