"""
Boundary to the lint/format engine.

The engine itself lives outside this package. It is any object with `lint()` and
`format()` methods taking an `EngineParams`; see `LintEngine`.
"""

from __future__ import annotations

import importlib
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True)
class LintError:
    """One finding reported by the engine."""

    line: int
    col: int
    rule_id: str
    detail: str
    can_be_auto_corrected: bool = False


# Called once per finding, with whether the engine corrected it.
LintCallback = Callable[[LintError, bool], None]


def _ignore_finding(_error: LintError, _corrected: bool) -> None:
    pass


@dataclass(frozen=True)
class EngineParams:
    file_name: str
    text: str
    rule_sets: Sequence[str]
    user_data: Mapping[str, str] = field(default_factory=dict)
    script: bool = False
    editorconfig_path: str | None = None
    debug: bool = False
    cb: LintCallback = _ignore_finding


@runtime_checkable
class LintEngine(Protocol):
    def lint(self, params: EngineParams) -> None: ...

    def format(self, params: EngineParams) -> str: ...


def is_script(file_name: str) -> bool:
    """Anything not ending in `.kt` (any case) is linted as a Kotlin script."""
    return not file_name.lower().endswith(".kt")


def lint_file(
    engine: LintEngine,
    file_name: str,
    file_contents: str,
    rule_sets: Sequence[str],
    user_data: Mapping[str, str] | None = None,
    editorconfig_path: str | None = None,
    debug: bool = False,
    lint_error_callback: Callable[[LintError], None] | None = None,
) -> None:
    """Lint a Kotlin source or script file, reporting each finding to the callback."""

    def cb(error: LintError, _corrected: bool) -> None:
        if lint_error_callback is not None:
            lint_error_callback(error)

    engine.lint(
        EngineParams(
            file_name=file_name,
            text=file_contents,
            rule_sets=rule_sets,
            user_data=user_data or {},
            script=is_script(file_name),
            editorconfig_path=editorconfig_path,
            debug=debug,
            cb=cb,
        )
    )


def format_file(
    engine: LintEngine,
    file_name: str,
    file_contents: str,
    rule_sets: Sequence[str],
    user_data: Mapping[str, str],
    editorconfig_path: str | None,
    debug: bool,
    cb: LintCallback,
) -> str:
    """Format a Kotlin source or script file and return the corrected text."""
    return engine.format(
        EngineParams(
            file_name=file_name,
            text=file_contents,
            rule_sets=rule_sets,
            user_data=user_data,
            script=is_script(file_name),
            editorconfig_path=editorconfig_path,
            debug=debug,
            cb=cb,
        )
    )


def load_engine(spec: str) -> LintEngine:
    """
    Load an engine from a `module:attribute` string. If the attribute is not an
    engine itself (a class or factory function), it is called with no arguments.
    Raises `ValueError` if the string is malformed or doesn't resolve to an engine.
    """
    module_name, sep, attr_name = spec.partition(":")
    if not sep or not module_name or not attr_name:
        raise ValueError(f"Engine must be given as 'module:attribute', got {spec!r}")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ValueError(f"Cannot import engine module {module_name!r}: {e}") from e

    obj: Any = module
    for part in attr_name.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise ValueError(f"Engine {spec!r} not found: {e}") from e

    if isinstance(obj, type) or not isinstance(obj, LintEngine):
        if not callable(obj):
            raise ValueError(f"Engine {spec!r} is not a lint engine")
        obj = obj()

    if not isinstance(obj, LintEngine):
        raise ValueError(f"Engine {spec!r} does not provide lint() and format()")
    return obj
