"""
TOML config file loading for ktsift.

A config file is `.ktsift.toml`, `ktsift.toml`, or a `pyproject.toml` with a
`[tool.ktsift]` table, looked up from the working directory towards the
filesystem root. Settings may be written flat or grouped under `[selection]`
and `[lint]`. The `[user-data]` table is forwarded to the engine.

Explicit CLI flags win over the config file, which wins over built-in defaults.
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, TypeVar, cast

if sys.version_info >= (3, 11):
    import tomllib  # pyright: ignore[reportUnreachable]
else:
    import tomli as tomllib  # type: ignore[no-redef]  # pyright: ignore[reportUnreachable]


@dataclass
class KtsiftConfig:
    """
    Settings read from a config file. A field is `None` when the file does not
    set it, so it never overrides a CLI default.
    """

    # [selection]
    patterns: list[str] | None = None
    relative: bool | None = None
    # [lint]
    engine: str | None = None
    ruleset: list[str] | None = None
    editorconfig: str | None = None
    debug: bool | None = None
    limit: int | None = None
    # [user-data]
    user_data: dict[str, str] | None = None

    def values_set(self) -> dict[str, Any]:
        """The settings the config file actually sets, by field name."""
        return {
            f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None
        }


_CONFIG_FILENAMES = (".ktsift.toml", "ktsift.toml")
_PYPROJECT = "pyproject.toml"

# Grouping tables whose keys are read as if written at the top level.
_SECTIONS = ("selection", "lint")


def _string_list(value: Any) -> list[str]:
    # A lone string is a one-item list, not a sequence of characters.
    if isinstance(value, str):
        return [value]
    if isinstance(value, list) and all(isinstance(v, str) for v in cast(list[Any], value)):
        return cast(list[str], value)
    raise TypeError("expected a list of strings")


def _string(value: Any) -> str:
    if isinstance(value, str):
        return value
    raise TypeError("expected a string")


def _flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    raise TypeError("expected true or false")


def _count(value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
        return value
    raise TypeError("expected a non-negative integer")


def _scalar_text(value: Any) -> str:
    # TOML booleans are written lowercase, keep them that way.
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (str, int, float)):
        return str(value)
    raise TypeError("expected a table of strings, numbers or booleans")


def _string_table(value: Any) -> dict[str, str]:
    if not isinstance(value, dict):
        raise TypeError("expected a table")
    return {str(k): _scalar_text(v) for k, v in cast(dict[str, Any], value).items()}


# Config field name -> converter that validates the raw TOML value.
_CONVERTERS: dict[str, Callable[[Any], Any]] = {
    "patterns": _string_list,
    "relative": _flag,
    "engine": _string,
    "ruleset": _string_list,
    "editorconfig": _string,
    "debug": _flag,
    "limit": _count,
    "user_data": _string_table,
}


def _tool_table(pyproject: Path) -> dict[str, Any] | None:
    """The `[tool.ktsift]` table of a pyproject file, or `None` if it has none."""
    try:
        data = tomllib.loads(pyproject.read_text())
    except (tomllib.TOMLDecodeError, UnicodeDecodeError, OSError):
        return None
    table = data.get("tool", {}).get("ktsift")
    return cast(dict[str, Any], table) if isinstance(table, dict) else None


def find_config_file(start_dir: Path) -> Path | None:
    """
    Return the nearest config file at or above `start_dir`, or `None`. Within one
    directory `.ktsift.toml` beats `ktsift.toml`, which beats a `pyproject.toml`
    with a `[tool.ktsift]` table.
    """
    start = start_dir.resolve()
    for directory in (start, *start.parents):
        for name in _CONFIG_FILENAMES:
            candidate = directory / name
            if candidate.is_file():
                return candidate
        pyproject = directory / _PYPROJECT
        if pyproject.is_file() and _tool_table(pyproject) is not None:
            return pyproject
    return None


def load_config(config_path: Path) -> KtsiftConfig:
    """
    Read a config file. A file that isn't valid TOML produces a warning and an
    empty config; unknown keys and badly typed values are warned about and skipped.
    """
    try:
        data = tomllib.loads(config_path.read_text())
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
        print(f"Warning: ignoring malformed config file {config_path}: {e}", file=sys.stderr)
        return KtsiftConfig()

    if config_path.name == _PYPROJECT:
        data = data.get("tool", {}).get("ktsift", {})

    return _parse_config_data(data)


def _parse_config_data(data: dict[str, Any]) -> KtsiftConfig:
    settings: dict[str, Any] = {}
    for key, value in data.items():
        if key in _SECTIONS and isinstance(value, dict):
            settings.update(cast(dict[str, Any], value))
        else:
            settings[key] = value

    values: dict[str, Any] = {}
    for key, value in settings.items():
        name = key.replace("-", "_")
        convert = _CONVERTERS.get(name)
        if convert is None:
            print(f"Warning: unrecognized config key {key!r}", file=sys.stderr)
            continue
        try:
            values[name] = convert(value)
        except TypeError as e:
            print(f"Warning: ignoring config key {key!r}: {e}", file=sys.stderr)

    return KtsiftConfig(**values)


_T = TypeVar("_T")


def merge_cli_with_config(
    cli_opts: _T,
    config: KtsiftConfig | None,
    explicit_flags: set[str],
) -> _T:
    """
    Copy config settings onto `cli_opts`, except for options named in
    `explicit_flags` (the ones given on the command line).
    """
    if config is not None:
        for name, value in config.values_set().items():
            if name not in explicit_flags and hasattr(cli_opts, name):
                setattr(cli_opts, name, value)
    return cli_opts
