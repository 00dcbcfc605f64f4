#!/usr/bin/env python3
"""
ktsift: Select Kotlin files by ordered patterns and lint or format them

Common usage:
  ktsift --list-files
  ktsift --engine mylinter:Engine
  ktsift --engine mylinter:Engine --format "src/**/*.kt" "!src/test/resources/**"
  ktsift --list-files --relative "regex:.*Test\\.kts?"

Patterns are applied in order. With no patterns, all `**/*.kt` and `**/*.kts`
files under the current directory are selected. Prefix a pattern with `!` to
exclude, and with `regex:` to use a regular expression instead of a glob.
"""

from __future__ import annotations

import argparse
import importlib.metadata
import sys
from dataclasses import dataclass, field
from pathlib import Path

from ktsift.config import find_config_file, load_config, merge_cli_with_config
from ktsift.engine import LintError, load_engine
from ktsift.file_matcher import (
    InvalidPatternError,
    RootUnavailableError,
    ScanEntryError,
    TreeScanner,
)
from ktsift.paths import expand_tilde
from ktsift.rulesets import MissingArchiveError, to_locators
from ktsift.runner import FileSkippedError, run_files


@dataclass
class Options:
    """Command-line options for the ktsift tool."""

    patterns: list[str]
    format: bool
    list_files: bool
    relative: bool
    ruleset: list[str]
    editorconfig: str | None
    engine: str | None
    debug: bool
    limit: int
    version: bool
    user_data: dict[str, str] = field(default_factory=dict)


def _key_value(text: str) -> tuple[str, str]:
    key, sep, value = text.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got {text!r}")
    return key, value


def _parse_args(args: list[str] | None = None) -> tuple[Options, set[str]]:
    """
    Parse command-line arguments.

    Returns a tuple of (options, explicit_flags) where `explicit_flags`
    tracks which flags the user explicitly passed (for config merge precedence).
    """
    # Use the module's docstring as the description
    module_doc = __doc__ or ""
    doc_parts = module_doc.split("\n\n")
    description = doc_parts[0]
    epilog = "\n\n".join(doc_parts[1:])

    parser = argparse.ArgumentParser(
        prog="ktsift",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "patterns",
        nargs="*",
        type=str,
        default=[],
        metavar="PATTERN",
        help="Ordered include/exclude patterns (default: **/*.kt **/*.kts)",
    )
    parser.add_argument(
        "-F",
        "--format",
        action="store_true",
        help="Fix style violations in place instead of only reporting them",
    )
    parser.add_argument(
        "--list-files",
        action="store_true",
        dest="list_files",
        help="Print the selected files without linting them",
    )
    parser.add_argument(
        "--relative",
        action="store_true",
        help="Print file paths relative to the current directory",
    )
    parser.add_argument(
        "-R",
        "--ruleset",
        action="append",
        default=None,
        metavar="PATH",
        help="Rule-set archive to load. Can be repeated",
    )
    parser.add_argument(
        "--editorconfig",
        type=str,
        default=None,
        metavar="PATH",
        help="Editor config file passed to the engine",
    )
    parser.add_argument(
        "--user-data",
        action="append",
        type=_key_value,
        default=None,
        dest="user_data",
        metavar="KEY=VALUE",
        help="Extra key/value context passed to the engine. Can be repeated",
    )
    parser.add_argument(
        "--engine",
        type=str,
        default=None,
        metavar="MODULE:ATTR",
        help="Lint/format engine to use, as an import path",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Print compiled patterns and turn on engine debug output",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=0,
        metavar="N",
        help="Stop after N findings are reported (0 = no limit, default: %(default)s)",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version information and exit",
    )
    opts = parser.parse_args(args)

    # Track which flags the user explicitly set (for config merge precedence).
    # Boolean flags and `--limit` are detected with a sentinel re-parse so that
    # passing the default value still counts as explicit.
    _SENTINEL = object()
    sentinel_parser = argparse.ArgumentParser(add_help=False)
    sentinel_parser.add_argument("--relative", action="store_true", default=_SENTINEL)
    sentinel_parser.add_argument("--debug", action="store_true", default=_SENTINEL)
    sentinel_parser.add_argument("--limit", type=int, default=_SENTINEL)
    sentinel_opts, _ = sentinel_parser.parse_known_args(args if args is not None else sys.argv[1:])

    explicit_flags: set[str] = set()
    for name in ("relative", "debug", "limit"):
        if getattr(sentinel_opts, name) is not _SENTINEL:
            explicit_flags.add(name)
    if opts.patterns:
        explicit_flags.add("patterns")
    # For append actions, None means not supplied; a list means supplied
    for name in ("ruleset", "user_data"):
        if getattr(opts, name) is not None:
            explicit_flags.add(name)
    for name in ("editorconfig", "engine"):
        if getattr(opts, name) is not None:
            explicit_flags.add(name)

    return (
        Options(
            patterns=opts.patterns,
            format=opts.format,
            list_files=opts.list_files,
            relative=opts.relative,
            ruleset=opts.ruleset or [],
            editorconfig=opts.editorconfig,
            engine=opts.engine,
            debug=opts.debug,
            limit=opts.limit,
            version=opts.version,
            user_data=dict(opts.user_data or []),
        ),
        explicit_flags,
    )


def _warn_unreadable(error: ScanEntryError | FileSkippedError) -> None:
    print(f"Warning: {error}", file=sys.stderr)


def _print_finding(location: str, error: LintError) -> None:
    print(f"{location}:{error.line}:{error.col}: {error.detail} ({error.rule_id})")


def main(args: list[str] | None = None) -> int:
    """
    Main entry point for the ktsift CLI.

    Args:
        args: Command-line arguments (uses sys.argv if None)

    Returns:
        Exit code (0 for success, 1 for findings, skipped files or fatal errors,
        2 for unexpected failures while linting)
    """
    options, explicit_flags = _parse_args(args)

    # Display version information if requested
    if options.version:
        try:
            version = importlib.metadata.version("ktsift")
            print(f"v{version}")
        except importlib.metadata.PackageNotFoundError:
            print("unknown (package not installed)")
        return 0

    # The working directory is the scan root for this whole invocation.
    root = Path.cwd().resolve()

    # Load and merge config file settings
    config_path = find_config_file(root)
    if config_path:
        config = load_config(config_path)
        merge_cli_with_config(options, config, explicit_flags)

    try:
        rule_sets = to_locators(options.ruleset)
    except MissingArchiveError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    patterns = [expand_tilde(p) for p in options.patterns]
    try:
        scanner = TreeScanner(root, patterns, on_error=_warn_unreadable)
    except InvalidPatternError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if options.debug:
        for pattern in scanner.selector.pattern_set:
            print(
                f"[DEBUG] {pattern.polarity.value} {pattern.syntax.value} pattern: {pattern.raw}",
                file=sys.stderr,
            )

    # Handle --list-files mode (print and exit)
    if options.list_files:
        try:
            for result in scanner.scan():
                print(result.location(options.relative))
        except RootUnavailableError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        return 0

    if not options.engine:
        print(
            "Error: No lint engine configured. Use --engine MODULE:ATTR or set `engine`"
            " in ktsift.toml (or use --list-files to only list files).",
            file=sys.stderr,
        )
        return 1

    try:
        engine = load_engine(options.engine)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        summary = run_files(
            scanner.scan(),
            engine,
            rule_sets,
            _print_finding,
            format=options.format,
            relative=options.relative,
            user_data=options.user_data,
            editorconfig_path=options.editorconfig,
            debug=options.debug,
            limit=options.limit,
            on_error=_warn_unreadable,
        )
    except RootUnavailableError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        # Engine failures. Unreadable files are reported as warnings above.
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if options.debug:
        print(
            f"[DEBUG] {summary.files} files checked, {summary.findings} findings,"
            f" {summary.formatted} files formatted, {summary.failed} files skipped",
            file=sys.stderr,
        )

    return 1 if summary.findings or summary.failed else 0


if __name__ == "__main__":
    sys.exit(main())
