"""
Drive the lint/format engine over a stream of selected files.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from ktsift.engine import LintEngine, LintError, format_file, lint_file
from ktsift.file_matcher import ScanResult

# Receives the rendered file location and an uncorrected finding.
Reporter = Callable[[str, LintError], None]


class FileSkippedError(Exception):
    """A selected file could not be read or written back. The run continues past it."""

    def __init__(self, path: Path, action: str, cause: OSError | UnicodeError) -> None:
        reason = getattr(cause, "strerror", None) or cause
        super().__init__(f"Cannot {action} {path}: {reason}")
        self.path: Path = path
        self.cause: OSError | UnicodeError = cause


OnFileError = Callable[[FileSkippedError], None]


@dataclass
class RunSummary:
    files: int = 0
    findings: int = 0
    formatted: int = 0
    failed: int = 0


def run_files(
    results: Iterable[ScanResult],
    engine: LintEngine,
    rule_sets: Sequence[str],
    report: Reporter,
    *,
    format: bool = False,
    relative: bool = False,
    user_data: Mapping[str, str] | None = None,
    editorconfig_path: str | None = None,
    debug: bool = False,
    limit: int = 0,
    on_error: OnFileError | None = None,
) -> RunSummary:
    """
    Lint (or format in place) each selected file and report findings.

    In format mode, findings the engine corrected are not reported, and files
    are only rewritten when the text actually changed. With `limit` > 0,
    reporting stops after that many findings and no further files are read.

    A file that cannot be read as UTF-8 text, or cannot be written back, is
    counted in `failed` and passed to `on_error`; the remaining files are still
    processed.
    """
    summary = RunSummary()
    user_data = user_data or {}

    def skip(path: Path, action: str, cause: OSError | UnicodeError) -> None:
        summary.failed += 1
        if on_error is not None:
            on_error(FileSkippedError(path, action, cause))

    for result in results:
        if limit and summary.findings >= limit:
            break

        name = result.location(relative)
        try:
            text = result.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            skip(result.path, "read", e)
            continue
        summary.files += 1

        def on_finding(error: LintError, corrected: bool, name: str = name) -> None:
            if corrected or (limit and summary.findings >= limit):
                return
            summary.findings += 1
            report(name, error)

        if format:
            formatted = format_file(
                engine,
                str(result.path),
                text,
                rule_sets,
                user_data,
                editorconfig_path,
                debug,
                on_finding,
            )
            if formatted != text:
                try:
                    result.path.write_text(formatted, encoding="utf-8")
                except OSError as e:
                    skip(result.path, "write", e)
                    continue
                summary.formatted += 1
        else:
            lint_file(
                engine,
                str(result.path),
                text,
                rule_sets,
                user_data=user_data,
                editorconfig_path=editorconfig_path,
                debug=debug,
                lint_error_callback=lambda error, cb=on_finding: cb(error, False),
            )

    return summary
