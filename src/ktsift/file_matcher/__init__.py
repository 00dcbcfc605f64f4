"""
Self-contained file selection: ordered include/exclude patterns and a lazy
directory walk that applies them.

No imports from `ktsift` outside this package.

Usage::

    from ktsift.file_matcher import TreeScanner

    scanner = TreeScanner(root, ["src/**/*.kt", "!src/test/resources/**"])
    for result in scanner.scan():
        print(result.location(relative=True))
"""

from ktsift.file_matcher.defaults import DEFAULT_PATTERNS
from ktsift.file_matcher.errors import InvalidPatternError, RootUnavailableError, ScanEntryError
from ktsift.file_matcher.patterns import (
    Pattern,
    PatternSet,
    Polarity,
    Syntax,
    compile_pattern,
    compile_patterns,
)
from ktsift.file_matcher.scanner import ScanResult, TreeScanner, scan
from ktsift.file_matcher.selector import Selector

__all__ = [
    "DEFAULT_PATTERNS",
    "InvalidPatternError",
    "Pattern",
    "PatternSet",
    "Polarity",
    "RootUnavailableError",
    "ScanEntryError",
    "ScanResult",
    "Selector",
    "Syntax",
    "TreeScanner",
    "compile_pattern",
    "compile_patterns",
    "scan",
]
