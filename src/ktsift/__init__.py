"""
ktsift: ordered include/exclude file selection for Kotlin lint and format runs.
"""

from ktsift.file_matcher import Selector, TreeScanner, compile_patterns, scan

__all__ = [
    "Selector",
    "TreeScanner",
    "compile_patterns",
    "scan",
]
