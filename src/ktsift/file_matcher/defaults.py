"""
Default file patterns, used when no patterns are given.

These use the glob syntax described in `ktsift.file_matcher.patterns`.
"""

from __future__ import annotations

# Kotlin sources and Kotlin scripts, at any depth (including the root itself).
DEFAULT_PATTERNS: list[str] = ["**/*.kt", "**/*.kts"]
