"""Tests for pattern compilation and the glob grammar."""

from __future__ import annotations

from pathlib import Path

import pytest

from ktsift.file_matcher import (
    DEFAULT_PATTERNS,
    InvalidPatternError,
    Polarity,
    Syntax,
    compile_pattern,
    compile_patterns,
)
from ktsift.file_matcher.patterns import glob_to_regex


def test_empty_list_compiles_to_defaults():
    pattern_set = compile_patterns([])
    assert len(pattern_set) == 2
    assert pattern_set.raw == ["**/*.kt", "**/*.kts"]
    assert pattern_set.raw == DEFAULT_PATTERNS
    for pattern in pattern_set:
        assert pattern.polarity is Polarity.include
        assert pattern.syntax is Syntax.glob


def test_defaults_match_recursively_from_root():
    kt, kts = compile_patterns([])
    assert kt.matches("Main.kt")
    assert kt.matches("src/main/kotlin/Main.kt")
    assert not kt.matches("build.gradle.kts")
    assert kts.matches("build.gradle.kts")
    assert kts.matches("sub/project/settings.gradle.kts")
    assert not kts.matches("Main.kt")


def test_order_is_preserved_without_dedupe():
    raw = ["b/**", "!a/**", "b/**", "regex:x.*"]
    assert compile_patterns(raw).raw == raw


def test_plain_glob_is_include():
    pattern = compile_pattern("src/**/*.kt")
    assert pattern.polarity is Polarity.include
    assert pattern.syntax is Syntax.glob
    assert pattern.raw == "src/**/*.kt"


def test_negated_glob_is_exclude():
    pattern = compile_pattern("!**/build/**")
    assert pattern.polarity is Polarity.exclude
    assert pattern.is_exclude
    assert pattern.syntax is Syntax.glob
    assert pattern.matches("app/build/Gen.kt")


def test_explicit_glob_prefix_is_stripped():
    pattern = compile_pattern("glob:!**/*.kts")
    assert pattern.polarity is Polarity.exclude
    assert pattern.syntax is Syntax.glob
    assert pattern.matches("a/b.kts")


def test_regex_prefix():
    pattern = compile_pattern(r"regex:.*Test\.kt")
    assert pattern.polarity is Polarity.include
    assert pattern.syntax is Syntax.regex
    assert pattern.matches("src/FooTest.kt")
    assert not pattern.matches("src/FooTest.kts")


def test_negated_regex_prefix():
    pattern = compile_pattern("regex:!gen/.*")
    assert pattern.polarity is Polarity.exclude
    assert pattern.syntax is Syntax.regex
    assert pattern.matches("gen/A.kt")
    assert not pattern.matches("src/gen/A.kt")


def test_regex_must_match_full_path():
    pattern = compile_pattern("regex:src")
    assert pattern.matches("src")
    assert not pattern.matches("src/A.kt")
    assert not pattern.matches("a/src")


def test_bang_before_regex_prefix_is_a_glob():
    # Negation comes after the syntax prefix, so this is a glob for a literal path.
    pattern = compile_pattern("!regex:foo")
    assert pattern.syntax is Syntax.glob
    assert pattern.polarity is Polarity.exclude
    assert pattern.matches("regex:foo")


def test_single_star_stays_in_segment():
    pattern = compile_pattern("*.kt")
    assert pattern.matches("A.kt")
    assert not pattern.matches("src/A.kt")


def test_double_star_crosses_segments():
    pattern = compile_pattern("**.kt")
    assert pattern.matches("a.kt")
    assert pattern.matches("a/b/c.kt")


def test_inner_double_star_matches_zero_directories():
    pattern = compile_pattern("src/**/*.kt")
    assert pattern.matches("src/A.kt")
    assert pattern.matches("src/main/kotlin/A.kt")
    assert not pattern.matches("other/src/A.kt")


def test_trailing_double_star():
    pattern = compile_pattern("src/test/resources/**")
    assert pattern.matches("src/test/resources/a/b.kt")
    assert not pattern.matches("src/test/A.kt")


def test_question_mark():
    pattern = compile_pattern("?.kt")
    assert pattern.matches("a.kt")
    assert not pattern.matches("ab.kt")
    assert not compile_pattern("a?b.kt").matches("a/b.kt")


def test_bracket_classes():
    assert compile_pattern("[abc].kt").matches("b.kt")
    assert not compile_pattern("[abc].kt").matches("d.kt")
    assert compile_pattern("[a-c].kt").matches("c.kt")
    assert compile_pattern("[!a-c].kt").matches("d.kt")
    assert not compile_pattern("[!a-c].kt").matches("a.kt")
    # A negated class never matches the separator.
    assert not compile_pattern("a[!x]b").matches("a/b")


def test_brace_alternation():
    pattern = compile_pattern("**/*.{kt,kts}")
    assert pattern.matches("a/b.kt")
    assert pattern.matches("a/b.kts")
    assert not pattern.matches("a/b.java")


def test_escaped_characters_are_literal():
    pattern = compile_pattern(r"\*.kt")
    assert pattern.matches("*.kt")
    assert not pattern.matches("a.kt")


def test_regex_special_characters_in_glob_are_literal():
    pattern = compile_pattern("a+b(1).kt")
    assert pattern.matches("a+b(1).kt")
    assert not pattern.matches("aab1.kt")


def test_path_objects_are_accepted():
    assert compile_pattern("src/*.kt").matches(Path("src") / "A.kt")


def test_unterminated_bracket_is_invalid():
    with pytest.raises(InvalidPatternError) as exc:
        compile_patterns(["src/[abc.kt"])
    assert exc.value.pattern == "src/[abc.kt"
    assert "src/[abc.kt" in str(exc.value)


def test_unterminated_group_is_invalid():
    with pytest.raises(InvalidPatternError):
        compile_pattern("*.{kt,kts")


def test_nested_group_is_invalid():
    with pytest.raises(InvalidPatternError):
        compile_pattern("{a,{b,c}}")


def test_trailing_escape_is_invalid():
    with pytest.raises(InvalidPatternError):
        compile_pattern("foo\\")


def test_slash_in_bracket_is_invalid():
    with pytest.raises(InvalidPatternError):
        compile_pattern("a[/]b")


def test_malformed_regex_is_invalid():
    with pytest.raises(InvalidPatternError) as exc:
        compile_pattern("regex:!(unclosed")
    assert exc.value.pattern == "regex:!(unclosed"


def test_empty_body_is_invalid():
    with pytest.raises(InvalidPatternError):
        compile_pattern("!")
    with pytest.raises(InvalidPatternError):
        compile_pattern("regex:")


def test_invalid_pattern_after_valid_ones_still_fails():
    with pytest.raises(InvalidPatternError) as exc:
        compile_patterns(["**/*.kt", "!src/[oops"])
    assert exc.value.pattern == "!src/[oops"


def test_glob_to_regex_anchoring():
    assert glob_to_regex("*.kt") == r"^[^/]*\.kt\Z"
    assert glob_to_regex("**/a") == r"^(?:.*/)?a\Z"


def test_leading_double_star_matches_top_level_directory():
    # Unlike the JVM glob syntax, no directory is required before the first segment.
    pattern = compile_pattern("!**/*test*/**.kt")
    assert pattern.matches("test_/a.kt")
    assert pattern.matches("a/test_/a.kt")
