"""Tests for the ordered include/exclude evaluator."""

from __future__ import annotations

from pathlib import Path

from ktsift.file_matcher import Selector, compile_patterns


def test_negation():
    selector = Selector.from_patterns(
        [
            "**.kt",
            "!**/*test*/**.kt",
            "!**/prefix*/**.kt",
            "!**/*suffix/**.kt",
        ]
    )

    assert selector.matches(Path("a.kt"))
    assert not selector.matches(Path("a/test_/a.kt"))
    assert not selector.matches(Path("a/_test_/a.kt"))
    assert not selector.matches(Path("a/_test/a.kt"))
    assert not selector.matches(Path("a/prefix_/a.kt"))
    assert not selector.matches(Path("a/prefix/a.kt"))
    assert selector.matches(Path("a/_prefix/a.kt"))
    assert not selector.matches(Path("a/_suffix/a.kt"))
    assert not selector.matches(Path("a/suffix/a.kt"))
    assert selector.matches(Path("a/suffix_/a.kt"))


def test_default_patterns_select_kotlin_files():
    selector = Selector.from_patterns([])
    assert selector.matches("Main.kt")
    assert selector.matches("app/build.gradle.kts")
    assert not selector.matches("README.md")
    assert not selector.matches("src/Main.java")


def test_only_exclude_patterns_select_nothing():
    selector = Selector.from_patterns(["!**/*.kt", "!build/**"])
    for path in ["a.kt", "src/b.kt", "build/c.kt", "README.md"]:
        assert not selector.matches(path)


def test_only_exclude_patterns_matching_nothing_still_select_nothing():
    selector = Selector.from_patterns(["!nothing/**"])
    assert not selector.matches("a.kt")


def test_later_include_reselects_excluded_path():
    selector = Selector.from_patterns(
        ["src/**/*.kt", "!src/generated/**", "src/generated/keep/**"]
    )
    assert selector.matches("src/A.kt")
    assert not selector.matches("src/generated/B.kt")
    assert selector.matches("src/generated/keep/C.kt")


def test_state_can_flip_several_times():
    selector = Selector.from_patterns(["**/*.kt", "!a/**", "a/b/**", "!a/b/c/**"])
    assert selector.matches("x.kt")
    assert not selector.matches("a/x.kt")
    assert selector.matches("a/b/x.kt")
    assert not selector.matches("a/b/c/x.kt")


def test_exclude_before_any_include_has_no_effect():
    # The exclude is skipped while nothing is selected yet.
    selector = Selector.from_patterns(["!gen/**", "**/*.kt"])
    assert selector.matches("gen/A.kt")


def test_include_while_selected_has_no_effect():
    # Once selected, a non-matching include does not deselect.
    selector = Selector.from_patterns(["**/*.kt", "*.kts"])
    assert selector.matches("src/A.kt")


def test_non_matching_include_leaves_path_unselected():
    selector = Selector.from_patterns(["*.kts", "!**", "src/**"])
    assert not selector.matches("lib/A.kt")
    assert selector.matches("src/A.kt")


def test_non_matching_pattern_is_transparent():
    base = Selector.from_patterns(["**/*.kt", "!test/**"])
    padded = Selector.from_patterns(["**/*.kt", "!unrelated/**", "!test/**", "other/**"])
    for path in ["a.kt", "test/a.kt", "src/a.kt", "README.md"]:
        assert base.matches(path) == padded.matches(path)


def test_mixed_regex_and_glob():
    selector = Selector.from_patterns(["**/*.kt", r"regex:!.*Generated\.kt"])
    assert selector.matches("src/A.kt")
    assert not selector.matches("src/AGenerated.kt")


def test_matches_is_idempotent():
    selector = Selector(compile_patterns(["**/*.kt", "!**/test/**", "**/test/keep/**"]))
    paths = ["a.kt", "x/test/a.kt", "x/test/keep/a.kt", "b.txt"]
    first = [selector.matches(p) for p in paths]
    for _ in range(3):
        assert [selector.matches(p) for p in paths] == first
    assert first == [True, False, True, False]


def test_pattern_set_is_exposed_unchanged():
    pattern_set = compile_patterns(["a/**", "!a/b/**"])
    selector = Selector(pattern_set)
    assert selector.pattern_set is pattern_set
