#!/usr/bin/env python3
"""
Test compilation and matching of ignore rules
"""

import pytest

from fly.fly_core.ignore import (
    EMPTY_RULES,
    compile_rule,
    compile_rules,
    glob_to_regex,
)


@pytest.mark.parametrize("line", ["", "   ", "# comment", "  # indented comment", "!", "/", "!/", "//"])
def test_lines_without_rules(line):
    """Blank, comment and degenerate lines produce no rule"""
    assert compile_rule(line) is None


def test_none_line():
    assert compile_rule(None) is None


def test_flags_are_parsed():
    """Markers are stripped and recorded as flags"""
    rule = compile_rule("  !/build/  ")
    assert rule.negated
    assert rule.directory_only
    assert rule.anchored
    assert rule.pattern == "build"

    plain = compile_rule("cache")
    assert not plain.negated
    assert not plain.directory_only
    assert not plain.anchored


def test_negation_marker_followed_by_space():
    rule = compile_rule("! tmp/")
    assert rule.negated
    assert rule.pattern == "tmp"


def test_unanchored_matches_any_depth():
    rule = compile_rule("build/")
    assert rule.matches("build")
    assert rule.matches("src/build")
    assert rule.matches("a/b/c/build")
    assert not rule.matches("build2")
    assert not rule.matches("mybuild")


def test_anchored_matches_top_level_only():
    rule = compile_rule("/build/")
    assert rule.matches("build")
    assert not rule.matches("src/build")


def test_double_star_prefix_equivalent_to_unanchored():
    """`**/build/` behaves exactly like `build/`"""
    unanchored = compile_rule("build/")
    explicit = compile_rule("**/build/")
    for path in ["build", "src/build", "a/b/build", "xbuild", "build/x", "src/build2"]:
        assert unanchored.matches(path) == explicit.matches(path), path


def test_question_mark_stays_within_segment():
    rule = compile_rule("/a?c")
    assert rule.matches("abc")
    assert rule.matches("a.c")
    assert not rule.matches("a/c")
    assert not rule.matches("ac")


def test_star_stays_within_segment():
    rule = compile_rule("/src/*")
    assert rule.matches("src/lib")
    assert rule.matches("src/")
    assert not rule.matches("src/lib/deep")


def test_double_star_spans_segments():
    rule = compile_rule("/docs/**")
    assert rule.matches("docs/a")
    assert rule.matches("docs/a/b/c")
    assert not rule.matches("other/docs/a")

    middle = compile_rule("/a/**/z")
    assert middle.matches("a/z")
    assert middle.matches("a/b/z")
    assert middle.matches("a/b/c/z")
    assert not middle.matches("a/bz")


def test_regex_metacharacters_are_literal():
    """Characters outside glob syntax match only themselves"""
    plus = compile_rule("/a+b")
    assert plus.matches("a+b")
    assert not plus.matches("aab")

    brackets = compile_rule("/[abc]")
    assert brackets.matches("[abc]")
    assert not brackets.matches("a")

    dot = compile_rule("/v1.0")
    assert dot.matches("v1.0")
    assert not dot.matches("v1x0")


def test_whole_path_must_match():
    rule = compile_rule("/src")
    assert not rule.matches("src/lib")
    assert not rule.matches("xsrc")


def test_backslashes_become_separators():
    rule = compile_rule("/foo\\bar")
    assert rule.pattern == "foo/bar"
    assert rule.matches("foo/bar")


def test_glob_to_regex_shapes():
    assert glob_to_regex("**/x") == "^(?:.*/)?x$"
    assert glob_to_regex("a*") == "^a[^/]*$"
    assert glob_to_regex("a?") == "^a[^/]$"
    assert glob_to_regex("**") == "^.*$"


def test_empty_input_yields_empty_sentinel():
    assert compile_rules(None) is EMPTY_RULES
    assert compile_rules([]) is EMPTY_RULES
    assert compile_rules(["", "# only comments", "   "]) is EMPTY_RULES
    assert EMPTY_RULES.is_empty


def test_empty_rules_never_ignore():
    for path in ["a", "a/b", ".git", "node_modules"]:
        assert not EMPTY_RULES.is_ignored(path, True)
        assert not EMPTY_RULES.is_ignored(path, False)


def test_rule_order_is_preserved():
    rules = compile_rules(["a/", "# skip", "!b", "/c"])
    assert [r.pattern for r in rules] == ["a", "b", "c"]
    assert len(rules) == 3


def test_last_match_wins():
    assert not compile_rules(["logs/", "!logs/"]).is_ignored("logs", True)
    assert compile_rules(["!logs/", "logs/"]).is_ignored("logs", True)


def test_negation_without_earlier_match_keeps_path():
    rules = compile_rules(["!keep/"])
    assert not rules.is_ignored("keep", True)
    assert not rules.is_ignored("other", True)


def test_directory_only_skipped_for_files():
    rules = compile_rules(["cache/"])
    assert rules.is_ignored("cache", True)
    assert not rules.is_ignored("cache", False)


def test_negated_child_of_ignored_directory():
    """`docs/` then `!docs/.keep` ignores docs/x but not docs/.keep"""
    rules = compile_rules(["docs/", "!docs/.keep"])
    assert rules.is_ignored("docs", True)
    assert rules.is_ignored("docs/x", False)
    assert rules.is_ignored("docs/x", True)
    assert not rules.is_ignored("docs/.keep", False)


def test_evaluate_returns_deciding_rule():
    rules = compile_rules(["*.tmp", "!keep.tmp"])
    assert rules.evaluate("a.tmp", False).pattern == "*.tmp"
    decided = rules.evaluate("keep.tmp", False)
    assert decided.negated
    assert rules.evaluate("a.txt", False) is None


def test_own_match_beats_negated_parent():
    """`*/` then `!src/` keeps src but still ignores src/lib"""
    rules = compile_rules(["*/", "!src/"])
    assert not rules.is_ignored("src", True)
    assert rules.is_ignored("src/lib", True)
    assert rules.is_ignored("other", True)
    assert rules.evaluate("src/lib", True).pattern == "*"


def test_children_inherit_parent_verdict():
    rules = compile_rules(["build/", "!build/"])
    assert not rules.is_ignored("build", True)
    assert not rules.is_ignored("build/x", True)
    assert not rules.is_ignored("build/x/y", False)

    nested = compile_rules(["/vendor/"])
    assert nested.is_ignored("vendor/a/b/c", True)
    assert nested.evaluate("vendor/a/b/c", True).pattern == "vendor"
