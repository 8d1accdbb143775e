#!/usr/bin/env python3
"""
Test the per-root ignore policy
"""

from fly.fly_core.ignore import IgnorePolicy


def test_negation_re_includes_single_entry(tmp_path):
    """Global `docs/` plus root `!docs/.keep`"""
    policy = IgnorePolicy.from_lines(["docs/"], ["!docs/.keep"])

    assert policy.should_ignore(tmp_path, tmp_path / "docs", True)
    assert policy.should_ignore(tmp_path, tmp_path / "docs" / "x", True)
    assert policy.should_ignore(tmp_path, tmp_path / "docs" / "x", False)
    assert not policy.should_ignore(tmp_path, tmp_path / "docs" / ".keep", False)


def test_root_rules_follow_global_rules(tmp_path):
    """Root rules come later in the list, so they win"""
    overridden = IgnorePolicy.from_lines(["build/"], ["!build/"])
    assert not overridden.should_ignore(tmp_path, tmp_path / "build", True)

    reinforced = IgnorePolicy.from_lines(["!build/"], ["build/"])
    assert reinforced.should_ignore(tmp_path, tmp_path / "build", True)


def test_root_itself_never_ignored(tmp_path):
    policy = IgnorePolicy.from_lines(["**"])
    assert not policy.should_ignore(tmp_path, tmp_path, True)
    assert policy.should_ignore(tmp_path, tmp_path / "anything", True)


def test_outside_root_never_ignored(tmp_path):
    root = tmp_path / "root"
    policy = IgnorePolicy.from_lines(["**"])

    assert not policy.should_ignore(root, tmp_path / "elsewhere", True)
    assert not policy.should_ignore(root, tmp_path, True)
    assert policy.relative_path(root, tmp_path / "elsewhere") is None


def test_relative_path(tmp_path):
    policy = IgnorePolicy()
    assert policy.relative_path(tmp_path, tmp_path) == ''
    assert policy.relative_path(tmp_path, tmp_path / "a" / "b") == "a/b"
    assert policy.relative_path(str(tmp_path) + "/", tmp_path / "a" / ".." / "c") == "c"


def test_anchoring_against_root(tmp_path):
    policy = IgnorePolicy.from_lines(["/build/"])
    assert policy.should_ignore(tmp_path, tmp_path / "build", True)
    assert not policy.should_ignore(tmp_path, tmp_path / "src" / "build", True)

    anywhere = IgnorePolicy.from_lines(["build/"])
    assert anywhere.should_ignore(tmp_path, tmp_path / "build", True)
    assert anywhere.should_ignore(tmp_path, tmp_path / "src" / "build", True)


def test_directory_only_rules_skip_files(tmp_path):
    policy = IgnorePolicy.from_lines(["out/"])
    assert policy.should_ignore(tmp_path, tmp_path / "out", True)
    assert not policy.should_ignore(tmp_path, tmp_path / "out", False)


def test_empty_policy(tmp_path):
    policy = IgnorePolicy.from_lines([], None)
    assert policy.is_empty
    assert not policy.should_ignore(tmp_path, tmp_path / "node_modules", True)


def test_match_reports_deciding_pattern(tmp_path):
    policy = IgnorePolicy.from_lines(["docs/"], ["!docs/.keep"])

    ignored = policy.match(tmp_path, tmp_path / "docs" / "x", False)
    assert ignored.should_ignore
    assert ignored.relative_path == "docs/x"
    assert ignored.matched_pattern == "docs"

    kept = policy.match(tmp_path, tmp_path / "docs" / ".keep", False)
    assert not kept.should_ignore
    assert kept.negated
    assert kept.matched_pattern == "!docs/.keep"

    unmatched = policy.match(tmp_path, tmp_path / "src", True)
    assert not unmatched.should_ignore
    assert unmatched.matched_pattern is None
