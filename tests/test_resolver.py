#!/usr/bin/env python3
"""
Test query resolution: ranking, hints, recall and closest-basename fallback
"""

import pytest

from fly.fly_core.models import DirectoryRecord
from fly.fly_core.resolver import (
    QueryKind,
    QueryResolver,
    filter_by_hints,
    is_numeric_token,
    rank_records,
)


def depth_of(path):
    return path.count("/") - 1


def populate(store, *paths):
    root_id = store.upsert_root("/")
    root = store.get_root("/")
    assert root.id == root_id
    store.bulk_upsert_directories(
        DirectoryRecord.create(root, path, depth_of(path), 0) for path in paths
    )


@pytest.fixture
def resolver(memory_store):
    return QueryResolver(memory_store)


def test_ranking_by_depth_then_path(memory_store, resolver):
    populate(memory_store, "/a/x/src", "/z/src", "/b/src")

    result = resolver.resolve(["src"])

    assert result.kind == QueryKind.BASENAME
    assert result.paths == ["/b/src", "/z/src", "/a/x/src"]
    assert memory_store.get_last_query_result() == result.paths


def test_ranking_example_exact():
    root_records = [
        DirectoryRecord(basename="src", fullpath="/a/src", depth=2, root_id=1, mtime=0, segments="/a/src"),
        DirectoryRecord(basename="src", fullpath="/b/src", depth=1, root_id=1, mtime=0, segments="/b/src"),
        DirectoryRecord(basename="src", fullpath="/z/src", depth=1, root_id=1, mtime=0, segments="/z/src"),
    ]
    assert rank_records(root_records) == ["/b/src", "/z/src", "/a/src"]


def test_rank_records_drops_duplicates():
    record = DirectoryRecord(basename="x", fullpath="/x", depth=1, root_id=1, mtime=0, segments="/x")
    assert rank_records([record, record]) == ["/x"]


def test_basename_lookup_ignores_case(memory_store, resolver):
    populate(memory_store, "/work/Docs")
    assert resolver.resolve(["docs"]).paths == ["/work/Docs"]
    assert resolver.resolve(["DOCS"]).paths == ["/work/Docs"]


def test_single_basename_match(memory_store, resolver):
    populate(memory_store, "/home/me/projects")
    result = resolver.resolve(["projects"])
    assert result.is_unique
    assert result.kind == QueryKind.BASENAME


def test_hint_order_does_not_matter(memory_store, resolver):
    populate(
        memory_store,
        "/work/api/svc/project",
        "/work/svc/api/project",
        "/work/web/project",
        "/work/api/project",
    )

    forward = resolver.resolve(["api", "svc", "project"])
    backward = resolver.resolve(["svc", "api", "project"])

    assert forward.kind == QueryKind.HINTS
    assert forward.paths == backward.paths
    assert forward.paths == ["/work/api/svc/project", "/work/svc/api/project"]
    assert memory_store.get_last_query_result() == forward.paths


def test_hints_ignore_case(memory_store, resolver):
    populate(memory_store, "/Work/API/project", "/work/web/project")
    assert resolver.resolve(["api", "project"]).paths == ["/Work/API/project"]
    assert resolver.resolve(["WEB", "project"]).paths == ["/work/web/project"]


def test_single_hint_survivor_leaves_last_result(memory_store, resolver):
    populate(memory_store, "/work/web/project", "/work/api/project", "/work/cli/project")
    everything = resolver.resolve(["project"])
    assert len(everything.paths) == 3

    narrowed = resolver.resolve(["web", "project"])

    assert narrowed.paths == ["/work/web/project"]
    assert memory_store.get_last_query_result() == everything.paths


def test_hint_emptying_the_set(memory_store, resolver):
    populate(memory_store, "/work/web/project", "/work/api/project")
    before = resolver.resolve(["project"]).paths

    result = resolver.resolve(["nothing", "project"])

    assert result.is_empty
    assert result.kind == QueryKind.HINTS
    assert memory_store.get_last_query_result() == before


def test_hints_with_unknown_basename(memory_store, resolver):
    populate(memory_store, "/work/web/project")
    result = resolver.resolve(["web", "projekt"])
    assert result.is_empty
    assert result.kind == QueryKind.HINTS


def test_numeric_recall(memory_store, resolver):
    populate(memory_store, "/b/src", "/z/src", "/a/x/src")
    listed = resolver.resolve(["src"]).paths
    assert len(listed) == 3

    second = resolver.resolve(["2"])
    assert second.kind == QueryKind.RECALL
    assert second.paths == [listed[1]]

    assert resolver.resolve(["4"]).is_empty
    assert resolver.resolve(["0"]).is_empty
    assert resolver.resolve(["-1"]).is_empty
    assert resolver.resolve(["+1"]).paths == [listed[0]]

    assert memory_store.get_last_query_result() == listed


def test_recall_without_previous_result(resolver):
    assert resolver.recall(1).is_empty


def test_numeric_token_is_never_a_basename(memory_store, resolver):
    populate(memory_store, "/photos/2024")
    result = resolver.resolve(["2024"])
    assert result.kind == QueryKind.RECALL
    assert result.is_empty


def test_numeric_token_with_hints_is_a_hint(memory_store, resolver):
    populate(memory_store, "/photos/2024/trip", "/photos/2023/trip")
    assert resolver.resolve(["2024", "trip"]).paths == ["/photos/2024/trip"]


def test_fuzzy_fallback_top_five(memory_store, resolver):
    populate(
        memory_store,
        "/t/abce", "/s/abce", "/t/abcf", "/t/abxy", "/t/axyz",
        "/t/wxyz", "/t/vxyz", "/t/uxyz",
    )

    result = resolver.resolve(["abcd"])

    assert result.kind == QueryKind.FUZZY
    # Distance 1: abce, abcf; 2: abxy; 3: axyz; 4: uxyz wins the tie on name
    assert result.paths == ["/s/abce", "/t/abce", "/t/abcf", "/t/abxy", "/t/axyz", "/t/uxyz"]
    assert memory_store.get_last_query_result() == result.paths


def test_fuzzy_fallback_compares_lowercase(memory_store, resolver):
    populate(memory_store, "/t/Readme", "/t/other")
    result = resolver.closest_basenames("READMX")
    assert result.paths[0] == "/t/Readme"


def test_fuzzy_fallback_on_empty_index(resolver):
    result = resolver.resolve(["anything"])
    assert result.kind == QueryKind.FUZZY
    assert result.is_empty


def test_empty_query(resolver):
    assert resolver.resolve([]).kind == QueryKind.EMPTY
    assert resolver.resolve(["", "  "]).is_empty


def test_mark_used(memory_store, resolver):
    populate(memory_store, "/w/target")
    assert resolver.mark_used("/w/target", 99)
    assert memory_store.get_directory("/w/target").last_used == 99
    assert not resolver.mark_used("/w/missing")


def test_works_against_sqlite(sqlite_store):
    populate(sqlite_store, "/b/src", "/z/src", "/a/x/src")
    resolver = QueryResolver(sqlite_store)

    listed = resolver.resolve(["SRC"]).paths
    assert listed == ["/b/src", "/z/src", "/a/x/src"]
    assert resolver.resolve(["3"]).paths == ["/a/x/src"]


def test_filter_by_hints_helper():
    paths = ["/a/API/x", "/b/web/x"]
    assert filter_by_hints(paths, ["api"]) == ["/a/API/x"]
    assert filter_by_hints(paths, []) == paths
    assert filter_by_hints(paths, ["none", "api"]) == []


@pytest.mark.parametrize("token,expected", [
    ("1", True), ("+3", True), ("-2", True), ("007", True),
    ("1a", False), ("", False), ("+", False), ("1.5", False),
])
def test_is_numeric_token(token, expected):
    assert is_numeric_token(token) is expected
