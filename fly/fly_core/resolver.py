#!/usr/bin/env python3
"""
Resolves jump queries against the indexed directory data.

Query shapes:
- `name`            exact basename lookup, closest-basename fallback on a miss
- `hint... name`    basename lookup narrowed by case-insensitive substrings
- `N`               N-th path (1-based) of the last multi-result answer
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple

from .constants import FUZZY_MATCH_LIMIT
from .directory_store import DirectoryStore
from .levenshtein import levenshtein_distance
from .models import DirectoryRecord
from fly.utils import get_logger

logger = get_logger("query-resolver")

NUMERIC_TOKEN = re.compile(r'[+-]?[0-9]+')


class QueryKind(Enum):
    EMPTY = "empty"
    BASENAME = "basename"
    HINTS = "hints"
    RECALL = "recall"
    FUZZY = "fuzzy"


@dataclass
class QueryResult:
    """Ranked paths answering one query"""
    kind: QueryKind
    paths: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.paths

    @property
    def is_unique(self) -> bool:
        return len(self.paths) == 1


def rank_records(records: Iterable[DirectoryRecord]) -> List[str]:
    """
    Order matches by ascending depth, then full path; drop duplicate paths

    Args:
        records: Matching directory records

    Returns:
        Ordered, de-duplicated full paths
    """
    ordered = sorted(records, key=lambda r: (r.depth, r.fullpath))
    seen = set()
    paths = []
    for record in ordered:
        if record.fullpath not in seen:
            seen.add(record.fullpath)
            paths.append(record.fullpath)
    return paths


def filter_by_hints(paths: Sequence[str], hints: Iterable[str]) -> List[str]:
    """
    Keep paths containing every hint (case-insensitive substring)

    Each hint narrows the set independently, so hint order does not
    change the result. Stops as soon as the set is empty.
    """
    remaining = list(paths)
    for hint in hints:
        needle = hint.lower()
        remaining = [p for p in remaining if needle in p.lower()]
        if not remaining:
            break
    return remaining


def is_numeric_token(token: str) -> bool:
    return NUMERIC_TOKEN.fullmatch(token) is not None


class QueryResolver:
    """Turns query tokens into ranked paths and keeps the last result for recall"""

    def __init__(self, store: DirectoryStore, fuzzy_limit: int = FUZZY_MATCH_LIMIT):
        self.store = store
        self.fuzzy_limit = fuzzy_limit

    def resolve(self, tokens: Sequence[str]) -> QueryResult:
        """
        Dispatch a tokenized query by its shape

        Args:
            tokens: Query tokens as split by the shell

        Returns:
            QueryResult (empty paths means no match)
        """
        tokens = [t for t in tokens if t and t.strip()]
        if not tokens:
            return QueryResult(QueryKind.EMPTY)

        if len(tokens) > 1:
            return self.resolve_with_hints(tokens)

        token = tokens[0]
        if is_numeric_token(token):
            return self.recall(int(token))

        result = self.resolve_basename(token)
        if result.is_empty:
            logger.debug(f"No exact match for '{token}', trying closest basenames")
            return self.closest_basenames(token)
        return result

    def resolve_basename(self, basename: str) -> QueryResult:
        """
        Exact, case-insensitive basename lookup

        The ranked list becomes the new last query result.
        """
        paths = self._ranked_basename_matches(basename)
        if paths:
            self.store.replace_last_query_result(paths)
        return QueryResult(QueryKind.BASENAME, paths)

    def resolve_with_hints(self, tokens: Sequence[str]) -> QueryResult:
        """
        Basename lookup narrowed by hints

        Args:
            tokens: Hints followed by the basename (last token)

        Returns:
            QueryResult; a single survivor is not recorded for recall
        """
        *hints, basename = tokens
        candidates = self._ranked_basename_matches(basename)
        if not candidates:
            return QueryResult(QueryKind.HINTS)

        filtered = filter_by_hints(candidates, hints)
        logger.debug(
            f"Hints {hints} narrowed '{basename}' from {len(candidates)} to {len(filtered)} paths"
        )
        if len(filtered) > 1:
            self.store.replace_last_query_result(filtered)
        return QueryResult(QueryKind.HINTS, filtered)

    def recall(self, index: int) -> QueryResult:
        """
        Fetch the index-th (1-based) path of the last query result

        Out-of-range indexes yield an empty result. Never modifies the
        stored result.
        """
        paths = self.store.get_last_query_result()
        if index < 1 or index > len(paths):
            logger.debug(f"Recall index {index} outside 1..{len(paths)}")
            return QueryResult(QueryKind.RECALL)
        return QueryResult(QueryKind.RECALL, [paths[index - 1]])

    def closest_basenames(self, query: str) -> QueryResult:
        """
        Rank all known basenames by edit distance to the query

        The closest `fuzzy_limit` basenames are kept (ties broken by
        basename); their paths become the new last query result.
        """
        basename_paths = self.store.get_basename_paths()
        if not basename_paths:
            return QueryResult(QueryKind.FUZZY)

        needle = query.lower()
        scored: List[Tuple[int, str]] = sorted(
            (levenshtein_distance(needle, name.lower()), name)
            for name in basename_paths
        )

        paths = []
        for distance, name in scored[:self.fuzzy_limit]:
            logger.trace(f"Closest match '{name}' at distance {distance}")
            paths.extend(sorted(basename_paths[name]))

        self.store.replace_last_query_result(paths)
        return QueryResult(QueryKind.FUZZY, paths)

    def mark_used(self, path: str, timestamp: Optional[int] = None) -> bool:
        """Record a successful jump to path"""
        return self.store.touch_last_used(path, timestamp)

    def _ranked_basename_matches(self, basename: str) -> List[str]:
        return rank_records(self.store.find_directories_by_basename(basename))
