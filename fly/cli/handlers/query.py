#!/usr/bin/env python3
"""Handler for jump queries (`flyctl TOKEN...`)"""

from typing import Dict, Any, List

from fly.cli.handlers.base import make_result, error_result
from fly.fly_core.resolver import QueryKind, QueryResolver, QueryResult
from fly.utils import get_logger

logger = get_logger(__name__)

MULTIPLE_HEADER = "--Multiple matches found--"
FUZZY_HEADER = "--No exact match; closest matches--"


def format_matches(result: QueryResult) -> str:
    """
    Render a query result for stdout

    A single path is printed bare so the shell wrapper can cd into it;
    several paths are numbered for later recall.
    """
    if result.is_unique and result.kind != QueryKind.FUZZY:
        return result.paths[0] + '\n'

    header = FUZZY_HEADER if result.kind == QueryKind.FUZZY else MULTIPLE_HEADER
    lines = [header]
    lines.extend(f"{i}: {path}" for i, path in enumerate(result.paths, 1))
    return '\n'.join(lines) + '\n'


def describe_miss(tokens: List[str], result: QueryResult) -> str:
    if result.kind == QueryKind.EMPTY:
        return "No query given"
    if result.kind == QueryKind.RECALL:
        return f"No entry {tokens[0]} in the last result list"
    if result.kind == QueryKind.HINTS:
        return f"No directory indexed matching hints and basename '{tokens[-1]}'"
    return f"No directory indexed with basename '{tokens[-1]}'"


class QueryHandler:
    """Resolves query tokens to directory paths"""

    def __init__(self, shared_modules: Dict[str, Any]):
        self.shared_modules = shared_modules
        self.store = shared_modules['store']
        self.resolver = QueryResolver(self.store)

    def handle(self, args: list) -> Dict[str, Any]:
        """Handle a query; args are the raw query tokens"""
        try:
            tokens = [str(arg) for arg in args]
            result = self.resolver.resolve(tokens)

            if result.is_empty:
                return error_result(describe_miss(tokens, result))

            if result.is_unique and result.kind != QueryKind.FUZZY:
                self.resolver.mark_used(result.paths[0])

            logger.debug(f"Query {tokens} resolved as {result.kind.value} to {len(result.paths)} paths")
            return make_result(True, stdout=format_matches(result))

        except Exception as e:
            logger.error(f"Query error: {e}", exc_info=True)
            return error_result(str(e))
