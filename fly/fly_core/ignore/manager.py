"""
Per-root ignore policy combining global and root-specific rules
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Union

from pathspec.util import normalize_file

from .rule_engine import IgnoreRules, compile_rules, EMPTY_RULES
from fly.utils import get_logger

logger = get_logger(__name__)


@dataclass
class MatchResult:
    """Result of matching a path against ignore rules"""
    should_ignore: bool
    relative_path: Optional[str] = None
    matched_pattern: Optional[str] = None
    negated: bool = False


class IgnorePolicy:
    """
    Answers "is this path ignored" for candidates under one root.

    Rules are evaluated in a single ordered list: all global rules first,
    then the root's own rules, each group in file order.
    """

    def __init__(self, rules: IgnoreRules = EMPTY_RULES):
        self._rules = rules

    @classmethod
    def from_lines(cls,
                   global_lines: Optional[Iterable[str]] = None,
                   root_lines: Optional[Iterable[str]] = None) -> 'IgnorePolicy':
        """
        Build a policy from raw ignore-file lines

        Args:
            global_lines: Lines of the global ignore file
            root_lines: Lines of the root's own ignore file

        Returns:
            IgnorePolicy with global rules ahead of root rules
        """
        combined = list(global_lines or []) + list(root_lines or [])
        rules = compile_rules(combined)
        logger.debug(f"Ignore policy built from {len(combined)} lines ({len(rules)} rules)")
        return cls(rules)

    @property
    def rules(self) -> IgnoreRules:
        return self._rules

    @property
    def is_empty(self) -> bool:
        return self._rules.is_empty

    def relative_path(self, root: Union[str, Path], candidate: Union[str, Path]) -> Optional[str]:
        """
        Slash-separated path of candidate below root.

        Returns:
            Relative path, '' for the root itself, None when outside the root
        """
        root_path = Path(os.path.normpath(os.path.abspath(root)))
        candidate_path = Path(os.path.normpath(os.path.abspath(candidate)))

        if candidate_path == root_path:
            return ''
        try:
            relative = candidate_path.relative_to(root_path)
        except ValueError:
            return None
        return normalize_file(relative)

    def match(self, root: Union[str, Path], candidate: Union[str, Path],
              is_directory: bool) -> MatchResult:
        """
        Match a candidate against the policy

        Args:
            root: Root directory the rules are relative to
            candidate: Path to check (absolute, or relative to cwd)
            is_directory: Whether candidate is a directory

        Returns:
            MatchResult with decision and deciding pattern
        """
        rel = self.relative_path(root, candidate)
        if not rel:
            # Root itself, or outside the root: never ignored here
            return MatchResult(should_ignore=False, relative_path=rel)

        rule = self._rules.evaluate(rel, is_directory)
        if rule is None:
            return MatchResult(should_ignore=False, relative_path=rel)

        return MatchResult(
            should_ignore=not rule.negated,
            relative_path=rel,
            matched_pattern=('!' if rule.negated else '') + rule.pattern,
            negated=rule.negated,
        )

    def should_ignore(self, root: Union[str, Path], candidate: Union[str, Path],
                      is_directory: bool) -> bool:
        """
        Check if a path below root should be ignored

        Args:
            root: Root directory
            candidate: Path to check
            is_directory: Whether candidate is a directory

        Returns:
            True if the candidate should be skipped
        """
        if self._rules.is_empty:
            return False
        return self.match(root, candidate, is_directory).should_ignore
