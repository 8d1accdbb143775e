"""
Rule engine for ignore pattern compilation and matching

Patterns follow a reduced gitignore syntax:
- Blank lines and lines starting with '#' are skipped
- A leading '!' negates the rule (re-includes a previously ignored path)
- A trailing '/' restricts the rule to directories
- A leading '/' anchors the rule to the root; otherwise it matches at any depth
- Wildcards: '?' (one char), '*' (any run within a segment), '**' (any depth)
"""

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Pattern, Tuple

from fly.utils import get_logger

logger = get_logger(__name__)

# Prefix that lets an unanchored pattern match at any depth
ANY_DEPTH_PREFIX = "**/"


@dataclass(frozen=True)
class IgnoreRule:
    """A single compiled ignore pattern"""
    pattern: str            # Pattern text as written (markers stripped)
    regex: Pattern[str]     # Matcher for the full relative path
    negated: bool = False
    directory_only: bool = False
    anchored: bool = False

    def matches(self, relative_path: str) -> bool:
        """Check the whole slash-separated relative path against this rule"""
        return self.regex.fullmatch(relative_path) is not None


def glob_to_regex(glob: str) -> str:
    """
    Translate a glob into a path-segment aware regular expression.

    '?' and '*' never cross a '/', '**/' matches zero or more whole
    segments, and a bare '**' matches anything. Every other regex
    metacharacter is escaped.

    Args:
        glob: Slash-separated glob pattern

    Returns:
        Regex source anchored at both ends
    """
    parts = ['^']
    i = 0
    length = len(glob)

    while i < length:
        char = glob[i]
        if char == '*':
            if i + 1 < length and glob[i + 1] == '*':
                i += 2
                if i < length and glob[i] == '/':
                    parts.append('(?:.*/)?')
                    i += 1
                else:
                    parts.append('.*')
            else:
                parts.append('[^/]*')
                i += 1
        elif char == '?':
            parts.append('[^/]')
            i += 1
        else:
            parts.append(re.escape(char))
            i += 1

    parts.append('$')
    return ''.join(parts)


def compile_rule(raw_line: Optional[str]) -> Optional[IgnoreRule]:
    """
    Compile one raw ignore-file line.

    Args:
        raw_line: Line as read from an ignore file

    Returns:
        IgnoreRule, or None for blank, comment, or degenerate lines
    """
    if raw_line is None:
        return None

    line = raw_line.strip()
    if not line or line.startswith('#'):
        return None

    negated = False
    if line.startswith('!'):
        negated = True
        line = line[1:].strip()
    if not line:
        return None

    directory_only = False
    if line.endswith('/'):
        directory_only = True
        line = line[:-1]
    if not line:
        return None

    anchored = line.startswith('/')
    if anchored:
        line = line[1:]

    line = line.replace('\\', '/')
    if not line:
        return None

    effective = line
    if not anchored and not effective.startswith(ANY_DEPTH_PREFIX):
        effective = ANY_DEPTH_PREFIX + effective

    try:
        regex = re.compile(glob_to_regex(effective))
    except re.error as e:
        logger.debug(f"Dropping ignore pattern '{raw_line.strip()}': {e}")
        return None

    return IgnoreRule(
        pattern=line,
        regex=regex,
        negated=negated,
        directory_only=directory_only,
        anchored=anchored,
    )


class IgnoreRules:
    """
    Ordered, immutable list of compiled rules.

    The last matching rule decides; a path no rule matches is kept.
    """

    def __init__(self, rules: Iterable[IgnoreRule] = ()):
        self._rules: Tuple[IgnoreRule, ...] = tuple(rules)

    @property
    def rules(self) -> Tuple[IgnoreRule, ...]:
        return self._rules

    @property
    def is_empty(self) -> bool:
        return not self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self):
        return iter(self._rules)

    def __repr__(self) -> str:
        return f"IgnoreRules({[r.pattern for r in self._rules]!r})"

    def evaluate(self, relative_path: str, is_directory: bool) -> Optional[IgnoreRule]:
        """
        Find the rule that decides a relative path.

        The last rule matching the path itself decides. When no rule
        matches it, the path takes its parent directory's verdict, so
        excluding `docs/` also covers `docs/x` while a later
        `!docs/.keep` can still re-include that single entry.

        Args:
            relative_path: Slash-separated path relative to the root
            is_directory: Whether the path itself is a directory

        Returns:
            The deciding rule, or None when no rule applies
        """
        if not self._rules or not relative_path:
            return None

        decided = None
        for rule in self._rules:
            if rule.directory_only and not is_directory:
                continue
            if rule.matches(relative_path):
                decided = rule
        if decided is not None:
            return decided

        parent = relative_path.rpartition('/')[0]
        if not parent:
            return None
        return self.evaluate(parent, True)

    def is_ignored(self, relative_path: str, is_directory: bool) -> bool:
        rule = self.evaluate(relative_path, is_directory)
        return rule is not None and not rule.negated


EMPTY_RULES = IgnoreRules()


def compile_rules(raw_lines: Optional[Iterable[str]]) -> IgnoreRules:
    """
    Compile raw ignore lines into an ordered rule list.

    Args:
        raw_lines: Lines in file order (global lines before root lines)

    Returns:
        IgnoreRules, or EMPTY_RULES when nothing compiled
    """
    if not raw_lines:
        return EMPTY_RULES

    compiled: List[IgnoreRule] = []
    for raw in raw_lines:
        rule = compile_rule(raw)
        if rule is not None:
            compiled.append(rule)

    if not compiled:
        return EMPTY_RULES

    logger.debug(f"Compiled {len(compiled)} ignore rules")
    return IgnoreRules(compiled)
