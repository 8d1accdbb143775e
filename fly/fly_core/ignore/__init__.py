"""
Ignore file processing for the fly directory index

This package provides:
- Compilation of gitignore-style lines into ordered rules
- A per-root policy (global rules, then root rules; last match wins)
- Loading of ignore files from disk
- Generation of default .flyIgnore files
"""

from .constants import IGNORE_FILENAME
from .rule_engine import IgnoreRule, IgnoreRules, EMPTY_RULES, compile_rule, compile_rules, glob_to_regex
from .manager import IgnorePolicy, MatchResult
from .file_loader import IgnoreFileLoader, IgnoreFileInfo
from .init import init_ignore_file, generate_ignore_content

__all__ = [
    'IGNORE_FILENAME',
    'IgnoreRule',
    'IgnoreRules',
    'EMPTY_RULES',
    'compile_rule',
    'compile_rules',
    'glob_to_regex',
    'IgnorePolicy',
    'MatchResult',
    'IgnoreFileLoader',
    'IgnoreFileInfo',
    'init_ignore_file',
    'generate_ignore_content',
]
