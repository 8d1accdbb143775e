"""
File loader for reading ignore files into raw pattern lines
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from .constants import IGNORE_FILENAME, MAX_IGNORE_FILE_SIZE
from .rule_engine import compile_rule

logger = logging.getLogger(__name__)


@dataclass
class IgnoreFileInfo:
    """Information about a loaded ignore file"""
    path: Path
    lines: List[str] = field(default_factory=list)
    error: Optional[str] = None
    stats: Dict[str, int] = field(default_factory=dict)

    @property
    def exists(self) -> bool:
        return self.error is None and bool(self.stats)

    @property
    def pattern_count(self) -> int:
        return self.stats.get('pattern_lines', 0)


class IgnoreFileLoader:
    """
    Handles loading ignore files from disk

    Lines are returned raw (only trailing whitespace removed); compiling
    them into rules is the rule engine's job.
    """

    def __init__(self, ignore_filename: str = IGNORE_FILENAME,
                 max_size: int = MAX_IGNORE_FILE_SIZE):
        self.ignore_filename = ignore_filename
        self.max_size = max_size

    def load_file(self, file_path: Path) -> IgnoreFileInfo:
        """
        Load an ignore file

        Args:
            file_path: Path to the ignore file

        Returns:
            IgnoreFileInfo with lines and stats; a missing file yields no
            lines and no error
        """
        info = IgnoreFileInfo(path=file_path)

        if not file_path.is_file():
            return info

        try:
            file_size = file_path.stat().st_size
        except OSError as e:
            info.error = f"Cannot stat file: {e}"
            logger.warning(f"{file_path}: {info.error}")
            return info

        if file_size > self.max_size:
            info.error = f"File too large: {file_size} bytes (max: {self.max_size})"
            logger.warning(f"{file_path}: {info.error}")
            return info

        try:
            text = file_path.read_text(encoding='utf-8', errors='replace')
        except OSError as e:
            info.error = f"Cannot read file: {e}"
            logger.warning(f"{file_path}: {info.error}")
            return info

        info.stats = {
            'total_lines': 0,
            'empty_lines': 0,
            'comment_lines': 0,
            'pattern_lines': 0,
            'dropped_lines': 0,
        }

        for line in text.splitlines():
            info.stats['total_lines'] += 1
            stripped = line.strip()

            if not stripped:
                info.stats['empty_lines'] += 1
            elif stripped.startswith('#'):
                info.stats['comment_lines'] += 1
            elif compile_rule(stripped) is None:
                info.stats['dropped_lines'] += 1
            else:
                info.stats['pattern_lines'] += 1

            info.lines.append(line.rstrip())

        logger.debug(
            f"Loaded {file_path}: {info.stats['pattern_lines']} patterns, "
            f"{info.stats['dropped_lines']} dropped"
        )
        return info

    def load_lines(self, file_path: Path) -> List[str]:
        """Raw lines of an ignore file (empty when missing or unreadable)"""
        return self.load_file(file_path).lines

    def root_ignore_file(self, root_path: Path) -> Path:
        """Location of a root's own ignore file"""
        return Path(root_path) / self.ignore_filename
