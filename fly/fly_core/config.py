#!/usr/bin/env python3
"""
On-disk configuration for fly.

Maintains, under ~/.config/fly (or the XDG / FLY_CONFIG_DIR equivalent):
- .flyRoots  : registered root directories, one absolute path per line
- .flyIgnore : global ignore patterns (gitignore-style)

The index database lives in the data dir (~/.local/share/fly by default).
"""

import os
from pathlib import Path
from typing import List, Optional, Union

from .constants import (
    APP_DIR_NAME,
    CONFIG_DIR_ENV,
    DATA_DIR_ENV,
    DATABASE_FILENAME,
    ROOTS_FILENAME,
)
from .directory_store import DirectoryStore
from .ignore import IGNORE_FILENAME, IgnoreFileLoader
from .ignore.init import generate_header
from .models import normalize_path
from fly.utils import get_logger

logger = get_logger("fly-config")

ROOTS_HEADER = [
    "# fly roots file",
    "# One absolute directory path per line",
]


def resolve_config_dir() -> Path:
    """FLY_CONFIG_DIR, then $XDG_CONFIG_HOME/fly, then ~/.config/fly"""
    override = os.environ.get(CONFIG_DIR_ENV, '').strip()
    if override:
        return Path(override).expanduser()
    xdg = os.environ.get('XDG_CONFIG_HOME', '').strip()
    if xdg:
        return Path(xdg) / APP_DIR_NAME
    return Path.home() / '.config' / APP_DIR_NAME


def resolve_data_dir() -> Path:
    """FLY_DATA_DIR, then $XDG_DATA_HOME/fly, then ~/.local/share/fly"""
    override = os.environ.get(DATA_DIR_ENV, '').strip()
    if override:
        return Path(override).expanduser()
    xdg = os.environ.get('XDG_DATA_HOME', '').strip()
    if xdg:
        return Path(xdg) / APP_DIR_NAME
    return Path.home() / '.local' / 'share' / APP_DIR_NAME


class ConfigManager:
    """Reads and writes the roots file and ignore files"""

    def __init__(self, config_dir: Optional[Union[str, Path]] = None,
                 data_dir: Optional[Union[str, Path]] = None):
        self.config_dir = Path(config_dir or resolve_config_dir()).absolute()
        self.data_dir = Path(data_dir or resolve_data_dir()).absolute()
        self.roots_file = self.config_dir / ROOTS_FILENAME
        self.ignore_file = self.config_dir / IGNORE_FILENAME
        self._loader = IgnoreFileLoader()

    @property
    def database_path(self) -> Path:
        return self.data_dir / DATABASE_FILENAME

    def ensure_layout(self) -> None:
        """Create the config dir and placeholder files if missing"""
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.data_dir.mkdir(parents=True, exist_ok=True)

        if not self.roots_file.exists():
            self._write_roots([])
            logger.debug(f"Created {self.roots_file}")

        if not self.ignore_file.exists():
            lines = generate_header("fly global ignore patterns")
            lines.extend(["#", "# Example:", "# node_modules/", ""])
            self.ignore_file.write_text('\n'.join(lines), encoding='utf-8')
            logger.debug(f"Created {self.ignore_file}")

    # Roots

    def load_roots(self) -> List[str]:
        """
        Load root paths from the roots file

        Returns:
            Normalized paths in file order, duplicates removed
        """
        if not self.roots_file.exists():
            return []

        roots: List[str] = []
        for line in self.roots_file.read_text(encoding='utf-8').splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith('#'):
                continue
            path = normalize_path(stripped)
            if path not in roots:
                roots.append(path)
        return roots

    def add_root(self, root_path: Union[str, Path]) -> str:
        """Add a root to the roots file (no-op if already present)"""
        path = normalize_path(root_path)
        roots = self.load_roots()
        if path not in roots:
            roots.append(path)
            self._write_roots(roots)
        return path

    def remove_root(self, root_path: Union[str, Path]) -> bool:
        """Remove a root from the roots file"""
        path = normalize_path(root_path)
        roots = self.load_roots()
        if path not in roots:
            return False
        roots.remove(path)
        self._write_roots(roots)
        return True

    def sync_roots(self, store: DirectoryStore) -> int:
        """
        Upsert every configured root into the store

        Returns:
            Number of roots synchronised
        """
        roots = self.load_roots()
        for path in roots:
            store.upsert_root(path)
        return len(roots)

    def _write_roots(self, roots: List[str]) -> None:
        self.config_dir.mkdir(parents=True, exist_ok=True)
        lines = ROOTS_HEADER + list(roots)
        self.roots_file.write_text('\n'.join(lines) + '\n', encoding='utf-8')

    # Ignore patterns

    def load_global_ignore_patterns(self) -> List[str]:
        return self._loader.load_lines(self.ignore_file)

    def load_root_ignore_patterns(self, root_path: Union[str, Path]) -> List[str]:
        return self._loader.load_lines(self._loader.root_ignore_file(Path(root_path)))
