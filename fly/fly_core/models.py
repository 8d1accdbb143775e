"""
Data records shared by the walker, the store, and the resolver
"""

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional, Union


def normalize_path(path: Union[str, Path]) -> str:
    """Absolute, normalized path string (symlinks are not resolved)"""
    return os.path.normpath(os.path.abspath(os.path.expanduser(str(path))))


@dataclass(frozen=True)
class Root:
    """A registered top-level directory"""
    id: int
    path: str


@dataclass(frozen=True)
class DirectoryRecord:
    """One indexed directory"""
    basename: str
    fullpath: str
    depth: int
    root_id: int
    mtime: int
    segments: str
    last_used: Optional[int] = None
    id: Optional[int] = None

    @classmethod
    def create(cls, root: Root, fullpath: Union[str, Path], depth: int, mtime: float) -> 'DirectoryRecord':
        """
        Build a record for a directory under root

        Args:
            root: Owning root
            fullpath: Directory path (normalized here)
            depth: Number of segments below the root
            mtime: Modification time in seconds

        Returns:
            DirectoryRecord ready for the store
        """
        normalized = normalize_path(fullpath)
        basename = os.path.basename(normalized) or normalized
        return cls(
            basename=basename,
            fullpath=normalized,
            depth=depth,
            root_id=root.id,
            mtime=int(mtime),
            segments=normalized.replace('\\', '/'),
        )

    def with_last_used(self, timestamp: Optional[int]) -> 'DirectoryRecord':
        return replace(self, last_used=timestamp)
