#!/usr/bin/env python3
"""
Depth-first walker that turns a root into directory records

Ignored directories are pruned before descending, so nothing below an
ignored directory is ever visited. Unreadable directories are logged and
skipped; the walk itself never fails because of them.
"""

import os
from dataclasses import dataclass, field
from typing import List, Tuple

from .ignore import IgnorePolicy
from .models import DirectoryRecord, Root, normalize_path
from fly.utils import get_logger

logger = get_logger("tree-walker")


@dataclass
class WalkResult:
    """Records collected for one root plus the problems met on the way"""
    root: Root
    records: List[DirectoryRecord] = field(default_factory=list)
    errors: List[Tuple[str, str]] = field(default_factory=list)  # (path, message)
    pruned: int = 0
    missing: bool = False

    @property
    def count(self) -> int:
        return len(self.records)


class TreeWalker:
    """Walks one root under an ignore policy"""

    def __init__(self, policy: IgnorePolicy = None, follow_symlinks: bool = False):
        self.policy = policy or IgnorePolicy()
        self.follow_symlinks = follow_symlinks

    def walk(self, root: Root) -> WalkResult:
        """
        Collect a record for every directory that survives the policy

        Args:
            root: Root to walk

        Returns:
            WalkResult; `missing` is set when the root is not a directory
        """
        root_path = normalize_path(root.path)
        result = WalkResult(root=root)

        if not os.path.isdir(root_path):
            logger.warning(f"Skipping root '{root.path}': not a directory or missing")
            result.missing = True
            return result

        def on_error(error: OSError):
            path = error.filename or root_path
            logger.warning(f"Failed to access {path}: {error.strerror or error}")
            result.errors.append((str(path), str(error.strerror or error)))

        for dirpath, dirnames, _ in os.walk(root_path, topdown=True, onerror=on_error,
                                            followlinks=self.follow_symlinks):
            try:
                mtime = os.stat(dirpath).st_mtime
            except OSError as e:
                logger.warning(f"Failed to read metadata for {dirpath}: {e.strerror or e}")
                result.errors.append((dirpath, str(e.strerror or e)))
                dirnames[:] = []
                continue

            depth = self._depth(root_path, dirpath)
            result.records.append(DirectoryRecord.create(root, dirpath, depth, mtime))
            logger.trace(f"Indexed {dirpath} (depth {depth})")

            # Prune in place; os.walk only descends into what is left
            kept = []
            for name in sorted(dirnames):
                child = os.path.join(dirpath, name)
                if self.policy.should_ignore(root_path, child, True):
                    logger.debug(f"Pruned {child}")
                    result.pruned += 1
                else:
                    kept.append(name)
            dirnames[:] = kept

        return result

    @staticmethod
    def _depth(root_path: str, dirpath: str) -> int:
        relative = os.path.relpath(dirpath, root_path)
        if relative == os.curdir:
            return 0
        return len(relative.split(os.sep))


def walk_root(root: Root, policy: IgnorePolicy = None) -> WalkResult:
    """Convenience wrapper around TreeWalker.walk"""
    return TreeWalker(policy).walk(root)
