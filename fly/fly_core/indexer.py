#!/usr/bin/env python3
"""
Directory indexer: full wipe + rebuild per root
"""

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Protocol, Sequence, Tuple

from tqdm import tqdm

from .directory_store import DirectoryStore
from .ignore import IgnorePolicy
from .models import Root
from .tree_walker import TreeWalker
from fly.utils import get_logger, log_with_context

logger = get_logger("directory-indexer")


class IgnoreSource(Protocol):
    """Supplies raw ignore lines; the config layer implements this"""

    def load_global_ignore_patterns(self) -> List[str]:
        ...

    def load_root_ignore_patterns(self, root_path: Path) -> List[str]:
        ...


@dataclass
class IndexReport:
    """Outcome of reindexing one root"""
    root: Root
    indexed: int = 0
    removed: int = 0
    pruned: int = 0
    errors: List[Tuple[str, str]] = field(default_factory=list)
    missing: bool = False

    @property
    def ok(self) -> bool:
        return not self.missing and not self.errors


class DirectoryIndexer:
    """Scans registered roots and materialises their directories in the store"""

    def __init__(self, store: DirectoryStore, ignore_source: Optional[IgnoreSource] = None):
        """
        Args:
            store: Directory store to rebuild
            ignore_source: Provider of global and per-root ignore lines
                           (None means no ignore rules)
        """
        self.store = store
        self.ignore_source = ignore_source

    def build_policy(self, root: Root,
                     global_lines: Optional[Sequence[str]] = None,
                     root_lines: Optional[Sequence[str]] = None) -> IgnorePolicy:
        """Compile the root's policy, reading lines from the ignore source when not given"""
        if self.ignore_source is not None:
            if global_lines is None:
                global_lines = self.ignore_source.load_global_ignore_patterns()
            if root_lines is None:
                root_lines = self.ignore_source.load_root_ignore_patterns(Path(root.path))
        return IgnorePolicy.from_lines(global_lines, root_lines)

    def reindex_root(self, root: Root,
                     global_lines: Optional[Sequence[str]] = None,
                     root_lines: Optional[Sequence[str]] = None) -> IndexReport:
        """
        Wipe and rebuild the directory index for a single root

        A root that is no longer a directory is unregistered, which drops
        its records with it.

        Args:
            root: Root to rebuild
            global_lines: Global ignore lines (read from the ignore source if None)
            root_lines: Root-specific ignore lines (read from the ignore source if None)

        Returns:
            IndexReport with counts and walk errors

        Raises:
            StoreError: If the store cannot be updated
        """
        report = IndexReport(root=root)

        if not Path(root.path).is_dir():
            logger.warning(f"Skipping root '{root.path}': not a directory or missing")
            report.removed = self._drop_root(root)
            report.missing = True
            return report

        policy = self.build_policy(root, global_lines, root_lines)
        walk = TreeWalker(policy).walk(root)

        if walk.missing:
            report.removed = self._drop_root(root)
            report.missing = True
            return report

        report.removed = self.store.replace_directories_for_root(root.id, walk.records)
        report.indexed = walk.count
        report.pruned = walk.pruned
        report.errors = walk.errors

        log_with_context(
            logger, logging.INFO,
            f"Indexed {report.indexed:,} directories under {root.path}",
            root=root.path, indexed=report.indexed, removed=report.removed,
            pruned=report.pruned, errors=len(report.errors),
        )
        return report

    def _drop_root(self, root: Root) -> int:
        with self.store.transaction():
            removed = self.store.delete_directories_for_root(root.id)
            self.store.delete_root(root.path)
        return removed

    def reindex_all_roots(self, show_progress: bool = False) -> List[IndexReport]:
        """
        Reindex every registered root

        Args:
            show_progress: Draw a progress bar on stderr

        Returns:
            One IndexReport per root, in root order
        """
        roots = self.store.list_roots()
        reports = []

        for root in tqdm(roots, desc="Indexing roots", unit="root",
                         disable=not show_progress, file=sys.stderr):
            reports.append(self.reindex_root(root))

        total = sum(r.indexed for r in reports)
        logger.info(f"Reindexed {len(reports)} roots, {total:,} directories")
        return reports
