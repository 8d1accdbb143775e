"""
In-memory directory store used by tests and dry runs
"""

import copy
import time
from contextlib import contextmanager
from dataclasses import replace
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from .directory_store import DirectoryStore, basename_key
from .models import DirectoryRecord, Root, normalize_path


class InMemoryDirectoryStore(DirectoryStore):
    """Dictionary backed store with snapshot/restore transactions"""

    def __init__(self):
        self._roots: Dict[str, Root] = {}
        self._directories: Dict[str, DirectoryRecord] = {}
        self._last_query: List[str] = []
        self._next_root_id = 1
        self._next_dir_id = 1
        self._tx_depth = 0

    @contextmanager
    def transaction(self):
        if self._tx_depth:
            self._tx_depth += 1
            try:
                yield self
            finally:
                self._tx_depth -= 1
            return

        snapshot = copy.deepcopy(
            (self._roots, self._directories, self._last_query, self._next_root_id, self._next_dir_id)
        )
        self._tx_depth = 1
        try:
            yield self
        except BaseException:
            (self._roots, self._directories, self._last_query,
             self._next_root_id, self._next_dir_id) = snapshot
            raise
        finally:
            self._tx_depth = 0

    # Roots

    def upsert_root(self, path: Union[str, Path]) -> int:
        normalized = normalize_path(path)
        root = self._roots.get(normalized)
        if root is None:
            root = Root(id=self._next_root_id, path=normalized)
            self._roots[normalized] = root
            self._next_root_id += 1
        return root.id

    def get_root(self, path: Union[str, Path]) -> Optional[Root]:
        return self._roots.get(normalize_path(path))

    def list_roots(self) -> List[Root]:
        return sorted(self._roots.values(), key=lambda r: r.id)

    def delete_root(self, path: Union[str, Path]) -> bool:
        root = self._roots.pop(normalize_path(path), None)
        if root is None:
            return False
        self.delete_directories_for_root(root.id)
        return True

    # Directories

    def delete_directories_for_root(self, root_id: int) -> int:
        doomed = [p for p, r in self._directories.items() if r.root_id == root_id]
        for fullpath in doomed:
            del self._directories[fullpath]
        return len(doomed)

    def bulk_upsert_directories(self, records: Iterable[DirectoryRecord]) -> int:
        count = 0
        with self.transaction():
            for record in records:
                existing = self._directories.get(record.fullpath)
                if existing is not None:
                    last_used = record.last_used if record.last_used is not None else existing.last_used
                    record = replace(record, id=existing.id, last_used=last_used)
                else:
                    record = replace(record, id=self._next_dir_id)
                    self._next_dir_id += 1
                self._directories[record.fullpath] = record
                count += 1
        return count

    def get_last_used_for_root(self, root_id: int) -> Dict[str, int]:
        return {
            r.fullpath: r.last_used
            for r in self._directories.values()
            if r.root_id == root_id and r.last_used is not None
        }

    def find_directories_by_basename(self, name: str) -> List[DirectoryRecord]:
        key = basename_key(name)
        matches = [r for r in self._directories.values() if basename_key(r.basename) == key]
        return sorted(matches, key=lambda r: (r.depth, r.fullpath))

    def get_directory(self, fullpath: Union[str, Path]) -> Optional[DirectoryRecord]:
        return self._directories.get(normalize_path(fullpath))

    def get_basename_paths(self) -> Dict[str, List[str]]:
        mapping: Dict[str, List[str]] = {}
        for record in sorted(self._directories.values(), key=lambda r: (r.basename, r.fullpath)):
            mapping.setdefault(record.basename, []).append(record.fullpath)
        return mapping

    def touch_last_used(self, fullpath: Union[str, Path], timestamp: Optional[int] = None) -> bool:
        normalized = normalize_path(fullpath)
        record = self._directories.get(normalized)
        if record is None:
            return False
        when = int(time.time()) if timestamp is None else int(timestamp)
        self._directories[normalized] = record.with_last_used(when)
        return True

    def count_directories(self) -> int:
        return len(self._directories)

    def count_roots(self) -> int:
        return len(self._roots)

    # Last query result

    def get_last_query_result(self) -> List[str]:
        return list(self._last_query)

    def replace_last_query_result(self, paths: Iterable[str]) -> None:
        self._last_query = list(paths)

    def reset(self) -> int:
        removed = len(self._directories)
        self._roots.clear()
        self._directories.clear()
        self._last_query = []
        return removed
