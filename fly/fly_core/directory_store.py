#!/usr/bin/env python3
"""
Directory store for roots, indexed directories and the last query result

The SQLite implementation keeps everything in a single embedded database
(`index.sqlite` under the data dir). Every public operation is atomic; a
root's delete-then-insert rebuild runs inside one transaction so readers
never observe a half-rebuilt root.
"""

import sqlite3
import time
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Union

from .models import DirectoryRecord, Root, normalize_path
from fly.utils import get_logger

logger = get_logger(__name__)


class StoreError(Exception):
    """Raised when the underlying storage engine fails."""
    pass


class DirectoryStore(ABC):
    """Storage operations the indexer and resolver rely on"""

    # Roots

    @abstractmethod
    def upsert_root(self, path: Union[str, Path]) -> int:
        """Register a root (idempotent) and return its id"""

    @abstractmethod
    def get_root(self, path: Union[str, Path]) -> Optional[Root]:
        """Look up a root by path"""

    @abstractmethod
    def list_roots(self) -> List[Root]:
        """All roots ordered by id"""

    @abstractmethod
    def delete_root(self, path: Union[str, Path]) -> bool:
        """Remove a root and every directory record it owns"""

    # Directories

    @abstractmethod
    def delete_directories_for_root(self, root_id: int) -> int:
        """Remove a root's directory records, returning how many were removed"""

    @abstractmethod
    def bulk_upsert_directories(self, records: Iterable[DirectoryRecord]) -> int:
        """Insert or update records in one transaction, keyed by fullpath"""

    @abstractmethod
    def get_last_used_for_root(self, root_id: int) -> Dict[str, int]:
        """fullpath -> last_used for a root's records that have been used"""

    @abstractmethod
    def find_directories_by_basename(self, name: str) -> List[DirectoryRecord]:
        """Records whose basename equals name, ignoring case"""

    @abstractmethod
    def get_basename_paths(self) -> Dict[str, List[str]]:
        """Every known basename mapped to its full paths"""

    @abstractmethod
    def touch_last_used(self, fullpath: Union[str, Path], timestamp: Optional[int] = None) -> bool:
        """Record that a directory was jumped to"""

    @abstractmethod
    def count_directories(self) -> int:
        pass

    @abstractmethod
    def count_roots(self) -> int:
        pass

    # Last query result

    @abstractmethod
    def get_last_query_result(self) -> List[str]:
        """Paths of the most recent multi-result query, in order"""

    @abstractmethod
    def replace_last_query_result(self, paths: Iterable[str]) -> None:
        """Overwrite the last query result (empty input clears it)"""

    # Maintenance

    @abstractmethod
    def reset(self) -> int:
        """Drop all roots, directories and the last result; returns directories removed"""

    @abstractmethod
    def transaction(self):
        """Context manager grouping several operations atomically"""

    def close(self) -> None:
        pass

    def replace_directories_for_root(self, root_id: int, records: Iterable[DirectoryRecord]) -> int:
        """
        Swap a root's directory set for a freshly walked one

        Delete and insert happen in one transaction. last_used values of
        directories that survive the rebuild are carried over.

        Args:
            root_id: Root whose records are replaced
            records: New records for the root

        Returns:
            Number of records removed before the insert
        """
        with self.transaction():
            last_used = self.get_last_used_for_root(root_id)
            removed = self.delete_directories_for_root(root_id)
            self.bulk_upsert_directories(
                record.with_last_used(last_used.get(record.fullpath, record.last_used))
                for record in records
            )
        return removed

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


SCHEMA_DDL = """
CREATE TABLE IF NOT EXISTS roots (
  id    INTEGER PRIMARY KEY,
  path  TEXT NOT NULL UNIQUE
);

CREATE TABLE IF NOT EXISTS directories (
  id            INTEGER PRIMARY KEY,
  basename      TEXT NOT NULL,
  basename_key  TEXT NOT NULL,
  fullpath      TEXT NOT NULL UNIQUE,
  depth         INTEGER NOT NULL,
  root_id       INTEGER NOT NULL REFERENCES roots(id) ON DELETE CASCADE,
  mtime         INTEGER NOT NULL,
  last_used     INTEGER,
  segments      TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_dirs_basename_key
  ON directories (basename_key);

CREATE INDEX IF NOT EXISTS idx_dirs_root_basename_key
  ON directories (root_id, basename_key);

CREATE TABLE IF NOT EXISTS last_query (
  position  INTEGER PRIMARY KEY,
  fullpath  TEXT NOT NULL
);
"""

UPSERT_DIRECTORY_SQL = """
INSERT INTO directories (basename, basename_key, fullpath, depth, root_id, mtime, last_used, segments)
VALUES (?, ?, ?, ?, ?, ?, ?, ?)
ON CONFLICT(fullpath) DO UPDATE SET
  basename     = excluded.basename,
  basename_key = excluded.basename_key,
  depth        = excluded.depth,
  root_id      = excluded.root_id,
  mtime        = excluded.mtime,
  last_used    = COALESCE(excluded.last_used, directories.last_used),
  segments     = excluded.segments
"""

DIRECTORY_COLUMNS = "id, basename, fullpath, depth, root_id, mtime, last_used, segments"


def basename_key(name: str) -> str:
    """Case-folded basename used for lookups"""
    return name.lower()


class SQLiteDirectoryStore(DirectoryStore):
    """SQLite backed directory store"""

    def __init__(self, db_path: Union[str, Path]):
        """
        Open (and create if needed) the database

        Args:
            db_path: Database file, or ':memory:'

        Raises:
            StoreError: If the database cannot be opened or initialised
        """
        self.db_path = str(db_path)
        if self.db_path != ':memory:':
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

        self._tx_depth = 0
        try:
            # Autocommit mode; transactions are opened explicitly
            self._conn = sqlite3.connect(self.db_path, isolation_level=None)
            self._conn.row_factory = sqlite3.Row
            self._apply_pragmas(self._conn)
            self._conn.executescript(SCHEMA_DDL)
        except sqlite3.Error as e:
            raise StoreError(f"Cannot open database {self.db_path}: {e}") from e

        logger.debug(f"Opened directory store at {self.db_path}")

    @staticmethod
    def _apply_pragmas(conn: sqlite3.Connection) -> None:
        conn.execute("PRAGMA journal_mode=WAL;")
        conn.execute("PRAGMA synchronous=NORMAL;")
        conn.execute("PRAGMA temp_store=MEMORY;")
        conn.execute("PRAGMA busy_timeout=2000;")
        conn.execute("PRAGMA foreign_keys=ON;")

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """
        Run the enclosed operations in one transaction

        Nested use joins the outermost transaction. Any exception rolls
        everything back; sqlite errors surface as StoreError.
        """
        conn = self._require_conn()
        if self._tx_depth:
            self._tx_depth += 1
            try:
                yield conn
            finally:
                self._tx_depth -= 1
            return

        try:
            conn.execute("BEGIN")
        except sqlite3.Error as e:
            raise StoreError(f"Cannot begin transaction: {e}") from e

        self._tx_depth = 1
        try:
            yield conn
        except sqlite3.Error as e:
            self._tx_depth = 0
            conn.execute("ROLLBACK")
            raise StoreError(str(e)) from e
        except BaseException:
            self._tx_depth = 0
            conn.execute("ROLLBACK")
            raise
        else:
            self._tx_depth = 0
            try:
                conn.execute("COMMIT")
            except sqlite3.Error as e:
                raise StoreError(f"Commit failed: {e}") from e

    def _require_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            raise StoreError("Directory store is closed")
        return self._conn

    def _query(self, sql: str, params: tuple = ()) -> List[sqlite3.Row]:
        try:
            return self._require_conn().execute(sql, params).fetchall()
        except sqlite3.Error as e:
            raise StoreError(str(e)) from e

    @staticmethod
    def _read_directory(row: sqlite3.Row) -> DirectoryRecord:
        return DirectoryRecord(
            id=row['id'],
            basename=row['basename'],
            fullpath=row['fullpath'],
            depth=row['depth'],
            root_id=row['root_id'],
            mtime=row['mtime'],
            last_used=row['last_used'],
            segments=row['segments'],
        )

    # Roots

    def upsert_root(self, path: Union[str, Path]) -> int:
        normalized = normalize_path(path)
        with self.transaction() as conn:
            conn.execute(
                "INSERT INTO roots(path) VALUES(?) ON CONFLICT(path) DO NOTHING",
                (normalized,)
            )
            row = conn.execute("SELECT id FROM roots WHERE path = ?", (normalized,)).fetchone()
        if row is None:
            raise StoreError(f"Failed to fetch root id after upsert: {normalized}")
        return row['id']

    def get_root(self, path: Union[str, Path]) -> Optional[Root]:
        rows = self._query("SELECT id, path FROM roots WHERE path = ?", (normalize_path(path),))
        return Root(id=rows[0]['id'], path=rows[0]['path']) if rows else None

    def list_roots(self) -> List[Root]:
        rows = self._query("SELECT id, path FROM roots ORDER BY id ASC")
        return [Root(id=row['id'], path=row['path']) for row in rows]

    def delete_root(self, path: Union[str, Path]) -> bool:
        normalized = normalize_path(path)
        with self.transaction() as conn:
            row = conn.execute("SELECT id FROM roots WHERE path = ?", (normalized,)).fetchone()
            if row is None:
                return False
            removed = conn.execute("DELETE FROM directories WHERE root_id = ?", (row['id'],)).rowcount
            conn.execute("DELETE FROM roots WHERE id = ?", (row['id'],))
        logger.info(f"Removed root {normalized} ({removed} directories)")
        return True

    # Directories

    def delete_directories_for_root(self, root_id: int) -> int:
        with self.transaction() as conn:
            return conn.execute("DELETE FROM directories WHERE root_id = ?", (root_id,)).rowcount

    def bulk_upsert_directories(self, records: Iterable[DirectoryRecord]) -> int:
        rows = [
            (r.basename, basename_key(r.basename), r.fullpath, r.depth,
             r.root_id, r.mtime, r.last_used, r.segments)
            for r in records
        ]
        if not rows:
            return 0
        with self.transaction() as conn:
            conn.executemany(UPSERT_DIRECTORY_SQL, rows)
        return len(rows)

    def get_last_used_for_root(self, root_id: int) -> Dict[str, int]:
        rows = self._query(
            "SELECT fullpath, last_used FROM directories WHERE root_id = ? AND last_used IS NOT NULL",
            (root_id,)
        )
        return {row['fullpath']: row['last_used'] for row in rows}

    def find_directories_by_basename(self, name: str) -> List[DirectoryRecord]:
        rows = self._query(
            f"SELECT {DIRECTORY_COLUMNS} FROM directories "
            "WHERE basename_key = ? ORDER BY depth ASC, fullpath ASC",
            (basename_key(name),)
        )
        return [self._read_directory(row) for row in rows]

    def get_directory(self, fullpath: Union[str, Path]) -> Optional[DirectoryRecord]:
        rows = self._query(
            f"SELECT {DIRECTORY_COLUMNS} FROM directories WHERE fullpath = ?",
            (normalize_path(fullpath),)
        )
        return self._read_directory(rows[0]) if rows else None

    def get_basename_paths(self) -> Dict[str, List[str]]:
        rows = self._query("SELECT basename, fullpath FROM directories ORDER BY basename, fullpath")
        mapping: Dict[str, List[str]] = {}
        for row in rows:
            mapping.setdefault(row['basename'], []).append(row['fullpath'])
        return mapping

    def touch_last_used(self, fullpath: Union[str, Path], timestamp: Optional[int] = None) -> bool:
        when = int(time.time()) if timestamp is None else int(timestamp)
        with self.transaction() as conn:
            updated = conn.execute(
                "UPDATE directories SET last_used = ? WHERE fullpath = ?",
                (when, normalize_path(fullpath))
            ).rowcount
        return updated > 0

    def count_directories(self) -> int:
        return self._query("SELECT COUNT(*) AS n FROM directories")[0]['n']

    def count_roots(self) -> int:
        return self._query("SELECT COUNT(*) AS n FROM roots")[0]['n']

    # Last query result

    def get_last_query_result(self) -> List[str]:
        rows = self._query("SELECT fullpath FROM last_query ORDER BY position ASC")
        return [row['fullpath'] for row in rows]

    def replace_last_query_result(self, paths: Iterable[str]) -> None:
        rows = [(position, path) for position, path in enumerate(paths, 1)]
        with self.transaction() as conn:
            conn.execute("DELETE FROM last_query")
            if rows:
                conn.executemany("INSERT INTO last_query(position, fullpath) VALUES (?, ?)", rows)

    # Maintenance

    def reset(self) -> int:
        with self.transaction() as conn:
            removed = conn.execute("DELETE FROM directories").rowcount
            conn.execute("DELETE FROM roots")
            conn.execute("DELETE FROM last_query")
        logger.info(f"Store reset; removed {removed} directories")
        return removed

    def integrity_check(self) -> str:
        rows = self._query("PRAGMA integrity_check;")
        return rows[0][0] if rows else "no result"
