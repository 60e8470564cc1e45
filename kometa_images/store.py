"""
Point size store for Kometa Images.

A tiny key-value store mapping cache keys to resolved point sizes, backed by
a single SQLite file. Every operation opens its own connection and closes it
before returning, so no lock is held while ImageMagick measures text.
"""

import sqlite3
from contextlib import closing, contextmanager
from pathlib import Path
from typing import Iterator, Optional

from .constants import logger, CACHE_TABLE, STORE_BUSY_TIMEOUT
from .errors import StoreUnavailableError


class PointSizeStore:
    """
    Persistent CacheKey -> PointSize mapping.

    Table schema: (CacheKey TEXT PRIMARY KEY, PointSize INTEGER NOT NULL)
    """

    def __init__(self, db_path: Path, timeout: float = STORE_BUSY_TIMEOUT):
        self.db_path = Path(db_path)
        self.timeout = timeout

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """Open a connection, commit on success and always close it."""
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(str(self.db_path), timeout=self.timeout)
        except (OSError, sqlite3.Error) as e:
            raise StoreUnavailableError(self.db_path, str(e)) from e

        with closing(conn):
            try:
                with conn:
                    yield conn
            except sqlite3.Error as e:
                raise StoreUnavailableError(self.db_path, str(e)) from e

    def ensure_table(self) -> None:
        """Create the cache table if it does not exist yet."""
        with self._connect() as conn:
            conn.execute(
                f"CREATE TABLE IF NOT EXISTS {CACHE_TABLE} ("
                "CacheKey TEXT PRIMARY KEY, "
                "PointSize INTEGER NOT NULL)"
            )
        logger.debug(f"STORE_READY path={self.db_path}")

    def get(self, key: str) -> Optional[int]:
        """Return the stored point size for key, or None when unknown."""
        with self._connect() as conn:
            row = conn.execute(
                f"SELECT PointSize FROM {CACHE_TABLE} WHERE CacheKey = ?",
                (key,),
            ).fetchone()
        return int(row[0]) if row else None

    def put(self, key: str, value: int) -> None:
        """Insert or replace the point size stored under key."""
        with self._connect() as conn:
            conn.execute(
                f"INSERT OR REPLACE INTO {CACHE_TABLE} (CacheKey, PointSize) VALUES (?, ?)",
                (key, int(value)),
            )

    def count(self) -> int:
        """Number of cached entries."""
        with self._connect() as conn:
            row = conn.execute(f"SELECT COUNT(*) FROM {CACHE_TABLE}").fetchone()
        return int(row[0])

    def clear(self) -> int:
        """Delete every cached entry and return how many were removed."""
        with self._connect() as conn:
            removed = conn.execute(f"DELETE FROM {CACHE_TABLE}").rowcount
        logger.info(f"STORE_CLEARED path={self.db_path} removed={removed}")
        return removed
