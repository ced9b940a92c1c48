"""Persistent storage for baseline records using SQLite.

One row per branch. Each refresh replaces the whole record; nothing is
merged across refreshes.
"""

from __future__ import annotations

import json
import logging
import sqlite3
import time
from pathlib import Path

from pydantic import ValidationError

from driftradar.baseline.aggregator import BaselineData
from driftradar.exceptions import CacheError

logger = logging.getLogger("driftradar.baseline")


class BaselineStore:
    """Key-value store of ``BaselineData`` keyed by branch name."""

    def __init__(self, db_path: str | Path) -> None:
        self.db_path = Path(db_path)
        self._conn: sqlite3.Connection | None = None

    def _get_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            try:
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
                self._conn = sqlite3.connect(str(self.db_path))
                self._conn.row_factory = sqlite3.Row
                self._create_tables()
            except (OSError, sqlite3.Error) as e:
                self._conn = None
                raise CacheError(f"Cannot open baseline store {self.db_path}: {e}") from e
        return self._conn

    def _create_tables(self) -> None:
        conn = self._get_conn()
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS baselines (
                branch TEXT PRIMARY KEY,
                data TEXT NOT NULL,       -- BaselineData as a flat JSON record
                saved_at REAL NOT NULL
            );
        """)

    def get(self, branch: str) -> BaselineData | None:
        """Return the stored baseline for `branch`, or None.

        A record that no longer parses is treated as absent.
        """
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT data FROM baselines WHERE branch = ?", (branch,)
            ).fetchone()
        except sqlite3.Error as e:
            raise CacheError(f"Cannot read baseline for {branch!r}: {e}") from e
        if row is None:
            return None
        try:
            return BaselineData.model_validate(json.loads(row["data"]))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable baseline for {branch!r}: {e}")
            return None

    def put(self, branch: str, data: BaselineData) -> None:
        """Store `data` as the baseline for `branch`, replacing any previous one."""
        conn = self._get_conn()
        try:
            conn.execute(
                "INSERT OR REPLACE INTO baselines (branch, data, saved_at) VALUES (?, ?, ?)",
                (branch, json.dumps(data.to_record()), time.time()),
            )
            conn.commit()
        except sqlite3.Error as e:
            raise CacheError(f"Cannot save baseline for {branch!r}: {e}") from e

    def delete(self, branch: str) -> bool:
        conn = self._get_conn()
        try:
            cur = conn.execute("DELETE FROM baselines WHERE branch = ?", (branch,))
            conn.commit()
        except sqlite3.Error as e:
            raise CacheError(f"Cannot delete baseline for {branch!r}: {e}") from e
        return cur.rowcount > 0

    def branches(self) -> list[str]:
        conn = self._get_conn()
        try:
            rows = conn.execute("SELECT branch FROM baselines ORDER BY branch").fetchall()
        except sqlite3.Error as e:
            raise CacheError(f"Cannot list baselines: {e}") from e
        return [r["branch"] for r in rows]

    def close(self) -> None:
        """Close the database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None
