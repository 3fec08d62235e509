"""SQLite-backed snapshot cache keyed by (data_type, year)."""

import json
import logging
import sqlite3
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from funnel_landing.errors import CacheUnavailableError

logger = logging.getLogger(__name__)


@dataclass
class CachedSnapshot:
    """A stored payload and when it was synced."""

    data_type: str
    year: int
    data: dict[str, Any]
    synced_at: datetime


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class SnapshotStore:
    """
    Key-value snapshot cache. One row per (data_type, year); a write replaces
    the previous row in the same transaction. Every sqlite failure surfaces as
    CacheUnavailableError so callers can fall back to recomputing.
    """

    def __init__(self, db_path: str | Path = "funnel_landing.db"):
        self._db_path = Path(db_path)
        self._ensure_schema()

    def _connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        schema_path = Path(__file__).parent / "schema.sql"
        try:
            with self._connection() as conn:
                conn.executescript(schema_path.read_text())
        except sqlite3.Error as e:
            raise CacheUnavailableError(f"Snapshot cache at {self._db_path} unavailable: {e}") from e

    def get(self, data_type: str, year: int) -> Optional[CachedSnapshot]:
        """Latest snapshot for the key, or None."""
        try:
            with self._connection() as conn:
                row = conn.execute(
                    """
                    SELECT * FROM funnel_cache WHERE data_type = ? AND year = ?
                    ORDER BY synced_at DESC LIMIT 1
                    """,
                    (data_type, year),
                ).fetchone()
        except sqlite3.Error as e:
            raise CacheUnavailableError(f"Snapshot read failed: {e}") from e
        if not row:
            return None
        try:
            return CachedSnapshot(
                data_type=row["data_type"],
                year=row["year"],
                data=json.loads(row["data"]),
                synced_at=_as_utc(datetime.fromisoformat(row["synced_at"])),
            )
        except ValueError as e:
            logger.warning("Ignoring undecodable snapshot %s/%s: %s", data_type, year, e)
            return None

    def set(
        self,
        data_type: str,
        year: int,
        data: dict[str, Any],
        *,
        synced_at: Optional[datetime] = None,
    ) -> datetime:
        """Replace the snapshot for the key. Returns the stored sync time."""
        synced_at = _as_utc(synced_at or datetime.now(timezone.utc))
        payload = json.dumps(data, default=str)
        try:
            with self._connection() as conn:
                conn.execute(
                    "DELETE FROM funnel_cache WHERE data_type = ? AND year = ?",
                    (data_type, year),
                )
                conn.execute(
                    "INSERT INTO funnel_cache (data_type, year, data, synced_at) VALUES (?, ?, ?, ?)",
                    (data_type, year, payload, synced_at.isoformat()),
                )
                conn.commit()
        except sqlite3.Error as e:
            raise CacheUnavailableError(f"Snapshot write failed: {e}") from e
        return synced_at

    def last_synced_at(self, data_type: str, year: int) -> Optional[datetime]:
        """Sync time of the stored snapshot, or None."""
        try:
            with self._connection() as conn:
                row = conn.execute(
                    """
                    SELECT synced_at FROM funnel_cache WHERE data_type = ? AND year = ?
                    ORDER BY synced_at DESC LIMIT 1
                    """,
                    (data_type, year),
                ).fetchone()
        except sqlite3.Error as e:
            raise CacheUnavailableError(f"Snapshot read failed: {e}") from e
        if not row:
            return None
        try:
            return _as_utc(datetime.fromisoformat(row["synced_at"]))
        except ValueError as e:
            logger.warning("Ignoring bad sync time for %s/%s: %s", data_type, year, e)
            return None
