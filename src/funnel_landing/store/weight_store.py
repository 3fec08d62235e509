"""SQLite store for status / stage weights."""

import math
import sqlite3
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Optional

from funnel_landing.errors import CacheUnavailableError, InvalidWeightError


class WeightKind(str, Enum):
    QUOTATION = "quotation"
    OPPORTUNITY = "opportunity"


@dataclass
class StatusWeight:
    """Configured weight for one quotation status or opportunity stage."""

    kind: WeightKind
    status_id: str
    status_label: str
    weight: float
    description: str | None
    active: bool
    updated_at: datetime


def validate_weight(code: str, weight: object) -> float:
    """Return the weight as float, or raise InvalidWeightError outside [0, 1]."""
    if isinstance(weight, bool) or not isinstance(weight, (int, float)):
        raise InvalidWeightError(code, weight)
    value = float(weight)
    if not math.isfinite(value) or value < 0.0 or value > 1.0:
        raise InvalidWeightError(code, weight)
    return value


class WeightStore:
    """
    SQLite store for the weights applied to quotations and opportunities.
    Weights are validated here so the calculator can trust whatever it reads.
    sqlite failures surface as CacheUnavailableError.
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
            raise CacheUnavailableError(f"Weight store at {self._db_path} unavailable: {e}") from e

    def upsert_weight(
        self,
        kind: WeightKind | str,
        code: str,
        label: str,
        weight: float,
        description: Optional[str] = None,
    ) -> StatusWeight:
        """Insert or update the weight for a code. Raises InvalidWeightError outside [0, 1]."""
        kind = WeightKind(kind)
        value = validate_weight(code, weight)
        now = datetime.now(timezone.utc)
        try:
            with self._connection() as conn:
                conn.execute(
                    """
                    INSERT INTO status_weights (kind, status_id, status_label, weight, description, active, updated_at)
                    VALUES (?, ?, ?, ?, ?, 1, ?)
                    ON CONFLICT(kind, status_id) DO UPDATE SET
                        status_label = excluded.status_label,
                        weight = excluded.weight,
                        description = excluded.description,
                        updated_at = excluded.updated_at
                    """,
                    (kind.value, str(code), label, value, description, now.isoformat()),
                )
                conn.commit()
        except sqlite3.Error as e:
            raise CacheUnavailableError(f"Weight write failed: {e}") from e
        return StatusWeight(
            kind=kind,
            status_id=str(code),
            status_label=label,
            weight=value,
            description=description,
            active=True,
            updated_at=now,
        )

    def set_active(self, kind: WeightKind | str, code: str, active: bool) -> bool:
        """Enable or disable a weight row. Returns False if the code is unknown."""
        kind = WeightKind(kind)
        try:
            with self._connection() as conn:
                cursor = conn.execute(
                    "UPDATE status_weights SET active = ?, updated_at = ? WHERE kind = ? AND status_id = ?",
                    (int(active), datetime.now(timezone.utc).isoformat(), kind.value, str(code)),
                )
                conn.commit()
        except sqlite3.Error as e:
            raise CacheUnavailableError(f"Weight write failed: {e}") from e
        return cursor.rowcount > 0

    def list_weights(self, kind: WeightKind | str, *, include_inactive: bool = False) -> list[StatusWeight]:
        """Weight rows for a kind, ordered by status code."""
        kind = WeightKind(kind)
        query = "SELECT * FROM status_weights WHERE kind = ?"
        if not include_inactive:
            query += " AND active = 1"
        try:
            with self._connection() as conn:
                rows = conn.execute(query + " ORDER BY CAST(status_id AS INTEGER), status_id", (kind.value,)).fetchall()
        except sqlite3.Error as e:
            raise CacheUnavailableError(f"Weight read failed: {e}") from e
        return [self._row_to_weight(r) for r in rows]

    def get_weights(self, kind: WeightKind | str) -> dict[str, float]:
        """Active weights as a code -> weight mapping."""
        return {w.status_id: w.weight for w in self.list_weights(kind)}

    def get_quotation_weights(self) -> dict[str, float]:
        return self.get_weights(WeightKind.QUOTATION)

    def get_opportunity_weights(self) -> dict[str, float]:
        return self.get_weights(WeightKind.OPPORTUNITY)

    def _row_to_weight(self, row: sqlite3.Row) -> StatusWeight:
        return StatusWeight(
            kind=WeightKind(row["kind"]),
            status_id=row["status_id"],
            status_label=row["status_label"],
            weight=float(row["weight"]),
            description=row["description"] or None,
            active=bool(row["active"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
