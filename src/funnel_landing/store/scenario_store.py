"""Store for named what-if simulation scenarios."""

import json
import sqlite3
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Mapping, Optional

from funnel_landing.errors import CacheUnavailableError
from funnel_landing.models.landing import LandingResult
from funnel_landing.models.period import PeriodFilter
from funnel_landing.store.weight_store import validate_weight


@dataclass
class SimulationScenario:
    """A saved simulation: the overrides tried and the landing they produced."""

    id: int
    name: str
    period: PeriodFilter
    quotation_weights: dict[str, float]
    opportunity_weights: dict[str, float]
    result: LandingResult
    notes: str | None
    created_at: datetime


class ScenarioStore:
    """SQLite store for simulation scenarios. sqlite failures surface as CacheUnavailableError."""

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
            raise CacheUnavailableError(f"Scenario store at {self._db_path} unavailable: {e}") from e

    def save(
        self,
        name: str,
        period: PeriodFilter,
        quotation_weights: Mapping[str, float],
        opportunity_weights: Mapping[str, float],
        result: LandingResult,
        *,
        notes: Optional[str] = None,
    ) -> SimulationScenario:
        """Persist a scenario. Name must be non-empty; weights must be in [0, 1]."""
        name = (name or "").strip()
        if not name:
            raise ValueError("scenario name must not be empty")
        q_weights = {str(k): validate_weight(str(k), v) for k, v in quotation_weights.items()}
        o_weights = {str(k): validate_weight(str(k), v) for k, v in opportunity_weights.items()}
        figures = result.landing_only()
        now = datetime.now(timezone.utc)
        try:
            with self._connection() as conn:
                cursor = conn.execute(
                    """
                    INSERT INTO simulation_scenarios
                    (name, year, quarter, quotation_weights, opportunity_weights, result, notes, created_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        name,
                        period.year,
                        period.quarter,
                        json.dumps(q_weights),
                        json.dumps(o_weights),
                        figures.model_dump_json(),
                        notes,
                        now.isoformat(),
                    ),
                )
                conn.commit()
                row_id = cursor.lastrowid or 0
        except sqlite3.Error as e:
            raise CacheUnavailableError(f"Scenario write failed: {e}") from e
        return SimulationScenario(
            id=row_id,
            name=name,
            period=period,
            quotation_weights=q_weights,
            opportunity_weights=o_weights,
            result=figures,
            notes=notes,
            created_at=now,
        )

    def list_all(self) -> list[SimulationScenario]:
        """All scenarios, newest first."""
        try:
            with self._connection() as conn:
                rows = conn.execute(
                    "SELECT * FROM simulation_scenarios ORDER BY created_at DESC, id DESC"
                ).fetchall()
        except sqlite3.Error as e:
            raise CacheUnavailableError(f"Scenario read failed: {e}") from e
        return [self._row_to_scenario(r) for r in rows]

    def get(self, scenario_id: int) -> Optional[SimulationScenario]:
        try:
            with self._connection() as conn:
                row = conn.execute(
                    "SELECT * FROM simulation_scenarios WHERE id = ?", (scenario_id,)
                ).fetchone()
        except sqlite3.Error as e:
            raise CacheUnavailableError(f"Scenario read failed: {e}") from e
        return self._row_to_scenario(row) if row else None

    def delete(self, scenario_id: int) -> bool:
        """Remove a scenario. Returns False if it did not exist."""
        try:
            with self._connection() as conn:
                cursor = conn.execute("DELETE FROM simulation_scenarios WHERE id = ?", (scenario_id,))
                conn.commit()
        except sqlite3.Error as e:
            raise CacheUnavailableError(f"Scenario delete failed: {e}") from e
        return cursor.rowcount > 0

    def _row_to_scenario(self, row: sqlite3.Row) -> SimulationScenario:
        return SimulationScenario(
            id=row["id"],
            name=row["name"],
            period=PeriodFilter(year=row["year"], quarter=row["quarter"]),
            quotation_weights=json.loads(row["quotation_weights"]),
            opportunity_weights=json.loads(row["opportunity_weights"]),
            result=LandingResult.model_validate_json(row["result"]),
            notes=row["notes"] or None,
            created_at=datetime.fromisoformat(row["created_at"]),
        )
