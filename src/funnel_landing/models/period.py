"""Period selection: a year, optionally narrowed to one calendar quarter."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

SNAPSHOT_DATA_TYPE = "funnel_snapshot"


class PeriodFilter(BaseModel):
    """Year plus optional quarter (1-4). No quarter means the whole year."""

    model_config = ConfigDict(frozen=True)

    year: int = Field(..., ge=1, le=9999)
    quarter: Optional[int] = Field(default=None, ge=1, le=4)

    @property
    def months(self) -> tuple[int, ...]:
        """Calendar months (1-12) covered by this period."""
        if self.quarter is None:
            return tuple(range(1, 13))
        first = (self.quarter - 1) * 3 + 1
        return (first, first + 1, first + 2)

    @property
    def cache_data_type(self) -> str:
        """Snapshot cache data-type for this period; the year is the other half of the key."""
        if self.quarter is None:
            return SNAPSHOT_DATA_TYPE
        return f"{SNAPSHOT_DATA_TYPE}_q{self.quarter}"

    def label(self) -> str:
        return f"{self.year}" if self.quarter is None else f"{self.year}-Q{self.quarter}"
