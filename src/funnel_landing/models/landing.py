"""Landing figures and the snapshot / report shapes built around them."""

from datetime import datetime

from pydantic import BaseModel, Field

from funnel_landing.models.period import PeriodFilter
from funnel_landing.models.records import Opportunity, Order, Quotation


class LandingResult(BaseModel):
    """Raw and weighted totals per category plus the combined landing figure."""

    orders_total: float = 0.0
    orders_invoiced: float = 0.0
    orders_remaining: float = 0.0

    quotations_raw_total: float = 0.0
    quotations_weighted_total: float = 0.0

    opportunities_raw_total: float = 0.0
    opportunities_weighted_total: float = 0.0

    landing_total: float = 0.0

    order_count: int = 0
    quotation_count: int = 0
    opportunity_count: int = 0

    def landing_only(self) -> "LandingResult":
        """Strip subclass fields, keeping only the figures."""
        return LandingResult.model_validate(self.model_dump(include=set(LandingResult.model_fields)))


class StatusOption(BaseModel):
    """A status or stage code seen in the data, with its display label."""

    code: str
    label: str


class FunnelSnapshot(LandingResult):
    """What the snapshot cache stores for one period."""

    period: PeriodFilter
    orders: list[Order] = Field(default_factory=list)
    quotations: list[Quotation] = Field(default_factory=list, description="Unique quotations")
    opportunities: list[Opportunity] = Field(default_factory=list, description="Unique opportunities")
    quotation_statuses: list[StatusOption] = Field(default_factory=list)
    opportunity_stages: list[StatusOption] = Field(default_factory=list)


class LandingReport(FunnelSnapshot):
    """Snapshot as served to a caller, with cache provenance."""

    last_sync: datetime
    from_cache: bool


class LandingComparison(BaseModel):
    """Simulated minus current, per figure."""

    current: LandingResult
    simulated: LandingResult
    deltas: dict[str, float] = Field(default_factory=dict)
