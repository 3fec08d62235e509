"""What-if recomputation of the landing under hypothetical weights.

Nothing here writes anywhere: simulations read from the CRM (or reuse a
dataset already built) and never touch the weight store or snapshot cache.
"""

from typing import Iterable, Mapping, Optional

from funnel_landing.connectors.base import CrmDataSource
from funnel_landing.models.landing import LandingComparison, LandingResult, StatusOption
from funnel_landing.models.period import PeriodFilter
from funnel_landing.models.records import Opportunity, Quotation

from .calculator import calculate_landing
from .dataset import FunnelDataset, fetch_dataset

COMPARED_FIELDS = (
    "orders_total",
    "quotations_raw_total",
    "quotations_weighted_total",
    "opportunities_raw_total",
    "opportunities_weighted_total",
    "landing_total",
)


def merge_weights(
    overrides: Mapping[str, float],
    base: Optional[Mapping[str, float]] = None,
) -> dict[str, float]:
    """Overrides win; base weights fill the codes overrides leave out."""
    merged = dict(base or {})
    merged.update(overrides)
    return merged


def simulate(
    period: PeriodFilter,
    quotation_overrides: Mapping[str, float],
    opportunity_overrides: Mapping[str, float],
    *,
    source: Optional[CrmDataSource] = None,
    dataset: Optional[FunnelDataset] = None,
    quotation_base: Optional[Mapping[str, float]] = None,
    opportunity_base: Optional[Mapping[str, float]] = None,
) -> LandingResult:
    """
    Landing under the given weights, computed exactly like the live path.
    Pass a prebuilt dataset for the same period, or a source to fetch one.
    Codes absent from both overrides and base fall back to the calculator defaults.
    """
    if dataset is None:
        if source is None:
            raise ValueError("simulate needs either a dataset or a source")
        dataset = fetch_dataset(source, period)
    elif dataset.period != period:
        raise ValueError(f"Dataset is for {dataset.period.label()}, not {period.label()}")

    return calculate_landing(
        dataset,
        merge_weights(quotation_overrides, quotation_base),
        merge_weights(opportunity_overrides, opportunity_base),
    )


def compare_landings(current: LandingResult, simulated: LandingResult) -> LandingComparison:
    """Per-figure delta (simulated - current) for side-by-side display."""
    deltas = {
        name: getattr(simulated, name) - getattr(current, name)
        for name in COMPARED_FIELDS
    }
    return LandingComparison(
        current=current.landing_only(),
        simulated=simulated.landing_only(),
        deltas=deltas,
    )


def discover_quotation_statuses(quotations: Iterable[Quotation]) -> list[StatusOption]:
    """Distinct quotation status codes in first-seen order. Code "0" (no status) is skipped."""
    seen: dict[str, str] = {}
    for q in quotations:
        if q.status and q.status != "0" and q.status not in seen:
            seen[q.status] = q.status_label or f"Statut {q.status}"
    return [StatusOption(code=c, label=lbl) for c, lbl in seen.items()]


def discover_opportunity_stages(opportunities: Iterable[Opportunity]) -> list[StatusOption]:
    """Distinct opportunity stage codes in first-seen order. Code "0" (no stage) is skipped."""
    seen: dict[str, str] = {}
    for op in opportunities:
        if op.stage and op.stage != "0" and op.stage not in seen:
            seen[op.stage] = op.stage_label or f"Étape {op.stage}"
    return [StatusOption(code=c, label=lbl) for c, lbl in seen.items()]
