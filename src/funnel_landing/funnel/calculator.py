"""Landing calculator: raw and weighted totals per category.

Orders count at 100%. Unique quotations are weighted by status and unique
opportunities by stage, falling back to the defaults below for codes with no
configured weight. Sums accumulate left to right in source order so identical
input always yields bit-identical figures.
"""

from typing import Callable, Iterable, Mapping, TypeVar

from funnel_landing.models.landing import LandingResult

from .dataset import FunnelDataset

DEFAULT_QUOTATION_WEIGHT = 0.5
DEFAULT_OPPORTUNITY_WEIGHT = 0.3

T = TypeVar("T")


def _accumulate(items: Iterable[T], value: Callable[[T], float]) -> float:
    # left fold in source order; builtin sum() is compensated on 3.12+
    total = 0.0
    for item in items:
        total = total + value(item)
    return total


def weight_for(code: str, weights: Mapping[str, float], default: float) -> float:
    """Configured weight for a code, or the default when unmapped."""
    weight = weights.get(code)
    return default if weight is None else weight


def calculate_landing(
    dataset: FunnelDataset,
    quotation_weights: Mapping[str, float],
    opportunity_weights: Mapping[str, float],
) -> LandingResult:
    """Compute the landing figures for a dataset. Never raises; empty input gives zeros."""
    orders = dataset.orders
    quotations = dataset.unique_quotations
    opportunities = dataset.unique_opportunities

    orders_total = _accumulate(orders, lambda o: o.gross_total)
    orders_invoiced = _accumulate(orders, lambda o: o.total_invoiced)
    orders_remaining = _accumulate(orders, lambda o: o.still_to_invoice)

    quotations_raw_total = _accumulate(quotations, lambda q: q.gross_total)
    quotations_weighted_total = _accumulate(
        quotations,
        lambda q: q.gross_total * weight_for(q.status, quotation_weights, DEFAULT_QUOTATION_WEIGHT),
    )

    opportunities_raw_total = _accumulate(opportunities, lambda op: op.amount)
    opportunities_weighted_total = _accumulate(
        opportunities,
        lambda op: op.amount * weight_for(op.stage, opportunity_weights, DEFAULT_OPPORTUNITY_WEIGHT),
    )

    landing_total = orders_total + quotations_weighted_total + opportunities_weighted_total

    return LandingResult(
        orders_total=orders_total,
        orders_invoiced=orders_invoiced,
        orders_remaining=orders_remaining,
        quotations_raw_total=quotations_raw_total,
        quotations_weighted_total=quotations_weighted_total,
        opportunities_raw_total=opportunities_raw_total,
        opportunities_weighted_total=opportunities_weighted_total,
        landing_total=landing_total,
        order_count=len(orders),
        quotation_count=len(quotations),
        opportunity_count=len(opportunities),
    )
