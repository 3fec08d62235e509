"""Cross-entity deduplication so the same revenue is never counted twice.

A quotation converted into an order is already counted as that order. An
opportunity answered by a quotation, or closed by an order, is already
counted there. Links are only honoured when the linking record is itself in
the period, so callers must pass period-filtered collections.
"""

from typing import Iterable

from pydantic import BaseModel, Field

from funnel_landing.models.records import Opportunity, Order, Quotation


class DedupResult(BaseModel):
    """Surviving records plus the link sets that excluded the others."""

    unique_quotations: list[Quotation] = Field(default_factory=list)
    unique_opportunities: list[Opportunity] = Field(default_factory=list)
    quotation_ids_with_order: set[int] = Field(default_factory=set)
    opportunity_ids_with_order: set[int] = Field(default_factory=set)
    opportunity_ids_with_quotation: set[int] = Field(default_factory=set)


def quotation_ids_linked_to_orders(orders: Iterable[Order]) -> set[int]:
    return {o.quotation_id for o in orders if o.quotation_id}


def opportunity_ids_linked_to_orders(orders: Iterable[Order]) -> set[int]:
    return {o.opportunity_id for o in orders if o.opportunity_id}


def opportunity_ids_linked_to_quotations(quotations: Iterable[Quotation]) -> set[int]:
    return {q.opportunity_id for q in quotations if q.opportunity_id}


def deduplicate(
    orders: list[Order],
    quotations: list[Quotation],
    opportunities: list[Opportunity],
) -> DedupResult:
    """
    Drop quotations already converted to an order, and opportunities already
    covered by an order or a quotation. Surviving records keep their order.
    """
    with_order = quotation_ids_linked_to_orders(orders)
    opp_with_order = opportunity_ids_linked_to_orders(orders)
    opp_with_quote = opportunity_ids_linked_to_quotations(quotations)

    unique_quotations = [q for q in quotations if q.quotation_id not in with_order]
    unique_opportunities = [
        op
        for op in opportunities
        if op.opportunity_id not in opp_with_order and op.opportunity_id not in opp_with_quote
    ]
    return DedupResult(
        unique_quotations=unique_quotations,
        unique_opportunities=unique_opportunities,
        quotation_ids_with_order=with_order,
        opportunity_ids_with_order=opp_with_order,
        opportunity_ids_with_quotation=opp_with_quote,
    )
