"""Funnel dataset: the filtered and deduplicated working set for one period."""

import logging

from pydantic import BaseModel, Field

from funnel_landing.connectors.base import CrmDataSource
from funnel_landing.models.period import PeriodFilter
from funnel_landing.models.records import Opportunity, Order, Quotation

from .dedup import deduplicate
from .period import filter_by_period

logger = logging.getLogger(__name__)


class FunnelDataset(BaseModel):
    """Period-filtered records, their deduplicated subsets and the full listings."""

    period: PeriodFilter

    orders: list[Order] = Field(default_factory=list)
    quotations: list[Quotation] = Field(default_factory=list)
    opportunities: list[Opportunity] = Field(default_factory=list)

    unique_quotations: list[Quotation] = Field(default_factory=list)
    unique_opportunities: list[Opportunity] = Field(default_factory=list)

    all_orders: list[Order] = Field(default_factory=list)
    all_quotations: list[Quotation] = Field(default_factory=list)
    all_opportunities: list[Opportunity] = Field(default_factory=list)


def build_dataset(
    period: PeriodFilter,
    orders: list[Order],
    quotations: list[Quotation],
    opportunities: list[Opportunity],
) -> FunnelDataset:
    """Filter all three collections to the period, then deduplicate."""
    filtered_orders = filter_by_period(orders, period)
    filtered_quotations = filter_by_period(quotations, period)
    filtered_opportunities = filter_by_period(opportunities, period)

    dedup = deduplicate(filtered_orders, filtered_quotations, filtered_opportunities)

    return FunnelDataset(
        period=period,
        orders=filtered_orders,
        quotations=filtered_quotations,
        opportunities=filtered_opportunities,
        unique_quotations=dedup.unique_quotations,
        unique_opportunities=dedup.unique_opportunities,
        all_orders=list(orders),
        all_quotations=list(quotations),
        all_opportunities=list(opportunities),
    )


def fetch_dataset(source: CrmDataSource, period: PeriodFilter) -> FunnelDataset:
    """
    Pull every order, quotation and opportunity from the source and build the
    period's dataset. The CRM has no date filter, so filtering is client-side.
    Source errors propagate untouched.
    """
    quotations = list(source.list_quotations())
    orders = list(source.list_orders())
    opportunities = list(source.list_opportunities())
    dataset = build_dataset(period, orders, quotations, opportunities)
    logger.info(
        "Funnel %s: %d/%d orders, %d/%d quotations (%d unique), %d/%d opportunities (%d unique)",
        period.label(),
        len(dataset.orders),
        len(orders),
        len(dataset.quotations),
        len(quotations),
        len(dataset.unique_quotations),
        len(dataset.opportunities),
        len(opportunities),
        len(dataset.unique_opportunities),
    )
    return dataset
