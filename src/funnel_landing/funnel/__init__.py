"""Funnel engine: period filter, deduplication, landing calculation, simulation."""

from .calculator import DEFAULT_OPPORTUNITY_WEIGHT, DEFAULT_QUOTATION_WEIGHT, calculate_landing
from .dataset import FunnelDataset, build_dataset, fetch_dataset
from .dedup import DedupResult, deduplicate
from .period import filter_by_period, is_in_period, parse_record_date, resolve_record_date
from .simulation import (
    compare_landings,
    discover_opportunity_stages,
    discover_quotation_statuses,
    simulate,
)

__all__ = [
    "DEFAULT_OPPORTUNITY_WEIGHT",
    "DEFAULT_QUOTATION_WEIGHT",
    "DedupResult",
    "FunnelDataset",
    "build_dataset",
    "calculate_landing",
    "compare_landings",
    "deduplicate",
    "discover_opportunity_stages",
    "discover_quotation_statuses",
    "fetch_dataset",
    "filter_by_period",
    "is_in_period",
    "parse_record_date",
    "resolve_record_date",
    "simulate",
]
