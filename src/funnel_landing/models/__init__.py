"""Data models for CRM records, periods and landing figures."""

from funnel_landing.models.landing import (
    FunnelSnapshot,
    LandingComparison,
    LandingReport,
    LandingResult,
    StatusOption,
)
from funnel_landing.models.period import PeriodFilter
from funnel_landing.models.raw import RawRecord
from funnel_landing.models.records import Customer, Opportunity, Order, Project, Quotation

__all__ = [
    "Customer",
    "FunnelSnapshot",
    "LandingComparison",
    "LandingReport",
    "LandingResult",
    "Opportunity",
    "Order",
    "PeriodFilter",
    "Project",
    "Quotation",
    "RawRecord",
    "StatusOption",
]
