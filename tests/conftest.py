"""Pytest fixtures for funnel-landing tests."""

import tempfile
from pathlib import Path
from typing import Iterator, Optional

import pytest

from funnel_landing.connectors.base import CrmDataSource
from funnel_landing.errors import SourceUnavailableError
from funnel_landing.models.records import Customer, Opportunity, Order, Project, Quotation


def make_order(
    order_id: int = 1,
    gross_total: float = 0.0,
    *,
    date: str = "2026-03-15",
    period_end: Optional[str] = None,
    quotation_id: Optional[int] = None,
    opportunity_id: Optional[int] = None,
    total_invoiced: float = 0.0,
    still_to_invoice: float = 0.0,
    status: str = "4",
) -> Order:
    return Order(
        order_id=order_id,
        label=f"Order {order_id}",
        gross_total=gross_total,
        total_invoiced=total_invoiced,
        still_to_invoice=still_to_invoice,
        date=date,
        period_end=period_end,
        quotation_id=quotation_id,
        opportunity_id=opportunity_id,
        status=status,
    )


def make_quotation(
    quotation_id: int = 1,
    gross_total: float = 0.0,
    *,
    status: str = "12",
    status_label: str = "",
    date: str = "2026-03-15",
    period_end: Optional[str] = None,
    opportunity_id: Optional[int] = None,
) -> Quotation:
    return Quotation(
        quotation_id=quotation_id,
        label=f"Quotation {quotation_id}",
        gross_total=gross_total,
        status=status,
        status_label=status_label,
        date=date,
        period_end=period_end,
        opportunity_id=opportunity_id,
    )


def make_opportunity(
    opportunity_id: int = 1,
    amount: float = 0.0,
    *,
    stage: str = "3",
    stage_label: str = "",
    close_date: Optional[str] = "2026-03-15",
    period_end: Optional[str] = None,
) -> Opportunity:
    return Opportunity(
        opportunity_id=opportunity_id,
        label=f"Opportunity {opportunity_id}",
        amount=amount,
        stage=stage,
        stage_label=stage_label,
        close_date=close_date,
        period_end=period_end,
    )


class FakeSource(CrmDataSource):
    """In-memory data source; counts list calls and can be told to fail."""

    source_id = "fake"

    def __init__(
        self,
        orders: Optional[list[Order]] = None,
        quotations: Optional[list[Quotation]] = None,
        opportunities: Optional[list[Opportunity]] = None,
    ):
        self.orders = orders or []
        self.quotations = quotations or []
        self.opportunities = opportunities or []
        self.fail = False
        self.calls = 0
        self.closed = False

    def _check(self) -> None:
        self.calls += 1
        if self.fail:
            raise SourceUnavailableError("fake source down")

    def list_customers(self) -> Iterator[Customer]:
        return iter([])

    def list_projects(self) -> Iterator[Project]:
        return iter([])

    def list_quotations(self) -> Iterator[Quotation]:
        self._check()
        return iter(list(self.quotations))

    def list_orders(self) -> Iterator[Order]:
        self._check()
        return iter(list(self.orders))

    def list_opportunities(self) -> Iterator[Opportunity]:
        self._check()
        return iter(list(self.opportunities))

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def temp_db() -> Path:
    """Temporary database path for isolated tests."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        path = Path(f.name)
    yield path
    path.unlink(missing_ok=True)


@pytest.fixture
def fake_source() -> FakeSource:
    """Source with one order, one open quotation and one opportunity in Q1 2026."""
    return FakeSource(
        orders=[make_order(1, 10000.0)],
        quotations=[make_quotation(10, 5000.0, status="12")],
        opportunities=[make_opportunity(100, 8000.0, stage="3")],
    )
