"""Abstract base class for CRM data sources."""

from abc import ABC, abstractmethod
from typing import Iterator

from funnel_landing.models.records import Customer, Opportunity, Order, Project, Quotation


class CrmDataSource(ABC):
    """
    Standard interface for CRM connectors.
    Each list method returns a fresh, finite iterator per call; business records
    come back already enriched with customer, project and status labels.
    """

    source_id: str = ""

    @abstractmethod
    def list_customers(self) -> Iterator[Customer]:
        """Iterate over all customers."""
        pass

    @abstractmethod
    def list_projects(self) -> Iterator[Project]:
        """Iterate over all projects."""
        pass

    @abstractmethod
    def list_quotations(self) -> Iterator[Quotation]:
        """Iterate over all quotations, enriched."""
        pass

    @abstractmethod
    def list_orders(self) -> Iterator[Order]:
        """Iterate over all orders, enriched."""
        pass

    @abstractmethod
    def list_opportunities(self) -> Iterator[Opportunity]:
        """Iterate over all opportunities, enriched."""
        pass

    def close(self) -> None:
        """Release held resources such as HTTP clients. Default: nothing to release."""
