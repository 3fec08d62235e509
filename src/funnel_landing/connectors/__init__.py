"""CRM connectors feeding the funnel engine."""

from funnel_landing.connectors.base import CrmDataSource
from funnel_landing.connectors.registry import ConnectorRegistry

__all__ = ["ConnectorRegistry", "CrmDataSource"]
