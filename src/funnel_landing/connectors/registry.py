"""Registry for discovering and instantiating CRM connectors."""

from typing import Type

from funnel_landing.connectors.base import CrmDataSource
from funnel_landing.connectors.nicoka import NicokaConnector


class ConnectorRegistry:
    """Discovers and provides CRM connectors."""

    _connectors: dict[str, Type[CrmDataSource]] = {
        "nicoka": NicokaConnector,
    }

    @classmethod
    def get(cls, source_id: str, **kwargs) -> CrmDataSource:
        """Get a connector instance for the given source. kwargs passed to connector __init__."""
        connector_cls = cls._connectors.get(source_id.lower())
        if not connector_cls:
            raise ValueError(f"Unknown source: {source_id}. Available: {list(cls._connectors.keys())}")
        return connector_cls(**kwargs)

    @classmethod
    def available_sources(cls) -> list[str]:
        """Return list of available source identifiers."""
        return list(cls._connectors.keys())
