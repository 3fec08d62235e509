"""Nicoka CRM connector."""

from .connector import NicokaConnector

__all__ = ["NicokaConnector"]
