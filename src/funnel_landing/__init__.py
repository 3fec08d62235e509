"""Weighted revenue landing forecast built from Nicoka CRM records."""

__version__ = "0.1.0"
