"""Zatch - multi-tenant real-estate listing platform."""

__version__ = "0.1.0"
