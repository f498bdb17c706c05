"""Storefront configuration and search-engine facing pages."""
