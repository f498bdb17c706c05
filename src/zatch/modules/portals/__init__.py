"""Listing feeds consumed by real-estate portals."""
