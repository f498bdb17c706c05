"""Bulk property import and export (CSV and JSON)."""
