"""Test factories for generating test data."""

from tests.factories.property import PropertyCreateFactory


__all__ = [
    "PropertyCreateFactory",
]
