"""Factory for property payloads."""

from uuid import uuid4

from polyfactory import Use
from polyfactory.factories.pydantic_factory import ModelFactory

from zatch.modules.properties.schemas import PropertyCreate


CITIES = [("Florianópolis", "SC"), ("Curitiba", "PR"), ("Porto Alegre", "RS")]


class PropertyCreateFactory(ModelFactory[PropertyCreate]):
    """Listings with realistic values. Optional fields keep their defaults."""

    __model__ = PropertyCreate
    __use_defaults__ = True

    title = Use(lambda: f"Casa {uuid4().hex[:6]} com piscina")
    price = Use(ModelFactory.__random__.randint, 150_000, 2_500_000)
    bedrooms = Use(ModelFactory.__random__.randint, 1, 5)
    bathrooms = Use(ModelFactory.__random__.randint, 1, 4)
    area = Use(ModelFactory.__random__.randint, 45, 400)
    address_city = "Florianópolis"
    address_state = "SC"
    address_neighborhood = "Centro"
    images = Use(lambda: [])
    reference = Use(lambda: f"REF-{uuid4().hex[:8].upper()}")
