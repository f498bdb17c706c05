"""Detached property instances for page and feed tests."""

from datetime import UTC, datetime
from uuid import uuid4

from zatch.modules.properties.models import Property, PropertyImage


def make_property(**overrides) -> Property:
    values = {
        "id": uuid4(),
        "tenant_id": uuid4(),
        "title": "Casa térrea com piscina",
        "slug": "casa-terrea-com-piscina",
        "description": "<p>Linda casa</p><p>Com quintal &amp; piscina</p>",
        "type": "casa",
        "status": "venda",
        "profile": "residencial",
        "price": 1250000.0,
        "address_street": "Rua das Flores, 10",
        "address_neighborhood": "Jurerê",
        "address_city": "Florianópolis",
        "address_state": "SC",
        "address_zipcode": "88053-000",
        "bedrooms": 3,
        "suites": 1,
        "bathrooms": 2,
        "garages": 2,
        "area": 180.0,
        "built_area": 150.0,
        "features": ["Piscina", "Churrasqueira"],
        "amenities": [],
        "financing": True,
        "documentation": "regular",
        "condo_exempt": False,
        "featured": False,
        "active": True,
        "reference": "CA-001",
        "views": 0,
        "shares": 0,
        "order_index": 0,
        "created_at": datetime(2024, 5, 1, tzinfo=UTC),
        "updated_at": datetime(2024, 5, 2, tzinfo=UTC),
    }
    images = overrides.pop("images", None)
    values.update(overrides)
    prop = Property(**values)
    prop.images = [
        PropertyImage(id=uuid4(), url=url, alt=None, order_index=index)
        for index, url in enumerate(images or [])
    ]
    return prop
