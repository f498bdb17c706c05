"""Unit tests for import parsing and the importer."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from zatch.core.errors import NotFoundError
from zatch.modules.data.importer import (
    PropertyImporter,
    map_status,
    map_type,
    parse_bool,
    parse_list,
    parse_price,
    row_images,
    row_to_values,
)


pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("R$ 1.350.000,00", 1350000.0),
        ("1.350.000", 1350000.0),
        ("1350000.50", 1350000.5),
        ("850.000,50", 850000.5),
        ("2500", 2500.0),
        ("1,5", 1.5),
        ("", None),
        ("R$", None),
        ("consulte", None),
    ],
)
def test_parse_price(value: str, expected: float | None):
    assert parse_price(value) == expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [("Sim", True), ("sim", True), ("X", True), ("true", True), ("Não", False), ("", False)],
)
def test_parse_bool(value: str, expected: bool):
    assert parse_bool(value) is expected


@pytest.mark.parametrize(
    ("label", "expected"),
    [
        ("Apartamento", "apartamento"),
        ("Galpão", "galpao"),
        ("Chácara", "rural"),
        ("Sala", "comercial"),
        ("Castelo", "casa"),
        (None, "casa"),
    ],
)
def test_map_type(label: str | None, expected: str):
    assert map_type(label) == expected


def test_map_status_defaults_to_sale():
    assert map_status("Aluguel") == "aluguel"
    assert map_status("permuta") == "venda"


def test_parse_list_drops_blanks():
    assert parse_list("Piscina; ; Churrasqueira;") == ["Piscina", "Churrasqueira"]


class TestRowToValues:
    def test_requires_title(self):
        with pytest.raises(ValueError):
            row_to_values({"titulo": "  ", "preco": "100"})

    def test_only_present_columns_are_returned(self):
        values = row_to_values({"titulo": "Casa", "quartos": "3"})

        assert values == {"title": "Casa", "bedrooms": 3}

    def test_full_row(self):
        values = row_to_values(
            {
                "titulo": "Cobertura Beira-Mar",
                "tipo": "Cobertura",
                "finalidade": "venda",
                "preco": "R$ 2.400.000,00",
                "endereco_cidade": "Florianópolis",
                "endereco_estado": "SC",
                "area_total": "220,5",
                "caracteristicas": "Piscina; Vista mar",
                "destaque": "Sim",
                "ativo": "Não",
                "referencia": "COB-01",
            }
        )

        assert values["type"] == "cobertura"
        assert values["price"] == 2400000.0
        assert values["area"] == 220.5
        assert values["features"] == ["Piscina", "Vista mar"]
        assert values["featured"] is True
        assert values["active"] is False
        assert values["reference"] == "COB-01"

    def test_unparseable_price_is_left_out(self):
        assert "price" not in row_to_values({"titulo": "Casa", "preco": "a combinar"})

    def test_trims_parsed_columns_but_not_the_description(self):
        values = row_to_values(
            {
                "titulo": "  Casa  ",
                "referencia": " REF-9 ",
                "endereco_bairro": "   ",
                "descricao": "  Ampla.\nVista mar.\n",
                "destaque": " Sim ",
            }
        )

        assert values["title"] == "Casa"
        assert values["reference"] == "REF-9"
        assert values["address_neighborhood"] is None
        assert values["description"] == "  Ampla.\nVista mar.\n"
        assert values["featured"] is True


def test_row_images():
    images = row_images({"imagens": "https://cdn.example.com/1.jpg; https://cdn.example.com/2.jpg"})

    assert [str(image.url) for image in images] == [
        "https://cdn.example.com/1.jpg",
        "https://cdn.example.com/2.jpg",
    ]
    assert row_images({"imagens": ""}) is None


class TestPropertyImporter:
    @pytest.fixture
    def service(self) -> MagicMock:
        service = MagicMock()
        service.repo.return_value = AsyncMock()
        service.repo.return_value.get_by_reference.return_value = None
        service.create_property = AsyncMock(return_value=SimpleNamespace(id=uuid4()))
        service.update_property = AsyncMock(return_value=SimpleNamespace(id=uuid4()))
        service.replace_images = AsyncMock()
        return service

    async def test_bad_rows_are_reported_with_line_numbers(self, service: MagicMock):
        rows = [
            {"titulo": "Casa A", "preco": "100.000"},
            {"titulo": "", "preco": "200.000"},
            {"titulo": "Casa C", "quartos": "2", "endereco_estado": "Santa Catarina"},
        ]

        report = await PropertyImporter(service).import_rows(uuid4(), rows)

        assert report.total == 3
        assert report.created == 1
        assert report.failed == 2
        assert [error.line for error in report.errors] == [3, 4]
        assert "titulo" in report.errors[0].message
        assert "address_state" in report.errors[1].message

    async def test_existing_reference_is_updated(self, service: MagicMock):
        existing = SimpleNamespace(id=uuid4())
        service.repo.return_value.get_by_reference.return_value = existing

        report = await PropertyImporter(service).import_rows(
            uuid4(), [{"titulo": "Casa", "referencia": "REF-1"}]
        )

        assert report.updated == 1
        assert report.created == 0
        assert service.update_property.await_args.args[1] == existing.id

    async def test_images_replace_the_gallery(self, service: MagicMock):
        await PropertyImporter(service).import_rows(
            uuid4(), [{"titulo": "Casa", "imagens": "https://cdn.example.com/1.jpg"}]
        )

        service.replace_images.assert_awaited_once()

    async def test_service_errors_do_not_stop_the_import(self, service: MagicMock):
        service.create_property.side_effect = [NotFoundError("Property not found"), SimpleNamespace(id=uuid4())]

        report = await PropertyImporter(service).import_rows(
            uuid4(), [{"titulo": "Casa A"}, {"titulo": "Casa B"}]
        )

        assert report.failed == 1
        assert report.created == 1
        assert report.errors[0].message == "Property not found"
