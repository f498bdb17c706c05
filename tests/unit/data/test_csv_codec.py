"""Unit tests for CSV writing and reading."""

import pytest

from zatch.modules.data.csv_codec import BOM, read_csv, write_csv


pytestmark = pytest.mark.unit


class TestWriteCsv:
    def test_starts_with_bom_and_has_no_trailing_newline(self):
        text = write_csv(["titulo", "preco"], [{"titulo": "Casa", "preco": 100}])

        assert text.startswith(BOM)
        assert text == f"{BOM}titulo,preco\nCasa,100"

    @pytest.mark.parametrize(
        ("value", "encoded"),
        [
            ("Rua A, 123", '"Rua A, 123"'),
            ('Casa "dos sonhos"', '"Casa ""dos sonhos"""'),
            ("linha 1\nlinha 2", '"linha 1\nlinha 2"'),
            ("simples", "simples"),
        ],
    )
    def test_quotes_only_when_needed(self, value: str, encoded: str):
        text = write_csv(["descricao"], [{"descricao": value}])

        assert text.removeprefix(BOM).split("\n", 1)[1] == encoded

    def test_none_becomes_empty(self):
        text = write_csv(["a", "b"], [{"a": None, "b": 0}])

        assert text.endswith("\n,0")


class TestReadCsv:
    def test_escaped_fields_are_recovered(self):
        rows = [
            {"titulo": "Casa, com vírgula", "descricao": 'Diz "olá"\ne quebra linha'},
            {"titulo": "Simples", "descricao": ""},
        ]

        parsed = read_csv(write_csv(["titulo", "descricao"], rows))

        assert parsed == rows

    def test_headers_are_trimmed_and_blank_rows_skipped(self):
        parsed = read_csv(" titulo , preco \nCasa,10\n,\n \n\n")

        assert parsed == [{"titulo": "Casa", "preco": "10"}]

    def test_values_keep_surrounding_whitespace(self):
        rows = [{"titulo": "  Casa  ", "descricao": "linha 1\nlinha 2\n"}]

        parsed = read_csv(write_csv(["titulo", "descricao"], rows))

        assert parsed == rows

    def test_bom_is_optional(self):
        assert read_csv("titulo\nCasa") == read_csv(f"{BOM}titulo\nCasa")
