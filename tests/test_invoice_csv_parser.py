"""
tests/test_invoice_csv_parser.py

Unit tests for header-keyed CSV record parsing.
"""

from __future__ import annotations

import types

import pytest

from app.parsers.invoice_csv import EmptyInputError, ParseError, iter_records, read_records
from tests.conftest import HEADER, csv_bytes


class TestIterRecords:
    def test_records_are_keyed_by_header(self) -> None:
        records = list(iter_records(csv_bytes("INV-1,Acme,2024-01-01,2024-01-31,Widget,2,10.00")))

        assert records == [
            {
                "InvoiceNumber": "INV-1",
                "CustomerName": "Acme",
                "IssueDate": "2024-01-01",
                "DueDate": "2024-01-31",
                "Description": "Widget",
                "Quantity": "2",
                "UnitPrice": "10.00",
            }
        ]

    def test_is_lazy(self) -> None:
        assert isinstance(iter_records(csv_bytes()), types.GeneratorType)

    def test_values_and_headers_are_trimmed(self) -> None:
        content = b" InvoiceNumber , CustomerName \n  INV-1 ,  Acme Corp  \n"

        records = list(iter_records(content))

        assert records == [{"InvoiceNumber": "INV-1", "CustomerName": "Acme Corp"}]

    def test_empty_lines_are_skipped(self) -> None:
        content = b"\n\nInvoiceNumber,Quantity\n\nINV-1,2\n   \n,\nINV-2,3\n\n"

        records = list(iter_records(content))

        assert [record["InvoiceNumber"] for record in records] == ["INV-1", "INV-2"]

    def test_quoted_fields_keep_delimiters(self) -> None:
        content = b'InvoiceNumber,Description\nINV-1,"Widget, large"\n'

        records = list(iter_records(content))

        assert records[0]["Description"] == "Widget, large"

    def test_blanks_after_closing_quote_are_ignored(self) -> None:
        content = b'InvoiceNumber,Description,Quantity\nINV-1,"Widget, large" ,2\nINV-2,"12"" pipe"\t, 3\nINV-3,1,"4"  '

        records = list(iter_records(content))

        assert records == [
            {"InvoiceNumber": "INV-1", "Description": "Widget, large", "Quantity": "2"},
            {"InvoiceNumber": "INV-2", "Description": '12" pipe', "Quantity": "3"},
            {"InvoiceNumber": "INV-3", "Description": "1", "Quantity": "4"},
        ]

    def test_quoted_header_with_trailing_blanks(self) -> None:
        content = b'"InvoiceNumber" ,Quantity\nINV-1,2\n'

        records = list(iter_records(content))

        assert records == [{"InvoiceNumber": "INV-1", "Quantity": "2"}]

    def test_utf8_bom_is_ignored(self) -> None:
        content = "\ufeffInvoiceNumber,CustomerName\nINV-1,Café\n".encode("utf-8")

        records = list(iter_records(content))

        assert records == [{"InvoiceNumber": "INV-1", "CustomerName": "Café"}]

    def test_blank_header_columns_are_dropped(self) -> None:
        content = b"InvoiceNumber,,Quantity\nINV-1,ignored,2\n"

        records = list(iter_records(content))

        assert records == [{"InvoiceNumber": "INV-1", "Quantity": "2"}]

    def test_custom_delimiter(self) -> None:
        content = b"InvoiceNumber;Quantity\nINV-1;2\n"

        records = list(iter_records(content, delimiter=";"))

        assert records == [{"InvoiceNumber": "INV-1", "Quantity": "2"}]


class TestParseErrors:
    def test_unbalanced_quote_raises(self) -> None:
        content = b'InvoiceNumber,Description\nINV-1,"Widget\n'

        with pytest.raises(ParseError):
            list(iter_records(content))

    def test_text_after_closing_quote_raises(self) -> None:
        content = b'InvoiceNumber,Description\nINV-1,"Widget" large\n'

        with pytest.raises(ParseError):
            list(iter_records(content))

    def test_extra_field_raises(self) -> None:
        content = b"InvoiceNumber,Quantity\nINV-1,2,surprise\n"

        with pytest.raises(ParseError, match="expected 2 fields, found 3"):
            list(iter_records(content))

    def test_missing_field_raises(self) -> None:
        content = b"InvoiceNumber,Quantity,UnitPrice\nINV-1,2\n"

        with pytest.raises(ParseError, match="expected 3 fields, found 2"):
            list(iter_records(content))

    def test_duplicate_header_raises(self) -> None:
        content = b"InvoiceNumber,Quantity,Quantity\nINV-1,2,3\n"

        with pytest.raises(ParseError, match="Duplicate column"):
            list(iter_records(content))

    def test_non_utf8_raises(self) -> None:
        content = "InvoiceNumber,CustomerName\nINV-1,Café\n".encode("latin-1")

        with pytest.raises(ParseError, match="UTF-8"):
            list(iter_records(content))

    def test_parse_error_is_not_empty_input(self) -> None:
        assert not issubclass(ParseError, EmptyInputError)
        assert not issubclass(EmptyInputError, ParseError)


class TestReadRecords:
    def test_header_only_raises_empty_input(self) -> None:
        with pytest.raises(EmptyInputError, match="Empty CSV file"):
            read_records(csv_bytes())

    def test_empty_file_raises_empty_input(self) -> None:
        with pytest.raises(EmptyInputError):
            read_records(b"")

    def test_blank_lines_after_header_raise_empty_input(self) -> None:
        with pytest.raises(EmptyInputError):
            read_records((HEADER + "\n\n\n").encode("utf-8"))

    def test_returns_all_records(self) -> None:
        records = read_records(csv_bytes("INV-1,Acme,,,A,1,1", "INV-2,Acme,,,B,1,1"))

        assert len(records) == 2
