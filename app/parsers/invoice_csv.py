"""
app/parsers/invoice_csv.py

Header-keyed record parsing for uploaded invoice CSV files.

Parsing is strict about structure (quoting, field counts, header shape)
and lenient about content: values are trimmed and blank lines skipped,
but nothing is type-checked here.
"""

from __future__ import annotations

import csv
import io
import re
from collections.abc import Iterator

# A complete quoted field plus any blanks after its closing quote.
_QUOTED_FIELD = re.compile(r'"[^"]*(?:""[^"]*)*"[ \t]*')

# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ParseError(ValueError):
    """
    Raised when the upload is not well-formed delimited text.
    """


class EmptyInputError(ValueError):
    """
    Raised when the upload has no data rows.
    """


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def iter_records(content: bytes, *, delimiter: str = ",") -> Iterator[dict[str, str]]:
    """
    Lazily yield one trimmed, header-keyed record per data row.

    The first non-blank row is the header. Columns with a blank header
    name are dropped from every record. Errors surface as ``ParseError``
    while iterating.
    """

    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise ParseError("CSV must be UTF-8 encoded.") from exc

    reader = csv.reader(
        io.StringIO(_trim_after_closing_quotes(text, delimiter), newline=""),
        delimiter=delimiter,
        skipinitialspace=True,
        strict=True,
    )
    headers: list[str] | None = None

    try:
        for raw_row in reader:
            row = [value.strip() for value in raw_row]
            if not any(row):
                continue

            if headers is None:
                headers = _validate_headers(row)
                continue

            if len(row) != len(headers):
                raise ParseError(
                    f"Row {reader.line_num}: expected {len(headers)} fields, found {len(row)}."
                )

            yield {name: value for name, value in zip(headers, row) if name}
    except csv.Error as exc:
        raise ParseError(f"Line {reader.line_num}: {exc}") from exc


def read_records(content: bytes, *, delimiter: str = ",") -> list[dict[str, str]]:
    """
    Parse the whole upload and reject it when no data rows are present.
    """

    records = list(iter_records(content, delimiter=delimiter))
    if not records:
        raise EmptyInputError("Empty CSV file")
    return records


def _validate_headers(row: list[str]) -> list[str]:
    seen: set[str] = set()
    for name in row:
        if not name:
            continue
        if name in seen:
            raise ParseError(f"Duplicate column name in header: {name!r}.")
        seen.add(name)
    return row


def _trim_after_closing_quotes(text: str, delimiter: str) -> str:
    """
    Drop blanks between a closing quote and the following delimiter or line
    end, so ``"Widget, large" ,2`` reads like ``"Widget, large",2``.

    Anything else after a closing quote is left for the reader to reject.
    """

    def _strip(match: re.Match[str]) -> str:
        end = match.end()
        if end == len(text) or text[end] in (delimiter, "\r", "\n"):
            return match.group().rstrip(" \t")
        return match.group()

    return _QUOTED_FIELD.sub(_strip, text)
