"""
app/parsers package marker.
"""

from app.parsers.invoice_csv import EmptyInputError, ParseError, iter_records, read_records

__all__ = [
    "EmptyInputError",
    "ParseError",
    "iter_records",
    "read_records",
]
