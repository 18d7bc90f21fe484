"""
app/services/invoice_aggregator.py

Groups parsed CSV records into invoice aggregates.

Expected columns
----------------
    InvoiceNumber   grouping key; rows without it are dropped
    CustomerName    resolved against the customer table at submission
    IssueDate       header field, taken from the first row of the invoice
    DueDate         header field, taken from the first row of the invoice
    Description     line description
    Quantity        line quantity, ``0`` when missing or not a number
    UnitPrice       line unit price, ``0`` when missing or not a number

Any other column is ignored.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from decimal import Decimal, InvalidOperation
from typing import Final

from app.domain.invoice_import import InvoiceAggregate, LineItem

logger = logging.getLogger(__name__)

COLUMN_INVOICE_NUMBER: Final[str] = "InvoiceNumber"
COLUMN_CUSTOMER_NAME: Final[str] = "CustomerName"
COLUMN_ISSUE_DATE: Final[str] = "IssueDate"
COLUMN_DUE_DATE: Final[str] = "DueDate"
COLUMN_DESCRIPTION: Final[str] = "Description"
COLUMN_QUANTITY: Final[str] = "Quantity"
COLUMN_UNIT_PRICE: Final[str] = "UnitPrice"

_ZERO = Decimal("0")


def parse_amount(value: str | None) -> Decimal | None:
    """
    Parse a numeric cell as an exact ``Decimal``.

    Returns ``Decimal("0")`` for a missing or blank cell and ``None`` when the
    cell holds something that is not a finite number.
    """

    if value is None or not value.strip():
        return _ZERO
    try:
        parsed = Decimal(value.strip())
    except InvalidOperation:
        return None
    if not parsed.is_finite():
        return None
    return parsed


def aggregate_records(
    records: Iterable[Mapping[str, str]],
) -> dict[str, InvoiceAggregate]:
    """
    Group records by invoice number, preserving first-seen invoice order.

    Numeric cells that cannot be parsed become ``0`` and add a warning to
    the owning aggregate instead of failing the row.
    """

    aggregates: dict[str, InvoiceAggregate] = {}
    skipped = 0

    for record in records:
        invoice_number = (record.get(COLUMN_INVOICE_NUMBER) or "").strip()
        if not invoice_number:
            skipped += 1
            continue

        aggregate = aggregates.get(invoice_number)
        if aggregate is None:
            aggregate = InvoiceAggregate(
                invoice_number=invoice_number,
                customer_name=record.get(COLUMN_CUSTOMER_NAME) or "",
                issue_date=record.get(COLUMN_ISSUE_DATE) or "",
                due_date=record.get(COLUMN_DUE_DATE) or "",
            )
            aggregates[invoice_number] = aggregate

        line_number = len(aggregate.lines) + 1
        quantity = _amount_or_zero(record, COLUMN_QUANTITY, line_number, aggregate)
        unit_price = _amount_or_zero(record, COLUMN_UNIT_PRICE, line_number, aggregate)
        aggregate.lines.append(
            LineItem(
                description=record.get(COLUMN_DESCRIPTION) or "",
                quantity=quantity,
                unit_price=unit_price,
            )
        )

    if skipped:
        logger.debug("Skipped %d record(s) without %s", skipped, COLUMN_INVOICE_NUMBER)
    return aggregates


def _amount_or_zero(
    record: Mapping[str, str],
    column: str,
    line_number: int,
    aggregate: InvoiceAggregate,
) -> Decimal:
    raw_value = record.get(column)
    parsed = parse_amount(raw_value)
    if parsed is not None:
        return parsed

    aggregate.warnings.append(
        f"Line {line_number}: {column} {raw_value!r} is not a number; using 0"
    )
    return _ZERO
