"""
app/repositories/invoice_repository.py

Persistence of imported invoices and their lines.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.domain.invoice_import import SubmissionPayload
from db.models.invoice import Invoice, InvoiceLine

DATE_FORMATS: tuple[str, ...] = (
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%m/%d/%Y",
)

_CENT = Decimal("0.01")


class InvoiceValidationError(ValueError):
    """
    Raised when a payload cannot be stored as an invoice.
    """


class DuplicateInvoiceError(InvoiceValidationError):
    """
    Raised when the invoice number is already taken.
    """


class InvoiceRepository:
    """
    Repository for creating invoices with their lines.

    Callers own the transaction: ``create_invoice`` only adds and flushes.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_number(self, invoice_number: str) -> Invoice | None:
        stmt = select(Invoice).where(Invoice.invoice_number == invoice_number)
        return self._session.scalars(stmt).first()

    def create_invoice(self, payload: SubmissionPayload) -> Invoice:
        """
        Insert the invoice header and every line, returning the new invoice.
        """

        if self.get_by_number(payload.invoice_number) is not None:
            raise DuplicateInvoiceError(f"Invoice '{payload.invoice_number}' already exists")

        issue_date = parse_date(payload.issue_date, field="IssueDate")
        if issue_date is None:
            raise InvoiceValidationError("IssueDate is required")
        due_date = parse_date(payload.due_date, field="DueDate")

        invoice = Invoice(
            invoice_number=payload.invoice_number,
            customer_id=payload.customer_id,
            issue_date=issue_date,
            due_date=due_date,
            status=payload.status,
            total_amount=_to_cents(payload.total_amount),
        )
        invoice.lines = [
            InvoiceLine(
                line_number=index,
                description=line.description or None,
                quantity=line.quantity,
                unit_price=line.unit_price,
                amount=_to_cents(line.amount),
            )
            for index, line in enumerate(payload.lines, start=1)
        ]
        self._session.add(invoice)
        self._session.flush()
        return invoice


def parse_date(value: str | None, *, field: str) -> date | None:
    """
    Parse an import date cell; blank cells are ``None``.
    """

    if value is None or not value.strip():
        return None

    raw = value.strip()
    try:
        return date.fromisoformat(raw)
    except ValueError:
        pass

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(raw, fmt).date()
        except ValueError:
            continue

    raise InvoiceValidationError(f"{field} '{raw}' is not a valid date")


def _to_cents(value: Decimal) -> Decimal:
    return value.quantize(_CENT, rounding=ROUND_HALF_UP)
