"""
app/domain/invoice_import.py

Domain models used by the invoice import pipeline.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from decimal import Decimal

DRAFT_STATUS = "Draft"

OUTCOME_CREATED = "created"
OUTCOME_FAILED = "failed"


@dataclass(frozen=True)
class LineItem:
    """
    One invoice line as read from a CSV row.
    """

    description: str
    quantity: Decimal
    unit_price: Decimal

    @property
    def amount(self) -> Decimal:
        return self.quantity * self.unit_price


@dataclass
class InvoiceAggregate:
    """
    An invoice reconstructed from every row sharing one invoice number.

    Header fields come from the first row seen; ``lines`` keeps row order.
    """

    invoice_number: str
    customer_name: str
    issue_date: str
    due_date: str
    lines: list[LineItem] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class SubmissionPayload:
    """
    Payload handed to the invoice store for one aggregate.
    """

    invoice_number: str
    customer_id: uuid.UUID
    issue_date: str
    due_date: str
    total_amount: Decimal
    lines: tuple[LineItem, ...]
    status: str = DRAFT_STATUS


@dataclass(frozen=True)
class SubmissionOutcome:
    """
    Result of submitting one aggregate: either created with an id or failed
    with a message. Never both.
    """

    invoice_number: str
    status: str
    invoice_id: uuid.UUID | None = None
    error: str | None = None
    warnings: tuple[str, ...] = ()

    @classmethod
    def created(
        cls,
        invoice_number: str,
        invoice_id: uuid.UUID,
        warnings: tuple[str, ...] = (),
    ) -> SubmissionOutcome:
        return cls(
            invoice_number=invoice_number,
            status=OUTCOME_CREATED,
            invoice_id=invoice_id,
            warnings=warnings,
        )

    @classmethod
    def failed(
        cls,
        invoice_number: str,
        error: str,
        warnings: tuple[str, ...] = (),
    ) -> SubmissionOutcome:
        return cls(
            invoice_number=invoice_number,
            status=OUTCOME_FAILED,
            error=error,
            warnings=warnings,
        )

    @property
    def is_success(self) -> bool:
        return self.status == OUTCOME_CREATED


@dataclass(frozen=True)
class BatchReport:
    """
    End-of-run import report. ``details`` follows the order in which
    invoice numbers first appeared in the file.
    """

    total: int
    success: int
    failed: int
    details: tuple[SubmissionOutcome, ...] = ()

    @classmethod
    def from_outcomes(cls, outcomes: list[SubmissionOutcome]) -> BatchReport:
        success = sum(1 for outcome in outcomes if outcome.is_success)
        return cls(
            total=len(outcomes),
            success=success,
            failed=len(outcomes) - success,
            details=tuple(outcomes),
        )
