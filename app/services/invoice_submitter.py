"""
app/services/invoice_submitter.py

Submits one invoice aggregate to the invoice store.

``InvoiceSubmitter.submit`` is the failure boundary for a single invoice:
customer resolution, payload construction, and persistence errors are all
turned into a failed ``SubmissionOutcome`` here and never raised to the
batch. There are no retries.
"""

from __future__ import annotations

import logging
import uuid
from decimal import Decimal
from typing import Protocol

from app.domain.invoice_import import (
    InvoiceAggregate,
    SubmissionOutcome,
    SubmissionPayload,
)
from app.services.customer_resolver import CustomerResolver, ReferenceNotFoundError

logger = logging.getLogger(__name__)


class SubmissionError(RuntimeError):
    """
    Raised by invoice stores when an invoice cannot be persisted.
    """


class InvoiceStore(Protocol):
    def create_invoice(
        self,
        payload: SubmissionPayload,
        *,
        timeout: float | None = None,
    ) -> uuid.UUID:
        ...


def compute_total(aggregate: InvoiceAggregate) -> Decimal:
    """
    Exact sum of quantity * unit price over every line.
    """

    return sum((line.amount for line in aggregate.lines), Decimal("0"))


def build_payload(aggregate: InvoiceAggregate, customer_id: uuid.UUID) -> SubmissionPayload:
    return SubmissionPayload(
        invoice_number=aggregate.invoice_number,
        customer_id=customer_id,
        issue_date=aggregate.issue_date,
        due_date=aggregate.due_date,
        total_amount=compute_total(aggregate),
        lines=tuple(aggregate.lines),
    )


class InvoiceSubmitter:
    """
    Resolves, prices, and persists one aggregate at a time.
    """

    def __init__(
        self,
        *,
        resolver: CustomerResolver,
        store: InvoiceStore,
        submit_timeout: float | None = None,
        log_failures: bool = True,
    ) -> None:
        self._resolver = resolver
        self._store = store
        self._submit_timeout = submit_timeout
        self._log_failures = log_failures

    def submit(self, aggregate: InvoiceAggregate) -> SubmissionOutcome:
        warnings = tuple(aggregate.warnings)
        try:
            customer_id = self._resolver.resolve(aggregate.customer_name)
            payload = build_payload(aggregate, customer_id)
            invoice_id = self._create(payload)
        except (ReferenceNotFoundError, SubmissionError) as exc:
            return self._failed(aggregate, str(exc), warnings)
        except TimeoutError:
            return self._failed(
                aggregate,
                f"Customer lookup for '{aggregate.customer_name}' timed out",
                warnings,
            )
        except ArithmeticError:
            return self._failed(
                aggregate,
                f"Invoice '{aggregate.invoice_number}' amounts are out of range",
                warnings,
            )
        except Exception as exc:  # noqa: BLE001
            return self._failed(aggregate, _describe_unexpected(exc), warnings)

        logger.debug(
            "Invoice created invoice_number=%r id=%s total=%s lines=%d",
            aggregate.invoice_number,
            invoice_id,
            payload.total_amount,
            len(payload.lines),
        )
        return SubmissionOutcome.created(aggregate.invoice_number, invoice_id, warnings)

    def _create(self, payload: SubmissionPayload) -> uuid.UUID:
        try:
            invoice_id = self._store.create_invoice(payload, timeout=self._submit_timeout)
        except TimeoutError as exc:
            raise SubmissionError(
                f"Invoice '{payload.invoice_number}' submission timed out"
            ) from exc
        if invoice_id is None:
            raise SubmissionError("Invoice store returned no id")
        return invoice_id

    def _failed(
        self,
        aggregate: InvoiceAggregate,
        message: str,
        warnings: tuple[str, ...],
    ) -> SubmissionOutcome:
        if self._log_failures:
            logger.warning(
                "Invoice import failed invoice_number=%r customer=%r: %s",
                aggregate.invoice_number,
                aggregate.customer_name,
                message,
            )
        return SubmissionOutcome.failed(aggregate.invoice_number, message, warnings)


def _describe_unexpected(exc: Exception) -> str:
    message = str(exc).strip()
    return message or type(exc).__name__
