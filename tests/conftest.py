"""
Shared fakes for the invoice import pipeline.

The fakes stand in for the customer lookup and invoice store so pipeline
tests run without a database.
"""

from __future__ import annotations

import threading
import uuid
from collections.abc import Sequence

import pytest

from app.domain.invoice_import import SubmissionPayload
from app.services.customer_resolver import CustomerResolver
from app.services.invoice_submitter import InvoiceSubmitter

ACME_ID = uuid.UUID("11111111-1111-1111-1111-111111111111")
GLOBEX_ID = uuid.UUID("22222222-2222-2222-2222-222222222222")

HEADER = "InvoiceNumber,CustomerName,IssueDate,DueDate,Description,Quantity,UnitPrice"


def csv_bytes(*rows: str, header: str = HEADER) -> bytes:
    return ("\n".join((header, *rows)) + "\n").encode("utf-8")


def invoice_id_for(invoice_number: str) -> uuid.UUID:
    return uuid.uuid5(uuid.NAMESPACE_URL, invoice_number)


class FakeCustomerLookup:
    def __init__(
        self,
        customers: dict[str, Sequence[uuid.UUID]] | None = None,
        *,
        error: Exception | None = None,
    ) -> None:
        self.customers = dict(customers or {})
        self.error = error
        self.calls: list[tuple[str, float | None]] = []
        self._lock = threading.Lock()

    def find_customer_ids(self, name: str, *, timeout: float | None = None) -> list[uuid.UUID]:
        with self._lock:
            self.calls.append((name, timeout))
        if self.error is not None:
            raise self.error
        return list(self.customers.get(name, ()))


class FakeInvoiceStore:
    def __init__(self, *, fail_on: dict[str, Exception] | None = None) -> None:
        self.fail_on = dict(fail_on or {})
        self.created: list[SubmissionPayload] = []
        self.timeouts: list[float | None] = []
        self._lock = threading.Lock()

    def create_invoice(self, payload: SubmissionPayload, *, timeout: float | None = None) -> uuid.UUID:
        with self._lock:
            self.timeouts.append(timeout)
        error = self.fail_on.get(payload.invoice_number)
        if error is not None:
            raise error
        with self._lock:
            self.created.append(payload)
        return invoice_id_for(payload.invoice_number)


@pytest.fixture()
def lookup() -> FakeCustomerLookup:
    return FakeCustomerLookup({"Acme": [ACME_ID], "Globex": [GLOBEX_ID]})


@pytest.fixture()
def store() -> FakeInvoiceStore:
    return FakeInvoiceStore()


@pytest.fixture()
def submitter(lookup: FakeCustomerLookup, store: FakeInvoiceStore) -> InvoiceSubmitter:
    return InvoiceSubmitter(
        resolver=CustomerResolver(lookup, timeout=5.0),
        store=store,
        submit_timeout=15.0,
    )
