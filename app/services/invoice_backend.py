"""
app/services/invoice_backend.py

SQLAlchemy-backed customer lookup and invoice store.

Every call opens its own session and transaction and releases both on
exit, including error paths. Nothing here holds a connection between
invoices.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.invoice_import import SubmissionPayload
from app.repositories.customer_repository import CustomerRepository
from app.repositories.invoice_repository import InvoiceRepository, InvoiceValidationError
from app.services.invoice_submitter import SubmissionError

# PostgreSQL SQLSTATE for query_canceled, raised when statement_timeout fires.
_QUERY_CANCELED_SQLSTATE = "57014"

SessionFactory = Callable[[], Session]


class SqlCustomerLookup:
    """
    CustomerLookup backed by the customers table.
    """

    def __init__(self, session_factory: SessionFactory) -> None:
        self._session_factory = session_factory

    def find_customer_ids(
        self,
        name: str,
        *,
        timeout: float | None = None,
    ) -> list[uuid.UUID]:
        try:
            with self._session_factory() as db, db.begin():
                _apply_statement_timeout(db, timeout)
                return CustomerRepository(db).find_ids_by_name(name)
        except OperationalError as exc:
            if _is_query_canceled(exc):
                raise TimeoutError(f"Customer lookup exceeded {timeout}s") from exc
            raise SubmissionError(f"Customer lookup failed: {_short_error(exc)}") from exc
        except SQLAlchemyError as exc:
            raise SubmissionError(f"Customer lookup failed: {_short_error(exc)}") from exc


class SqlInvoiceStore:
    """
    InvoiceStore that writes one invoice and its lines per transaction.
    """

    def __init__(self, session_factory: SessionFactory) -> None:
        self._session_factory = session_factory

    def create_invoice(
        self,
        payload: SubmissionPayload,
        *,
        timeout: float | None = None,
    ) -> uuid.UUID:
        try:
            with self._session_factory() as db, db.begin():
                _apply_statement_timeout(db, timeout)
                invoice = InvoiceRepository(db).create_invoice(payload)
                invoice_id = invoice.id
        except InvoiceValidationError as exc:
            raise SubmissionError(str(exc)) from exc
        except IntegrityError as exc:
            raise SubmissionError(
                f"Invoice '{payload.invoice_number}' violates a database constraint: "
                f"{_short_error(exc)}"
            ) from exc
        except OperationalError as exc:
            if _is_query_canceled(exc):
                raise TimeoutError(f"Invoice insert exceeded {timeout}s") from exc
            raise SubmissionError(f"Invoice store unavailable: {_short_error(exc)}") from exc
        except SQLAlchemyError as exc:
            raise SubmissionError(f"Invoice store error: {_short_error(exc)}") from exc

        return invoice_id

    def ping(self) -> None:
        """Run SELECT 1; raises when the database is unreachable."""
        with self._session_factory() as db:
            db.execute(text("SELECT 1"))


def _apply_statement_timeout(db: Session, timeout: float | None) -> None:
    if timeout is None or db.get_bind().dialect.name != "postgresql":
        return
    milliseconds = max(1, int(timeout * 1000))
    db.execute(text(f"SET LOCAL statement_timeout = {milliseconds}"))


def _is_query_canceled(exc: OperationalError) -> bool:
    return getattr(exc.orig, "sqlstate", None) == _QUERY_CANCELED_SQLSTATE


def _short_error(exc: SQLAlchemyError) -> str:
    source = getattr(exc, "orig", None) or exc
    lines = str(source).strip().splitlines()
    return lines[0] if lines else type(source).__name__
