"""
app/services/invoice_import_service.py

Batch orchestration for invoice CSV imports.

One import runs through four stages:

    1. Parsing      bytes -> header-keyed records (ParseError / EmptyInputError)
    2. Aggregating  records -> invoice aggregates in first-seen order
    3. Processing   each aggregate is resolved, priced and submitted on its own
    4. Reporting    outcomes are folded into one BatchReport

Errors in stages 1-2 abort the import before anything is written. Once
stage 3 starts a report is always produced: a failing invoice is recorded
in the report and the remaining invoices are still submitted.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor, as_completed
from functools import lru_cache

from app.config import get_invoice_import_settings
from app.domain.invoice_import import BatchReport, InvoiceAggregate, SubmissionOutcome
from app.parsers.invoice_csv import EmptyInputError, ParseError, read_records
from app.services.customer_resolver import CustomerResolver
from app.services.invoice_aggregator import aggregate_records
from app.services.invoice_backend import SqlCustomerLookup, SqlInvoiceStore
from app.services.invoice_submitter import InvoiceSubmitter

logger = logging.getLogger(__name__)

CANCELLED_ERROR = "Import cancelled before submission"


class ImportStage:
    PARSING = "parsing"
    AGGREGATING = "aggregating"
    PROCESSING = "processing"
    REPORTING = "reporting"


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class OrchestratorFault(RuntimeError):
    """
    Raised for unexpected failures outside a single invoice's submission.

    No partial report accompanies this error.
    """

    def __init__(self, message: str, *, stage: str) -> None:
        super().__init__(message)
        self.stage = stage


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class InvoiceImportService:
    """
    Drives one CSV upload through parsing, grouping, submission and reporting.
    """

    def __init__(
        self,
        *,
        submitter: InvoiceSubmitter,
        max_workers: int = 1,
        preflight: Callable[[], None] | None = None,
    ) -> None:
        self._submitter = submitter
        self._max_workers = max(1, max_workers)
        self._preflight = preflight

    def import_invoices(
        self,
        content: bytes,
        *,
        cancel_event: threading.Event | None = None,
    ) -> BatchReport:
        """
        Import every invoice in *content* and report per-invoice outcomes.

        Args:
            content:       Raw CSV upload.
            cancel_event:  Optional flag checked before each submission; once
                           set, invoices not yet submitted are reported as
                           failed.

        Raises:
            ParseError:        The upload is not well-formed CSV.
            EmptyInputError:   The upload has no data rows.
            OrchestratorFault: Anything unexpected outside per-invoice handling.
        """

        stage = ImportStage.PARSING
        try:
            records = read_records(content)

            stage = ImportStage.AGGREGATING
            aggregates = list(aggregate_records(records).values())
            logger.info(
                "Invoice import parsed records=%d invoices=%d",
                len(records),
                len(aggregates),
            )

            if self._preflight is not None and aggregates:
                self._preflight()

            stage = ImportStage.PROCESSING
            outcomes = self._process(aggregates, cancel_event)

            stage = ImportStage.REPORTING
            report = BatchReport.from_outcomes(outcomes)
        except (ParseError, EmptyInputError):
            raise
        except Exception as exc:
            logger.exception("Invoice import aborted stage=%s", stage)
            raise OrchestratorFault(f"{type(exc).__name__}: {exc}", stage=stage) from exc

        logger.info(
            "Invoice import completed total=%d success=%d failed=%d",
            report.total,
            report.success,
            report.failed,
        )
        return report

    def _process(
        self,
        aggregates: list[InvoiceAggregate],
        cancel_event: threading.Event | None,
    ) -> list[SubmissionOutcome]:
        if self._max_workers == 1 or len(aggregates) <= 1:
            return [self._submit_one(aggregate, cancel_event) for aggregate in aggregates]

        outcomes: list[SubmissionOutcome | None] = [None] * len(aggregates)
        with ThreadPoolExecutor(
            max_workers=min(self._max_workers, len(aggregates)),
            thread_name_prefix="invoice-import",
        ) as executor:
            futures = {
                executor.submit(self._submit_one, aggregate, cancel_event): index
                for index, aggregate in enumerate(aggregates)
            }
            for future in as_completed(futures):
                outcomes[futures[future]] = future.result()

        # Report order follows the file, not completion order.
        return [outcome for outcome in outcomes if outcome is not None]

    def _submit_one(
        self,
        aggregate: InvoiceAggregate,
        cancel_event: threading.Event | None,
    ) -> SubmissionOutcome:
        if cancel_event is not None and cancel_event.is_set():
            return SubmissionOutcome.failed(
                aggregate.invoice_number,
                CANCELLED_ERROR,
                tuple(aggregate.warnings),
            )
        return self._submitter.submit(aggregate)


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_invoice_import_service() -> InvoiceImportService:
    """
    Build and cache the import service with env-driven settings.
    """

    from db.session import get_session_factory

    settings = get_invoice_import_settings()
    session_factory = get_session_factory()
    store = SqlInvoiceStore(session_factory)
    submitter = InvoiceSubmitter(
        resolver=CustomerResolver(
            SqlCustomerLookup(session_factory),
            timeout=settings.lookup_timeout_seconds,
        ),
        store=store,
        submit_timeout=settings.submit_timeout_seconds,
        log_failures=settings.log_failures,
    )
    return InvoiceImportService(
        submitter=submitter,
        max_workers=settings.max_workers,
        preflight=store.ping,
    )
