"""
app/services package marker.
"""

from app.services.customer_resolver import CustomerLookup, CustomerResolver, ReferenceNotFoundError
from app.services.invoice_aggregator import aggregate_records, parse_amount
from app.services.invoice_import_service import (
    InvoiceImportService,
    OrchestratorFault,
    get_invoice_import_service,
)
from app.services.invoice_submitter import (
    InvoiceStore,
    InvoiceSubmitter,
    SubmissionError,
    build_payload,
    compute_total,
)

__all__ = [
    "CustomerLookup",
    "CustomerResolver",
    "ReferenceNotFoundError",
    "aggregate_records",
    "parse_amount",
    "InvoiceImportService",
    "OrchestratorFault",
    "get_invoice_import_service",
    "InvoiceStore",
    "InvoiceSubmitter",
    "SubmissionError",
    "build_payload",
    "compute_total",
]
