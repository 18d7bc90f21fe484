"""
app/domain package marker.
"""

from app.domain.invoice_import import (
    BatchReport,
    InvoiceAggregate,
    LineItem,
    SubmissionOutcome,
    SubmissionPayload,
)

__all__ = [
    "BatchReport",
    "InvoiceAggregate",
    "LineItem",
    "SubmissionOutcome",
    "SubmissionPayload",
]
