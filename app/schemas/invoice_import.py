"""
app/schemas/invoice_import.py

Response schemas for the invoice import endpoint.
"""

from __future__ import annotations

from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.domain.invoice_import import BatchReport, SubmissionOutcome


class InvoiceImportDetailResponse(BaseModel):
    """
    Outcome of one invoice in an import.
    """

    model_config = ConfigDict(populate_by_name=True)

    invoice_number: str = Field(..., alias="invoiceNumber")
    status: Literal["created", "failed"]
    id: UUID | None = None
    error: str | None = None
    warnings: list[str] | None = None

    @classmethod
    def from_outcome(cls, outcome: SubmissionOutcome) -> InvoiceImportDetailResponse:
        return cls(
            invoice_number=outcome.invoice_number,
            status=outcome.status,
            id=outcome.invoice_id,
            error=outcome.error,
            warnings=list(outcome.warnings) or None,
        )


class InvoiceImportReportResponse(BaseModel):
    """
    API response model for one invoice import batch.
    """

    total: int = Field(..., ge=0)
    success: int = Field(..., ge=0)
    failed: int = Field(..., ge=0)
    details: list[InvoiceImportDetailResponse] = Field(default_factory=list)

    @classmethod
    def from_report(cls, report: BatchReport) -> InvoiceImportReportResponse:
        return cls(
            total=report.total,
            success=report.success,
            failed=report.failed,
            details=[InvoiceImportDetailResponse.from_outcome(outcome) for outcome in report.details],
        )
