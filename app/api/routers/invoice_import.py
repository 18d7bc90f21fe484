"""
app/api/routers/invoice_import.py

Invoice CSV import HTTP endpoint.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, UploadFile, status

from app.api.dependencies import get_csv_upload
from app.parsers.invoice_csv import EmptyInputError, ParseError
from app.schemas.invoice_import import InvoiceImportReportResponse
from app.services.invoice_import_service import (
    InvoiceImportService,
    OrchestratorFault,
    get_invoice_import_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["invoice-import"])


@router.post(
    "/api/import-invoices",
    response_model=InvoiceImportReportResponse,
    response_model_exclude_none=True,
)
def import_invoices(
    file: UploadFile = Depends(get_csv_upload),
    import_service: InvoiceImportService = Depends(get_invoice_import_service),
) -> InvoiceImportReportResponse:
    """
    Create one draft invoice per invoice number found in the uploaded CSV.
    """

    try:
        report = import_service.import_invoices(file.file.read())
    except EmptyInputError as exc:
        logger.warning("Invoice import rejected file=%r: %s", file.filename, exc)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except ParseError as exc:
        logger.warning("Invoice import rejected file=%r: %s", file.filename, exc)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid CSV format: {exc}",
        ) from exc
    except OrchestratorFault as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "Import failed", "details": str(exc)},
        ) from exc
    finally:
        file.file.close()

    return InvoiceImportReportResponse.from_report(report)
