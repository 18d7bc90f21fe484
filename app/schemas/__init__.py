"""
app/schemas package marker.
"""

from app.schemas.invoice_import import InvoiceImportDetailResponse, InvoiceImportReportResponse

__all__ = [
    "InvoiceImportDetailResponse",
    "InvoiceImportReportResponse",
]
