"""
app/repositories package marker.
"""

from app.repositories.customer_repository import CustomerRepository
from app.repositories.invoice_repository import (
    DuplicateInvoiceError,
    InvoiceRepository,
    InvoiceValidationError,
)

__all__ = [
    "CustomerRepository",
    "DuplicateInvoiceError",
    "InvoiceRepository",
    "InvoiceValidationError",
]
