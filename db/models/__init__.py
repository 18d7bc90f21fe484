"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.customer import Customer
from db.models.invoice import Invoice, InvoiceLine

__all__ = [
    "Customer",
    "Invoice",
    "InvoiceLine",
]
