"""
app/api/routers package marker.
"""

from app.api.routers.invoice_import import router as invoice_import_router

__all__ = [
    "invoice_import_router",
]
