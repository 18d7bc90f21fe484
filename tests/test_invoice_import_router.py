"""
tests/test_invoice_import_router.py

HTTP contract of POST /api/import-invoices with the import service
replaced through FastAPI dependency overrides.
"""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.api.routers import invoice_import_router
from app.services.customer_resolver import CustomerResolver
from app.services.invoice_import_service import InvoiceImportService, get_invoice_import_service
from app.services.invoice_submitter import InvoiceSubmitter
from tests.conftest import FakeCustomerLookup, FakeInvoiceStore, csv_bytes, invoice_id_for


def _client(service: InvoiceImportService) -> TestClient:
    application = FastAPI()
    application.include_router(invoice_import_router)
    application.dependency_overrides[get_invoice_import_service] = lambda: service
    return TestClient(application)


@pytest.fixture()
def client(submitter: InvoiceSubmitter) -> TestClient:
    return _client(InvoiceImportService(submitter=submitter))


def _upload(client: TestClient, content: bytes, filename: str = "invoices.csv", content_type: str = "text/csv"):
    return client.post("/api/import-invoices", files={"file": (filename, content, content_type)})


def test_report_for_mixed_batch(client: TestClient) -> None:
    response = _upload(
        client,
        csv_bytes(
            "INV-1,Acme,2024-01-01,2024-01-31,Widget,2,10.00",
            "INV-1,Acme,2024-01-01,2024-01-31,Gadget,1,5.00",
            "INV-2,Initech,2024-01-01,2024-01-31,Stapler,1,3.00",
        ),
    )

    assert response.status_code == 200
    assert response.json() == {
        "total": 2,
        "success": 1,
        "failed": 1,
        "details": [
            {"invoiceNumber": "INV-1", "status": "created", "id": str(invoice_id_for("INV-1"))},
            {"invoiceNumber": "INV-2", "status": "failed", "error": "Customer 'Initech' not found"},
        ],
    }


def test_all_failed_batch_is_still_200(store: FakeInvoiceStore) -> None:
    service = InvoiceImportService(
        submitter=InvoiceSubmitter(resolver=CustomerResolver(FakeCustomerLookup({})), store=store)
    )

    response = _upload(_client(service), csv_bytes("INV-1,Nobody,,,A,1,1"))

    assert response.status_code == 200
    assert response.json()["failed"] == 1


def test_warnings_are_returned(client: TestClient) -> None:
    response = _upload(client, csv_bytes("INV-1,Acme,2024-01-01,,Widget,two,10.00"))

    detail = response.json()["details"][0]
    assert detail["warnings"] == ["Line 1: Quantity 'two' is not a number; using 0"]


def test_header_only_is_400(client: TestClient) -> None:
    response = _upload(client, csv_bytes())

    assert response.status_code == 400
    assert response.json() == {"detail": "Empty CSV file"}


def test_malformed_csv_is_400(client: TestClient) -> None:
    response = _upload(client, csv_bytes("INV-1,Acme,2024-01-01,,Widget,2"))

    assert response.status_code == 400
    assert response.json()["detail"].startswith("Invalid CSV format:")


def test_non_csv_upload_is_400(client: TestClient) -> None:
    response = _upload(client, b"%PDF-1.7", filename="invoice.pdf", content_type="application/pdf")

    assert response.status_code == 400
    assert response.json() == {"detail": "Only CSV files are allowed."}


def test_missing_file_is_400(client: TestClient) -> None:
    response = client.post("/api/import-invoices", data={"comment": "no file"})

    assert response.status_code == 400
    assert response.json() == {"detail": "No file uploaded"}


def test_orchestrator_fault_is_500(submitter: InvoiceSubmitter) -> None:
    def preflight() -> None:
        raise ConnectionError("database unreachable")

    service = InvoiceImportService(submitter=submitter, preflight=preflight)

    response = _upload(_client(service), csv_bytes("INV-1,Acme,,,A,1,1"))

    assert response.status_code == 500
    body = response.json()["detail"]
    assert body["error"] == "Import failed"
    assert "database unreachable" in body["details"]
