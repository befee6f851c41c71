"""
Tests de API para el módulo de Facturación
"""

import pytest
from datetime import date
from decimal import Decimal
from fastapi.testclient import TestClient

from app.main import app


client = TestClient(app)


@pytest.fixture
def invoice_payload(customer, product):
    return {
        "customer_id": str(customer.id),
        "invoice_number": "2024-0001",
        "invoice_date": "2024-03-01",
        "items": [{"product_id": str(product.id), "quantity": 1}],
    }


def create_invoice(headers, payload):
    response = client.post("/invoices", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestInvoicesAPI:

    def test_due_date_defaults_to_thirty_days(self, headers, invoice_payload):
        invoice = create_invoice(headers, invoice_payload)

        assert invoice["status"] == "draft"
        assert invoice["due_date"] == "2024-03-31"
        assert Decimal(invoice["total"]) == Decimal("121.00")

    def test_explicit_due_date(self, headers, invoice_payload):
        invoice_payload["due_date"] = "2024-03-15"

        invoice = create_invoice(headers, invoice_payload)

        assert invoice["due_date"] == "2024-03-15"

    def test_due_date_before_invoice_date(self, headers, invoice_payload):
        invoice_payload["due_date"] = "2024-02-01"

        response = client.post("/invoices", json=invoice_payload, headers=headers)

        assert response.status_code == 400

    def test_invoice_date_defaults_to_today(self, headers, invoice_payload):
        del invoice_payload["invoice_date"]

        invoice = create_invoice(headers, invoice_payload)

        assert invoice["invoice_date"] == date.today().isoformat()

    def test_created_with_status(self, headers, invoice_payload):
        invoice_payload["status"] = "paid"

        invoice = create_invoice(headers, invoice_payload)

        assert invoice["status"] == "paid"

    def test_paid_invoice_is_locked(self, headers, invoice_payload, product):
        invoice = create_invoice(headers, invoice_payload)
        paid = client.put(f"/invoices/{invoice['id']}", json={"status": "paid"}, headers=headers)
        assert paid.json()["status"] == "paid"

        items = client.put(f"/invoices/{invoice['id']}", json={
            "items": [{"product_id": str(product.id), "quantity": 2}]
        }, headers=headers)
        assert items.status_code == 400
        assert items.json()["kind"] == "document_locked"

        back = client.put(f"/invoices/{invoice['id']}", json={"status": "sent"}, headers=headers)
        assert back.status_code == 400

        notes = client.put(f"/invoices/{invoice['id']}", json={"notes": "Betaald per bank"}, headers=headers)
        assert notes.status_code == 200

    def test_same_status_is_noop(self, headers, invoice_payload):
        invoice = create_invoice(headers, invoice_payload)

        response = client.put(f"/invoices/{invoice['id']}", json={"status": "draft"}, headers=headers)

        assert response.status_code == 200
        assert response.json()["status"] == "draft"

    def test_cannot_null_required_fields(self, headers, invoice_payload):
        invoice = create_invoice(headers, invoice_payload)

        response = client.put(f"/invoices/{invoice['id']}", json={"invoice_number": None}, headers=headers)

        assert response.status_code == 400

    def test_scoped_by_tenant(self, headers, other_headers, invoice_payload):
        invoice = create_invoice(headers, invoice_payload)

        assert client.get(f"/invoices/{invoice['id']}", headers=other_headers).status_code == 404
        assert client.put(
            f"/invoices/{invoice['id']}", json={"status": "paid"}, headers=other_headers
        ).status_code == 404
        assert client.get(f"/invoices/{invoice['id']}", headers=headers).json()["status"] == "draft"

    def test_no_conversion_endpoint(self, headers, invoice_payload):
        invoice = create_invoice(headers, invoice_payload)

        response = client.post(f"/invoices/{invoice['id']}/convert", headers=headers)

        assert response.status_code in (404, 405)
