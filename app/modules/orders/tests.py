"""
Tests de API para el módulo de Pedidos
"""

import pytest
from datetime import date, timedelta
from decimal import Decimal
from fastapi.testclient import TestClient

from app.main import app


client = TestClient(app)


@pytest.fixture
def order(headers, customer, product):
    response = client.post("/orders", json={
        "customer_id": str(customer.id),
        "order_number": "ORD-1",
        "tax_percentage": "9",
        "items": [
            {"product_id": str(product.id), "quantity": 3, "price": "12.50"},
        ],
    }, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestOrdersAPI:

    def test_create(self, order):
        assert order["status"] == "pending"
        assert order["quote_id"] is None
        # 37.50 + 9% = 40.875 → 40.88
        assert Decimal(order["total"]) == Decimal("40.88")
        assert len(order["order_items"]) == 1

    @pytest.mark.parametrize("status, kind", [
        ("processing", "invalid_status_transition"),
        ("cancelled", "invalid_status_transition"),
        ("completed", "conversion_required"),
    ])
    def test_created_only_as_pending(self, headers, customer, product, status, kind):
        response = client.post("/orders", json={
            "customer_id": str(customer.id),
            "order_number": "ORD-2",
            "status": status,
            "items": [{"product_id": str(product.id), "quantity": 1}],
        }, headers=headers)

        assert response.status_code == 400
        assert response.json()["kind"] == kind
        assert client.get("/orders", headers=headers).json() == []

    def test_manual_transitions(self, headers, order):
        processing = client.put(f"/orders/{order['id']}", json={"status": "processing"}, headers=headers)
        assert processing.json()["status"] == "processing"

        completed = client.put(f"/orders/{order['id']}", json={"status": "completed"}, headers=headers)
        assert completed.status_code == 400
        assert completed.json()["kind"] == "conversion_required"

        cancelled = client.put(f"/orders/{order['id']}", json={"status": "cancelled"}, headers=headers)
        assert cancelled.json()["status"] == "cancelled"

        reopened = client.put(f"/orders/{order['id']}", json={"status": "pending"}, headers=headers)
        assert reopened.status_code == 400

    def test_cancelled_order_cannot_be_converted(self, headers, order):
        client.put(f"/orders/{order['id']}", json={"status": "cancelled"}, headers=headers)

        response = client.post(f"/orders/{order['id']}/convert-to-invoice", headers=headers)

        assert response.status_code == 400
        assert response.json()["kind"] == "invalid_status_transition"
        assert client.get("/invoices", headers=headers).json() == []

    def test_convert_to_invoice(self, headers, order):
        response = client.post(f"/orders/{order['id']}/convert-to-invoice", headers=headers)

        assert response.status_code == 201, response.text
        invoice = response.json()
        assert invoice["status"] == "draft"
        assert invoice["order_id"] == order["id"]
        assert invoice["invoice_number"] == "INV-ORD-1"
        assert invoice["due_date"] == (date.today() + timedelta(days=30)).isoformat()
        assert invoice["total"] == order["total"]

        source = client.get(f"/orders/{order['id']}", headers=headers).json()
        assert source["status"] == "completed"
        assert source["converted_to_invoice_id"] == invoice["id"]

        again = client.post(f"/orders/{order['id']}/convert-to-invoice", headers=headers)
        assert again.status_code == 409
        assert len(client.get("/invoices", headers=headers).json()) == 1

    def test_convert_with_invoice_number(self, headers, order):
        response = client.post(
            f"/orders/{order['id']}/convert-to-invoice", json={"invoice_number": "2024-0001"}, headers=headers
        )

        assert response.json()["invoice_number"] == "2024-0001"

    def test_delete_clears_invoice_link(self, headers, order):
        invoice = client.post(f"/orders/{order['id']}/convert-to-invoice", headers=headers).json()

        assert client.delete(f"/orders/{order['id']}", headers=headers).status_code == 200

        remaining = client.get(f"/invoices/{invoice['id']}", headers=headers).json()
        assert remaining["order_id"] is None
        assert len(remaining["invoice_items"]) == 1
