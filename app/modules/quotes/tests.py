"""
Tests de API para el módulo de Cotizaciones

Incluye la conversión a pedido por HTTP y la forma de la respuesta
(quote_items con producto embebido, resumen del cliente, desglose).
"""

import pytest
from decimal import Decimal
from fastapi.testclient import TestClient
from uuid import uuid4

from app.main import app


client = TestClient(app)


# ===== FIXTURES =====

@pytest.fixture
def quote_payload(customer, product):
    return {
        "customer_id": str(customer.id),
        "quote_number": "Q-2024-001",
        "discount_percentage": "10",
        "tax_percentage": "21",
        "items": [
            {"product_id": str(product.id), "quantity": 2, "price": "15.00"},
            {"product_id": str(product.id), "quantity": 1, "price": "40.00"},
        ],
    }


def create_quote(headers, payload):
    response = client.post("/quotes", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestQuotesAPI:

    def test_create_response_shape(self, headers, quote_payload, customer, product):
        quote = create_quote(headers, quote_payload)

        assert quote["status"] == "draft"
        assert quote["currency"] == "EUR"
        assert Decimal(quote["total"]) == Decimal("76.23")
        assert Decimal(quote["subtotal"]) == Decimal("70.00")
        assert Decimal(quote["discount_amount"]) == Decimal("7.00")
        assert Decimal(quote["tax_amount"]) == Decimal("13.23")
        assert quote["customer"] == {
            "id": str(customer.id), "display_name": "Bakkerij Jansen B.V.", "email": "info@jansen.nl"
        }
        assert len(quote["quote_items"]) == 2
        first = quote["quote_items"][0]
        assert first["product"]["name"] == "Consultoría"
        assert first["quantity"] == 2
        assert Decimal(first["total"]) == Decimal("30.00")
        assert quote["converted_to_order_id"] is None

    def test_defaults_without_percentages(self, headers, customer, product):
        quote = create_quote(headers, {
            "customer_id": str(customer.id),
            "quote_number": "Q-1",
            "items": [{"product_id": str(product.id), "quantity": 1}],
        })

        assert Decimal(quote["tax_percentage"]) == Decimal("21")
        assert Decimal(quote["discount_percentage"]) == Decimal("0")
        assert Decimal(quote["quote_items"][0]["price"]) == Decimal("100.00")
        assert Decimal(quote["total"]) == Decimal("121.00")

    def test_items_required(self, headers, quote_payload):
        quote_payload["items"] = []

        response = client.post("/quotes", json=quote_payload, headers=headers)

        assert response.status_code == 400

    def test_negative_quantity_is_invalid_item(self, headers, quote_payload):
        quote_payload["items"][0]["quantity"] = -1

        response = client.post("/quotes", json=quote_payload, headers=headers)

        assert response.status_code == 400
        assert response.json()["kind"] == "invalid_item"

    def test_percentage_out_of_range(self, headers, quote_payload):
        quote_payload["tax_percentage"] = "120"

        response = client.post("/quotes", json=quote_payload, headers=headers)

        assert response.status_code == 400

    def test_unknown_customer(self, headers, quote_payload):
        quote_payload["customer_id"] = str(uuid4())

        response = client.post("/quotes", json=quote_payload, headers=headers)

        assert response.status_code == 404

    def test_list_filters(self, headers, other_headers, quote_payload):
        first = create_quote(headers, quote_payload)
        second = create_quote(headers, dict(quote_payload, quote_number="Q-2024-002"))
        client.put(f"/quotes/{second['id']}", json={"status": "sent"}, headers=headers)

        listed = client.get("/quotes", headers=headers).json()
        sent = client.get("/quotes", params={"status": "sent"}, headers=headers).json()

        assert [q["id"] for q in listed] == [second["id"], first["id"]]
        assert [q["id"] for q in sent] == [second["id"]]
        assert client.get("/quotes", headers=other_headers).json() == []

    def test_update_replaces_items(self, headers, quote_payload, product):
        quote = create_quote(headers, quote_payload)

        response = client.put(f"/quotes/{quote['id']}", json={
            "items": [{"product_id": str(product.id), "quantity": 5, "price": "10.00"}]
        }, headers=headers)

        assert response.status_code == 200
        body = response.json()
        assert len(body["quote_items"]) == 1
        assert body["quote_items"][0]["id"] not in {i["id"] for i in quote["quote_items"]}
        # 50.00 - 10% = 45.00, + 21% = 54.45
        assert Decimal(body["total"]) == Decimal("54.45")

    def test_update_with_stale_version(self, headers, quote_payload):
        quote = create_quote(headers, quote_payload)
        first = client.put(
            f"/quotes/{quote['id']}", json={"notes": "a", "version": quote["version"]}, headers=headers
        )
        assert first.status_code == 200

        response = client.put(
            f"/quotes/{quote['id']}", json={"notes": "b", "version": quote["version"]}, headers=headers
        )

        assert response.status_code == 409
        assert response.json()["kind"] == "concurrent_modification"

    def test_direct_approval_is_refused(self, headers, quote_payload):
        quote = create_quote(headers, quote_payload)

        response = client.put(f"/quotes/{quote['id']}", json={"status": "approved"}, headers=headers)

        assert response.status_code == 400
        assert response.json()["kind"] == "conversion_required"

    @pytest.mark.parametrize("status", ["sent", "rejected", "expired"])
    def test_created_only_as_draft(self, headers, quote_payload, status):
        quote_payload["status"] = status

        response = client.post("/quotes", json=quote_payload, headers=headers)

        assert response.status_code == 400
        assert response.json()["kind"] == "invalid_status_transition"
        assert client.get("/quotes", headers=headers).json() == []

    def test_invalid_transition(self, headers, quote_payload):
        quote = create_quote(headers, quote_payload)
        client.put(f"/quotes/{quote['id']}", json={"status": "expired"}, headers=headers)

        response = client.put(f"/quotes/{quote['id']}", json={"status": "sent"}, headers=headers)

        assert response.status_code == 400
        assert response.json()["kind"] == "invalid_status_transition"

    def test_delete(self, headers, other_headers, quote_payload):
        quote = create_quote(headers, quote_payload)

        assert client.delete(f"/quotes/{quote['id']}", headers=other_headers).status_code == 404
        assert client.delete(f"/quotes/{quote['id']}", headers=headers).status_code == 200
        assert client.get(f"/quotes/{quote['id']}", headers=headers).status_code == 404


class TestConvertQuoteAPI:

    def test_convert_to_order(self, headers, quote_payload):
        quote = create_quote(headers, quote_payload)

        response = client.post(f"/quotes/{quote['id']}/convert-to-order", headers=headers)

        assert response.status_code == 201, response.text
        order = response.json()
        assert order["status"] == "pending"
        assert order["quote_id"] == quote["id"]
        assert order["order_number"] == "ORD-Q-2024-001"
        assert order["total"] == quote["total"]
        assert [(i["product_id"], i["quantity"], i["price"]) for i in order["order_items"]] == \
            [(i["product_id"], i["quantity"], i["price"]) for i in quote["quote_items"]]

        source = client.get(f"/quotes/{quote['id']}", headers=headers).json()
        assert source["status"] == "approved"
        assert source["converted_to_order_id"] == order["id"]

    def test_convert_with_order_number(self, headers, quote_payload):
        quote = create_quote(headers, quote_payload)

        response = client.post(
            f"/quotes/{quote['id']}/convert-to-order", json={"order_number": "ORD-100"}, headers=headers
        )

        assert response.json()["order_number"] == "ORD-100"

    def test_convert_twice(self, headers, quote_payload):
        quote = create_quote(headers, quote_payload)
        client.post(f"/quotes/{quote['id']}/convert-to-order", headers=headers)

        response = client.post(f"/quotes/{quote['id']}/convert-to-order", headers=headers)

        assert response.status_code == 409
        assert response.json()["kind"] == "already_converted"
        assert len(client.get("/orders", headers=headers).json()) == 1

    def test_convert_other_tenant(self, headers, other_headers, quote_payload):
        quote = create_quote(headers, quote_payload)

        response = client.post(f"/quotes/{quote['id']}/convert-to-order", headers=other_headers)

        assert response.status_code == 404
        assert client.get("/orders", headers=headers).json() == []

    def test_converted_quote_items_are_locked(self, headers, quote_payload, product):
        quote = create_quote(headers, quote_payload)
        client.post(f"/quotes/{quote['id']}/convert-to-order", headers=headers)

        response = client.put(f"/quotes/{quote['id']}", json={
            "items": [{"product_id": str(product.id), "quantity": 1}]
        }, headers=headers)

        assert response.status_code == 400
        assert response.json()["kind"] == "document_locked"
