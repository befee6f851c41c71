"""
Tests para el módulo de Productos
"""

from decimal import Decimal
from fastapi.testclient import TestClient

from app.common.repository import TenantRepository
from app.core.config import settings
from app.main import app
from app.modules.products.models import Product


client = TestClient(app)


def create_product(headers, **overrides):
    data = {"name": "Installatie", "description": "Per uur", "price": "45.50", "stock": 3}
    data.update(overrides)
    response = client.post("/products", json=data, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestProductsAPI:

    def test_create(self, headers):
        product = create_product(headers)

        assert product["name"] == "Installatie"
        assert Decimal(product["price"]) == Decimal("45.50")
        assert product["stock"] == 3

    def test_negative_price_rejected(self, headers):
        response = client.post("/products", json={"name": "Gratis", "price": "-1"}, headers=headers)

        assert response.status_code == 400
        assert response.json()["kind"] == "validation_error"

    def test_stock_may_be_negative(self, headers):
        product = create_product(headers, stock=-4)

        assert product["stock"] == -4

    def test_update_only_sent_fields(self, headers):
        product = create_product(headers)

        response = client.put(f"/products/{product['id']}", json={"price": "50.00"}, headers=headers)

        assert response.status_code == 200
        assert Decimal(response.json()["price"]) == Decimal("50.00")
        assert response.json()["description"] == "Per uur"

    def test_update_rejects_null_price(self, headers):
        product = create_product(headers)

        response = client.put(f"/products/{product['id']}", json={"price": None}, headers=headers)

        assert response.status_code == 400

    def test_scoped_by_tenant(self, headers, other_headers):
        product = create_product(headers)

        assert client.get(f"/products/{product['id']}", headers=other_headers).status_code == 404
        assert client.get("/products", headers=other_headers).json() == []

    def test_delete_unused_product(self, headers):
        product = create_product(headers)

        assert client.delete(f"/products/{product['id']}", headers=headers).status_code == 200
        assert client.get(f"/products/{product['id']}", headers=headers).status_code == 404

    def test_delete_product_in_use_is_refused(self, headers, customer):
        product = create_product(headers)
        client.post("/quotes", json={
            "customer_id": str(customer.id),
            "quote_number": "Q-1",
            "items": [{"product_id": product["id"], "quantity": 2}],
        }, headers=headers)

        response = client.delete(f"/products/{product['id']}", headers=headers)

        assert response.status_code == 400
        assert client.get(f"/products/{product['id']}", headers=headers).status_code == 200


class TestPaging:

    def test_default_page_size(self, headers, tenant_id, db_session):
        products = TenantRepository(db_session, Product)
        for i in range(settings.DEFAULT_PAGE_SIZE + 2):
            products.create(tenant_id, {"name": f"Artikel {i:02d}", "price": Decimal("1.00")})
        db_session.commit()

        first = client.get("/products", headers=headers).json()
        rest = client.get(
            "/products", params={"offset": settings.DEFAULT_PAGE_SIZE}, headers=headers
        ).json()

        assert len(first) == settings.DEFAULT_PAGE_SIZE
        assert len(rest) == 2
        assert not {p["id"] for p in first} & {p["id"] for p in rest}

    def test_explicit_limit(self, headers):
        for name in ("Een", "Twee", "Drie"):
            create_product(headers, name=name)

        response = client.get("/products", params={"limit": 2}, headers=headers)

        assert [p["name"] for p in response.json()] == ["Drie", "Twee"]

    def test_limit_above_maximum_is_rejected(self, headers):
        response = client.get("/products", params={"limit": settings.MAX_PAGE_SIZE + 1}, headers=headers)

        assert response.status_code == 400
        assert response.json()["kind"] == "validation_error"
