"""
Tests para el repositorio por tenant, las transacciones y el middleware de tenant
"""

import logging
import pytest
from decimal import Decimal
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError
from uuid import uuid4

from app.common.repository import TenantRepository
from app.common.transaction import atomic
from app.core.exceptions import ConcurrentModification, NotFound, StorageError, ValidationError
from app.main import app
from app.modules.customers.models import Customer
from app.modules.documents.lifecycle import QuoteStatus
from app.modules.documents.schemas import DocumentItemCreate
from app.modules.products.models import Product
from app.modules.quotes.models import Quote
from app.modules.quotes.schemas import QuoteCreate
from app.modules.quotes.service import QuoteService


client = TestClient(app)


@pytest.fixture
def products(db_session):
    return TenantRepository(db_session, Product, "Producto no encontrado")


@pytest.fixture
def quote(db_session, tenant_id, customer, product):
    return QuoteService(db_session).create_document(QuoteCreate(
        customer_id=customer.id,
        quote_number="Q-1",
        items=[DocumentItemCreate(product_id=product.id, quantity=1)],
    ), tenant_id)


class TestTenantRepository:

    def test_create_stamps_tenant_and_timestamps(self, db_session, products, tenant_id, other_tenant_id):
        product = products.create(tenant_id, {
            "name": "Licencia", "price": Decimal("10.00"), "tenant_id": other_tenant_id
        })
        db_session.commit()

        assert product.tenant_id == tenant_id
        assert product.created_at is not None
        assert product.updated_at is not None

    def test_get_from_other_tenant_is_not_found(self, db_session, products, tenant_id, other_tenant_id):
        product = products.create(tenant_id, {"name": "Licencia", "price": Decimal("10.00")})
        db_session.commit()

        with pytest.raises(NotFound) as exc_info:
            products.get(product.id, other_tenant_id)
        assert exc_info.value.message == "Producto no encontrado"

    def test_get_missing_is_not_found(self, products, tenant_id):
        with pytest.raises(NotFound):
            products.get(uuid4(), tenant_id)

    def test_list_is_scoped_and_newest_first(self, db_session, products, tenant_id, other_tenant_id):
        products.create(tenant_id, {"name": "Primero", "price": Decimal("1.00")})
        products.create(tenant_id, {"name": "Segundo", "price": Decimal("2.00")})
        products.create(other_tenant_id, {"name": "Ajeno", "price": Decimal("3.00")})
        db_session.commit()

        names = [p.name for p in products.list(tenant_id)]

        assert names == ["Segundo", "Primero"]

    def test_list_with_custom_order_and_filters(self, db_session, products, tenant_id):
        products.create(tenant_id, {"name": "B", "price": Decimal("1.00"), "stock": 5})
        products.create(tenant_id, {"name": "A", "price": Decimal("2.00"), "stock": 5})
        products.create(tenant_id, {"name": "C", "price": Decimal("3.00"), "stock": 0})
        db_session.commit()

        result = products.list(tenant_id, order_by=[Product.name.asc()], stock=5)

        assert [p.name for p in result] == ["A", "B"]
        assert products.count(tenant_id, stock=5) == 2
        # Un filtro None se ignora
        assert products.count(tenant_id, stock=None) == 3

    def test_update_refreshes_updated_at(self, db_session, products, tenant_id):
        product = products.create(tenant_id, {"name": "Licencia", "price": Decimal("10.00")})
        db_session.commit()
        before = product.updated_at

        products.update(product.id, tenant_id, {"price": Decimal("12.00"), "id": uuid4()})
        db_session.commit()

        assert product.price == Decimal("12.00")
        assert product.updated_at >= before

    def test_update_other_tenant_leaves_record_intact(self, db_session, products, tenant_id, other_tenant_id):
        product = products.create(tenant_id, {"name": "Licencia", "price": Decimal("10.00")})
        db_session.commit()

        with pytest.raises(NotFound):
            products.update(product.id, other_tenant_id, {"name": "Robado"})
        db_session.rollback()

        assert products.get(product.id, tenant_id).name == "Licencia"

    def test_delete_other_tenant_is_not_found(self, db_session, products, tenant_id, other_tenant_id):
        product = products.create(tenant_id, {"name": "Licencia", "price": Decimal("10.00")})
        db_session.commit()

        with pytest.raises(NotFound):
            products.delete(product.id, other_tenant_id)
        products.delete(product.id, tenant_id)
        db_session.commit()

        assert products.count(tenant_id) == 0


class TestAtomic:

    def test_commits_on_success(self, db_session, tenant_id):
        customers = TenantRepository(db_session, Customer)
        with atomic(db_session, "creating customer"):
            customers.create(tenant_id, {"name": "Klant"})

        db_session.rollback()
        assert customers.count(tenant_id) == 1

    def test_rolls_back_on_domain_error(self, db_session, tenant_id):
        customers = TenantRepository(db_session, Customer)
        with pytest.raises(ValidationError):
            with atomic(db_session, "creating customer"):
                customers.create(tenant_id, {"name": "Klant"})
                raise ValidationError("falla a mitad")

        assert customers.count(tenant_id) == 0

    def test_integrity_error_becomes_storage_error(self, db_session, tenant_id, quote):
        assert quote.status == QuoteStatus.DRAFT

        # approved sin back-link viola el CHECK estado/back-link
        with pytest.raises(StorageError) as exc_info:
            with atomic(db_session, "approving quote"):
                quote.status = QuoteStatus.APPROVED

        assert exc_info.value.message == "Error interno del servidor"
        stored = QuoteService(db_session).get_document(quote.id, tenant_id)
        assert stored.status == QuoteStatus.DRAFT
        assert stored.converted_to_order_id is None

    def test_lost_update_becomes_concurrent_modification(self, db_session, tenant_id, quote):
        assert quote.version == 1

        with pytest.raises(ConcurrentModification):
            with atomic(db_session, "updating quote"):
                # Otra transacción ya escribió la fila
                db_session.execute(
                    Quote.__table__.update().where(Quote.__table__.c.id == quote.id).values(version=7)
                )
                quote.notes = "Cambio perdido"
                db_session.flush()

        stored = QuoteService(db_session).get_document(quote.id, tenant_id)
        assert stored.notes is None
        assert stored.version == 1


class TestStorageErrorResponse:

    def test_storage_failure_is_generic_500(self, headers, tenant_id, db_session, monkeypatch):
        def failing_create(self, tenant_id, data):
            raise OperationalError("INSERT INTO customers", {}, Exception("disk I/O error"))

        monkeypatch.setattr(TenantRepository, "create", failing_create)

        response = client.post("/customers", json={"name": "Klant"}, headers=headers)

        assert response.status_code == 500
        assert response.json() == {"kind": "storage_error", "detail": "Error interno del servidor"}
        assert "disk" not in response.text
        assert "INSERT" not in response.text
        assert TenantRepository(db_session, Customer).count(tenant_id) == 0

    def test_domain_errors_are_not_logged_as_errors(self, headers, caplog):
        with caplog.at_level(logging.INFO):
            response = client.get(f"/customers/{uuid4()}", headers=headers)

        assert response.status_code == 404
        assert [r for r in caplog.records if r.levelno >= logging.ERROR] == []


class TestTenantMiddleware:

    def test_missing_header_is_unauthorized(self):
        response = client.get("/customers")

        assert response.status_code == 401
        assert response.json()["kind"] == "unauthorized"

    def test_invalid_header_is_unauthorized(self):
        response = client.get("/customers", headers={"X-Company-ID": "no-es-un-uuid"})

        assert response.status_code == 401

    def test_health_does_not_need_tenant(self):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_tenant_echoed_in_response(self, headers, tenant_id):
        response = client.get("/customers", headers=headers)

        assert response.status_code == 200
        assert response.headers["X-Tenant-ID"] == str(tenant_id)

    def test_method_not_allowed(self, headers):
        response = client.patch("/customers", headers=headers)

        assert response.status_code == 405
        assert response.json()["kind"] == "method_not_allowed"
