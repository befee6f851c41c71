"""
Tests para el módulo de Clientes

Cubren:
- CRUD con aislamiento multi-tenant
- Nombre visible (empresa, nombre libre, persona)
- Validación de IBAN y correo
- Personas de contacto como sub-recurso
- Borrado explícito de personas de contacto y notas
- Bloqueo del borrado de clientes con documentos
"""

import pytest
from fastapi.testclient import TestClient
from uuid import uuid4

from app.core.exceptions import NotFound
from app.main import app
from app.common.validators import normalize_iban, validate_iban
from app.modules.customers.models import Customer, UNNAMED_CUSTOMER
from app.modules.customers.service import CustomerService


client = TestClient(app)


# ===== FIXTURES =====

@pytest.fixture
def sample_company_data():
    """Datos de ejemplo de un cliente empresa"""
    return {
        "company_name": "Bakkerij Jansen B.V.",
        "email": "info@jansen.nl",
        "phone": "020-1234567",
        "street_address": "Dorpsstraat 1",
        "postal_code": "1011 AB",
        "city": "Amsterdam",
        "iban": "nl91 abna 0417 1643 00",
        "kvk": "12345678",
        "btw_number": "NL123456789B01",
        "debtor_number": "D-1001",
    }


@pytest.fixture
def sample_person_data():
    return {
        "first_name": "Anna",
        "middle_name": "van",
        "last_name": "Dijk",
        "email": "anna@example.nl",
        "date_of_birth": "1990-05-17",
    }


def create_customer(headers, data):
    response = client.post("/customers", json=data, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


# ===== TESTS DE VALIDADORES =====

class TestIbanValidation:

    def test_valid_iban(self):
        assert validate_iban("NL91ABNA0417164300") is True
        assert validate_iban("GB82 WEST 1234 5698 7654 32") is True

    def test_invalid_checksum(self):
        assert validate_iban("NL92ABNA0417164300") is False

    def test_invalid_format(self):
        assert validate_iban("1234") is False
        assert validate_iban("") is False

    def test_normalize(self):
        assert normalize_iban(" nl91 abna 0417 1643 00 ") == "NL91ABNA0417164300"


# ===== TESTS DE MODELO =====

class TestDisplayName:

    def test_company_name_first(self):
        customer = Customer(company_name="Jansen B.V.", name="Jan", first_name="Jan")
        assert customer.display_name == "Jansen B.V."

    def test_free_name_second(self):
        customer = Customer(name="Klant Jan", first_name="Jan", last_name="Jansen")
        assert customer.display_name == "Klant Jan"

    def test_person_name(self):
        customer = Customer(first_name="Anna", middle_name="van", last_name="Dijk")
        assert customer.display_name == "Anna van Dijk"

    def test_unnamed(self):
        assert Customer().display_name == UNNAMED_CUSTOMER


# ===== TESTS DE API =====

class TestCustomersAPI:

    def test_create_company(self, headers, tenant_id, sample_company_data):
        body = create_customer(headers, sample_company_data)

        assert body["display_name"] == "Bakkerij Jansen B.V."
        assert body["iban"] == "NL91ABNA0417164300"
        assert "tenant_id" not in body

    def test_create_person(self, headers, sample_person_data):
        body = create_customer(headers, sample_person_data)

        assert body["display_name"] == "Anna van Dijk"
        assert body["date_of_birth"] == "1990-05-17"

    def test_create_requires_a_name(self, headers):
        response = client.post("/customers", json={"email": "x@example.nl"}, headers=headers)

        assert response.status_code == 400
        assert response.json()["kind"] == "validation_error"

    def test_create_rejects_invalid_iban(self, headers):
        response = client.post(
            "/customers", json={"name": "Klant", "iban": "NL00ABNA0417164300"}, headers=headers
        )

        assert response.status_code == 400

    def test_create_rejects_invalid_email(self, headers):
        response = client.post("/customers", json={"name": "Klant", "email": "geen-email"}, headers=headers)

        assert response.status_code == 400

    def test_create_ignores_tenant_in_payload(self, headers, other_headers):
        body = create_customer(headers, {"name": "Klant", "tenant_id": str(uuid4())})

        assert client.get(f"/customers/{body['id']}", headers=headers).status_code == 200
        assert client.get(f"/customers/{body['id']}", headers=other_headers).status_code == 404

    def test_list_newest_first_and_scoped(self, headers, other_headers):
        create_customer(headers, {"name": "Eerste"})
        create_customer(headers, {"name": "Tweede"})
        create_customer(other_headers, {"name": "Ander"})

        response = client.get("/customers", headers=headers)

        assert response.status_code == 200
        assert [c["display_name"] for c in response.json()] == ["Tweede", "Eerste"]

    def test_get_from_other_tenant_is_not_found(self, headers, other_headers, sample_company_data):
        body = create_customer(headers, sample_company_data)

        response = client.get(f"/customers/{body['id']}", headers=other_headers)

        assert response.status_code == 404
        assert response.json() == {"kind": "not_found", "detail": "Cliente no encontrado"}

    def test_update_only_sent_fields(self, headers, sample_company_data):
        body = create_customer(headers, sample_company_data)

        response = client.put(f"/customers/{body['id']}", json={"city": "Utrecht"}, headers=headers)

        assert response.status_code == 200
        updated = response.json()
        assert updated["city"] == "Utrecht"
        assert updated["email"] == "info@jansen.nl"

    def test_update_cannot_remove_every_name(self, headers):
        body = create_customer(headers, {"name": "Klant"})

        response = client.put(f"/customers/{body['id']}", json={"name": None}, headers=headers)

        assert response.status_code == 400

    def test_update_other_tenant_is_not_found(self, headers, other_headers):
        body = create_customer(headers, {"name": "Klant"})

        response = client.put(f"/customers/{body['id']}", json={"name": "Gekaapt"}, headers=other_headers)

        assert response.status_code == 404
        assert client.get(f"/customers/{body['id']}", headers=headers).json()["name"] == "Klant"

    def test_delete_removes_contacts_and_notes(self, headers, sample_company_data):
        body = create_customer(headers, sample_company_data)
        client.post(
            f"/customers/{body['id']}/contact-persons",
            json={"first_name": "Piet", "last_name": "Jansen"},
            headers=headers
        )
        client.post(
            "/notes", json={"customer_id": body["id"], "title": "Bel", "content": "Terugbellen"}, headers=headers
        )

        response = client.delete(f"/customers/{body['id']}", headers=headers)

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert client.get(f"/customers/{body['id']}", headers=headers).status_code == 404
        assert client.get("/notes", headers=headers).json() == []

    def test_delete_with_documents_is_refused(self, headers, customer, product):
        client.post("/quotes", json={
            "customer_id": str(customer.id),
            "quote_number": "Q-1",
            "items": [{"product_id": str(product.id), "quantity": 1}],
        }, headers=headers)

        response = client.delete(f"/customers/{customer.id}", headers=headers)

        assert response.status_code == 400
        assert client.get(f"/customers/{customer.id}", headers=headers).status_code == 200


class TestCustomerService:

    def test_wrong_tenant_is_not_found(self, db_session, customer, other_tenant_id):
        with pytest.raises(NotFound):
            CustomerService(db_session).get_customer(customer.id, other_tenant_id)


class TestContactPersonsAPI:

    def test_crud(self, headers, sample_company_data):
        customer = create_customer(headers, sample_company_data)
        base = f"/customers/{customer['id']}/contact-persons"

        created = client.post(
            base, json={"first_name": "Piet", "last_name": "Jansen", "email": "piet@jansen.nl"}, headers=headers
        )
        assert created.status_code == 201
        contact_id = created.json()["id"]
        assert created.json()["customer_id"] == customer["id"]

        updated = client.put(f"{base}/{contact_id}", json={"phone": "06-12345678"}, headers=headers)
        assert updated.status_code == 200
        assert updated.json()["phone"] == "06-12345678"
        assert updated.json()["first_name"] == "Piet"

        listed = client.get(base, headers=headers)
        assert [c["id"] for c in listed.json()] == [contact_id]

        detail = client.get(f"/customers/{customer['id']}", headers=headers).json()
        assert [c["id"] for c in detail["contact_persons"]] == [contact_id]

        assert client.delete(f"{base}/{contact_id}", headers=headers).status_code == 200
        assert client.get(f"{base}/{contact_id}", headers=headers).status_code == 404

    def test_requires_first_and_last_name(self, headers):
        customer = create_customer(headers, {"name": "Klant"})

        response = client.post(
            f"/customers/{customer['id']}/contact-persons", json={"first_name": "Piet"}, headers=headers
        )

        assert response.status_code == 400

    def test_contact_of_other_customer_is_not_found(self, headers):
        first = create_customer(headers, {"name": "Eerste"})
        second = create_customer(headers, {"name": "Tweede"})
        contact = client.post(
            f"/customers/{first['id']}/contact-persons",
            json={"first_name": "Piet", "last_name": "Jansen"},
            headers=headers
        ).json()

        response = client.get(f"/customers/{second['id']}/contact-persons/{contact['id']}", headers=headers)

        assert response.status_code == 404

    def test_unknown_customer_is_not_found(self, headers):
        response = client.post(
            f"/customers/{uuid4()}/contact-persons",
            json={"first_name": "Piet", "last_name": "Jansen"},
            headers=headers
        )

        assert response.status_code == 404
