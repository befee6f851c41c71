"""
Tests para el módulo de Notas
"""

import pytest
from fastapi.testclient import TestClient
from uuid import uuid4

from app.main import app


client = TestClient(app)


@pytest.fixture
def customer_id(headers):
    response = client.post("/customers", json={"name": "Klant"}, headers=headers)
    return response.json()["id"]


def create_note(headers, customer_id, title="Bel", content="Terugbellen"):
    response = client.post(
        "/notes", json={"customer_id": customer_id, "title": title, "content": content}, headers=headers
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestNotesAPI:

    def test_create_and_get(self, headers, customer_id):
        note = create_note(headers, customer_id)

        response = client.get(f"/notes/{note['id']}", headers=headers)

        assert response.status_code == 200
        assert response.json()["title"] == "Bel"
        assert response.json()["customer_id"] == customer_id

    def test_title_and_content_required(self, headers, customer_id):
        response = client.post("/notes", json={"customer_id": customer_id, "title": "Bel"}, headers=headers)

        assert response.status_code == 400

    def test_unknown_customer_is_not_found(self, headers):
        response = client.post(
            "/notes", json={"customer_id": str(uuid4()), "title": "Bel", "content": "x"}, headers=headers
        )

        assert response.status_code == 404

    def test_filter_by_customer(self, headers, customer_id):
        other = client.post("/customers", json={"name": "Ander"}, headers=headers).json()["id"]
        first = create_note(headers, customer_id, title="Eerste")
        create_note(headers, other, title="Ander")
        second = create_note(headers, customer_id, title="Tweede")

        response = client.get("/notes", params={"customer_id": customer_id}, headers=headers)

        assert [n["id"] for n in response.json()] == [second["id"], first["id"]]
        assert len(client.get("/notes", headers=headers).json()) == 3

    def test_update(self, headers, customer_id):
        note = create_note(headers, customer_id)

        response = client.put(f"/notes/{note['id']}", json={"content": "Offerte sturen"}, headers=headers)

        assert response.status_code == 200
        assert response.json()["content"] == "Offerte sturen"
        assert response.json()["title"] == "Bel"

    def test_update_rejects_null(self, headers, customer_id):
        note = create_note(headers, customer_id)

        response = client.put(f"/notes/{note['id']}", json={"title": None}, headers=headers)

        assert response.status_code == 400

    def test_other_tenant_cannot_see_or_delete(self, headers, other_headers, customer_id):
        note = create_note(headers, customer_id)

        assert client.get(f"/notes/{note['id']}", headers=other_headers).status_code == 404
        assert client.delete(f"/notes/{note['id']}", headers=other_headers).status_code == 404
        assert client.delete(f"/notes/{note['id']}", headers=headers).status_code == 200
        assert client.get(f"/notes/{note['id']}", headers=headers).status_code == 404
