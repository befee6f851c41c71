"""
Configuración común de pytest

La base de datos de pruebas es SQLite en memoria: las variables de entorno se
fijan antes de importar la aplicación para que el engine se cree con ella.
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"

import pytest
from decimal import Decimal
from uuid import uuid4

from app.database.database import Base, SessionLocal, engine
from app.common.middleware import TENANT_HEADER

import app.main  # noqa: F401  registra todos los modelos


@pytest.fixture(autouse=True)
def reset_database():
    """Esquema limpio para cada test"""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def tenant_id():
    return uuid4()


@pytest.fixture
def other_tenant_id():
    return uuid4()


@pytest.fixture
def headers(tenant_id):
    return {TENANT_HEADER: str(tenant_id)}


@pytest.fixture
def other_headers(other_tenant_id):
    return {TENANT_HEADER: str(other_tenant_id)}


@pytest.fixture
def customer(db_session, tenant_id):
    from app.modules.customers.schemas import CustomerCreate
    from app.modules.customers.service import CustomerService

    return CustomerService(db_session).create_customer(
        CustomerCreate(company_name="Bakkerij Jansen B.V.", email="info@jansen.nl"), tenant_id
    )


@pytest.fixture
def product(db_session, tenant_id):
    from app.modules.products.schemas import ProductCreate
    from app.modules.products.service import create_product

    return create_product(
        db_session, ProductCreate(name="Consultoría", price=Decimal("100.00"), stock=10), tenant_id
    )
