from fastapi import APIRouter, status, Query
from typing import List
from uuid import UUID

from app.core.config import settings
from app.dependencies.dbDependecies import db_dependency
from app.dependencies.tenantDependencies import TenantId
from app.modules.customers.service import CustomerService
from app.modules.customers.schemas import (
    CustomerCreate, CustomerUpdate, CustomerOut, CustomerDetail,
    ContactPersonCreate, ContactPersonUpdate, ContactPersonOut
)

customers_router = APIRouter(prefix="/customers", tags=["Customers"])


@customers_router.get("", response_model=List[CustomerOut])
def list_customers(
    db: db_dependency,
    tenant_id: TenantId,
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0)
):
    """Listar clientes del tenant, más recientes primero"""
    return CustomerService(db).list_customers(tenant_id, limit, offset)


@customers_router.post("", response_model=CustomerOut, status_code=status.HTTP_201_CREATED)
def create_customer(customer_data: CustomerCreate, db: db_dependency, tenant_id: TenantId):
    """
    Crear un cliente

    Requiere al menos uno de: name, first_name, company_name.
    """
    return CustomerService(db).create_customer(customer_data, tenant_id)


@customers_router.get("/{customer_id}", response_model=CustomerDetail)
def get_customer(customer_id: UUID, db: db_dependency, tenant_id: TenantId):
    return CustomerService(db).get_customer(customer_id, tenant_id)


@customers_router.put("/{customer_id}", response_model=CustomerOut)
def update_customer(customer_id: UUID, customer_update: CustomerUpdate, db: db_dependency, tenant_id: TenantId):
    return CustomerService(db).update_customer(customer_id, customer_update, tenant_id)


@customers_router.delete("/{customer_id}")
def delete_customer(customer_id: UUID, db: db_dependency, tenant_id: TenantId):
    """
    Eliminar un cliente

    Elimina también sus personas de contacto y notas. Falla si el cliente
    tiene cotizaciones, pedidos o facturas.
    """
    CustomerService(db).delete_customer(customer_id, tenant_id)
    return {"success": True}


# ===== CONTACT PERSONS =====

@customers_router.get("/{customer_id}/contact-persons", response_model=List[ContactPersonOut])
def list_contact_persons(customer_id: UUID, db: db_dependency, tenant_id: TenantId):
    return CustomerService(db).list_contact_persons(customer_id, tenant_id)


@customers_router.post(
    "/{customer_id}/contact-persons",
    response_model=ContactPersonOut,
    status_code=status.HTTP_201_CREATED
)
def create_contact_person(
    customer_id: UUID, contact_data: ContactPersonCreate, db: db_dependency, tenant_id: TenantId
):
    return CustomerService(db).create_contact_person(customer_id, contact_data, tenant_id)


@customers_router.get("/{customer_id}/contact-persons/{contact_id}", response_model=ContactPersonOut)
def get_contact_person(customer_id: UUID, contact_id: UUID, db: db_dependency, tenant_id: TenantId):
    return CustomerService(db).get_contact_person(customer_id, contact_id, tenant_id)


@customers_router.put("/{customer_id}/contact-persons/{contact_id}", response_model=ContactPersonOut)
def update_contact_person(
    customer_id: UUID,
    contact_id: UUID,
    contact_update: ContactPersonUpdate,
    db: db_dependency,
    tenant_id: TenantId
):
    return CustomerService(db).update_contact_person(customer_id, contact_id, contact_update, tenant_id)


@customers_router.delete("/{customer_id}/contact-persons/{contact_id}")
def delete_contact_person(customer_id: UUID, contact_id: UUID, db: db_dependency, tenant_id: TenantId):
    CustomerService(db).delete_contact_person(customer_id, contact_id, tenant_id)
    return {"success": True}
