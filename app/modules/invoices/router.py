from fastapi import APIRouter, status, Query
from typing import List, Optional
from uuid import UUID

from app.core.config import settings
from app.dependencies.dbDependecies import db_dependency
from app.dependencies.tenantDependencies import TenantId
from app.modules.documents.lifecycle import InvoiceStatus
from app.modules.invoices.service import InvoiceService
from app.modules.invoices.schemas import InvoiceCreate, InvoiceUpdate, InvoiceOut, InvoiceDetail

invoices_router = APIRouter(prefix="/invoices", tags=["Invoices"])


@invoices_router.get("", response_model=List[InvoiceOut])
def list_invoices(
    db: db_dependency,
    tenant_id: TenantId,
    status: Optional[InvoiceStatus] = Query(None, description="Filtrar por estado"),
    customer_id: Optional[UUID] = Query(None, description="Filtrar por cliente"),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0)
):
    """Listar facturas, más recientes primero"""
    return InvoiceService(db).list_documents(tenant_id, status, customer_id, limit, offset)


@invoices_router.post("", response_model=InvoiceDetail, status_code=status.HTTP_201_CREATED)
def create_invoice(invoice_data: InvoiceCreate, db: db_dependency, tenant_id: TenantId):
    """
    Crear una factura con sus ítems

    Si no se envía due_date, vence a los 30 días de la fecha de factura.
    """
    return InvoiceService(db).create_document(invoice_data, tenant_id)


@invoices_router.get("/{invoice_id}", response_model=InvoiceDetail)
def get_invoice(invoice_id: UUID, db: db_dependency, tenant_id: TenantId):
    return InvoiceService(db).get_document(invoice_id, tenant_id)


@invoices_router.put("/{invoice_id}", response_model=InvoiceDetail)
def update_invoice(invoice_id: UUID, invoice_update: InvoiceUpdate, db: db_dependency, tenant_id: TenantId):
    """
    Actualizar una factura

    Una factura pagada o anulada ya no admite cambios de ítems ni importes.
    """
    return InvoiceService(db).update_document(invoice_id, invoice_update, tenant_id)


@invoices_router.delete("/{invoice_id}")
def delete_invoice(invoice_id: UUID, db: db_dependency, tenant_id: TenantId):
    InvoiceService(db).delete_document(invoice_id, tenant_id)
    return {"success": True}
