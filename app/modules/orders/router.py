from fastapi import APIRouter, status, Query
from typing import List, Optional
from uuid import UUID

from app.core.config import settings
from app.dependencies.dbDependecies import db_dependency
from app.dependencies.tenantDependencies import TenantId
from app.modules.documents.conversion import ConversionService
from app.modules.documents.lifecycle import OrderStatus
from app.modules.invoices.schemas import InvoiceDetail
from app.modules.orders.service import OrderService
from app.modules.orders.schemas import (
    OrderCreate, OrderUpdate, OrderOut, OrderDetail, ConvertOrderRequest
)

orders_router = APIRouter(prefix="/orders", tags=["Orders"])


@orders_router.get("", response_model=List[OrderOut])
def list_orders(
    db: db_dependency,
    tenant_id: TenantId,
    status: Optional[OrderStatus] = Query(None, description="Filtrar por estado"),
    customer_id: Optional[UUID] = Query(None, description="Filtrar por cliente"),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0)
):
    """Listar pedidos, más recientes primero"""
    return OrderService(db).list_documents(tenant_id, status, customer_id, limit, offset)


@orders_router.post("", response_model=OrderDetail, status_code=status.HTTP_201_CREATED)
def create_order(order_data: OrderCreate, db: db_dependency, tenant_id: TenantId):
    return OrderService(db).create_document(order_data, tenant_id)


@orders_router.get("/{order_id}", response_model=OrderDetail)
def get_order(order_id: UUID, db: db_dependency, tenant_id: TenantId):
    return OrderService(db).get_document(order_id, tenant_id)


@orders_router.put("/{order_id}", response_model=OrderDetail)
def update_order(order_id: UUID, order_update: OrderUpdate, db: db_dependency, tenant_id: TenantId):
    """
    Actualizar un pedido

    El estado `completed` solo se alcanza convirtiendo el pedido en factura.
    """
    return OrderService(db).update_document(order_id, order_update, tenant_id)


@orders_router.delete("/{order_id}")
def delete_order(order_id: UUID, db: db_dependency, tenant_id: TenantId):
    OrderService(db).delete_document(order_id, tenant_id)
    return {"success": True}


@orders_router.post(
    "/{order_id}/convert-to-invoice",
    response_model=InvoiceDetail,
    status_code=status.HTTP_201_CREATED
)
def convert_order_to_invoice(
    order_id: UUID,
    db: db_dependency,
    tenant_id: TenantId,
    request: Optional[ConvertOrderRequest] = None
):
    """
    Convertir un pedido en factura

    La factura nace en `draft` con vencimiento a 30 días y el pedido pasa a
    `completed`. Todo en una transacción.
    """
    invoice_number = request.invoice_number if request else None
    return ConversionService(db).convert_order_to_invoice(order_id, tenant_id, invoice_number)
