from fastapi import APIRouter, status, Query
from typing import List, Optional
from uuid import UUID

from app.core.config import settings
from app.dependencies.dbDependecies import db_dependency
from app.dependencies.tenantDependencies import TenantId
from app.modules.documents.conversion import ConversionService
from app.modules.documents.lifecycle import QuoteStatus
from app.modules.orders.schemas import OrderDetail
from app.modules.quotes.service import QuoteService
from app.modules.quotes.schemas import (
    QuoteCreate, QuoteUpdate, QuoteOut, QuoteDetail, ConvertQuoteRequest
)

quotes_router = APIRouter(prefix="/quotes", tags=["Quotes"])


@quotes_router.get("", response_model=List[QuoteOut])
def list_quotes(
    db: db_dependency,
    tenant_id: TenantId,
    status: Optional[QuoteStatus] = Query(None, description="Filtrar por estado"),
    customer_id: Optional[UUID] = Query(None, description="Filtrar por cliente"),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0)
):
    """Listar cotizaciones, más recientes primero"""
    return QuoteService(db).list_documents(tenant_id, status, customer_id, limit, offset)


@quotes_router.post("", response_model=QuoteDetail, status_code=status.HTTP_201_CREATED)
def create_quote(quote_data: QuoteCreate, db: db_dependency, tenant_id: TenantId):
    """
    Crear una cotización con sus ítems

    Los ítems sin precio toman el precio actual del producto.
    """
    return QuoteService(db).create_document(quote_data, tenant_id)


@quotes_router.get("/{quote_id}", response_model=QuoteDetail)
def get_quote(quote_id: UUID, db: db_dependency, tenant_id: TenantId):
    return QuoteService(db).get_document(quote_id, tenant_id)


@quotes_router.put("/{quote_id}", response_model=QuoteDetail)
def update_quote(quote_id: UUID, quote_update: QuoteUpdate, db: db_dependency, tenant_id: TenantId):
    """
    Actualizar una cotización

    Si se envía `items`, reemplaza todos los ítems. El estado `approved`
    solo se alcanza convirtiendo la cotización en pedido.
    """
    return QuoteService(db).update_document(quote_id, quote_update, tenant_id)


@quotes_router.delete("/{quote_id}")
def delete_quote(quote_id: UUID, db: db_dependency, tenant_id: TenantId):
    QuoteService(db).delete_document(quote_id, tenant_id)
    return {"success": True}


@quotes_router.post(
    "/{quote_id}/convert-to-order",
    response_model=OrderDetail,
    status_code=status.HTTP_201_CREATED
)
def convert_quote_to_order(
    quote_id: UUID,
    db: db_dependency,
    tenant_id: TenantId,
    request: Optional[ConvertQuoteRequest] = None
):
    """
    Convertir una cotización en pedido

    Copia cliente, moneda, porcentajes, notas e ítems (con sus precios) a un
    pedido nuevo y marca la cotización como `approved`. Todo en una transacción.
    """
    order_number = request.order_number if request else None
    return ConversionService(db).convert_quote_to_order(quote_id, tenant_id, order_number)
