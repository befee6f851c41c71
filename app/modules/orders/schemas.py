"""
Esquemas Pydantic para el módulo de Pedidos
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from uuid import UUID
from datetime import date

from app.modules.documents.lifecycle import OrderStatus
from app.modules.documents.schemas import (
    DocumentCreateBase, DocumentUpdateBase, DocumentOutBase, DocumentBreakdown, DocumentItemOut
)


class OrderCreate(DocumentCreateBase):
    order_number: str = Field(..., min_length=1, max_length=50)
    order_date: Optional[date] = None
    status: Optional[OrderStatus] = None


class OrderUpdate(DocumentUpdateBase):
    order_number: Optional[str] = Field(None, min_length=1, max_length=50)
    order_date: Optional[date] = None
    status: Optional[OrderStatus] = None


class OrderOut(DocumentOutBase):
    order_number: str
    order_date: date
    status: OrderStatus
    quote_id: Optional[UUID] = None
    converted_to_invoice_id: Optional[UUID] = None


class OrderDetail(OrderOut, DocumentBreakdown):
    order_items: List[DocumentItemOut] = []


class ConvertOrderRequest(BaseModel):
    invoice_number: Optional[str] = Field(
        None, min_length=1, max_length=50,
        description="Número de la factura; por defecto se deriva del número del pedido"
    )
