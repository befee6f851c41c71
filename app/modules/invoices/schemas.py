"""
Esquemas Pydantic para el módulo de Facturación
"""

from pydantic import Field
from typing import Optional, List
from uuid import UUID
from datetime import date

from app.modules.documents.lifecycle import InvoiceStatus
from app.modules.documents.schemas import (
    DocumentCreateBase, DocumentUpdateBase, DocumentOutBase, DocumentBreakdown, DocumentItemOut
)


class InvoiceCreate(DocumentCreateBase):
    invoice_number: str = Field(..., min_length=1, max_length=50)
    invoice_date: Optional[date] = None
    due_date: Optional[date] = Field(None, description="Por defecto invoice_date + 30 días")
    status: Optional[InvoiceStatus] = None


class InvoiceUpdate(DocumentUpdateBase):
    invoice_number: Optional[str] = Field(None, min_length=1, max_length=50)
    invoice_date: Optional[date] = None
    due_date: Optional[date] = None
    status: Optional[InvoiceStatus] = None


class InvoiceOut(DocumentOutBase):
    invoice_number: str
    invoice_date: date
    due_date: Optional[date] = None
    status: InvoiceStatus
    order_id: Optional[UUID] = None


class InvoiceDetail(InvoiceOut, DocumentBreakdown):
    invoice_items: List[DocumentItemOut] = []
