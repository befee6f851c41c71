"""
Esquemas Pydantic para el módulo de Cotizaciones
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from uuid import UUID
from datetime import date

from app.modules.documents.lifecycle import QuoteStatus
from app.modules.documents.schemas import (
    DocumentCreateBase, DocumentUpdateBase, DocumentOutBase, DocumentBreakdown, DocumentItemOut
)


class QuoteCreate(DocumentCreateBase):
    quote_number: str = Field(..., min_length=1, max_length=50)
    quote_date: Optional[date] = None
    valid_until: Optional[date] = None
    status: Optional[QuoteStatus] = None


class QuoteUpdate(DocumentUpdateBase):
    quote_number: Optional[str] = Field(None, min_length=1, max_length=50)
    quote_date: Optional[date] = None
    valid_until: Optional[date] = None
    status: Optional[QuoteStatus] = None


class QuoteOut(DocumentOutBase):
    quote_number: str
    quote_date: date
    valid_until: Optional[date] = None
    status: QuoteStatus
    converted_to_order_id: Optional[UUID] = None


class QuoteDetail(QuoteOut, DocumentBreakdown):
    quote_items: List[DocumentItemOut] = []


class ConvertQuoteRequest(BaseModel):
    order_number: Optional[str] = Field(
        None, min_length=1, max_length=50,
        description="Número del pedido; por defecto se deriva del número de la cotización"
    )
