"""
Esquemas Pydantic compartidos por los documentos comerciales

Los importes de los ítems no se validan aquí: cantidad y precio llegan tal
cual al servicio, que responde con InvalidItem.
"""

from pydantic import BaseModel, Field
from decimal import Decimal
from typing import Optional, List
from uuid import UUID
from datetime import datetime

from app.modules.customers.schemas import CustomerSummary
from app.modules.products.schemas import ProductSummary


# ===== ITEM SCHEMAS =====

class DocumentItemCreate(BaseModel):
    product_id: UUID
    quantity: int
    price: Optional[Decimal] = Field(
        None, max_digits=15, decimal_places=2,
        description="Precio unitario; por defecto el precio actual del producto"
    )


class DocumentItemOut(BaseModel):
    id: UUID
    product_id: UUID
    quantity: int
    price: Decimal
    total: Decimal
    product: Optional[ProductSummary] = None

    class Config:
        from_attributes = True


# ===== DOCUMENT SCHEMAS =====

class DocumentCreateBase(BaseModel):
    customer_id: UUID
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    tax_percentage: Optional[Decimal] = Field(None, ge=0, le=100)
    discount_percentage: Optional[Decimal] = Field(None, ge=0, le=100)
    notes: Optional[str] = None
    items: List[DocumentItemCreate] = Field(..., min_length=1)


class DocumentUpdateBase(BaseModel):
    """Máscara de campos: solo se aplican los enviados"""
    customer_id: Optional[UUID] = None
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    tax_percentage: Optional[Decimal] = Field(None, ge=0, le=100)
    discount_percentage: Optional[Decimal] = Field(None, ge=0, le=100)
    notes: Optional[str] = None
    items: Optional[List[DocumentItemCreate]] = Field(
        None, min_length=1, description="Si se envía, reemplaza todos los ítems"
    )
    version: Optional[int] = Field(None, description="Versión leída por el cliente")


class DocumentOutBase(BaseModel):
    id: UUID
    customer_id: UUID
    currency: str
    tax_percentage: Decimal
    discount_percentage: Decimal
    total: Decimal
    notes: Optional[str] = None
    version: int
    created_at: datetime
    updated_at: datetime
    customer: Optional[CustomerSummary] = None

    class Config:
        from_attributes = True


class DocumentBreakdown(BaseModel):
    """Desglose calculado a partir de los ítems"""
    subtotal: Decimal
    discount_amount: Decimal
    tax_amount: Decimal
