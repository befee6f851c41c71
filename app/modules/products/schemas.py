from pydantic import BaseModel, Field
from decimal import Decimal
from typing import Optional
from uuid import UUID
from datetime import datetime


class ProductBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    price: Decimal = Field(..., ge=0, max_digits=15, decimal_places=2, description="Precio de venta")
    stock: int = Field(0, description="Existencias, puede ser negativo")
    image_url: Optional[str] = Field(None, max_length=500)


class ProductCreate(ProductBase):
    pass


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0, max_digits=15, decimal_places=2)
    stock: Optional[int] = None
    image_url: Optional[str] = Field(None, max_length=500)


class ProductOut(ProductBase):
    id: UUID
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ProductSummary(BaseModel):
    """Proyección del producto embebida en los ítems de documentos"""
    id: UUID
    name: str
    description: Optional[str] = None

    class Config:
        from_attributes = True
