"""
Esquemas Pydantic para el módulo de Clientes
"""

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator
from typing import Optional, List
from uuid import UUID
from datetime import date, datetime

from app.common.validators import normalize_iban, validate_iban


def _clean_iban(v):
    if v is None or not v.strip():
        return None
    if not validate_iban(v):
        raise ValueError('IBAN inválido')
    return normalize_iban(v)


# ===== CUSTOMER SCHEMAS =====

class CustomerBase(BaseModel):
    name: Optional[str] = Field(None, max_length=200)
    first_name: Optional[str] = Field(None, max_length=100)
    middle_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    gender: Optional[str] = Field(None, max_length=20)
    date_of_birth: Optional[date] = None
    company_name: Optional[str] = Field(None, max_length=200)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = None
    street_address: Optional[str] = Field(None, max_length=200)
    postal_code: Optional[str] = Field(None, max_length=20)
    city: Optional[str] = Field(None, max_length=100)
    iban: Optional[str] = Field(None, max_length=42)
    kvk: Optional[str] = Field(None, max_length=20)
    btw_number: Optional[str] = Field(None, max_length=30)
    debtor_number: Optional[str] = Field(None, max_length=30)

    @field_validator('iban')
    @classmethod
    def validate_iban_field(cls, v):
        return _clean_iban(v)

    @field_validator('date_of_birth')
    @classmethod
    def validate_date_of_birth(cls, v):
        if v and v > date.today():
            raise ValueError('La fecha de nacimiento no puede estar en el futuro')
        return v


class CustomerCreate(CustomerBase):

    @model_validator(mode='after')
    def validate_identity(self):
        if not any((self.name, self.first_name, self.company_name)):
            raise ValueError('Se requiere nombre, nombre de pila o nombre de empresa')
        return self


class CustomerUpdate(CustomerBase):
    """Todos los campos opcionales; solo se aplican los enviados"""
    pass


class CustomerOut(CustomerBase):
    id: UUID
    display_name: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CustomerSummary(BaseModel):
    """Proyección del cliente embebida en documentos"""
    id: UUID
    display_name: str
    email: Optional[str] = None

    class Config:
        from_attributes = True


# ===== CONTACT PERSON SCHEMAS =====

class ContactPersonBase(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    middle_name: Optional[str] = Field(None, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    gender: Optional[str] = Field(None, max_length=20)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)


class ContactPersonCreate(ContactPersonBase):
    pass


class ContactPersonUpdate(BaseModel):
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    middle_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    gender: Optional[str] = Field(None, max_length=20)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)

    @field_validator('first_name', 'last_name')
    @classmethod
    def validate_required_names(cls, v):
        if v is None:
            raise ValueError('El nombre y el apellido no pueden quedar vacíos')
        return v


class ContactPersonOut(ContactPersonBase):
    id: UUID
    customer_id: UUID
    email: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CustomerDetail(CustomerOut):
    contact_persons: List[ContactPersonOut] = []
