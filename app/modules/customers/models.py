"""
Modelos SQLAlchemy para el módulo de Clientes

- Customer: persona natural, empresa o ambos
- ContactPerson: personas de contacto de un cliente

Arquitectura multi-tenant: todas las tablas incluyen tenant_id.
Las personas de contacto y notas NO se borran en cascada desde la base de
datos; el servicio las elimina explícitamente.
"""

from app.database.database import Base
from sqlalchemy import Column, String, Date, ForeignKey, Text, Uuid
from sqlalchemy.orm import relationship
from app.common.mixins import BaseMixin

UNNAMED_CUSTOMER = "Cliente sin nombre"


class Customer(Base, BaseMixin):
    __tablename__ = "customers"

    # Nombre libre (legacy)
    name = Column(String(200), nullable=True, index=True)

    # Persona natural
    first_name = Column(String(100), nullable=True)
    middle_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    gender = Column(String(20), nullable=True)
    date_of_birth = Column(Date, nullable=True)

    # Empresa
    company_name = Column(String(200), nullable=True, index=True)

    # Contacto
    email = Column(String(100), nullable=True, index=True)
    phone = Column(String(50), nullable=True)

    # Dirección
    address = Column(Text, nullable=True)
    street_address = Column(String(200), nullable=True)
    postal_code = Column(String(20), nullable=True)
    city = Column(String(100), nullable=True)

    # Datos fiscales y bancarios
    iban = Column(String(34), nullable=True)
    kvk = Column(String(20), nullable=True)  # Registro mercantil
    btw_number = Column(String(30), nullable=True)  # Número de IVA
    debtor_number = Column(String(30), nullable=True)

    # Relationships
    contact_persons = relationship("ContactPerson", back_populates="customer", passive_deletes=True)

    @property
    def person_name(self) -> str:
        parts = [self.first_name, self.middle_name, self.last_name]
        return " ".join(p.strip() for p in parts if p and p.strip())

    @property
    def display_name(self) -> str:
        """Empresa, luego nombre libre, luego nombre de la persona"""
        return (
            (self.company_name or "").strip()
            or (self.name or "").strip()
            or self.person_name
            or UNNAMED_CUSTOMER
        )


class ContactPerson(Base, BaseMixin):
    __tablename__ = "contact_persons"

    customer_id = Column(Uuid(as_uuid=True), ForeignKey("customers.id"), nullable=False, index=True)

    first_name = Column(String(100), nullable=False)
    middle_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=False)
    gender = Column(String(20), nullable=True)
    email = Column(String(100), nullable=True)
    phone = Column(String(50), nullable=True)

    # Relationships
    customer = relationship("Customer", back_populates="contact_persons")
