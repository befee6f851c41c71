"""
Servicios de negocio para el módulo de Clientes

- CRUD de clientes scoped por tenant
- Personas de contacto como sub-recurso del cliente
- Borrado explícito de personas de contacto y notas al eliminar un cliente
"""

from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID
import logging

from app.common.repository import TenantRepository
from app.common.transaction import atomic
from app.core.exceptions import NotFound, ValidationError
from app.modules.customers.models import Customer, ContactPerson
from app.modules.customers.schemas import (
    CustomerCreate, CustomerUpdate, ContactPersonCreate, ContactPersonUpdate
)

logger = logging.getLogger(__name__)


class CustomerService:
    def __init__(self, db: Session):
        self.db = db
        self.customers = TenantRepository(db, Customer, "Cliente no encontrado")
        self.contact_persons = TenantRepository(db, ContactPerson, "Persona de contacto no encontrada")

    # ===== CUSTOMERS =====

    def list_customers(self, tenant_id: UUID, limit: Optional[int] = None, offset: int = 0) -> List[Customer]:
        return self.customers.list(tenant_id, limit=limit, offset=offset)

    def get_customer(self, customer_id: UUID, tenant_id: UUID) -> Customer:
        return self.customers.get(customer_id, tenant_id)

    def create_customer(self, customer_data: CustomerCreate, tenant_id: UUID) -> Customer:
        """Crear nuevo cliente"""
        with atomic(self.db, "creating customer"):
            customer = self.customers.create(tenant_id, customer_data.model_dump())
        logger.info(f"Customer {customer.id} created for tenant {tenant_id}")
        return customer

    def update_customer(self, customer_id: UUID, customer_update: CustomerUpdate, tenant_id: UUID) -> Customer:
        """Actualizar solo los campos enviados"""
        with atomic(self.db, "updating customer"):
            customer = self.customers.get(customer_id, tenant_id)
            self.customers.apply(customer, customer_update.model_dump(exclude_unset=True))
            if not any((customer.name, customer.first_name, customer.company_name)):
                raise ValidationError("Se requiere nombre, nombre de pila o nombre de empresa")
        return customer

    def delete_customer(self, customer_id: UUID, tenant_id: UUID) -> None:
        """
        Eliminar cliente junto con sus personas de contacto y notas.

        La base de datos no borra en cascada: las dependencias se eliminan aquí
        en la misma transacción. No se permite eliminar clientes con documentos.
        """
        from app.modules.notes.models import Note

        with atomic(self.db, "deleting customer"):
            customer = self.customers.get(customer_id, tenant_id)

            document_count = self._count_documents(customer.id, tenant_id)
            if document_count:
                raise ValidationError(
                    f"No se puede eliminar el cliente porque tiene {document_count} documento(s) asociados"
                )

            removed_contacts = self.contact_persons.query(tenant_id).filter(
                ContactPerson.customer_id == customer.id
            ).delete(synchronize_session=False)
            removed_notes = self.db.query(Note).filter(
                Note.tenant_id == tenant_id,
                Note.customer_id == customer.id
            ).delete(synchronize_session=False)

            self.db.delete(customer)
            self.db.flush()

        logger.info(
            f"Customer {customer_id} deleted for tenant {tenant_id} "
            f"({removed_contacts} contact persons, {removed_notes} notes)"
        )

    def _count_documents(self, customer_id: UUID, tenant_id: UUID) -> int:
        from app.modules.quotes.models import Quote
        from app.modules.orders.models import Order
        from app.modules.invoices.models import Invoice

        total = 0
        for model in (Quote, Order, Invoice):
            total += self.db.query(model).filter(
                model.tenant_id == tenant_id,
                model.customer_id == customer_id
            ).count()
        return total

    # ===== CONTACT PERSONS =====

    def list_contact_persons(self, customer_id: UUID, tenant_id: UUID) -> List[ContactPerson]:
        self.customers.get(customer_id, tenant_id)
        return self.contact_persons.list(tenant_id, customer_id=customer_id)

    def get_contact_person(self, customer_id: UUID, contact_id: UUID, tenant_id: UUID) -> ContactPerson:
        contact = self.contact_persons.get(contact_id, tenant_id)
        if contact.customer_id != customer_id:
            raise NotFound("Persona de contacto no encontrada")
        return contact

    def create_contact_person(
        self, customer_id: UUID, contact_data: ContactPersonCreate, tenant_id: UUID
    ) -> ContactPerson:
        with atomic(self.db, "creating contact person"):
            customer = self.customers.get(customer_id, tenant_id)
            data = contact_data.model_dump()
            data["customer_id"] = customer.id
            contact = self.contact_persons.create(tenant_id, data)
        return contact

    def update_contact_person(
        self, customer_id: UUID, contact_id: UUID, contact_update: ContactPersonUpdate, tenant_id: UUID
    ) -> ContactPerson:
        with atomic(self.db, "updating contact person"):
            contact = self.get_contact_person(customer_id, contact_id, tenant_id)
            self.contact_persons.apply(contact, contact_update.model_dump(exclude_unset=True))
        return contact

    def delete_contact_person(self, customer_id: UUID, contact_id: UUID, tenant_id: UUID) -> None:
        with atomic(self.db, "deleting contact person"):
            contact = self.get_contact_person(customer_id, contact_id, tenant_id)
            self.db.delete(contact)
            self.db.flush()