from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID

from app.common.repository import TenantRepository
from app.common.transaction import atomic
from app.core.exceptions import ValidationError
from app.modules.customers.models import Customer
from app.modules.notes.models import Note
from app.modules.notes.schemas import NoteCreate, NoteUpdate


class NoteService:
    def __init__(self, db: Session):
        self.db = db
        self.notes = TenantRepository(db, Note, "Nota no encontrada")
        self.customers = TenantRepository(db, Customer, "Cliente no encontrado")

    def list_notes(
        self, tenant_id: UUID, customer_id: Optional[UUID] = None, limit: Optional[int] = None, offset: int = 0
    ) -> List[Note]:
        """Listar notas, opcionalmente solo las de un cliente"""
        return self.notes.list(tenant_id, limit=limit, offset=offset, customer_id=customer_id)

    def get_note(self, note_id: UUID, tenant_id: UUID) -> Note:
        return self.notes.get(note_id, tenant_id)

    def create_note(self, note_data: NoteCreate, tenant_id: UUID) -> Note:
        with atomic(self.db, "creating note"):
            self.customers.get(note_data.customer_id, tenant_id)
            note = self.notes.create(tenant_id, note_data.model_dump())
        return note

    def update_note(self, note_id: UUID, note_update: NoteUpdate, tenant_id: UUID) -> Note:
        changes = note_update.model_dump(exclude_unset=True)
        if any(changes.get(field) is None for field in changes):
            raise ValidationError("El título y el contenido no pueden quedar vacíos")
        with atomic(self.db, "updating note"):
            note = self.notes.update(note_id, tenant_id, changes)
        return note

    def delete_note(self, note_id: UUID, tenant_id: UUID) -> None:
        with atomic(self.db, "deleting note"):
            self.notes.delete(note_id, tenant_id)
