from fastapi import APIRouter, status, Query
from typing import List, Optional
from uuid import UUID

from app.core.config import settings
from app.dependencies.dbDependecies import db_dependency
from app.dependencies.tenantDependencies import TenantId
from app.modules.notes.service import NoteService
from app.modules.notes.schemas import NoteCreate, NoteUpdate, NoteOut

notes_router = APIRouter(prefix="/notes", tags=["Notes"])


@notes_router.get("", response_model=List[NoteOut])
def list_notes(
    db: db_dependency,
    tenant_id: TenantId,
    customer_id: Optional[UUID] = Query(None, description="Filtrar por cliente"),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0)
):
    return NoteService(db).list_notes(tenant_id, customer_id, limit, offset)


@notes_router.post("", response_model=NoteOut, status_code=status.HTTP_201_CREATED)
def create_note(note_data: NoteCreate, db: db_dependency, tenant_id: TenantId):
    return NoteService(db).create_note(note_data, tenant_id)


@notes_router.get("/{note_id}", response_model=NoteOut)
def get_note(note_id: UUID, db: db_dependency, tenant_id: TenantId):
    return NoteService(db).get_note(note_id, tenant_id)


@notes_router.put("/{note_id}", response_model=NoteOut)
def update_note(note_id: UUID, note_update: NoteUpdate, db: db_dependency, tenant_id: TenantId):
    return NoteService(db).update_note(note_id, note_update, tenant_id)


@notes_router.delete("/{note_id}")
def delete_note(note_id: UUID, db: db_dependency, tenant_id: TenantId):
    NoteService(db).delete_note(note_id, tenant_id)
    return {"success": True}
