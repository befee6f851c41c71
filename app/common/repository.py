"""
Repositorio genérico con aislamiento por tenant

Toda lectura y escritura pasa por aquí con un tenant_id explícito:
- get/update/delete filtran por id Y tenant_id; un registro de otro tenant
  se reporta igual que uno inexistente (NotFound, nunca Forbidden)
- create siempre estampa el tenant_id recibido e ignora el del payload
- list ordena por created_at descendente salvo que se indique otro orden
- toda escritura fija updated_at con la hora de la operación

El repositorio hace flush pero nunca commit: la transacción pertenece al
servicio que lo invoca.
"""
from typing import Any, Dict, Generic, Iterable, List, Optional, Type, TypeVar
from uuid import UUID

from sqlalchemy.orm import Session

from app.common.mixins import utcnow
from app.core.exceptions import NotFound

ModelT = TypeVar("ModelT")

# Columnas que un payload nunca puede sobrescribir
PROTECTED_FIELDS = {"id", "tenant_id", "created_at", "updated_at", "version"}


class TenantRepository(Generic[ModelT]):
    """Operaciones CRUD scoped por tenant para un modelo"""

    def __init__(self, db: Session, model: Type[ModelT], not_found_message: Optional[str] = None):
        self.db = db
        self.model = model
        self.not_found_message = not_found_message

    def query(self, tenant_id: UUID):
        return self.db.query(self.model).filter(self.model.tenant_id == tenant_id)

    def list(
        self,
        tenant_id: UUID,
        order_by: Optional[Iterable[Any]] = None,
        limit: Optional[int] = None,
        offset: int = 0,
        **filters: Any
    ) -> List[ModelT]:
        query = self.query(tenant_id)
        for field, value in filters.items():
            if value is not None:
                query = query.filter(getattr(self.model, field) == value)

        if order_by is None:
            order_by = [self.model.created_at.desc()]
        query = query.order_by(*order_by)

        if offset:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def count(self, tenant_id: UUID, **filters: Any) -> int:
        query = self.query(tenant_id)
        for field, value in filters.items():
            if value is not None:
                query = query.filter(getattr(self.model, field) == value)
        return query.count()

    def get(self, entity_id: UUID, tenant_id: UUID, for_update: bool = False) -> ModelT:
        query = self.query(tenant_id).filter(self.model.id == entity_id)
        if for_update:
            query = query.with_for_update()
        entity = query.first()
        if entity is None:
            raise NotFound(self.not_found_message)
        return entity

    def build(self, tenant_id: UUID, data: Dict[str, Any]) -> ModelT:
        """Instanciar con el tenant estampado sin añadir a la sesión (p.ej. ítems de una colección)"""
        values = {k: v for k, v in data.items() if k not in PROTECTED_FIELDS}
        now = utcnow()
        return self.model(**values, tenant_id=tenant_id, created_at=now, updated_at=now)

    def create(self, tenant_id: UUID, data: Dict[str, Any]) -> ModelT:
        entity = self.build(tenant_id, data)
        self.db.add(entity)
        self.db.flush()
        return entity

    def apply(self, entity: ModelT, changes: Dict[str, Any]) -> ModelT:
        """Aplicar cambios a una entidad ya cargada con el tenant correcto"""
        for field, value in changes.items():
            if field in PROTECTED_FIELDS:
                continue
            setattr(entity, field, value)
        entity.updated_at = utcnow()
        self.db.flush()
        return entity

    def update(self, entity_id: UUID, tenant_id: UUID, changes: Dict[str, Any]) -> ModelT:
        entity = self.get(entity_id, tenant_id)
        return self.apply(entity, changes)

    def delete(self, entity_id: UUID, tenant_id: UUID) -> None:
        entity = self.get(entity_id, tenant_id)
        self.db.delete(entity)
        self.db.flush()
