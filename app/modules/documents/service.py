"""
Servicio base para cotizaciones, pedidos y facturas

Cada tipo de documento hereda de DocumentService y declara su modelo, su
modelo de ítem, su máquina de estados y sus campos de número y fecha.

- Creación del documento con sus ítems en una sola transacción
- Reemplazo completo de ítems en la actualización (nunca parcial)
- Total persistido recalculado en cada escritura, redondeado a 2 decimales
- Bloqueo de importes en documentos convertidos o en estado terminal
- Borrado explícito de ítems y de los forward-links que apuntan al documento
"""

from collections import namedtuple
from datetime import date
from sqlalchemy.orm import Session
from typing import Any, Dict, List, Optional, Sequence
from uuid import UUID
import logging

from app.common.repository import TenantRepository
from app.common.transaction import atomic
from app.core.config import settings
from app.core.exceptions import (
    ConcurrentModification, DocumentLocked, ValidationError
)
from app.modules.customers.models import Customer
from app.modules.documents.lifecycle import DocumentLifecycle
from app.modules.pricing.calculator import (
    calculate_totals, ensure_valid_items, ensure_valid_percentage, line_total, round_money
)
from app.modules.products.models import Product

logger = logging.getLogger(__name__)

# Línea ya validada: el precio queda congelado al agregarla
ItemRow = namedtuple("ItemRow", ["product_id", "quantity", "price"])

# Campos que no se pueden modificar en un documento bloqueado (además de los ítems)
LOCKED_FIELDS = ("currency", "tax_percentage", "discount_percentage")


class DocumentService:
    model = None
    item_model = None
    lifecycle: DocumentLifecycle = None
    number_field: str = None
    date_field: str = None
    not_found_message: str = "Documento no encontrado"

    def __init__(self, db: Session):
        self.db = db
        self.documents = TenantRepository(db, self.model, self.not_found_message)
        self.items = TenantRepository(db, self.item_model)
        self.customers = TenantRepository(db, Customer, "Cliente no encontrado")
        self.products = TenantRepository(db, Product, "Producto no encontrado")

    @property
    def kind(self) -> str:
        return self.model.__name__.lower()

    # ===== READ =====

    def list_documents(
        self,
        tenant_id: UUID,
        status=None,
        customer_id: Optional[UUID] = None,
        limit: Optional[int] = None,
        offset: int = 0
    ) -> List[Any]:
        return self.documents.list(
            tenant_id, limit=limit, offset=offset, status=status, customer_id=customer_id
        )

    def get_document(self, document_id: UUID, tenant_id: UUID):
        return self.documents.get(document_id, tenant_id)

    # ===== WRITE =====

    def create_document(self, data, tenant_id: UUID):
        """Crear documento e ítems en una transacción"""
        values = data.model_dump(exclude={"items"}, exclude_none=True)

        with atomic(self.db, f"creating {self.kind}"):
            self.customers.get(data.customer_id, tenant_id)
            self._ensure_initial_status(values)
            rows = self._resolve_items(data.items, tenant_id)
            self._prepare(values)
            document = self.persist(tenant_id, values, rows)

        logger.info(
            f"{self.model.__name__} {document.id} created for tenant {tenant_id} "
            f"with {len(rows)} items, total {document.total}"
        )
        return document

    def persist(self, tenant_id: UUID, values: Dict[str, Any], rows: Sequence[ItemRow]):
        """
        Crear el documento con ítems ya validados y el total calculado.

        También lo usa la conversión, que aporta los ítems del documento origen.
        """
        values = dict(values)
        values.setdefault("currency", settings.DEFAULT_CURRENCY)
        values.setdefault("tax_percentage", settings.DEFAULT_TAX_PERCENTAGE)
        values.setdefault("discount_percentage", settings.DEFAULT_DISCOUNT_PERCENTAGE)
        values.setdefault("status", self.lifecycle.initial)
        for field in ("tax_percentage", "discount_percentage"):
            values[field] = ensure_valid_percentage(values[field], field)
        values["total"] = self._total(rows, values["discount_percentage"], values["tax_percentage"])

        document = self.documents.build(tenant_id, values)
        document.items = self._build_items(tenant_id, rows)
        self.db.add(document)
        self.db.flush()
        return document

    def update_document(self, document_id: UUID, update, tenant_id: UUID):
        """
        Actualizar solo los campos enviados.

        - items, si llega, reemplaza todos los ítems existentes
        - status pasa por la máquina de estados del documento
        - version, si llega, debe coincidir con la almacenada
        """
        changes = update.model_dump(exclude_unset=True, exclude={"items", "version"})
        target_status = changes.pop("status", None)
        self._ensure_not_null(changes)

        with atomic(self.db, f"updating {self.kind} {document_id}"):
            document = self.documents.get(document_id, tenant_id)

            if update.version is not None and update.version != document.version:
                raise ConcurrentModification(
                    f"El documento está en la versión {document.version}, no en la {update.version}"
                )

            if self.lifecycle.is_locked(document):
                touched = [f for f in LOCKED_FIELDS if f in changes and changes[f] != getattr(document, f)]
                if update.items is not None or touched:
                    raise DocumentLocked()

            if target_status is not None:
                self.lifecycle.ensure_transition(document.status, target_status)
                if target_status != document.status:
                    changes["status"] = target_status

            if "customer_id" in changes:
                self.customers.get(changes["customer_id"], tenant_id)

            self._prepare(changes, document)

            if update.items is not None:
                rows = self._resolve_items(update.items, tenant_id)
                self._replace_items(document, tenant_id, rows)
            else:
                rows = [ItemRow(item.product_id, item.quantity, item.price) for item in document.items]

            changes["total"] = self._total(
                rows,
                changes.get("discount_percentage", document.discount_percentage),
                changes.get("tax_percentage", document.tax_percentage),
            )
            self.documents.apply(document, changes)

        if target_status is not None:
            logger.info(f"{self.model.__name__} {document.id} status is now {document.status.value}")
        return document

    def delete_document(self, document_id: UUID, tenant_id: UUID) -> None:
        """Eliminar documento: primero sus ítems y los forward-links que apuntan a él"""
        with atomic(self.db, f"deleting {self.kind} {document_id}"):
            document = self.documents.get(document_id, tenant_id)
            cleared = self._clear_forward_links(document, tenant_id)
            item_count = len(document.items)
            document.items.clear()
            self.db.flush()
            self.db.delete(document)
            self.db.flush()

        logger.info(
            f"{self.model.__name__} {document_id} deleted for tenant {tenant_id} "
            f"({item_count} items, {cleared} forward-links cleared)"
        )

    # ===== HOOKS =====

    def _prepare(self, values: Dict[str, Any], document=None) -> None:
        """Completar y validar campos propios del tipo (fechas)"""
        if document is None:
            values.setdefault(self.date_field, date.today())

    def _clear_forward_links(self, document, tenant_id: UUID) -> int:
        return 0

    # ===== HELPERS =====

    def _ensure_initial_status(self, values: Dict[str, Any]) -> None:
        self.lifecycle.ensure_creatable(values.get("status"))

    def _ensure_not_null(self, changes: Dict[str, Any]) -> None:
        required = ("customer_id", "currency", "tax_percentage", "discount_percentage",
                    "status", self.number_field, self.date_field)
        for field in required:
            if field in changes and changes[field] is None:
                raise ValidationError(f"El campo {field} no puede quedar vacío")

    def _resolve_items(self, items, tenant_id: UUID) -> List[ItemRow]:
        """Validar cantidades y precios, comprobar productos y congelar el precio"""
        ensure_valid_items(
            (item.quantity, item.price if item.price is not None else 0) for item in items
        )
        rows = []
        for item in items:
            product = self.products.get(item.product_id, tenant_id)
            price = item.price if item.price is not None else product.price
            rows.append(ItemRow(product.id, item.quantity, round_money(price)))
        return rows

    def _build_items(self, tenant_id: UUID, rows: Sequence[ItemRow]) -> List[Any]:
        return [
            self.items.build(tenant_id, {
                "product_id": row.product_id,
                "quantity": row.quantity,
                "price": row.price,
                "total": line_total(row.quantity, row.price),
                "position": position,
            })
            for position, row in enumerate(rows)
        ]

    def _replace_items(self, document, tenant_id: UUID, rows: Sequence[ItemRow]) -> None:
        # delete-orphan elimina las filas anteriores en el flush
        document.items.clear()
        self.db.flush()
        document.items.extend(self._build_items(tenant_id, rows))

    @staticmethod
    def _total(rows: Sequence[ItemRow], discount_percentage, tax_percentage):
        lines = [(row.quantity, row.price) for row in rows]
        return round_money(calculate_totals(lines, discount_percentage, tax_percentage).total)

    @staticmethod
    def _ensure_date_order(start: Optional[date], end: Optional[date], message: str) -> None:
        if start is not None and end is not None and end < start:
            raise ValidationError(message)
