from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID
import logging

from app.common.repository import TenantRepository
from app.common.transaction import atomic
from app.core.exceptions import ValidationError
from app.modules.products.models import Product
from app.modules.products.schemas import ProductCreate, ProductUpdate

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Producto no encontrado"


def _repository(db: Session) -> TenantRepository:
    return TenantRepository(db, Product, NOT_FOUND_MESSAGE)


def get_all_products(db: Session, tenant_id: UUID, limit: Optional[int] = None, offset: int = 0) -> List[Product]:
    return _repository(db).list(tenant_id, limit=limit, offset=offset)


def get_product_by_id(db: Session, tenant_id: UUID, product_id: UUID) -> Product:
    return _repository(db).get(product_id, tenant_id)


def create_product(db: Session, data: ProductCreate, tenant_id: UUID) -> Product:
    with atomic(db, "creating product"):
        product = _repository(db).create(tenant_id, data.model_dump())
    logger.info(f"Product {product.id} created for tenant {tenant_id}")
    return product


def update_product(db: Session, tenant_id: UUID, product_id: UUID, data: ProductUpdate) -> Product:
    changes = data.model_dump(exclude_unset=True)
    for field in ("name", "price", "stock"):
        if field in changes and changes[field] is None:
            raise ValidationError(f"El campo {field} no puede quedar vacío")
    with atomic(db, "updating product"):
        product = _repository(db).update(product_id, tenant_id, changes)
    return product


def delete_product(db: Session, tenant_id: UUID, product_id: UUID) -> None:
    """Eliminar un producto si ningún documento lo referencia"""
    from app.modules.quotes.models import QuoteItem
    from app.modules.orders.models import OrderItem
    from app.modules.invoices.models import InvoiceItem

    with atomic(db, "deleting product"):
        product = get_product_by_id(db, tenant_id, product_id)
        usage = sum(
            db.query(model).filter(model.tenant_id == tenant_id, model.product_id == product.id).count()
            for model in (QuoteItem, OrderItem, InvoiceItem)
        )
        if usage:
            raise ValidationError(
                f"No se puede eliminar el producto porque está en {usage} línea(s) de documentos"
            )
        db.delete(product)
        db.flush()
