"""
Conversión de documentos: Cotización → Pedido → Factura

Cada conversión corre en una sola transacción:
1. Cargar el origen con bloqueo de fila (SELECT ... FOR UPDATE)
2. Verificar que no esté convertido ni en estado terminal
3. Crear el documento destino copiando cliente, moneda, porcentajes, notas
   e ítems con sus precios (sin volver a consultar el precio del producto)
4. Marcar el origen como convertido junto con su back-link

El total del destino se recalcula desde sus propios ítems y coincide con el
del origen.
"""

from datetime import date
from sqlalchemy.orm import Session
from typing import Any, Dict, List, Optional
from uuid import UUID
import logging

from app.common.transaction import atomic
from app.core.config import settings
from app.core.exceptions import ValidationError
from app.modules.documents.lifecycle import QUOTE_LIFECYCLE, ORDER_LIFECYCLE
from app.modules.documents.service import ItemRow
from app.modules.invoices.models import Invoice
from app.modules.invoices.service import InvoiceService, default_due_date
from app.modules.orders.models import Order
from app.modules.orders.service import OrderService
from app.modules.quotes.service import QuoteService

logger = logging.getLogger(__name__)

# Campos de cabecera que viajan del origen al destino
CARRIED_FIELDS = ("customer_id", "currency", "tax_percentage", "discount_percentage", "notes")


def _carried_values(source) -> Dict[str, Any]:
    return {field: getattr(source, field) for field in CARRIED_FIELDS}


def _source_rows(source) -> List[ItemRow]:
    rows = [ItemRow(item.product_id, item.quantity, item.price) for item in source.items]
    if not rows:
        raise ValidationError("No se puede convertir un documento sin ítems")
    return rows


class ConversionService:
    def __init__(self, db: Session):
        self.db = db
        self.quotes = QuoteService(db)
        self.orders = OrderService(db)
        self.invoices = InvoiceService(db)

    def convert_quote_to_order(
        self, quote_id: UUID, tenant_id: UUID, order_number: Optional[str] = None
    ) -> Order:
        """Crear un pedido a partir de una cotización y marcarla como approved"""
        with atomic(self.db, f"converting quote {quote_id} to order"):
            quote = self.quotes.documents.get(quote_id, tenant_id, for_update=True)
            QUOTE_LIFECYCLE.ensure_convertible(quote)
            rows = _source_rows(quote)

            values = _carried_values(quote)
            values.update({
                "order_number": order_number or f"{settings.ORDER_NUMBER_PREFIX}{quote.quote_number}",
                "order_date": date.today(),
                "quote_id": quote.id,
            })
            order = self.orders.persist(tenant_id, values, rows)

            QUOTE_LIFECYCLE.mark_converted(quote, order.id)
            self.quotes.documents.apply(quote, {})

        logger.info(
            f"Quote {quote_id} converted to order {order.id} for tenant {tenant_id} (total {order.total})"
        )
        return order

    def convert_order_to_invoice(
        self, order_id: UUID, tenant_id: UUID, invoice_number: Optional[str] = None
    ) -> Invoice:
        """Crear una factura a partir de un pedido y marcarlo como completed"""
        with atomic(self.db, f"converting order {order_id} to invoice"):
            order = self.orders.documents.get(order_id, tenant_id, for_update=True)
            ORDER_LIFECYCLE.ensure_convertible(order)
            rows = _source_rows(order)

            today = date.today()
            values = _carried_values(order)
            values.update({
                "invoice_number": invoice_number or f"{settings.INVOICE_NUMBER_PREFIX}{order.order_number}",
                "invoice_date": today,
                "due_date": default_due_date(today),
                "order_id": order.id,
            })
            invoice = self.invoices.persist(tenant_id, values, rows)

            ORDER_LIFECYCLE.mark_converted(order, invoice.id)
            self.orders.documents.apply(order, {})

        logger.info(
            f"Order {order_id} converted to invoice {invoice.id} for tenant {tenant_id} (total {invoice.total})"
        )
        return invoice
