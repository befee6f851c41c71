"""
Servicio de Cotizaciones

CRUD sobre DocumentService; la conversión a pedido vive en
app.modules.documents.conversion.
"""

from typing import Any, Dict
from uuid import UUID

from app.modules.documents.lifecycle import QUOTE_LIFECYCLE
from app.modules.documents.service import DocumentService
from app.modules.orders.models import Order
from app.modules.quotes.models import Quote, QuoteItem


class QuoteService(DocumentService):
    model = Quote
    item_model = QuoteItem
    lifecycle = QUOTE_LIFECYCLE
    number_field = "quote_number"
    date_field = "quote_date"
    not_found_message = "Cotización no encontrada"

    def _prepare(self, values: Dict[str, Any], document=None) -> None:
        super()._prepare(values, document)
        quote_date = values.get("quote_date", document.quote_date if document else None)
        valid_until = values.get("valid_until", document.valid_until if document else None)
        self._ensure_date_order(
            quote_date, valid_until, "La fecha de validez no puede ser anterior a la fecha de la cotización"
        )

    def _clear_forward_links(self, quote: Quote, tenant_id: UUID) -> int:
        return self.db.query(Order).filter(
            Order.tenant_id == tenant_id,
            Order.quote_id == quote.id
        ).update({Order.quote_id: None}, synchronize_session=False)
