"""
Servicio de Facturación
"""

from datetime import date, timedelta
from typing import Any, Dict

from app.core.config import settings
from app.modules.documents.lifecycle import INVOICE_LIFECYCLE
from app.modules.documents.service import DocumentService
from app.modules.invoices.models import Invoice, InvoiceItem


def default_due_date(invoice_date: date) -> date:
    return invoice_date + timedelta(days=settings.INVOICE_PAYMENT_TERM_DAYS)


class InvoiceService(DocumentService):
    model = Invoice
    item_model = InvoiceItem
    lifecycle = INVOICE_LIFECYCLE
    number_field = "invoice_number"
    date_field = "invoice_date"
    not_found_message = "Factura no encontrada"

    def _prepare(self, values: Dict[str, Any], document=None) -> None:
        super()._prepare(values, document)
        if document is None:
            values.setdefault("due_date", default_due_date(values["invoice_date"]))

        invoice_date = values.get("invoice_date", document.invoice_date if document else None)
        due_date = values.get("due_date", document.due_date if document else None)
        self._ensure_date_order(
            invoice_date, due_date, "La fecha de vencimiento no puede ser anterior a la fecha de la factura"
        )
