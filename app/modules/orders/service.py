"""
Servicio de Pedidos
"""

from uuid import UUID

from app.modules.documents.lifecycle import ORDER_LIFECYCLE
from app.modules.documents.service import DocumentService
from app.modules.invoices.models import Invoice
from app.modules.orders.models import Order, OrderItem


class OrderService(DocumentService):
    model = Order
    item_model = OrderItem
    lifecycle = ORDER_LIFECYCLE
    number_field = "order_number"
    date_field = "order_date"
    not_found_message = "Pedido no encontrado"

    def _clear_forward_links(self, order: Order, tenant_id: UUID) -> int:
        return self.db.query(Invoice).filter(
            Invoice.tenant_id == tenant_id,
            Invoice.order_id == order.id
        ).update({Invoice.order_id: None}, synchronize_session=False)
