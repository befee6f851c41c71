from app.database.database import Base
from sqlalchemy import Column, Date, Enum, ForeignKey, Integer, String, Uuid, CheckConstraint
from sqlalchemy.orm import relationship
from datetime import date

from app.modules.documents.lifecycle import OrderStatus
from app.modules.documents.models import DocumentMixin, DocumentItemMixin, status_values


class Order(Base, DocumentMixin):
    __tablename__ = "orders"

    order_number = Column(String(50), nullable=False, index=True)
    order_date = Column(Date, nullable=False, default=date.today)
    status = Column(
        Enum(OrderStatus, name="order_status", values_callable=status_values),
        nullable=False,
        default=OrderStatus.PENDING
    )

    # Forward-link a la cotización de origen (solo la escribe la conversión)
    quote_id = Column(Uuid(as_uuid=True), ForeignKey("quotes.id", ondelete="SET NULL"), nullable=True, index=True)
    # Back-link a la factura generada
    converted_to_invoice_id = Column(Uuid(as_uuid=True), nullable=True, index=True)

    # Bloqueo optimista: cada UPDATE incrementa version
    version = Column(Integer, nullable=False, default=1)
    __mapper_args__ = {"version_id_col": version}

    # Relationships
    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.position"
    )

    __table_args__ = (
        CheckConstraint(
            "(status = 'completed') = (converted_to_invoice_id IS NOT NULL)",
            name="ck_order_completed_iff_converted"
        ),
    )

    @property
    def order_items(self):
        return self.items


class OrderItem(Base, DocumentItemMixin):
    __tablename__ = "order_items"

    order_id = Column(Uuid(as_uuid=True), ForeignKey("orders.id"), nullable=False, index=True)

    # Relationships
    order = relationship("Order", back_populates="items")
