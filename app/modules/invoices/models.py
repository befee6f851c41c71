from app.database.database import Base
from sqlalchemy import Column, Date, Enum, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import relationship
from datetime import date

from app.modules.documents.lifecycle import InvoiceStatus
from app.modules.documents.models import DocumentMixin, DocumentItemMixin, status_values


class Invoice(Base, DocumentMixin):
    __tablename__ = "invoices"

    invoice_number = Column(String(50), nullable=False, index=True)
    invoice_date = Column(Date, nullable=False, default=date.today)
    due_date = Column(Date, nullable=True)  # Por defecto invoice_date + plazo de pago
    status = Column(
        Enum(InvoiceStatus, name="invoice_status", values_callable=status_values),
        nullable=False,
        default=InvoiceStatus.DRAFT
    )

    # Forward-link al pedido de origen (solo lo escribe la conversión)
    order_id = Column(Uuid(as_uuid=True), ForeignKey("orders.id", ondelete="SET NULL"), nullable=True, index=True)

    # Bloqueo optimista: cada UPDATE incrementa version
    version = Column(Integer, nullable=False, default=1)
    __mapper_args__ = {"version_id_col": version}

    # Relationships
    items = relationship(
        "InvoiceItem",
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="InvoiceItem.position"
    )

    @property
    def invoice_items(self):
        return self.items


class InvoiceItem(Base, DocumentItemMixin):
    __tablename__ = "invoice_items"

    invoice_id = Column(Uuid(as_uuid=True), ForeignKey("invoices.id"), nullable=False, index=True)

    # Relationships
    invoice = relationship("Invoice", back_populates="items")
