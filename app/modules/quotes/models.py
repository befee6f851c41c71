from app.database.database import Base
from sqlalchemy import Column, Date, Enum, ForeignKey, Integer, String, Uuid, CheckConstraint
from sqlalchemy.orm import relationship
from datetime import date

from app.modules.documents.lifecycle import QuoteStatus
from app.modules.documents.models import DocumentMixin, DocumentItemMixin, status_values


class Quote(Base, DocumentMixin):
    __tablename__ = "quotes"

    quote_number = Column(String(50), nullable=False, index=True)
    quote_date = Column(Date, nullable=False, default=date.today)
    valid_until = Column(Date, nullable=True)
    status = Column(
        Enum(QuoteStatus, name="quote_status", values_callable=status_values),
        nullable=False,
        default=QuoteStatus.DRAFT
    )

    # Back-link al pedido generado; sin FK para no crear dependencia circular
    converted_to_order_id = Column(Uuid(as_uuid=True), nullable=True, index=True)

    # Relationships
    items = relationship(
        "QuoteItem",
        back_populates="quote",
        cascade="all, delete-orphan",
        order_by="QuoteItem.position"
    )

    # Bloqueo optimista: cada UPDATE incrementa version
    version = Column(Integer, nullable=False, default=1)
    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        CheckConstraint(
            "(status = 'approved') = (converted_to_order_id IS NOT NULL)",
            name="ck_quote_approved_iff_converted"
        ),
    )

    @property
    def quote_items(self):
        return self.items


class QuoteItem(Base, DocumentItemMixin):
    __tablename__ = "quote_items"

    quote_id = Column(Uuid(as_uuid=True), ForeignKey("quotes.id"), nullable=False, index=True)

    # Relationships
    quote = relationship("Quote", back_populates="items")
