from app.database.database import Base
from sqlalchemy import Column, String, ForeignKey, Text, Uuid
from sqlalchemy.orm import relationship
from app.common.mixins import BaseMixin


class Note(Base, BaseMixin):
    """Notas libres sobre un cliente"""
    __tablename__ = "notes"

    customer_id = Column(Uuid(as_uuid=True), ForeignKey("customers.id"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    content = Column(Text, nullable=False)

    # Relationships
    customer = relationship("Customer")
