from app.database.database import Base
from sqlalchemy import Column, Integer, String, Numeric, Text, CheckConstraint
from app.common.mixins import BaseMixin


class Product(Base, BaseMixin):
    __tablename__ = "products"

    name = Column(String(200), nullable=False, index=True)
    description = Column(Text, nullable=True)
    price = Column(Numeric(15, 2), nullable=False, default=0)  # Precio de venta actual
    stock = Column(Integer, nullable=False, default=0)  # Puede quedar negativo, sin reservas
    image_url = Column(String(500), nullable=True)

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_product_price_non_negative"),
    )
