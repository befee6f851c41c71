"""
Columnas compartidas por cotizaciones, pedidos y facturas
"""
from sqlalchemy import Column, ForeignKey, Integer, Numeric, String, Text, Uuid
from sqlalchemy.orm import declared_attr, relationship

from app.common.mixins import BaseMixin
from app.core.config import settings
from app.modules.pricing.calculator import calculate_totals


def status_values(enum_cls):
    """Persistir el valor del enum ('draft'), no su nombre"""
    return [member.value for member in enum_cls]


class DocumentMixin(BaseMixin):
    """Cabecera común: cliente, moneda, porcentajes globales y total persistido"""

    @declared_attr
    def customer_id(cls):
        return Column(Uuid(as_uuid=True), ForeignKey("customers.id"), nullable=False, index=True)

    @declared_attr
    def customer(cls):
        return relationship("Customer")

    currency = Column(String(3), nullable=False, default=settings.DEFAULT_CURRENCY)
    tax_percentage = Column(Numeric(5, 2), nullable=False, default=settings.DEFAULT_TAX_PERCENTAGE)
    discount_percentage = Column(Numeric(5, 2), nullable=False, default=settings.DEFAULT_DISCOUNT_PERCENTAGE)
    total = Column(Numeric(15, 2), nullable=False, default=0)  # Redondeado al persistir
    notes = Column(Text, nullable=True)

    @property
    def totals(self):
        """Desglose calculado a partir de los ítems actuales, redondeado a 2 decimales"""
        lines = [(item.quantity, item.price) for item in self.items]
        return calculate_totals(lines, self.discount_percentage, self.tax_percentage).rounded()

    @property
    def subtotal(self):
        return self.totals.subtotal

    @property
    def discount_amount(self):
        return self.totals.discount_amount

    @property
    def tax_amount(self):
        return self.totals.tax_amount


class DocumentItemMixin(BaseMixin):
    """Línea de documento: producto, cantidad, precio unitario y total de línea"""

    @declared_attr
    def product_id(cls):
        return Column(Uuid(as_uuid=True), ForeignKey("products.id"), nullable=False, index=True)

    @declared_attr
    def product(cls):
        return relationship("Product")

    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(15, 2), nullable=False)   # Precio unitario al momento de agregar
    total = Column(Numeric(15, 2), nullable=False)   # quantity × price
    position = Column(Integer, nullable=False, default=0)  # Orden de entrada
