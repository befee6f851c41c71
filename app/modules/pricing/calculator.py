"""
Calculadora de totales para documentos comerciales

Función pura sin I/O: recibe líneas (cantidad, precio unitario) y los
porcentajes de descuento e impuesto del documento y devuelve subtotal,
descuento, base gravable, impuesto y total.

    subtotal        = Σ cantidad × precio
    discount_amount = subtotal × descuento / 100
    taxable_amount  = subtotal − discount_amount
    tax_amount      = taxable_amount × impuesto / 100
    total           = taxable_amount + tax_amount

Los cálculos intermedios se hacen con Decimal exacto; el redondeo a 2
decimales ocurre solo al persistir o mostrar (round_money / rounded()).
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Sequence, Tuple, Union

from app.core.exceptions import InvalidItem, ValidationError

Number = Union[Decimal, int, str]

ZERO = Decimal("0")
HUNDRED = Decimal("100")
CENT = Decimal("0.01")


def to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        # repr del float, no su expansión binaria
        return Decimal(str(value))
    return Decimal(value)


def round_money(value: Number) -> Decimal:
    """Redondear a 2 decimales (half-up) para persistencia o presentación"""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class DocumentTotals:
    subtotal: Decimal
    discount_amount: Decimal
    taxable_amount: Decimal
    tax_amount: Decimal
    total: Decimal

    def rounded(self) -> "DocumentTotals":
        return DocumentTotals(
            subtotal=round_money(self.subtotal),
            discount_amount=round_money(self.discount_amount),
            taxable_amount=round_money(self.taxable_amount),
            tax_amount=round_money(self.tax_amount),
            total=round_money(self.total),
        )


def ensure_valid_items(lines: Iterable[Tuple[Number, Number]]) -> None:
    """Validación del lado del llamador: cantidad entera >= 1 y precio >= 0"""
    for position, (quantity, unit_price) in enumerate(lines, start=1):
        qty = to_decimal(quantity)
        if qty != qty.to_integral_value() or qty < 1:
            raise InvalidItem(f"La cantidad del ítem {position} debe ser un entero mayor o igual a 1")
        if to_decimal(unit_price) < 0:
            raise InvalidItem(f"El precio del ítem {position} no puede ser negativo")


def ensure_valid_percentage(value: Number, field: str) -> Decimal:
    pct = to_decimal(value)
    if pct < 0 or pct > HUNDRED:
        raise ValidationError(f"El campo {field} debe estar entre 0 y 100")
    return pct


def calculate_totals(
    lines: Sequence[Tuple[Number, Number]],
    discount_percentage: Number = ZERO,
    tax_percentage: Number = ZERO,
) -> DocumentTotals:
    """
    Calcular los totales de un documento

    Args:
        lines: secuencia ordenada de (cantidad, precio_unitario)
        discount_percentage: descuento global 0-100
        tax_percentage: impuesto global 0-100

    Returns:
        DocumentTotals sin redondear
    """
    discount_pct = to_decimal(discount_percentage)
    tax_pct = to_decimal(tax_percentage)

    subtotal = sum((to_decimal(qty) * to_decimal(price) for qty, price in lines), ZERO)
    discount_amount = subtotal * discount_pct / HUNDRED
    taxable_amount = subtotal - discount_amount
    tax_amount = taxable_amount * tax_pct / HUNDRED
    total = taxable_amount + tax_amount

    return DocumentTotals(
        subtotal=subtotal,
        discount_amount=discount_amount,
        taxable_amount=taxable_amount,
        tax_amount=tax_amount,
        total=total,
    )


def line_total(quantity: Number, unit_price: Number) -> Decimal:
    return round_money(to_decimal(quantity) * to_decimal(unit_price))
