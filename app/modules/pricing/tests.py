"""
Tests para la calculadora de totales

- Escenarios de referencia con descuento e impuesto
- Lista vacía
- Idempotencia y monotonía
- Validación de ítems y porcentajes
"""

import pytest
from decimal import Decimal

from app.core.exceptions import InvalidItem, ValidationError
from app.modules.pricing.calculator import (
    calculate_totals, ensure_valid_items, ensure_valid_percentage, line_total, round_money
)


class TestCalculateTotals:

    def test_discount_and_tax(self):
        """2×15 + 1×40 con 10% de descuento y 21% de impuesto"""
        lines = [(2, Decimal("15.00")), (1, Decimal("40.00"))]

        totals = calculate_totals(lines, Decimal("10"), Decimal("21")).rounded()

        assert totals.subtotal == Decimal("70.00")
        assert totals.discount_amount == Decimal("7.00")
        assert totals.taxable_amount == Decimal("63.00")
        assert totals.tax_amount == Decimal("13.23")
        assert totals.total == Decimal("76.23")

    def test_empty_items_are_all_zero(self):
        totals = calculate_totals([], Decimal("0"), Decimal("21")).rounded()

        assert totals.subtotal == Decimal("0.00")
        assert totals.discount_amount == Decimal("0.00")
        assert totals.tax_amount == Decimal("0.00")
        assert totals.total == Decimal("0.00")

    def test_no_intermediate_rounding(self):
        """El redondeo solo se aplica al final"""
        lines = [(3, Decimal("0.335"))]

        totals = calculate_totals(lines, Decimal("0"), Decimal("21"))

        assert totals.subtotal == Decimal("1.005")
        assert totals.total == Decimal("1.21605")
        assert totals.rounded().total == Decimal("1.22")

    def test_idempotent(self):
        lines = [(4, Decimal("12.49")), (7, Decimal("3.10"))]

        first = calculate_totals(lines, Decimal("5"), Decimal("9"))
        second = calculate_totals(lines, Decimal("5"), Decimal("9"))

        assert first == second

    def test_total_monotonic_in_quantity(self):
        base = calculate_totals([(1, Decimal("20.00"))], Decimal("10"), Decimal("21"))
        more = calculate_totals([(2, Decimal("20.00"))], Decimal("10"), Decimal("21"))

        assert more.total >= base.total

    def test_more_discount_never_raises_total(self):
        lines = [(3, Decimal("19.99"))]
        totals = [calculate_totals(lines, Decimal(pct), Decimal("21")).total for pct in ("0", "5", "12.5", "100")]

        assert totals == sorted(totals, reverse=True)

    def test_total_monotonic_in_tax(self):
        lines = [(2, Decimal("20.00"))]
        low = calculate_totals(lines, Decimal("0"), Decimal("9"))
        high = calculate_totals(lines, Decimal("0"), Decimal("21"))

        assert high.total >= low.total

    def test_full_discount(self):
        totals = calculate_totals([(1, Decimal("50.00"))], Decimal("100"), Decimal("21"))

        assert totals.total == Decimal("0")

    def test_accepts_ints_and_strings(self):
        totals = calculate_totals([(2, "15.00"), (1, 40)], 10, 21).rounded()

        assert totals.total == Decimal("76.23")


class TestItemValidation:

    def test_valid_items(self):
        ensure_valid_items([(1, Decimal("0")), (5, Decimal("9.99"))])

    def test_zero_quantity(self):
        with pytest.raises(InvalidItem):
            ensure_valid_items([(0, Decimal("10.00"))])

    def test_negative_quantity(self):
        with pytest.raises(InvalidItem):
            ensure_valid_items([(-2, Decimal("10.00"))])

    def test_fractional_quantity(self):
        with pytest.raises(InvalidItem):
            ensure_valid_items([(Decimal("1.5"), Decimal("10.00"))])

    def test_negative_price(self):
        with pytest.raises(InvalidItem) as exc_info:
            ensure_valid_items([(1, Decimal("10.00")), (1, Decimal("-0.01"))])

        assert "2" in exc_info.value.message

    def test_invalid_item_is_validation_error(self):
        assert issubclass(InvalidItem, ValidationError)
        assert InvalidItem.kind == "invalid_item"


class TestHelpers:

    def test_round_money_half_up(self):
        assert round_money(Decimal("2.345")) == Decimal("2.35")
        assert round_money(Decimal("2.344")) == Decimal("2.34")
        assert round_money(0) == Decimal("0.00")

    def test_line_total(self):
        assert line_total(3, Decimal("19.99")) == Decimal("59.97")

    def test_percentage_range(self):
        assert ensure_valid_percentage("21", "tax_percentage") == Decimal("21")
        with pytest.raises(ValidationError):
            ensure_valid_percentage(Decimal("100.01"), "tax_percentage")
        with pytest.raises(ValidationError):
            ensure_valid_percentage(-1, "discount_percentage")
