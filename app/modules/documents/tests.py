"""
Tests del núcleo de documentos

- Máquinas de estado de cotizaciones, pedidos y facturas
- Conversión Cotización → Pedido → Factura (igualdad de totales, sin doble conversión)
- Reemplazo de ítems y recálculo del total
- Bloqueo optimista por versión
- Restricción de base de datos estado/back-link
"""

import pytest
from datetime import date, timedelta
from decimal import Decimal
from sqlalchemy.exc import IntegrityError
from types import SimpleNamespace
from uuid import uuid4

from app.core.exceptions import (
    AlreadyConverted, ConcurrentModification, ConversionRequired, DocumentLocked,
    InvalidItem, InvalidStatusTransition, NotFound
)
from app.modules.documents.conversion import ConversionService
from app.modules.documents.lifecycle import (
    QUOTE_LIFECYCLE, ORDER_LIFECYCLE, INVOICE_LIFECYCLE, QuoteStatus, OrderStatus, InvoiceStatus
)
from app.modules.documents.schemas import DocumentItemCreate
from app.modules.invoices.models import Invoice
from app.modules.orders.models import Order, OrderItem
from app.modules.orders.service import OrderService
from app.modules.pricing.calculator import calculate_totals
from app.modules.products.schemas import ProductCreate
from app.modules.products.service import create_product
from app.modules.quotes.models import Quote, QuoteItem
from app.modules.quotes.schemas import QuoteCreate, QuoteUpdate
from app.modules.quotes.service import QuoteService


# ===== FIXTURES =====

@pytest.fixture
def second_product(db_session, tenant_id):
    return create_product(
        db_session, ProductCreate(name="Onderhoud", price=Decimal("40.00"), stock=0), tenant_id
    )


@pytest.fixture
def quote(db_session, tenant_id, customer, product, second_product):
    """Cotización en draft: 2×15.00 + 1×40.00, 10% descuento, 21% impuesto"""
    data = QuoteCreate(
        customer_id=customer.id,
        quote_number="Q-2024-001",
        discount_percentage=Decimal("10"),
        tax_percentage=Decimal("21"),
        notes="Levering binnen 2 weken",
        items=[
            DocumentItemCreate(product_id=product.id, quantity=2, price=Decimal("15.00")),
            DocumentItemCreate(product_id=second_product.id, quantity=1),
        ],
    )
    return QuoteService(db_session).create_document(data, tenant_id)


def fake_document(status, back_link=None, link_name="converted_to_order_id"):
    return SimpleNamespace(status=status, **{link_name: back_link})


# ===== TESTS DE MÁQUINAS DE ESTADO =====

class TestQuoteLifecycle:

    @pytest.mark.parametrize("current, target", [
        (QuoteStatus.DRAFT, QuoteStatus.SENT),
        (QuoteStatus.SENT, QuoteStatus.DRAFT),
        (QuoteStatus.DRAFT, QuoteStatus.REJECTED),
        (QuoteStatus.SENT, QuoteStatus.EXPIRED),
    ])
    def test_allowed_transitions(self, current, target):
        QUOTE_LIFECYCLE.ensure_transition(current, target)

    def test_same_status_is_noop(self):
        QUOTE_LIFECYCLE.ensure_transition(QuoteStatus.REJECTED, QuoteStatus.REJECTED)

    def test_approved_requires_conversion(self):
        with pytest.raises(ConversionRequired):
            QUOTE_LIFECYCLE.ensure_transition(QuoteStatus.SENT, QuoteStatus.APPROVED)

    @pytest.mark.parametrize("current, target", [
        (QuoteStatus.REJECTED, QuoteStatus.DRAFT),
        (QuoteStatus.EXPIRED, QuoteStatus.SENT),
        (QuoteStatus.APPROVED, QuoteStatus.DRAFT),
    ])
    def test_terminal_states_do_not_move(self, current, target):
        with pytest.raises(InvalidStatusTransition):
            QUOTE_LIFECYCLE.ensure_transition(current, target)

    def test_mark_converted_sets_status_and_link_together(self):
        document = fake_document(QuoteStatus.SENT)
        target_id = uuid4()

        QUOTE_LIFECYCLE.mark_converted(document, target_id)

        assert document.status == QuoteStatus.APPROVED
        assert document.converted_to_order_id == target_id

    def test_convert_twice(self):
        document = fake_document(QuoteStatus.APPROVED, uuid4())

        with pytest.raises(AlreadyConverted):
            QUOTE_LIFECYCLE.ensure_convertible(document)

    def test_convert_terminal(self):
        with pytest.raises(InvalidStatusTransition):
            QUOTE_LIFECYCLE.ensure_convertible(fake_document(QuoteStatus.REJECTED))

    def test_created_only_as_draft(self):
        QUOTE_LIFECYCLE.ensure_creatable(None)
        QUOTE_LIFECYCLE.ensure_creatable(QuoteStatus.DRAFT)
        for status in (QuoteStatus.SENT, QuoteStatus.REJECTED, QuoteStatus.EXPIRED):
            with pytest.raises(InvalidStatusTransition):
                QUOTE_LIFECYCLE.ensure_creatable(status)
        with pytest.raises(ConversionRequired):
            QUOTE_LIFECYCLE.ensure_creatable(QuoteStatus.APPROVED)


class TestOrderLifecycle:

    def test_manual_transitions(self):
        ORDER_LIFECYCLE.ensure_transition(OrderStatus.PENDING, OrderStatus.PROCESSING)
        ORDER_LIFECYCLE.ensure_transition(OrderStatus.PROCESSING, OrderStatus.PENDING)
        ORDER_LIFECYCLE.ensure_transition(OrderStatus.PROCESSING, OrderStatus.CANCELLED)

    def test_completed_requires_conversion(self):
        with pytest.raises(ConversionRequired):
            ORDER_LIFECYCLE.ensure_transition(OrderStatus.PROCESSING, OrderStatus.COMPLETED)

    def test_cancelled_is_terminal(self):
        with pytest.raises(InvalidStatusTransition):
            ORDER_LIFECYCLE.ensure_transition(OrderStatus.CANCELLED, OrderStatus.PENDING)
        with pytest.raises(InvalidStatusTransition):
            ORDER_LIFECYCLE.ensure_convertible(
                fake_document(OrderStatus.CANCELLED, link_name="converted_to_invoice_id")
            )

    def test_locked_when_converted(self):
        document = fake_document(OrderStatus.COMPLETED, uuid4(), link_name="converted_to_invoice_id")

        assert ORDER_LIFECYCLE.is_locked(document)

    @pytest.mark.parametrize("status", [OrderStatus.PROCESSING, OrderStatus.CANCELLED])
    def test_created_only_as_pending(self, status):
        ORDER_LIFECYCLE.ensure_creatable(OrderStatus.PENDING)
        with pytest.raises(InvalidStatusTransition):
            ORDER_LIFECYCLE.ensure_creatable(status)


class TestInvoiceLifecycle:

    def test_manual_transitions(self):
        INVOICE_LIFECYCLE.ensure_transition(InvoiceStatus.DRAFT, InvoiceStatus.SENT)
        INVOICE_LIFECYCLE.ensure_transition(InvoiceStatus.SENT, InvoiceStatus.PAID)
        INVOICE_LIFECYCLE.ensure_transition(InvoiceStatus.DRAFT, InvoiceStatus.CANCELLED)

    def test_paid_is_terminal(self):
        with pytest.raises(InvalidStatusTransition):
            INVOICE_LIFECYCLE.ensure_transition(InvoiceStatus.PAID, InvoiceStatus.DRAFT)

    def test_no_downstream_conversion(self):
        assert not INVOICE_LIFECYCLE.convertible
        assert not INVOICE_LIFECYCLE.is_locked(SimpleNamespace(status=InvoiceStatus.SENT))
        assert INVOICE_LIFECYCLE.is_locked(SimpleNamespace(status=InvoiceStatus.PAID))

    def test_created_in_any_status(self):
        for status in InvoiceStatus:
            INVOICE_LIFECYCLE.ensure_creatable(status)


# ===== TESTS DE CREACIÓN =====

class TestCreateDocument:

    def test_totals_and_defaults(self, quote, second_product):
        assert quote.status == QuoteStatus.DRAFT
        assert quote.currency == "EUR"
        assert quote.quote_date == date.today()
        assert quote.total == Decimal("76.23")
        assert quote.subtotal == Decimal("70.00")
        assert quote.discount_amount == Decimal("7.00")
        assert quote.tax_amount == Decimal("13.23")
        assert quote.version == 1

    def test_item_price_defaults_to_product_price(self, quote, second_product):
        item = quote.items[1]

        assert item.product_id == second_product.id
        assert item.price == Decimal("40.00")
        assert item.total == Decimal("40.00")

    def test_items_keep_submitted_order(self, quote, product, second_product):
        assert [item.product_id for item in quote.items] == [product.id, second_product.id]
        assert [item.position for item in quote.items] == [0, 1]

    def test_items_carry_tenant(self, quote, tenant_id):
        assert all(item.tenant_id == tenant_id for item in quote.items)

    def test_negative_quantity_is_invalid_item(self, db_session, tenant_id, customer, product):
        data = QuoteCreate(
            customer_id=customer.id,
            quote_number="Q-bad",
            items=[DocumentItemCreate(product_id=product.id, quantity=-1)],
        )

        with pytest.raises(InvalidItem):
            QuoteService(db_session).create_document(data, tenant_id)
        assert db_session.query(Quote).count() == 0

    def test_product_of_other_tenant_is_not_found(self, db_session, customer, product, other_tenant_id):
        foreign = create_product(db_session, ProductCreate(name="Ander", price=Decimal("1.00")), other_tenant_id)
        data = QuoteCreate(
            customer_id=customer.id,
            quote_number="Q-x",
            items=[DocumentItemCreate(product_id=foreign.id, quantity=1)],
        )

        with pytest.raises(NotFound):
            QuoteService(db_session).create_document(data, customer.tenant_id)

    def test_cannot_create_as_approved(self, db_session, tenant_id, customer, product):
        data = QuoteCreate(
            customer_id=customer.id,
            quote_number="Q-x",
            status=QuoteStatus.APPROVED,
            items=[DocumentItemCreate(product_id=product.id, quantity=1)],
        )

        with pytest.raises(ConversionRequired):
            QuoteService(db_session).create_document(data, tenant_id)

    def test_cannot_create_past_initial_status(self, db_session, tenant_id, customer, product):
        data = QuoteCreate(
            customer_id=customer.id,
            quote_number="Q-x",
            status=QuoteStatus.REJECTED,
            items=[DocumentItemCreate(product_id=product.id, quantity=1)],
        )

        with pytest.raises(InvalidStatusTransition):
            QuoteService(db_session).create_document(data, tenant_id)
        assert db_session.query(Quote).count() == 0


# ===== TESTS DE CONVERSIÓN =====

class TestConversion:

    def test_quote_to_order(self, db_session, tenant_id, quote):
        order = ConversionService(db_session).convert_quote_to_order(quote.id, tenant_id)

        assert order.status == OrderStatus.PENDING
        assert order.quote_id == quote.id
        assert order.order_number == "ORD-Q-2024-001"
        assert order.order_date == date.today()
        assert order.customer_id == quote.customer_id
        assert order.notes == quote.notes
        assert order.total == quote.total
        assert [(i.product_id, i.quantity, i.price) for i in order.items] == \
            [(i.product_id, i.quantity, i.price) for i in quote.items]

        db_session.refresh(quote)
        assert quote.status == QuoteStatus.APPROVED
        assert quote.converted_to_order_id == order.id

    def test_converted_total_reproducible_from_items(self, db_session, tenant_id, quote):
        order = ConversionService(db_session).convert_quote_to_order(quote.id, tenant_id)

        lines = [(item.quantity, item.price) for item in order.items]
        expected = calculate_totals(lines, order.discount_percentage, order.tax_percentage).rounded().total
        assert order.total == expected

    def test_custom_order_number(self, db_session, tenant_id, quote):
        order = ConversionService(db_session).convert_quote_to_order(quote.id, tenant_id, "ORD-777")

        assert order.order_number == "ORD-777"

    def test_second_conversion_fails_without_new_order(self, db_session, tenant_id, quote):
        service = ConversionService(db_session)
        service.convert_quote_to_order(quote.id, tenant_id)

        with pytest.raises(AlreadyConverted):
            service.convert_quote_to_order(quote.id, tenant_id)
        assert db_session.query(Order).filter(Order.tenant_id == tenant_id).count() == 1

    def test_convert_rejected_quote(self, db_session, tenant_id, quote):
        QuoteService(db_session).update_document(quote.id, QuoteUpdate(status=QuoteStatus.REJECTED), tenant_id)

        with pytest.raises(InvalidStatusTransition):
            ConversionService(db_session).convert_quote_to_order(quote.id, tenant_id)
        assert db_session.query(Order).count() == 0

    def test_convert_from_other_tenant_is_not_found(self, db_session, quote, other_tenant_id):
        with pytest.raises(NotFound):
            ConversionService(db_session).convert_quote_to_order(quote.id, other_tenant_id)

    def test_order_to_invoice(self, db_session, tenant_id, quote):
        service = ConversionService(db_session)
        order = service.convert_quote_to_order(quote.id, tenant_id)

        invoice = service.convert_order_to_invoice(order.id, tenant_id)

        assert invoice.status == InvoiceStatus.DRAFT
        assert invoice.order_id == order.id
        assert invoice.invoice_number == "INV-ORD-Q-2024-001"
        assert invoice.invoice_date == date.today()
        assert invoice.due_date == date.today() + timedelta(days=30)
        assert invoice.total == order.total == Decimal("76.23")
        assert len(invoice.items) == 2

        db_session.refresh(order)
        assert order.status == OrderStatus.COMPLETED
        assert order.converted_to_invoice_id == invoice.id

        with pytest.raises(AlreadyConverted):
            service.convert_order_to_invoice(order.id, tenant_id)
        assert db_session.query(Invoice).count() == 1

    def test_converted_quote_is_locked(self, db_session, tenant_id, quote, product):
        ConversionService(db_session).convert_quote_to_order(quote.id, tenant_id)
        service = QuoteService(db_session)

        with pytest.raises(DocumentLocked):
            service.update_document(quote.id, QuoteUpdate(discount_percentage=Decimal("50")), tenant_id)
        with pytest.raises(DocumentLocked):
            service.update_document(
                quote.id,
                QuoteUpdate(items=[DocumentItemCreate(product_id=product.id, quantity=1)]),
                tenant_id
            )

        updated = service.update_document(quote.id, QuoteUpdate(notes="Akkoord per mail"), tenant_id)
        assert updated.notes == "Akkoord per mail"
        assert updated.total == Decimal("76.23")


# ===== TESTS DE ACTUALIZACIÓN =====

class TestUpdateDocument:

    def test_replace_items(self, db_session, tenant_id, quote, product):
        old_ids = {item.id for item in quote.items}

        updated = QuoteService(db_session).update_document(
            quote.id,
            QuoteUpdate(items=[DocumentItemCreate(product_id=product.id, quantity=3, price=Decimal("9.99"))]),
            tenant_id
        )

        remaining = db_session.query(QuoteItem).filter(QuoteItem.quote_id == quote.id).all()
        assert len(remaining) == 1
        assert remaining[0].id not in old_ids
        assert db_session.query(QuoteItem).filter(QuoteItem.id.in_(old_ids)).count() == 0

        expected = calculate_totals(
            [(3, Decimal("9.99"))], updated.discount_percentage, updated.tax_percentage
        ).rounded().total
        assert updated.total == expected == Decimal("32.64")

    def test_percentage_change_recomputes_total(self, db_session, tenant_id, quote):
        updated = QuoteService(db_session).update_document(
            quote.id, QuoteUpdate(discount_percentage=Decimal("0")), tenant_id
        )

        assert updated.total == Decimal("84.70")
        assert len(updated.items) == 2

    def test_status_change_is_validated(self, db_session, tenant_id, quote):
        service = QuoteService(db_session)

        assert service.update_document(quote.id, QuoteUpdate(status=QuoteStatus.SENT), tenant_id).status \
            == QuoteStatus.SENT
        with pytest.raises(ConversionRequired):
            service.update_document(quote.id, QuoteUpdate(status=QuoteStatus.APPROVED), tenant_id)

    def test_valid_until_before_quote_date(self, db_session, tenant_id, quote):
        from app.core.exceptions import ValidationError

        with pytest.raises(ValidationError):
            QuoteService(db_session).update_document(
                quote.id, QuoteUpdate(valid_until=quote.quote_date - timedelta(days=1)), tenant_id
            )

    def test_stale_version_is_rejected(self, db_session, tenant_id, quote):
        service = QuoteService(db_session)
        service.update_document(quote.id, QuoteUpdate(notes="Eerste wijziging", version=1), tenant_id)

        with pytest.raises(ConcurrentModification):
            service.update_document(quote.id, QuoteUpdate(notes="Tweede wijziging", version=1), tenant_id)
        assert service.get_document(quote.id, tenant_id).notes == "Eerste wijziging"

    def test_version_increases_on_update(self, db_session, tenant_id, quote):
        updated = QuoteService(db_session).update_document(quote.id, QuoteUpdate(notes="x"), tenant_id)

        assert updated.version > 1


# ===== TESTS DE BORRADO =====

class TestDeleteDocument:

    def test_delete_removes_items(self, db_session, tenant_id, quote):
        QuoteService(db_session).delete_document(quote.id, tenant_id)

        assert db_session.query(Quote).count() == 0
        assert db_session.query(QuoteItem).count() == 0

    def test_delete_clears_forward_link(self, db_session, tenant_id, quote):
        order = ConversionService(db_session).convert_quote_to_order(quote.id, tenant_id)

        QuoteService(db_session).delete_document(quote.id, tenant_id)

        remaining = OrderService(db_session).get_document(order.id, tenant_id)
        db_session.refresh(remaining)
        assert remaining.quote_id is None
        assert db_session.query(OrderItem).count() == 2

    def test_delete_other_tenant_is_not_found(self, db_session, quote, other_tenant_id):
        with pytest.raises(NotFound):
            QuoteService(db_session).delete_document(quote.id, other_tenant_id)


class TestStatusLinkConstraint:

    def test_approved_without_link_is_rejected_by_database(self, db_session, quote):
        quote.status = QuoteStatus.APPROVED

        with pytest.raises(IntegrityError):
            db_session.flush()
        db_session.rollback()
