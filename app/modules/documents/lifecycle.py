"""
Máquinas de estado de los documentos comerciales

Cada tipo de documento tiene un conjunto cerrado de estados y transiciones:

COTIZACIÓN (Quote):
- draft → sent, rejected, expired
- sent → draft, rejected, expired
- approved: solo al convertir en pedido (junto con converted_to_order_id)
- rejected, expired: terminales

PEDIDO (Order):
- pending → processing, cancelled
- processing → pending, cancelled
- completed: solo al convertir en factura (junto con converted_to_invoice_id)
- cancelled: terminal

FACTURA (Invoice):
- draft → sent, paid, cancelled
- sent → draft, paid, cancelled
- paid, cancelled: terminales

Cotizaciones y pedidos se crean siempre en su estado inicial; una factura
puede crearse en cualquiera de sus estados (por defecto draft).

El estado de conversión y el back-link se escriben juntos en
DocumentLifecycle.mark_converted; ningún otro camino puede asignarlos.
"""

import enum
from typing import Dict, FrozenSet, Iterable, Optional
from uuid import UUID

from app.core.exceptions import (
    AlreadyConverted, ConversionRequired, InvalidStatusTransition, ValidationError
)


class QuoteStatus(str, enum.Enum):
    DRAFT = "draft"
    SENT = "sent"
    APPROVED = "approved"   # Convertida en pedido
    REJECTED = "rejected"
    EXPIRED = "expired"


class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"  # Convertido en factura
    CANCELLED = "cancelled"


class InvoiceStatus(str, enum.Enum):
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    CANCELLED = "cancelled"


class DocumentLifecycle:
    """Transiciones permitidas y acoplamiento estado/back-link de un tipo de documento"""

    def __init__(
        self,
        label: str,
        initial: enum.Enum,
        terminal: Iterable[enum.Enum],
        transitions: Dict[enum.Enum, Iterable[enum.Enum]],
        converted_status: Optional[enum.Enum] = None,
        back_link: Optional[str] = None,
        creatable: Optional[Iterable[enum.Enum]] = None,
    ):
        self.label = label
        self.initial = initial
        self.terminal: FrozenSet = frozenset(terminal)
        self.transitions = {state: frozenset(targets) for state, targets in transitions.items()}
        self.converted_status = converted_status
        self.back_link = back_link
        self.creatable: FrozenSet = frozenset(creatable) if creatable is not None else frozenset([initial])

    @property
    def convertible(self) -> bool:
        return self.converted_status is not None

    def is_terminal(self, status) -> bool:
        return status in self.terminal

    def is_converted(self, document) -> bool:
        return self.convertible and getattr(document, self.back_link) is not None

    def is_locked(self, document) -> bool:
        """Un documento convertido o en estado terminal ya no admite cambios de importes"""
        return self.is_terminal(document.status) or self.is_converted(document)

    def ensure_transition(self, current, target) -> None:
        if target == current:
            return
        if self.convertible and target == self.converted_status:
            raise ConversionRequired(
                f"El estado '{target.value}' de {self.label} solo se asigna mediante la conversión"
            )
        if target not in self.transitions.get(current, frozenset()):
            raise InvalidStatusTransition(
                f"No se puede pasar {self.label} de '{current.value}' a '{target.value}'"
            )

    def ensure_creatable(self, status) -> None:
        """Estado pedido al crear el documento (None = estado inicial)"""
        if status is None or status in self.creatable:
            return
        if self.convertible and status == self.converted_status:
            raise ConversionRequired(
                f"El estado '{status.value}' de {self.label} solo se asigna mediante la conversión"
            )
        raise InvalidStatusTransition(
            f"{self.label.capitalize()} se crea en estado '{self.initial.value}', no en '{status.value}'"
        )

    def apply_status(self, document, target) -> None:
        self.ensure_transition(document.status, target)
        document.status = target

    def ensure_convertible(self, document) -> None:
        if not self.convertible:
            raise ValidationError(f"{self.label.capitalize()} no admite conversión")
        if self.is_converted(document):
            raise AlreadyConverted(
                f"{self.label.capitalize()} ya fue convertida (documento {getattr(document, self.back_link)})"
            )
        if self.is_terminal(document.status) or document.status == self.converted_status:
            raise InvalidStatusTransition(
                f"No se puede convertir {self.label} en estado '{document.status.value}'"
            )

    def mark_converted(self, document, target_id: UUID) -> None:
        """Única escritura de estado de conversión + back-link"""
        self.ensure_convertible(document)
        document.status = self.converted_status
        setattr(document, self.back_link, target_id)


QUOTE_LIFECYCLE = DocumentLifecycle(
    label="la cotización",
    initial=QuoteStatus.DRAFT,
    terminal=[QuoteStatus.REJECTED, QuoteStatus.EXPIRED],
    transitions={
        QuoteStatus.DRAFT: [QuoteStatus.SENT, QuoteStatus.REJECTED, QuoteStatus.EXPIRED],
        QuoteStatus.SENT: [QuoteStatus.DRAFT, QuoteStatus.REJECTED, QuoteStatus.EXPIRED],
    },
    converted_status=QuoteStatus.APPROVED,
    back_link="converted_to_order_id",
)

ORDER_LIFECYCLE = DocumentLifecycle(
    label="el pedido",
    initial=OrderStatus.PENDING,
    terminal=[OrderStatus.CANCELLED],
    transitions={
        OrderStatus.PENDING: [OrderStatus.PROCESSING, OrderStatus.CANCELLED],
        OrderStatus.PROCESSING: [OrderStatus.PENDING, OrderStatus.CANCELLED],
    },
    converted_status=OrderStatus.COMPLETED,
    back_link="converted_to_invoice_id",
)

INVOICE_LIFECYCLE = DocumentLifecycle(
    label="la factura",
    initial=InvoiceStatus.DRAFT,
    terminal=[InvoiceStatus.PAID, InvoiceStatus.CANCELLED],
    transitions={
        InvoiceStatus.DRAFT: [InvoiceStatus.SENT, InvoiceStatus.PAID, InvoiceStatus.CANCELLED],
        InvoiceStatus.SENT: [InvoiceStatus.DRAFT, InvoiceStatus.PAID, InvoiceStatus.CANCELLED],
    },
    creatable=list(InvoiceStatus),
)
