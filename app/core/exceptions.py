"""
Excepciones de dominio del back office

Los servicios lanzan estas excepciones cuando se viola una regla de negocio.
La capa HTTP (app/main.py) las traduce a respuestas JSON con la forma
{"kind": ..., "detail": ...} y el código de estado de cada clase.
"""
from fastapi import status


class DomainError(Exception):
    """Base de todos los errores de dominio."""

    kind = "domain_error"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Error de negocio"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(DomainError):
    """Campo requerido ausente o valor mal formado."""

    kind = "validation_error"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Datos inválidos"


class InvalidItem(ValidationError):
    """Ítem con cantidad o precio fuera de rango."""

    kind = "invalid_item"
    default_message = "Ítem inválido"


class InvalidStatusTransition(ValidationError):
    kind = "invalid_status_transition"
    default_message = "Transición de estado no permitida"


class ConversionRequired(ValidationError):
    """El estado solicitado solo se alcanza mediante una conversión."""

    kind = "conversion_required"
    default_message = "Este estado solo se asigna al convertir el documento"


class DocumentLocked(ValidationError):
    kind = "document_locked"
    default_message = "El documento ya no se puede modificar"


class NotFound(DomainError):
    """Registro inexistente o perteneciente a otro tenant (indistinguibles)."""

    kind = "not_found"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Registro no encontrado"


class AlreadyConverted(DomainError):
    kind = "already_converted"
    status_code = status.HTTP_409_CONFLICT
    default_message = "El documento ya fue convertido"


class ConcurrentModification(DomainError):
    kind = "concurrent_modification"
    status_code = status.HTTP_409_CONFLICT
    default_message = "El documento fue modificado por otra operación, recárguelo e intente de nuevo"


class StorageError(DomainError):
    """Fallo de la capa de persistencia; el detalle interno nunca llega al cliente."""

    kind = "storage_error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Error interno del servidor"
