"""
Manejo de transacciones para operaciones de varios pasos
"""
from contextlib import contextmanager
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.core.exceptions import ConcurrentModification, DomainError, StorageError

logger = logging.getLogger(__name__)


@contextmanager
def atomic(db: Session, action: str):
    """
    Ejecuta el bloque como una sola transacción.

    Commit al salir sin errores; rollback ante cualquier fallo. Los errores de
    dominio se propagan tal cual, un UPDATE con versión desactualizada se
    reporta como ConcurrentModification y cualquier otro error de SQLAlchemy
    se registra completo y se reduce a StorageError.
    """
    try:
        yield
        db.commit()
    except DomainError:
        db.rollback()
        raise
    except StaleDataError:
        db.rollback()
        logger.warning(f"Concurrent modification detected while {action}")
        raise ConcurrentModification()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Storage failure while {action}")
        raise StorageError()
