"""
Base service class for Reports module

Provides common functionality for all report services including
database session management and tenant filtering.
"""

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.orm import Session

from app.modules.invoices.models import Invoice


class BaseReportService:
    """Base service class for all report services"""

    def __init__(self, db: Session, tenant_id: UUID):
        self.db = db
        self.tenant_id = tenant_id

    def _get_base_invoice_query(self):
        """Get base query for invoices with tenant filtering"""
        return self.db.query(Invoice).filter(
            Invoice.tenant_id == self.tenant_id
        )

    def _apply_since_filter(self, query, datetime_field, start: datetime):
        """Apply lower bound (inclusive) to a datetime column"""
        return query.filter(datetime_field >= start)

    @staticmethod
    def _as_utc(value: datetime) -> datetime:
        """SQLite devuelve datetimes naive; se asumen en UTC"""
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
