"""
Revenue Report Service

Suma el total de las facturas pagadas del tenant por intervalo de tiempo:

- today: por hora, desde las 00:00 hasta la hora actual ("HH:00")
- week: por día, últimos 7 días ("YYYY-MM-DD")
- month: por día, últimos 30 días ("YYYY-MM-DD")
- year: por mes, últimos 12 meses ("YYYY-MM")

Los intervalos sin facturas aparecen con 0. Todo en UTC.
"""

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Dict, List, Optional

from .base import BaseReportService
from app.common.mixins import utcnow
from app.modules.documents.lifecycle import InvoiceStatus
from app.modules.invoices.models import Invoice
from app.modules.pricing.calculator import round_money
from app.modules.reports.schemas import RevenuePeriod, RevenuePoint

DAILY_WINDOWS = {
    RevenuePeriod.WEEK: 7,
    RevenuePeriod.MONTH: 30,
}


def parse_period(value: Optional[str]) -> RevenuePeriod:
    """Periodo desconocido o vacío → month"""
    try:
        return RevenuePeriod(value)
    except ValueError:
        return RevenuePeriod.MONTH


def _shift_months(year: int, month: int, delta: int):
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def bucket_key(period: RevenuePeriod, moment: datetime) -> str:
    if period == RevenuePeriod.TODAY:
        return f"{moment.hour:02d}:00"
    if period == RevenuePeriod.YEAR:
        return f"{moment.year:04d}-{moment.month:02d}"
    return moment.date().isoformat()


def period_buckets(period: RevenuePeriod, now: datetime):
    """Inicio del periodo y claves ordenadas de todos sus intervalos"""
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)

    if period == RevenuePeriod.TODAY:
        return midnight, [f"{hour:02d}:00" for hour in range(now.hour + 1)]

    if period == RevenuePeriod.YEAR:
        months = [_shift_months(now.year, now.month, -offset) for offset in range(11, -1, -1)]
        first_year, first_month = months[0]
        start = midnight.replace(year=first_year, month=first_month, day=1)
        return start, [f"{year:04d}-{month:02d}" for year, month in months]

    days = DAILY_WINDOWS[period]
    start = midnight - timedelta(days=days - 1)
    return start, [(start + timedelta(days=offset)).date().isoformat() for offset in range(days)]


class RevenueReportService(BaseReportService):
    """Service for the revenue chart"""

    def get_revenue(self, period: Optional[str] = None, now: Optional[datetime] = None) -> List[RevenuePoint]:
        period = parse_period(period)
        now = self._as_utc(now or utcnow())
        start, buckets = period_buckets(period, now)

        query = self._get_base_invoice_query().filter(Invoice.status == InvoiceStatus.PAID)
        query = self._apply_since_filter(query, Invoice.created_at, start)
        rows = query.with_entities(Invoice.created_at, Invoice.total).order_by(Invoice.created_at.asc()).all()

        revenue: Dict[str, Decimal] = {key: Decimal("0") for key in buckets}
        for created_at, total in rows:
            key = bucket_key(period, self._as_utc(created_at))
            if key in revenue:
                revenue[key] += total

        return [RevenuePoint(date=key, revenue=round_money(revenue[key])) for key in buckets]
