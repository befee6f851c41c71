"""
Tests para el reporte de ingresos

- Intervalos rellenados con 0 y ordenados
- Solo facturas pagadas del tenant
- Periodo desconocido → month
"""

import pytest
from datetime import datetime, timezone
from decimal import Decimal
from fastapi.testclient import TestClient

from app.main import app
from app.modules.documents.lifecycle import InvoiceStatus
from app.modules.documents.schemas import DocumentItemCreate
from app.modules.invoices.schemas import InvoiceCreate, InvoiceUpdate
from app.modules.invoices.service import InvoiceService
from app.modules.reports.schemas import RevenuePeriod
from app.modules.reports.services.revenue import (
    RevenueReportService, bucket_key, parse_period, period_buckets
)


client = TestClient(app)

NOW = datetime(2024, 6, 15, 14, 30, tzinfo=timezone.utc)


# ===== FIXTURES =====

@pytest.fixture
def make_invoice(db_session, customer, product):
    """Crea una factura de un ítem con la fecha de creación indicada"""
    service = InvoiceService(db_session)

    def _make(tenant_id, price, created_at, paid=True):
        invoice = service.create_document(InvoiceCreate(
            customer_id=customer.id,
            invoice_number=f"F-{created_at.isoformat()}",
            tax_percentage=Decimal("0"),
            items=[DocumentItemCreate(product_id=product.id, quantity=1, price=Decimal(price))],
        ), tenant_id)
        if paid:
            invoice = service.update_document(invoice.id, InvoiceUpdate(status=InvoiceStatus.PAID), tenant_id)
        invoice.created_at = created_at
        db_session.commit()
        return invoice

    return _make


# ===== TESTS DE INTERVALOS =====

class TestBuckets:

    def test_parse_period(self):
        assert parse_period("year") == RevenuePeriod.YEAR
        assert parse_period("decade") == RevenuePeriod.MONTH
        assert parse_period(None) == RevenuePeriod.MONTH

    def test_today_until_current_hour(self):
        start, keys = period_buckets(RevenuePeriod.TODAY, NOW)

        assert start == datetime(2024, 6, 15, tzinfo=timezone.utc)
        assert keys[0] == "00:00"
        assert keys[-1] == "14:00"
        assert len(keys) == 15

    def test_week(self):
        start, keys = period_buckets(RevenuePeriod.WEEK, NOW)

        assert start == datetime(2024, 6, 9, tzinfo=timezone.utc)
        assert keys == [f"2024-06-{day:02d}" for day in range(9, 16)]

    def test_month_has_thirty_days(self):
        start, keys = period_buckets(RevenuePeriod.MONTH, NOW)

        assert len(keys) == 30
        assert keys[0] == "2024-05-17"
        assert keys[-1] == "2024-06-15"

    def test_year_crosses_year_boundary(self):
        start, keys = period_buckets(RevenuePeriod.YEAR, NOW)

        assert start == datetime(2023, 7, 1, tzinfo=timezone.utc)
        assert keys[0] == "2023-07"
        assert keys[-1] == "2024-06"
        assert len(keys) == 12

    def test_bucket_key(self):
        moment = datetime(2024, 6, 3, 9, 45, tzinfo=timezone.utc)

        assert bucket_key(RevenuePeriod.TODAY, moment) == "09:00"
        assert bucket_key(RevenuePeriod.WEEK, moment) == "2024-06-03"
        assert bucket_key(RevenuePeriod.YEAR, moment) == "2024-06"


# ===== TESTS DEL SERVICIO =====

class TestRevenueReportService:

    def test_sums_paid_invoices_per_day(self, db_session, tenant_id, make_invoice):
        make_invoice(tenant_id, "100.00", datetime(2024, 6, 14, 10, tzinfo=timezone.utc))
        make_invoice(tenant_id, "50.25", datetime(2024, 6, 14, 18, tzinfo=timezone.utc))
        make_invoice(tenant_id, "20.00", datetime(2024, 6, 15, 8, tzinfo=timezone.utc))

        points = RevenueReportService(db_session, tenant_id).get_revenue("week", now=NOW)

        by_date = {p.date: p.revenue for p in points}
        assert by_date["2024-06-14"] == Decimal("150.25")
        assert by_date["2024-06-15"] == Decimal("20.00")
        assert by_date["2024-06-09"] == Decimal("0.00")
        assert [p.date for p in points] == sorted(by_date)

    def test_ignores_unpaid_and_old_invoices(self, db_session, tenant_id, make_invoice):
        make_invoice(tenant_id, "100.00", datetime(2024, 6, 14, 10, tzinfo=timezone.utc), paid=False)
        make_invoice(tenant_id, "75.00", datetime(2024, 5, 1, 10, tzinfo=timezone.utc))

        points = RevenueReportService(db_session, tenant_id).get_revenue("week", now=NOW)

        assert all(p.revenue == Decimal("0") for p in points)

    def test_scoped_by_tenant(self, db_session, tenant_id, other_tenant_id, make_invoice):
        make_invoice(tenant_id, "100.00", datetime(2024, 6, 15, 9, tzinfo=timezone.utc))

        points = RevenueReportService(db_session, other_tenant_id).get_revenue("today", now=NOW)

        assert sum(p.revenue for p in points) == Decimal("0")

    def test_year_groups_by_month(self, db_session, tenant_id, make_invoice):
        make_invoice(tenant_id, "10.00", datetime(2023, 8, 2, tzinfo=timezone.utc))
        make_invoice(tenant_id, "15.00", datetime(2023, 8, 28, tzinfo=timezone.utc))

        points = RevenueReportService(db_session, tenant_id).get_revenue("year", now=NOW)

        assert {p.date: p.revenue for p in points}["2023-08"] == Decimal("25.00")

    def test_unknown_period_is_month(self, db_session, tenant_id):
        points = RevenueReportService(db_session, tenant_id).get_revenue("decade", now=NOW)

        assert len(points) == 30


class TestRevenueAPI:

    def test_default_period(self, headers):
        response = client.get("/revenue", headers=headers)

        assert response.status_code == 200
        assert len(response.json()) == 30

    def test_today(self, headers):
        response = client.get("/revenue", params={"period": "today"}, headers=headers)

        assert response.json()[0] == {"date": "00:00", "revenue": "0.00"}

    def test_requires_tenant(self):
        assert client.get("/revenue").status_code == 401
