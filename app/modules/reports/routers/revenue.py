"""
Revenue Report Router

Datos para el gráfico de ingresos del dashboard.
"""

from typing import List, Optional

from fastapi import APIRouter, Query

from app.dependencies.dbDependecies import db_dependency
from app.dependencies.tenantDependencies import TenantId

from ..services.revenue import RevenueReportService
from ..schemas import RevenuePoint


router = APIRouter(prefix="/revenue", tags=["Reports"])


@router.get("", response_model=List[RevenuePoint])
def get_revenue(
    db: db_dependency,
    tenant_id: TenantId,
    period: Optional[str] = Query("month", description="today | week | month | year")
):
    """
    Ingresos de facturas pagadas agrupados por intervalo.

    Un periodo desconocido se trata como `month`.
    """
    return RevenueReportService(db=db, tenant_id=tenant_id).get_revenue(period)
