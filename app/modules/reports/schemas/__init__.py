"""
Pydantic schemas for Reports module
"""

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field


class RevenuePeriod(str, Enum):
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class RevenuePoint(BaseModel):
    """Un intervalo del gráfico de ingresos"""
    date: str = Field(description="Hora (HH:00), día (YYYY-MM-DD) o mes (YYYY-MM)")
    revenue: Decimal = Field(description="Suma de facturas pagadas, redondeada a 2 decimales")
