"""
Reports Module

Este módulo NO crea nuevas tablas, sino que genera consultas sobre las
tablas existentes de otros módulos.

Funcionalidades principales:
- Ingresos de facturas pagadas por hora, día o mes (gráfico del dashboard)

Architecture Pattern: Service Layer
- routers/ -> Define FastAPI endpoints
- services/ -> Lógica de negocio y consultas
- schemas/ -> Modelos Pydantic para responses
"""

from .routers import revenue_router

__all__ = [
    "revenue_router",
]
