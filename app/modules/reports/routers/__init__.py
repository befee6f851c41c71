"""
Routers package for Reports module

Exports all report router instances for easy importing.
"""

from .revenue import router as revenue_router

__all__ = [
    "revenue_router",
]
