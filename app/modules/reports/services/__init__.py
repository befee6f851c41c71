"""
Services package for Reports module

Exports all report service classes for easy importing.
"""

from .revenue import RevenueReportService

__all__ = [
    "RevenueReportService",
]
