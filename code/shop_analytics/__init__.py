"""
Reporting engine for a small shop's sales / expense / customer log.
"""

from .dashboard import (
    build_dashboard,
    assemble_dashboard,
    build_customer_table,
    CollaboratorError,
)
from .periods import resolve_period, PeriodWindow, PeriodError
from .sources import ShopDataSource, InMemorySource, FileSource
from .summary import daily_summary, InvalidDateError

__all__ = [
    "build_dashboard",
    "assemble_dashboard",
    "build_customer_table",
    "CollaboratorError",
    "resolve_period",
    "PeriodWindow",
    "PeriodError",
    "ShopDataSource",
    "InMemorySource",
    "FileSource",
    "daily_summary",
    "InvalidDateError",
]
