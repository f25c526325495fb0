"""
Single-day sales / expenses / profit summary, as sent in reply to a
"/summary [today|yesterday|YYYY-MM-DD]" message.
"""

from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

from .classify import classify, within
from .config import DEFAULT_TIMEZONE
from .periods import TODAY, YESTERDAY, to_local


class InvalidDateError(ValueError):
    """Raised when the summary date is not today, yesterday or YYYY-MM-DD."""
    pass


@dataclass(frozen=True)
class DailySummary:
    date: str
    total_sales: float
    total_expenses: float

    @property
    def profit(self) -> float:
        return self.total_sales - self.total_expenses

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "totalSales": self.total_sales,
            "totalExpenses": self.total_expenses,
            "profit": self.profit,
        }

    def as_text(self, currency: str = "₹") -> str:
        return (
            f"Summary for {self.date}:\n"
            f"Sales: {currency}{self.total_sales:g}\n"
            f"Expenses: {currency}{self.total_expenses:g}\n"
            f"Net Profit: {currency}{self.profit:g}"
        )


def resolve_day(date_arg, now=None, tz: str = DEFAULT_TIMEZONE) -> pd.Timestamp:
    arg = str(date_arg or TODAY).strip().lower()
    today = to_local(now, tz).normalize()
    if arg == TODAY:
        return today
    if arg == YESTERDAY:
        return today - pd.Timedelta(days=1)
    try:
        return pd.to_datetime(arg, format="%Y-%m-%d")
    except ValueError:
        raise InvalidDateError(
            f"Invalid date {date_arg!r}. Use YYYY-MM-DD, 'today' or 'yesterday'."
        ) from None


def daily_summary(transactions, date_arg=TODAY, now=None, tz: str = DEFAULT_TIMEZONE) -> DailySummary:
    day = resolve_day(date_arg, now, tz)
    log = classify(transactions, tz=tz)
    end = day + pd.Timedelta(days=1)
    sales = within(log.sales, day, end)
    expenses = within(log.expenses, day, end)
    return DailySummary(
        date=day.strftime("%Y-%m-%d"),
        total_sales=float(pd.to_numeric(sales["Revenue"]).sum()) if not sales.empty else 0.0,
        total_expenses=float(pd.to_numeric(expenses["Amount"]).sum()) if not expenses.empty else 0.0,
    )
