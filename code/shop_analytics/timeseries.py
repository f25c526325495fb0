"""
Chart series for the dashboard.

Single-day periods bucket the current window by hour of day, keeping only hours
with activity. Every other period buckets the whole log by calendar date; those
charts are intentionally not clipped to the comparison window.

A category with no activity in a bucket stays missing (None) instead of 0, so a
day with only expenses shows revenue=None, not revenue=0.
"""

from __future__ import annotations

from typing import List

import pandas as pd

from .classify import ClassifiedLog, within
from .periods import PeriodWindow

SERIES_COLUMNS = ["Bucket", "Revenue", "Cost", "Expenses", "Net_Profit"]


def _sum_by(df: pd.DataFrame, keys: pd.Series, col: str) -> pd.Series:
    values = pd.to_numeric(df[col], errors="coerce").fillna(0)
    return values.groupby(keys).sum()


def time_series_frame(log: ClassifiedLog, window: PeriodWindow) -> pd.DataFrame:
    if window.is_single_day:
        sales = within(log.sales, window.current_start, window.current_end)
        expenses = within(log.expenses, window.current_start, window.current_end)
        sale_keys = sales["Timestamp"].dt.hour
        expense_keys = expenses["Timestamp"].dt.hour
    else:
        sales, expenses = log.sales, log.expenses
        sale_keys = sales["Timestamp"].dt.strftime("%Y-%m-%d")
        expense_keys = expenses["Timestamp"].dt.strftime("%Y-%m-%d")

    if sales.empty and expenses.empty:
        return pd.DataFrame(columns=SERIES_COLUMNS)

    parts = {}
    if not sales.empty:
        parts["Revenue"] = _sum_by(sales, sale_keys, "Revenue")
        parts["Cost"] = _sum_by(sales, sale_keys, "Cost")
    if not expenses.empty:
        parts["Expenses"] = _sum_by(expenses, expense_keys, "Amount")

    frame = pd.concat(parts, axis=1).sort_index()
    frame = frame.reindex(columns=["Revenue", "Cost", "Expenses"])
    frame["Net_Profit"] = (
        frame["Revenue"].fillna(0) - frame["Cost"].fillna(0) - frame["Expenses"].fillna(0)
    )
    frame.index.name = "Bucket"
    return frame.reset_index()[SERIES_COLUMNS]


def _maybe(value):
    return None if pd.isna(value) else float(value)


def time_series_records(frame: pd.DataFrame, hourly: bool) -> List[dict]:
    out = []
    for row in frame.itertuples(index=False):
        rec = {}
        if hourly:
            rec["hour"] = int(row.Bucket)
            rec["label"] = f"{int(row.Bucket):02d}:00"
        else:
            rec["label"] = row.Bucket
        rec["revenue"] = _maybe(row.Revenue)
        rec["expenses"] = _maybe(row.Expenses)
        rec["netProfit"] = float(row.Net_Profit)
        out.append(rec)
    return out


def build_time_series(log: ClassifiedLog, window: PeriodWindow) -> List[dict]:
    return time_series_records(time_series_frame(log, window), hourly=window.is_single_day)
