"""
Metrics snapshot for a set of sales and expenses.

revenue  = sum(gross - discount)
cost     = sum(primary item unit cost x quantity)
profit   = revenue - cost - expenses
margin % = 100 x (revenue - cost) / revenue, 0 when there is no revenue
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet

import pandas as pd

KPI_FIELDS = {
    "totalRevenue": "total_revenue",
    "totalCost": "total_cost",
    "netProfit": "net_profit",
    "grossMarginPct": "gross_margin_pct",
    "totalExpenses": "total_expenses",
    "orderCount": "order_count",
    "averageOrderValue": "average_order_value",
    "newCustomerCount": "new_customer_count",
}


@dataclass(frozen=True)
class MetricsSnapshot:
    total_revenue: float
    total_cost: float
    net_profit: float
    gross_margin_pct: float
    total_expenses: float
    order_count: int
    average_order_value: float
    new_customer_count: int
    customer_keys: FrozenSet[str] = field(default_factory=frozenset, repr=False)

    @classmethod
    def from_totals(cls, revenue: float, cost: float, expenses: float,
                    order_count: int, customer_keys=frozenset()) -> "MetricsSnapshot":
        keys = frozenset(customer_keys)
        return cls(
            total_revenue=revenue,
            total_cost=cost,
            net_profit=revenue - cost - expenses,
            gross_margin_pct=100 * (revenue - cost) / revenue if revenue else 0.0,
            total_expenses=expenses,
            order_count=order_count,
            average_order_value=revenue / order_count if order_count else 0.0,
            new_customer_count=len(keys),
            customer_keys=keys,
        )

    def to_dict(self) -> dict:
        return {name: getattr(self, attr) for name, attr in KPI_FIELDS.items()}


def _total(df: pd.DataFrame, col: str) -> float:
    if df.empty:
        return 0.0
    return float(pd.to_numeric(df[col], errors="coerce").fillna(0).sum())


def calculate_metrics(sales: pd.DataFrame, expenses: pd.DataFrame) -> MetricsSnapshot:
    keys = sales.loc[sales["Customer_Key"] != "", "Customer_Key"] if not sales.empty else []
    return MetricsSnapshot.from_totals(
        revenue=_total(sales, "Revenue"),
        cost=_total(sales, "Cost"),
        expenses=_total(expenses, "Amount"),
        order_count=int(len(sales)),
        customer_keys=set(keys),
    )


def combine(a: MetricsSnapshot, b: MetricsSnapshot) -> MetricsSnapshot:
    """Snapshot of the union of two disjoint sale/expense sets."""
    return MetricsSnapshot.from_totals(
        revenue=a.total_revenue + b.total_revenue,
        cost=a.total_cost + b.total_cost,
        expenses=a.total_expenses + b.total_expenses,
        order_count=a.order_count + b.order_count,
        customer_keys=a.customer_keys | b.customer_keys,
    )
