"""
customers.py

Customer lifetime aggregation keyed by the derived identity key.

The identity table is built from sales inside a caller-chosen window, which
need not match the KPI window (e.g. an all-time customer list on a monthly
dashboard). The growth series always looks at first-ever purchases across the
whole log, then counts how many of them land in each output bucket.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

import pandas as pd

from .classify import ClassifiedLog, within
from .periods import ALL, PeriodWindow, month_start, to_local

ACTIVE = "Active"
INACTIVE = "Inactive"

CUSTOMER_COLUMNS = [
    "Customer_Key", "Display_Name", "Phone", "Total_Orders", "Total_Spend",
    "First_Purchase", "Last_Purchase", "Status",
]


@dataclass(frozen=True)
class CustomerAggregate:
    key: str
    display_name: str
    phone: str
    total_orders: int
    total_spend: float
    first_purchase: pd.Timestamp
    last_purchase: pd.Timestamp
    status: str

    @property
    def member_since(self) -> str:
        return f"Since {self.first_purchase.strftime('%b %Y')}"

    def to_dict(self) -> dict:
        return {
            "id": self.key,
            "name": self.display_name,
            "phone": self.phone,
            "totalOrders": self.total_orders,
            "totalSpend": self.total_spend,
            "firstPurchase": self.first_purchase.isoformat(),
            "lastPurchase": self.last_purchase.isoformat(),
            "memberSince": self.member_since,
            "status": self.status,
        }


def customer_status(last_purchase: pd.Timestamp, now, active_days: int = 30) -> str:
    return ACTIVE if to_local(now) - last_purchase <= pd.Timedelta(days=active_days) else INACTIVE


def _latest_nonblank(values: pd.Series) -> str:
    present = values[values.astype(str).str.strip() != ""]
    return str(present.iloc[-1]) if not present.empty else ""


def customer_frame(log: ClassifiedLog, start=None, end=None, now=None,
                   active_days: int = 30) -> pd.DataFrame:
    sales = within(log.customer_sales, start, end)
    if sales.empty:
        return pd.DataFrame(columns=CUSTOMER_COLUMNS)

    sales = sales.assign(Revenue=pd.to_numeric(sales["Revenue"], errors="coerce").fillna(0))
    grouped = sales.groupby("Customer_Key", sort=False)
    df = pd.DataFrame({
        "Display_Name": grouped["Customer_Name"].agg(_latest_nonblank),
        "Phone": grouped["Customer_Phone"].agg(_latest_nonblank),
        "Total_Orders": grouped.size(),
        "Total_Spend": grouped["Revenue"].sum(),
        "First_Purchase": grouped["Timestamp"].min(),
        "Last_Purchase": grouped["Timestamp"].max(),
    })
    df["Phone"] = df["Phone"].replace("", "N/A")
    now = to_local(now)
    df["Status"] = [customer_status(ts, now, active_days) for ts in df["Last_Purchase"]]

    df.index.name = "Customer_Key"
    df = df.reset_index()
    return df.sort_values(["Total_Spend", "Display_Name"], ascending=[False, True],
                          kind="stable").reset_index(drop=True)[CUSTOMER_COLUMNS]


def aggregate_customers(log: ClassifiedLog, window: Optional[PeriodWindow] = None,
                        now=None, active_days: int = 30) -> List[CustomerAggregate]:
    start = window.current_start if window else None
    end = window.current_end if window else None
    frame = customer_frame(log, start, end, now=now, active_days=active_days)
    return [
        CustomerAggregate(
            key=row.Customer_Key,
            display_name=row.Display_Name,
            phone=row.Phone,
            total_orders=int(row.Total_Orders),
            total_spend=float(row.Total_Spend),
            first_purchase=row.First_Purchase,
            last_purchase=row.Last_Purchase,
            status=row.Status,
        )
        for row in frame.itertuples(index=False)
    ]


# ======================================================
# GROWTH SERIES
# ======================================================

def first_purchases(log: ClassifiedLog) -> pd.Series:
    """Earliest purchase per identity key over the entire log."""
    sales = log.customer_sales
    if sales.empty:
        return pd.Series(dtype="datetime64[ns]")
    return sales.groupby("Customer_Key")["Timestamp"].min()


def _growth_buckets(window: PeriodWindow, now, months: int):
    if window.period == ALL or window.current_start is None:
        first = month_start(to_local(now)) - pd.DateOffset(months=months - 1)
        labels = [p.strftime("%Y-%m") for p in pd.period_range(first, periods=months, freq="M")]
        return labels, "%Y-%m"
    days = pd.date_range(window.current_start, window.current_end - pd.Timedelta(days=1), freq="D")
    return [d.strftime("%Y-%m-%d") for d in days], "%Y-%m-%d"


def growth_series(log: ClassifiedLog, window: PeriodWindow, now=None,
                  months: int = 6) -> List[dict]:
    """
    New customers per bucket: daily across the window, or monthly over the
    last `months` months (current month included) for the "all" period.
    """
    labels, fmt = _growth_buckets(window, now, months)
    firsts = first_purchases(log)
    if firsts.empty:
        counts = pd.Series(0, index=labels)
    else:
        counts = firsts.dt.strftime(fmt).value_counts().reindex(labels, fill_value=0)
    return [{"label": label, "newCustomers": int(n)} for label, n in counts.items()]
