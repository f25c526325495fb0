"""
classify.py

Split the parsed log into per-kind DataFrames on the shop-local clock.

Outputs
- sales:      one row per Sale (primary item columns, money columns, customer key)
- sale_items: one row per line item of every Sale, carrying its share of the
              sale's net revenue (pro rata to line gross)
- expenses:   one row per Expense
- archived_keys: identity keys whose latest Customer record is archived

Archived identities keep their sales (revenue is revenue) but lose their
Customer_Key, which removes them from every customer-facing aggregation.
Records whose id is not a readable timestamp are dropped and counted.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import FrozenSet, Iterable, Optional

import pandas as pd

from .config import DEFAULT_TIMEZONE
from .identity import identity_key, normalize_product
from .periods import to_local
from .transactions import CustomerRecord, Expense, Sale, parse_log

logger = logging.getLogger(__name__)

SALE_COLUMNS = [
    "Txn_ID", "Timestamp", "Product", "Product_Key", "Quantity",
    "Gross", "Discount", "Discount_Spec", "Revenue", "Cost", "Profit",
    "Customer_Name", "Customer_Phone", "Customer_Key",
    "Status", "Entered_By", "Items",
]

SALE_ITEM_COLUMNS = [
    "Txn_ID", "Timestamp", "Product", "Product_Key", "Quantity", "Line_Gross", "Line_Revenue",
]

EXPENSE_COLUMNS = ["Txn_ID", "Timestamp", "Reason", "Category", "Amount", "Entered_By"]


@dataclass(frozen=True, eq=False)
class ClassifiedLog:
    sales: pd.DataFrame
    sale_items: pd.DataFrame
    expenses: pd.DataFrame
    archived_keys: FrozenSet[str]

    @property
    def customer_sales(self) -> pd.DataFrame:
        """Sales attributable to a known, non-archived customer."""
        return self.sales[self.sales["Customer_Key"] != ""]


def parse_timestamp(txn_id: str, tz: str = DEFAULT_TIMEZONE) -> Optional[pd.Timestamp]:
    try:
        ts = to_local(txn_id, tz)
    except (TypeError, ValueError, OverflowError):
        return None
    return None if pd.isna(ts) else ts


def _frame(rows, columns) -> pd.DataFrame:
    df = pd.DataFrame(rows, columns=columns)
    df["Timestamp"] = pd.to_datetime(df["Timestamp"])
    return df.sort_values("Timestamp", kind="stable").reset_index(drop=True)


def _archived_keys(customers) -> FrozenSet[str]:
    # latest record per identity wins, so a later non-archived record restores it
    state = {}
    for _, record in sorted(customers, key=lambda c: c[0]):
        state[identity_key(record.name, record.phone)] = record.is_archived
    return frozenset(k for k, archived in state.items() if archived)


def classify(transactions: Iterable, tz: str = DEFAULT_TIMEZONE) -> ClassifiedLog:
    sales, items, expenses, customers = [], [], [], []
    bad_ids = 0

    for txn in parse_log(transactions):
        ts = parse_timestamp(txn.id, tz)
        if ts is None:
            bad_ids += 1
            continue

        if isinstance(txn, Sale):
            sales.append(_sale_row(txn, ts))
            for item, revenue in zip(txn.items, line_revenue(txn)):
                items.append([
                    txn.id, ts, item.product_name, normalize_product(item.product_name),
                    item.quantity, item.gross, revenue,
                ])
        elif isinstance(txn, Expense):
            expenses.append([txn.id, ts, txn.reason, txn.category, txn.amount, txn.entered_by])
        elif isinstance(txn, CustomerRecord):
            customers.append((ts, txn))
        else:
            raise TypeError(f"Unhandled transaction type {type(txn).__name__}")

    if bad_ids:
        logger.warning("Dropped %d record(s) with unreadable timestamp ids", bad_ids)

    archived = _archived_keys(customers)
    sales_df = _frame(sales, SALE_COLUMNS)
    if archived:
        sales_df.loc[sales_df["Customer_Key"].isin(archived), "Customer_Key"] = ""

    return ClassifiedLog(
        sales=sales_df,
        sale_items=_frame(items, SALE_ITEM_COLUMNS),
        expenses=_frame(expenses, EXPENSE_COLUMNS),
        archived_keys=archived,
    )


def _sale_row(sale: Sale, ts: pd.Timestamp) -> list:
    primary = sale.primary_item
    product = primary.product_name if primary else ""
    key = identity_key(sale.customer_name, sale.customer_phone) if sale.customer_name else ""
    return [
        sale.id, ts, product, normalize_product(product),
        primary.quantity if primary else 0.0,
        sale.gross_amount, sale.discount_amount, sale.discount_spec,
        sale.net_amount, sale.cost_at_sale, sale.profit,
        sale.customer_name, sale.customer_phone, key,
        sale.status, sale.entered_by, describe_items(sale),
    ]


def within(df: pd.DataFrame, start=None, end=None) -> pd.DataFrame:
    """Rows with start <= Timestamp < end; a None bound is unbounded."""
    mask = pd.Series(True, index=df.index)
    if start is not None:
        mask &= df["Timestamp"] >= start
    if end is not None:
        mask &= df["Timestamp"] < end
    return df[mask]


def line_revenue(sale: Sale) -> list:
    """Split a sale's net revenue across its items by line gross; the shares sum to the sale."""
    if not sale.items:
        return []
    items_gross = sum(item.gross for item in sale.items)
    if not items_gross:
        return [sale.net_amount / len(sale.items)] * len(sale.items)
    return [sale.net_amount * item.gross / items_gross for item in sale.items]


def describe_items(sale: Sale) -> str:
    return ", ".join(f"{item.quantity:g} x {item.product_name}" for item in sale.items)
