"""Top products by revenue within the current window."""

from __future__ import annotations

from typing import List

import pandas as pd

RANKING_COLUMNS = ["Product", "Quantity", "Revenue"]


def top_products_frame(sale_items: pd.DataFrame, limit: int = 5) -> pd.DataFrame:
    # Every line item counts under its own product, credited with its share of
    # the sale's net revenue.
    named = sale_items[sale_items["Product_Key"] != ""]
    if named.empty:
        return pd.DataFrame(columns=RANKING_COLUMNS)

    df = named.assign(
        Quantity=pd.to_numeric(named["Quantity"], errors="coerce").fillna(0),
        Revenue=pd.to_numeric(named["Line_Revenue"], errors="coerce").fillna(0),
    )
    grouped = (
        df.groupby("Product_Key", sort=False)
          .agg(Product=("Product", "first"), Quantity=("Quantity", "sum"), Revenue=("Revenue", "sum"))
          .sort_values("Revenue", ascending=False, kind="stable")
    )
    return grouped.head(limit).reset_index(drop=True)[RANKING_COLUMNS]


def top_products(sale_items: pd.DataFrame, limit: int = 5) -> List[dict]:
    frame = top_products_frame(sale_items, limit)
    return [
        {"product": row.Product, "quantity": float(row.Quantity), "revenue": float(row.Revenue)}
        for row in frame.itertuples(index=False)
    ]
