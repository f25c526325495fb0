"""
dashboard.py

Compose every analytics piece into one dashboard payload for a period.

    source -> classify -> metrics / series / ranking / customers
           -> comparison / spotlight / insights -> payload

The log and the inventory snapshot are read once per call; everything else is
derived fresh, so calls share no state. A failing collaborator fails the whole
call with CollaboratorError; bad individual records only shrink the totals.
"""

from __future__ import annotations

import logging
from typing import List, Optional

import pandas as pd

from .classify import classify, within
from .compare import compare_metrics
from .config import Settings
from .customers import aggregate_customers, growth_series
from .insights import detect_insights
from .metrics import calculate_metrics
from .periods import resolve_period, to_local
from .ranking import top_products
from .sources import InventoryItem, ShopDataSource, parse_inventory
from .spotlight import window_spotlight
from .timeseries import build_time_series

logger = logging.getLogger(__name__)


class CollaboratorError(RuntimeError):
    """Raised when the event store or the inventory cannot be read."""
    pass


def fetch_shop_data(source: ShopDataSource):
    try:
        transactions = source.list_all_transactions()
        inventory = parse_inventory(source.get_inventory_snapshot())
        low_stock = source.get_low_stock_report(inventory) or ""
    except Exception as e:
        raise CollaboratorError(f"Could not read shop data: {e}") from e
    return transactions, inventory, low_stock


def _money(value) -> float:
    return float(value) if pd.notna(value) else 0.0


def recent_orders(sales: pd.DataFrame, limit: int = 5) -> List[dict]:
    latest = sales.sort_values("Timestamp", ascending=False, kind="stable").head(limit)
    return [
        {
            "id": row.Txn_ID,
            "date": row.Timestamp.strftime("%Y-%m-%d"),
            "customer": {
                "name": row.Customer_Name or "N/A",
                "phone": row.Customer_Phone or "N/A",
            },
            "items": row.Items,
            "grossAmount": _money(row.Gross),
            "discount": _money(row.Discount),
            "discountString": row.Discount_Spec,
            "amount": _money(row.Revenue),
            "cost": _money(row.Cost),
            "profit": _money(row.Profit),
            "status": row.Status,
        }
        for row in latest.itertuples(index=False)
    ]


def assemble_dashboard(transactions, inventory: List[InventoryItem], low_stock_report: str,
                       period, now=None, settings: Optional[Settings] = None) -> dict:
    settings = settings or Settings()
    now = to_local(now, settings.timezone)
    window = resolve_period(period, now, default=settings.default_period, tz=settings.timezone)
    log = classify(transactions, tz=settings.timezone)

    current_sales = within(log.sales, window.current_start, window.current_end)
    current = calculate_metrics(
        current_sales,
        within(log.expenses, window.current_start, window.current_end),
    )
    previous = None
    if window.has_comparison:
        previous = calculate_metrics(
            within(log.sales, window.previous_start, window.previous_end),
            within(log.expenses, window.previous_start, window.previous_end),
        )
    kpis = compare_metrics(current, previous)

    insights = detect_insights(
        window,
        kpis["totalRevenue"]["changePct"],
        low_stock_report,
        inventory,
        log,
        now,
        trend_threshold=settings.trend_threshold_pct,
        dead_stock_days=settings.dead_stock_days,
    )

    logger.info("Built %s dashboard: %d order(s), %d insight(s)",
                window.period, current.order_count, len(insights))

    return {
        "period": window.as_dict(),
        "hasComparison": window.has_comparison,
        "kpis": kpis,
        "charts": {
            "granularity": "hour" if window.is_single_day else "day",
            "timeSeries": build_time_series(log, window),
            "topProducts": top_products(
                within(log.sale_items, window.current_start, window.current_end),
                settings.top_products_limit,
            ),
            "customerGrowth": growth_series(log, window, now, settings.growth_months),
        },
        "modules": {
            "recentOrders": recent_orders(current_sales, settings.recent_orders_limit),
            "insights": [i.to_dict() for i in insights],
            "spotlight": window_spotlight(log, window, now, settings.active_customer_days).to_dict(),
        },
    }


def build_dashboard(source: ShopDataSource, period, now=None,
                    settings: Optional[Settings] = None) -> dict:
    transactions, inventory, low_stock = fetch_shop_data(source)
    return assemble_dashboard(transactions, inventory, low_stock, period, now=now, settings=settings)


def build_customer_table(source: ShopDataSource, period="all", now=None,
                         settings: Optional[Settings] = None) -> List[dict]:
    """Customer list over its own window, independent of any KPI window."""
    settings = settings or Settings()
    try:
        transactions = source.list_all_transactions()
    except Exception as e:
        raise CollaboratorError(f"Could not read shop data: {e}") from e
    now = to_local(now, settings.timezone)
    window = resolve_period(period, now, default=settings.default_period, tz=settings.timezone)
    log = classify(transactions, tz=settings.timezone)
    customers = aggregate_customers(log, window, now=now, active_days=settings.active_customer_days)
    return [c.to_dict() for c in customers]
