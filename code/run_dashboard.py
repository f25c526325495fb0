#!/usr/bin/env python3
"""
run_dashboard.py

Build the shop dashboard for one period from a JSON log export and an
inventory CSV, and write it out for inspection.

Outputs (under DASHBOARD_OUTPUT_DIR / --output-dir):
- dashboard.json              full payload
- dashboard_tables.xlsx       KPIs, time series, top products, customers
- tables/*.csv                same tables as CSV
- charts/<period>_series.png  revenue / expenses / net profit (with --chart)

Env (all optional when passed as arguments)
- DASHBOARD_LOG_JSON, DASHBOARD_INVENTORY_CSV, DASHBOARD_OUTPUT_DIR
- SHOP_TIMEZONE, DASHBOARD_DEFAULT_PERIOD and the other settings in shop_analytics.io

Usage:
  python run_dashboard.py --period month --log db.json --inventory inventory.csv --output-dir out
  python run_dashboard.py --summary 2025-08-04 --log db.json
"""

from __future__ import annotations

import argparse
import logging

from shop_analytics.classify import classify, within
from shop_analytics.customers import customer_frame
from shop_analytics.dashboard import assemble_dashboard, fetch_shop_data
from shop_analytics.io import ensure_dirs, load_settings
from shop_analytics.periods import PERIODS, resolve_period, to_local
from shop_analytics.ranking import top_products_frame
from shop_analytics.report import kpi_frame, save_json, write_tables
from shop_analytics.sources import FileSource
from shop_analytics.summary import daily_summary
from shop_analytics.timeseries import time_series_frame


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--period", type=str, default=None, help=f"One of: {', '.join(PERIODS)}")
    ap.add_argument("--now", type=str, default=None, help="Reference time (ISO-8601); default: current time")
    ap.add_argument("--log", type=str, default=None, help="JSON export of the transaction log")
    ap.add_argument("--inventory", type=str, default=None, help="Inventory CSV")
    ap.add_argument("--output-dir", type=str, default=None, help="Directory to write outputs")
    ap.add_argument("--chart", action="store_true", help="Also write a PNG chart of the series")
    ap.add_argument("--summary", type=str, default=None, metavar="DATE",
                    help="Print the daily summary for today / yesterday / YYYY-MM-DD and exit")
    ap.add_argument("--log-level", type=str, default="WARNING")
    args = ap.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    s = load_settings(log_json=args.log, inventory_csv=args.inventory, output_dir=args.output_dir)
    if s.log_json is None:
        raise ValueError("DASHBOARD_LOG_JSON (or --log) must be provided")

    source = FileSource(s.log_json, s.inventory_csv, low_stock_threshold=s.low_stock_default_threshold)
    now = to_local(args.now, s.timezone)

    if args.summary:
        print(daily_summary(source.list_all_transactions(), args.summary, now, s.timezone).as_text())
        return

    ensure_dirs(s)
    period = args.period or s.default_period

    transactions, inventory, low_stock = fetch_shop_data(source)
    payload = assemble_dashboard(transactions, inventory, low_stock, period, now=now, settings=s)
    save_json(payload, s.output_dir / "dashboard.json")

    log = classify(transactions, tz=s.timezone)
    window = resolve_period(period, now, default=s.default_period, tz=s.timezone)
    series = time_series_frame(log, window)
    current_items = within(log.sale_items, window.current_start, window.current_end)

    tables = {
        "KPIs": kpi_frame(payload),
        "Time_Series": series,
        "Top_Products": top_products_frame(current_items, s.top_products_limit),
        "Customers": customer_frame(log, now=now, active_days=s.active_customer_days),
    }
    write_tables(tables, s.tables_dir, s.output_dir / "dashboard_tables.xlsx")

    if args.chart and not series.empty:
        from shop_analytics.charts import plot_series
        plot_series(series, s.charts_dir / f"{window.period}_series.png",
                    f"Revenue vs expenses ({window.period})")

    kpis = payload["kpis"]
    print(f"Dashboard ({window.period}) written to {s.output_dir}")
    print(f"  Revenue:    {kpis['totalRevenue']['value']:,.2f}")
    print(f"  Net profit: {kpis['netProfit']['value']:,.2f}")
    print(f"  Orders:     {kpis['orderCount']['value']}")
    print(f"  Insights:   {len(payload['modules']['insights'])}")
    print(f"  Spotlight:  {payload['modules']['spotlight']['name']}")


if __name__ == "__main__":
    main()
