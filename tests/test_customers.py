#!/usr/bin/env python3
"""
test_customers.py

Unit tests for customer aggregation and the new-customer growth series.

Tests:
- One aggregate per identity across spelling / phone formatting
- Active vs Inactive on the 30-day horizon
- Archived customers are suppressed (and can be restored)
- Caller-chosen window for the identity table
- Growth buckets count first-ever purchases only
"""

import unittest

import pandas as pd

from fixtures import NOW, at, customer, sale

from shop_analytics.classify import classify
from shop_analytics.customers import (
    ACTIVE,
    INACTIVE,
    aggregate_customers,
    customer_status,
    first_purchases,
    growth_series,
)
from shop_analytics.periods import resolve_period


class TestAggregateCustomers(unittest.TestCase):

    def test_same_customer_different_formatting(self):
        log = classify([
            sale(at("2025-08-02"), price=1000, name="Suresh K", phone="98765 43210"),
            sale(at("2025-08-05"), price=1500, discount=100, name="suresh k", phone="9876543210"),
        ])
        customers = aggregate_customers(log, resolve_period("month", NOW), now=NOW)
        self.assertEqual(len(customers), 1)
        c = customers[0]
        self.assertEqual(c.total_orders, 2)
        self.assertEqual(c.total_spend, 2400)
        self.assertEqual(c.first_purchase, pd.Timestamp("2025-08-02 10:00"))
        self.assertEqual(c.last_purchase, pd.Timestamp("2025-08-05 10:00"))
        self.assertEqual(c.display_name, "suresh k")
        self.assertEqual(c.key, "suresh k:9876543210")

    def test_sorted_by_spend(self):
        log = classify([
            sale(at("2025-08-01"), price=300, name="Asha", phone="1"),
            sale(at("2025-08-02"), price=900, name="Priya", phone="2"),
            sale(at("2025-08-03"), price=500, name="Ravi", phone="3"),
        ])
        names = [c.display_name for c in aggregate_customers(log, now=NOW)]
        self.assertEqual(names, ["Priya", "Ravi", "Asha"])

    def test_anonymous_sales_are_not_customers(self):
        log = classify([sale(at("2025-08-01")), sale(at("2025-08-02"), phone="9000000000")])
        self.assertEqual(aggregate_customers(log, now=NOW), [])

    def test_status(self):
        log = classify([
            sale(at("2025-07-07", "16:00"), name="Recent", phone="1"),
            sale(at("2025-07-01"), name="Lapsed", phone="2"),
        ])
        status = {c.display_name: c.status for c in aggregate_customers(log, now=NOW)}
        self.assertEqual(status, {"Recent": ACTIVE, "Lapsed": INACTIVE})

    def test_status_boundary(self):
        self.assertEqual(customer_status(pd.Timestamp("2025-07-07 15:00"), NOW), ACTIVE)
        self.assertEqual(customer_status(pd.Timestamp("2025-07-07 14:59"), NOW), INACTIVE)

    def test_member_since_and_dict(self):
        log = classify([sale(at("2025-07-14"), name="Priya", phone="")])
        c = aggregate_customers(log, now=NOW)[0]
        self.assertEqual(c.member_since, "Since Jul 2025")
        d = c.to_dict()
        self.assertEqual(d["phone"], "N/A")
        self.assertEqual(d["memberSince"], "Since Jul 2025")
        self.assertEqual(d["totalOrders"], 1)

    def test_archived_customer_is_suppressed(self):
        log = classify([
            sale(at("2025-08-01"), name="Suresh K", phone="98765 43210"),
            sale(at("2025-08-02"), name="Priya", phone="1"),
            customer(at("2025-08-03"), "SURESH K", "9876543210"),
        ])
        names = [c.display_name for c in aggregate_customers(log, now=NOW)]
        self.assertEqual(names, ["Priya"])
        self.assertIn("suresh k:9876543210", log.archived_keys)
        # revenue is still counted
        self.assertEqual(len(log.sales), 2)

    def test_later_record_restores_customer(self):
        log = classify([
            sale(at("2025-08-01"), name="Suresh K", phone="98765 43210"),
            customer(at("2025-08-02"), "Suresh K", "9876543210"),
            customer(at("2025-08-04"), "Suresh K", "9876543210", status="active"),
        ])
        self.assertEqual(len(aggregate_customers(log, now=NOW)), 1)

    def test_window_limits_identity_table(self):
        log = classify([
            sale(at("2025-07-10"), name="Asha", phone="1"),
            sale(at("2025-08-02"), name="Priya", phone="2"),
        ])
        month = aggregate_customers(log, resolve_period("month", NOW), now=NOW)
        everyone = aggregate_customers(log, resolve_period("all", NOW), now=NOW)
        self.assertEqual([c.display_name for c in month], ["Priya"])
        self.assertEqual(len(everyone), 2)


class TestGrowthSeries(unittest.TestCase):

    def setUp(self):
        self.log = classify([
            sale(at("2024-12-24"), name="Old", phone="0"),
            sale(at("2025-07-01"), name="Asha", phone="1"),
            sale(at("2025-08-02"), name="Asha", phone="1"),
            sale(at("2025-08-02", "17:00"), name="Priya", phone="2"),
            sale(at("2025-08-05"), name="Ravi", phone="3"),
            sale(at("2025-08-05", "12:00"), name="Ravi", phone="3"),
            sale(at("2025-08-05", "13:00"), name="", phone="4"),
        ])

    def test_first_purchases_span_whole_log(self):
        firsts = first_purchases(self.log)
        self.assertEqual(firsts["asha:1"], pd.Timestamp("2025-07-01 10:00"))
        self.assertEqual(len(firsts), 4)

    def test_month_is_daily(self):
        series = growth_series(self.log, resolve_period("month", NOW), NOW)
        self.assertEqual(len(series), 31)
        self.assertEqual(series[0]["label"], "2025-08-01")
        self.assertEqual(series[-1]["label"], "2025-08-31")
        counts = {b["label"]: b["newCustomers"] for b in series}
        # Asha's first purchase was in July
        self.assertEqual(counts["2025-08-02"], 1)
        self.assertEqual(counts["2025-08-05"], 1)
        self.assertEqual(sum(counts.values()), 2)

    def test_week_is_daily(self):
        series = growth_series(self.log, resolve_period("week", NOW), NOW)
        self.assertEqual([b["label"] for b in series][0], "2025-08-03")
        self.assertEqual(len(series), 7)
        self.assertEqual(sum(b["newCustomers"] for b in series), 1)

    def test_all_is_last_six_months(self):
        series = growth_series(self.log, resolve_period("all", NOW), NOW)
        self.assertEqual(
            [b["label"] for b in series],
            ["2025-03", "2025-04", "2025-05", "2025-06", "2025-07", "2025-08"],
        )
        counts = {b["label"]: b["newCustomers"] for b in series}
        self.assertEqual(counts["2025-07"], 1)
        self.assertEqual(counts["2025-08"], 2)
        self.assertEqual(sum(counts.values()), 3)

    def test_no_customers(self):
        series = growth_series(classify([]), resolve_period("all", NOW), NOW)
        self.assertEqual(len(series), 6)
        self.assertTrue(all(b["newCustomers"] == 0 for b in series))


if __name__ == "__main__":
    unittest.main(verbosity=2)
