#!/usr/bin/env python3
"""
test_transactions.py

Unit tests for reading raw log records into typed transactions.

Tests:
- Current and legacy (flat single-item) sale shapes
- Discount expressions
- Primary-item cost convention
- Unreadable records are skipped, not fatal
"""

import unittest

from fixtures import at, customer, expense, sale

from shop_analytics.transactions import (
    CustomerRecord,
    Expense,
    Sale,
    TransactionParseError,
    compute_discount,
    parse_log,
    parse_transaction,
)


class TestParseSale(unittest.TestCase):

    def test_line_item_sale(self):
        s = parse_transaction(sale(at("2025-08-06"), qty=2, price=1000, cost=1000, discount=200,
                                   name="Suresh K", phone="98765 43210"))
        self.assertIsInstance(s, Sale)
        self.assertEqual(s.gross_amount, 2000)
        self.assertEqual(s.net_amount, 1800)
        self.assertEqual(s.cost_at_sale, 2000)
        self.assertEqual(s.profit, -200)
        self.assertEqual(s.customer_name, "Suresh K")

    def test_gross_defaults_to_line_totals(self):
        rec = sale(at("2025-08-06"), qty=3, price=250)
        del rec["grossAmount"]
        self.assertEqual(parse_transaction(rec).gross_amount, 750)

    def test_legacy_flat_sale(self):
        s = parse_transaction({
            "id": at("2025-08-06"),
            "type": "Sale",
            "item": "jeans",
            "qty": 2,
            "rate": 1400,
            "grossAmount": 2800,
            "discount": 280,
            "discountString": "10%",
            "costPrice": 2000,
            "customerName": "Priya",
            "entryBy": "Ravi",
        })
        self.assertEqual(len(s.items), 1)
        self.assertEqual(s.primary_item.product_name, "jeans")
        self.assertEqual(s.primary_item.unit_cost_at_sale, 1000)
        self.assertEqual(s.cost_at_sale, 2000)
        self.assertEqual(s.discount_amount, 280)
        self.assertEqual(s.discount_spec, "10%")
        self.assertEqual(s.entered_by, "Ravi")
        self.assertEqual(s.status, "Confirmed")

    def test_discount_from_expression_when_amount_missing(self):
        rec = sale(at("2025-08-06"), qty=2, price=1400, discountSpec="10%")
        del rec["discountAmount"]
        self.assertEqual(parse_transaction(rec).discount_amount, 280)

    def test_only_primary_item_cost_counts(self):
        rec = sale(at("2025-08-06"), product="jeans", price=1000, cost=500)
        rec["items"].append({"productName": "belt", "quantity": 2, "unitPrice": 200, "unitCostAtSale": 150})
        rec["grossAmount"] = 1400
        s = parse_transaction(rec)
        self.assertEqual(s.cost_at_sale, 500)

    def test_sale_without_items(self):
        s = parse_transaction({"id": at("2025-08-06"), "kind": "Sale", "grossAmount": "1,200"})
        self.assertIsNone(s.primary_item)
        self.assertEqual(s.gross_amount, 1200)
        self.assertEqual(s.cost_at_sale, 0)


class TestComputeDiscount(unittest.TestCase):

    def test_percentage(self):
        self.assertEqual(compute_discount(2800, "10%"), 280)

    def test_percentage_is_rounded(self):
        self.assertEqual(compute_discount(999, "5%"), 50)

    def test_flat(self):
        self.assertEqual(compute_discount(2800, "200"), 200)
        self.assertEqual(compute_discount(2800, "rs 200"), 200)
        self.assertEqual(compute_discount(2800, "Rs.150"), 150)

    def test_leading_number_with_trailing_text(self):
        self.assertEqual(compute_discount(2800, "200 off"), 200)
        self.assertEqual(compute_discount(2800, "10 %"), 280)
        self.assertEqual(compute_discount(2800, "10% off"), 280)
        self.assertEqual(compute_discount(2800, "1,000 flat"), 1000)

    def test_unparseable(self):
        self.assertEqual(compute_discount(2800, "some"), 0)
        self.assertEqual(compute_discount(2800, "x%"), 0)
        self.assertEqual(compute_discount(2800, None), 0)


class TestOtherKinds(unittest.TestCase):

    def test_expense(self):
        e = parse_transaction(expense(at("2025-08-06"), 300))
        self.assertIsInstance(e, Expense)
        self.assertEqual(e.amount, 300)
        self.assertEqual(e.category, "food")

    def test_legacy_expense(self):
        e = parse_transaction({"id": at("2025-08-06"), "type": "Expense", "item": "Rent", "total": 5000})
        self.assertEqual(e.reason, "Rent")
        self.assertEqual(e.amount, 5000)
        self.assertEqual(e.category, "Uncategorized")

    def test_customer_record(self):
        c = parse_transaction(customer(at("2025-08-06"), "Suresh", "9876543210"))
        self.assertIsInstance(c, CustomerRecord)
        self.assertTrue(c.is_archived)
        self.assertFalse(parse_transaction(
            customer(at("2025-08-06"), "Suresh", "9876543210", status="active")).is_archived)


class TestParseLog(unittest.TestCase):

    def test_unknown_kind_raises(self):
        with self.assertRaises(TransactionParseError):
            parse_transaction({"id": at("2025-08-06"), "kind": "Refund"})

    def test_missing_id_raises(self):
        with self.assertRaises(TransactionParseError):
            parse_transaction({"kind": "Sale"})

    def test_bad_records_are_skipped(self):
        records = [
            sale(at("2025-08-06")),
            {"kind": "Sale"},
            {"id": at("2025-08-06"), "kind": "Refund"},
            "not a record",
            expense(at("2025-08-06"), 100),
        ]
        with self.assertLogs("shop_analytics.transactions", level="WARNING") as logs:
            parsed = parse_log(records)
        self.assertEqual(len(parsed), 2)
        self.assertIn("Skipped 3", logs.output[0])


if __name__ == "__main__":
    unittest.main(verbosity=2)
