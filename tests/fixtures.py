"""
Raw log records and a fixed clock shared by the test modules.

NOW is Wednesday 2025-08-06 15:00 shop-local (Asia/Kolkata); the Sunday that
starts its week is 2025-08-03.
"""

import sys
from pathlib import Path

import pandas as pd

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "code"))

NOW = pd.Timestamp("2025-08-06 15:00")


def at(date: str, time: str = "10:00") -> str:
    """Log id for a shop-local date/time, written the way the store writes it."""
    return f"{date}T{time}:00+05:30"


def sale(txn_id, product="jeans", qty=1, price=1000, cost=500, discount=0,
         name="", phone="", **extra):
    rec = {
        "id": txn_id,
        "kind": "Sale",
        "items": [{
            "productName": product,
            "quantity": qty,
            "unitPrice": price,
            "unitCostAtSale": cost,
        }],
        "grossAmount": qty * price,
        "discountAmount": discount,
        "customerName": name,
        "customerPhone": phone,
        "status": "Confirmed",
        "enteredBy": "owner",
    }
    rec.update(extra)
    return rec


def expense(txn_id, amount, reason="Chai and snacks", category="food"):
    return {
        "id": txn_id,
        "kind": "Expense",
        "reason": reason,
        "category": category,
        "amount": amount,
        "enteredBy": "owner",
    }


def customer(txn_id, name, phone, status="archived"):
    return {"id": txn_id, "kind": "Customer", "name": name, "phone": phone, "status": status}
