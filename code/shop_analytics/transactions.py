"""
transactions.py

Typed view of the shop's append-only event log.

Every record is keyed by its ISO-8601 timestamp id and is one of three kinds:
- Sale:     line items with the unit cost frozen at sale time, discount, customer fields
- Expense:  reason / category / amount
- Customer: explicit identity record, only used to archive (soft-delete) a customer

Raw records come from the event store as plain mappings. Older records use the
flat single-item shape (item / qty / rate / costPrice with costPrice as the line
total) and legacy field names (type, discount, discountString, entryBy, total);
both shapes are read into the same types here.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple, Union

import pandas as pd

logger = logging.getLogger(__name__)

KIND_SALE = "Sale"
KIND_EXPENSE = "Expense"
KIND_CUSTOMER = "Customer"

KINDS = (KIND_SALE, KIND_EXPENSE, KIND_CUSTOMER)

DEFAULT_SALE_STATUS = "Confirmed"
ARCHIVED_STATUS = "archived"


class TransactionParseError(ValueError):
    """Raised when a raw log record cannot be read as any transaction kind."""
    pass


@dataclass(frozen=True)
class LineItem:
    product_name: str
    quantity: float
    unit_price: float
    unit_cost_at_sale: float

    @property
    def gross(self) -> float:
        return self.unit_price * self.quantity

    @property
    def cost(self) -> float:
        return self.unit_cost_at_sale * self.quantity


@dataclass(frozen=True)
class Sale:
    id: str
    items: Tuple[LineItem, ...]
    gross_amount: float
    discount_amount: float
    discount_spec: str = ""
    customer_name: str = ""
    customer_phone: str = ""
    status: str = DEFAULT_SALE_STATUS
    entered_by: str = ""

    kind = KIND_SALE

    @property
    def primary_item(self) -> Optional[LineItem]:
        return self.items[0] if self.items else None

    @property
    def net_amount(self) -> float:
        return self.gross_amount - self.discount_amount

    @property
    def cost_at_sale(self) -> float:
        # Only the primary item's cost counts toward the sale cost. Multi-item
        # sales under-report cost; downstream profit figures depend on this.
        item = self.primary_item
        return item.cost if item else 0.0

    @property
    def profit(self) -> float:
        return self.net_amount - self.cost_at_sale


@dataclass(frozen=True)
class Expense:
    id: str
    reason: str
    category: str
    amount: float
    entered_by: str = ""

    kind = KIND_EXPENSE


@dataclass(frozen=True)
class CustomerRecord:
    id: str
    name: str
    phone: str
    status: str = ""

    kind = KIND_CUSTOMER

    @property
    def is_archived(self) -> bool:
        return self.status.strip().lower() == ARCHIVED_STATUS


Transaction = Union[Sale, Expense, CustomerRecord]


# ======================================================
# FIELD HELPERS
# ======================================================

def _text(value) -> str:
    if value is None:
        return ""
    if not isinstance(value, str) and pd.isna(value):
        return ""
    return str(value).strip()


def as_number(value, default: float = 0.0) -> float:
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, str):
        value = value.replace(",", "").strip()
        if not value:
            return default
    try:
        out = float(value)
    except (TypeError, ValueError):
        return default
    return default if pd.isna(out) else out


def _first(raw: dict, *keys):
    for k in keys:
        if k in raw and raw[k] is not None:
            return raw[k]
    return None


_RUPEE_PREFIX = re.compile(r"^\s*(rs\.?|inr|₹)\s*", re.IGNORECASE)
_LEADING_NUMBER = re.compile(r"^\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+))")


def _leading_number(text: str) -> Optional[float]:
    match = _LEADING_NUMBER.match(text.replace(",", ""))
    return float(match.group(1)) if match else None


def compute_discount(gross_amount: float, discount_spec) -> float:
    """
    Turn a free-text discount expression into an amount.

    Any "%" makes it a percentage of gross, rounded: "10%", "10 % off".
    Otherwise the leading number is a flat amount: "200", "rs200", "200 off".
    No leading number -> 0.
    """
    spec = _text(discount_spec)
    if not spec:
        return 0.0
    if "%" in spec:
        pct = _leading_number(spec.replace("%", "", 1))
        if pct is None:
            return 0.0
        return float(round(gross_amount * pct / 100))
    flat = _leading_number(_RUPEE_PREFIX.sub("", spec))
    return 0.0 if flat is None else flat


# ======================================================
# PARSING
# ======================================================

def _parse_line_item(raw: dict) -> LineItem:
    return LineItem(
        product_name=_text(_first(raw, "productName", "name", "item")),
        quantity=as_number(_first(raw, "quantity", "qty")),
        unit_price=as_number(_first(raw, "unitPrice", "rate", "price")),
        unit_cost_at_sale=as_number(_first(raw, "unitCostAtSale", "unitCost", "cost")),
    )


def _legacy_line_item(raw: dict) -> Optional[LineItem]:
    name = _text(raw.get("item"))
    if not name:
        return None
    qty = as_number(raw.get("qty"))
    rate = as_number(raw.get("rate"), default=None)
    if rate is None:
        rate = as_number(raw.get("grossAmount")) / qty if qty else 0.0
    # costPrice on flat records is the line total, not the unit cost
    total_cost = as_number(raw.get("costPrice"))
    return LineItem(
        product_name=name,
        quantity=qty,
        unit_price=rate,
        unit_cost_at_sale=total_cost / qty if qty else 0.0,
    )


def _parse_sale(txn_id: str, raw: dict) -> Sale:
    raw_items = raw.get("items")
    if isinstance(raw_items, (list, tuple)):
        items = tuple(_parse_line_item(i) for i in raw_items if isinstance(i, dict))
    else:
        legacy = _legacy_line_item(raw)
        items = (legacy,) if legacy else ()

    gross = as_number(raw.get("grossAmount"), default=None)
    if gross is None:
        gross = sum(i.gross for i in items)

    discount_spec = _text(_first(raw, "discountSpec", "discountString"))
    discount = as_number(_first(raw, "discountAmount", "discount"), default=None)
    if discount is None:
        discount = compute_discount(gross, discount_spec)

    return Sale(
        id=txn_id,
        items=items,
        gross_amount=gross,
        discount_amount=discount,
        discount_spec=discount_spec,
        customer_name=_text(raw.get("customerName")),
        customer_phone=_text(raw.get("customerPhone")),
        status=_text(raw.get("status")) or DEFAULT_SALE_STATUS,
        entered_by=_text(_first(raw, "enteredBy", "entryBy")),
    )


def _parse_expense(txn_id: str, raw: dict) -> Expense:
    return Expense(
        id=txn_id,
        reason=_text(_first(raw, "reason", "item")),
        category=_text(raw.get("category")) or "Uncategorized",
        amount=as_number(_first(raw, "amount", "total")),
        entered_by=_text(_first(raw, "enteredBy", "entryBy")),
    )


def _parse_customer(txn_id: str, raw: dict) -> CustomerRecord:
    return CustomerRecord(
        id=txn_id,
        name=_text(raw.get("name")),
        phone=_text(raw.get("phone")),
        status=_text(raw.get("status")),
    )


_PARSERS = {
    KIND_SALE: _parse_sale,
    KIND_EXPENSE: _parse_expense,
    KIND_CUSTOMER: _parse_customer,
}


def parse_transaction(raw) -> Transaction:
    if isinstance(raw, (Sale, Expense, CustomerRecord)):
        return raw
    if not isinstance(raw, dict):
        raise TransactionParseError(f"Expected a mapping, got {type(raw).__name__}")

    txn_id = _text(raw.get("id"))
    if not txn_id:
        raise TransactionParseError("Transaction has no id")

    kind = _text(_first(raw, "kind", "type")).capitalize()
    parser = _PARSERS.get(kind)
    if parser is None:
        raise TransactionParseError(f"Unknown transaction kind {kind!r} for {txn_id}")
    return parser(txn_id, raw)


def parse_log(records: Iterable) -> List[Transaction]:
    """Parse every readable record; unreadable ones are skipped and counted."""
    out: List[Transaction] = []
    skipped = 0
    for raw in records:
        try:
            out.append(parse_transaction(raw))
        except TransactionParseError as e:
            skipped += 1
            logger.debug("Skipping log record: %s", e)
    if skipped:
        logger.warning("Skipped %d unreadable log record(s)", skipped)
    return out
