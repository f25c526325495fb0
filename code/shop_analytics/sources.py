"""
sources.py

The two collaborators the engine reads from, and two concrete sources.

A source provides:
- list_all_transactions()  every raw log record, any kind, any order
- get_inventory_snapshot() catalog rows (itemName, quantity, costPrice,
                           sellingPrice, lowStockThreshold)
- get_low_stock_report()   report text, empty when nothing is low; takes the
                           snapshot already read so the inventory is read once

InMemorySource wraps already-loaded data (tests, callers that fetched the log
themselves). FileSource reads a JSON log export ({"transactions": [...]}) and an
inventory CSV whose headers are matched case/space-insensitively.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

import pandas as pd

from .identity import normalize_product
from .transactions import as_number

logger = logging.getLogger(__name__)

DEFAULT_LOW_STOCK_THRESHOLD = 10

# normalized CSV header -> snapshot field
_INVENTORY_HEADERS = {
    "itemname": "itemName",
    "quantity": "quantity",
    "costprice": "costPrice",
    "sellingprice": "sellingPrice",
    "lowstockthreshold": "lowStockThreshold",
    "category": "category",
}

_REQUIRED_INVENTORY_COLS = {"itemName", "quantity"}


@dataclass(frozen=True)
class InventoryItem:
    item_name: str
    quantity: float
    cost_price: float = 0.0
    selling_price: float = 0.0
    low_stock_threshold: Optional[float] = None

    @property
    def key(self) -> str:
        return normalize_product(self.item_name)

    def threshold(self, default: float = DEFAULT_LOW_STOCK_THRESHOLD) -> float:
        # a missing or zero threshold falls back to the default
        return self.low_stock_threshold or default

    def is_low_stock(self, default: float = DEFAULT_LOW_STOCK_THRESHOLD) -> bool:
        return self.quantity <= self.threshold(default)


def parse_inventory(records: Iterable) -> List[InventoryItem]:
    items = []
    for rec in records:
        if isinstance(rec, InventoryItem):
            items.append(rec)
            continue
        name = str(rec.get("itemName") or "").strip()
        if not name:
            continue
        items.append(InventoryItem(
            item_name=name,
            quantity=as_number(rec.get("quantity"), 0.0),
            cost_price=as_number(rec.get("costPrice"), 0.0),
            selling_price=as_number(rec.get("sellingPrice"), 0.0),
            low_stock_threshold=as_number(rec.get("lowStockThreshold")),
        ))
    return items


def low_stock_report(items: Iterable[InventoryItem],
                     default_threshold: float = DEFAULT_LOW_STOCK_THRESHOLD) -> str:
    lines = [
        f"*{i.item_name}*\n  - Current Stock: {i.quantity:g}\n  - Reorder Point: {i.threshold(default_threshold):g}"
        for i in items if i.is_low_stock(default_threshold)
    ]
    if not lines:
        return ""
    return (
        "Items at or below their reorder threshold:\n\n"
        + "\n\n".join(lines)
    )


class ShopDataSource(ABC):
    @abstractmethod
    def list_all_transactions(self) -> list:
        ...

    @abstractmethod
    def get_inventory_snapshot(self) -> List[InventoryItem]:
        ...

    def get_low_stock_report(self, snapshot: Optional[List[InventoryItem]] = None) -> str:
        """Report text; pass an already-read snapshot to avoid reading the inventory again."""
        items = self.get_inventory_snapshot() if snapshot is None else snapshot
        return low_stock_report(items)


class InMemorySource(ShopDataSource):
    def __init__(self, transactions=None, inventory=None, low_stock_threshold=DEFAULT_LOW_STOCK_THRESHOLD):
        self._transactions = list(transactions or [])
        self._inventory = parse_inventory(inventory or [])
        self._threshold = low_stock_threshold

    def list_all_transactions(self) -> list:
        return list(self._transactions)

    def get_inventory_snapshot(self) -> List[InventoryItem]:
        return list(self._inventory)

    def get_low_stock_report(self, snapshot: Optional[List[InventoryItem]] = None) -> str:
        items = self._inventory if snapshot is None else snapshot
        return low_stock_report(items, self._threshold)


class FileSource(ShopDataSource):
    def __init__(self, log_json, inventory_csv=None, low_stock_threshold=DEFAULT_LOW_STOCK_THRESHOLD):
        self.log_json = Path(log_json)
        self.inventory_csv = Path(inventory_csv) if inventory_csv else None
        self._threshold = low_stock_threshold

    def list_all_transactions(self) -> list:
        if not self.log_json.exists():
            raise FileNotFoundError(f"Transaction log not found: {self.log_json}")
        with self.log_json.open(encoding="utf-8") as fh:
            data = json.load(fh)
        records = data.get("transactions", []) if isinstance(data, dict) else data
        if not isinstance(records, list):
            raise ValueError(f"{self.log_json} does not hold a list of transactions")
        return records

    def get_inventory_snapshot(self) -> List[InventoryItem]:
        if self.inventory_csv is None:
            return []
        return parse_inventory(load_inventory_csv(self.inventory_csv).to_dict("records"))

    def get_low_stock_report(self, snapshot: Optional[List[InventoryItem]] = None) -> str:
        items = self.get_inventory_snapshot() if snapshot is None else snapshot
        return low_stock_report(items, self._threshold)


def load_inventory_csv(path: Path) -> pd.DataFrame:
    if not Path(path).exists():
        raise FileNotFoundError(f"Inventory file not found: {path}")
    df = pd.read_csv(path)
    df.columns = [
        _INVENTORY_HEADERS.get("".join(str(c).lower().split()), str(c).strip())
        for c in df.columns
    ]
    missing = _REQUIRED_INVENTORY_COLS - set(df.columns)
    if missing:
        raise ValueError(f"Missing required inventory columns: {sorted(missing)}")
    df["itemName"] = df["itemName"].astype(str).str.strip()
    df = df[df["itemName"].ne("") & df["itemName"].ne("nan")]
    logger.info("Loaded %d inventory item(s) from %s", len(df), path)
    return df
