"""
insights.py

Rule checks that surface risks and opportunities. Each rule is evaluated on its
own and may add notices; several can fire for the same item.

1. Low stock:     the inventory low-stock report is non-empty -> critical risk
2. Revenue trend: change > +threshold% -> info opportunity,
                  change < -threshold% -> warning risk
3. Dead stock:    month / all only, one warning per catalog item with no sale
                  in the trailing N days
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

import pandas as pd

from .classify import ClassifiedLog
from .periods import ALL, MONTH, PeriodWindow, to_local
from .sources import InventoryItem

RISK = "risk"
OPPORTUNITY = "opportunity"

CRITICAL = "critical"
WARNING = "warning"
INFO = "info"

DEAD_STOCK_PERIODS = (MONTH, ALL)


@dataclass(frozen=True)
class Insight:
    kind: str
    severity: str
    title: str
    message: str
    item: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "type": self.kind,
            "severity": self.severity,
            "title": self.title,
            "message": self.message,
            "item": self.item,
        }


def low_stock_insights(report: str) -> List[Insight]:
    if not report or not report.strip():
        return []
    return [Insight(RISK, CRITICAL, "Low stock", report.strip())]


def revenue_trend_insights(change_pct: Optional[float], threshold: float = 10.0) -> List[Insight]:
    if change_pct is None:
        return []
    if change_pct > threshold:
        return [Insight(OPPORTUNITY, INFO, "Revenue is up",
                        f"Revenue is up {change_pct:.1f}% on the previous period.")]
    if change_pct < -threshold:
        return [Insight(RISK, WARNING, "Revenue is down",
                        f"Revenue is down {abs(change_pct):.1f}% on the previous period.")]
    return []


def recently_sold(log: ClassifiedLog, now, days: int = 30) -> set:
    cutoff = to_local(now) - pd.Timedelta(days=days)
    items = log.sale_items
    recent = items[items["Timestamp"] >= cutoff]
    return set(recent["Product_Key"])


def dead_stock_insights(log: ClassifiedLog, inventory: Iterable[InventoryItem],
                        now, days: int = 30) -> List[Insight]:
    sold = recently_sold(log, now, days)
    return [
        Insight(RISK, WARNING, "Dead stock",
                f"'{item.item_name}' has not sold in the last {days} days.",
                item=item.item_name)
        for item in inventory
        if item.key and item.key not in sold
    ]


def detect_insights(window: PeriodWindow, revenue_change: Optional[float],
                    low_stock_report: str, inventory: Iterable[InventoryItem],
                    log: ClassifiedLog, now, trend_threshold: float = 10.0,
                    dead_stock_days: int = 30) -> List[Insight]:
    insights = low_stock_insights(low_stock_report)
    insights += revenue_trend_insights(revenue_change, trend_threshold)
    if window.period in DEAD_STOCK_PERIODS:
        insights += dead_stock_insights(log, inventory, now, dead_stock_days)
    return insights
