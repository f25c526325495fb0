"""
spotlight.py

Pick the one customer story shown on the dashboard, by day of week:

    Mon-Wed  Top Spender          highest lifetime spend
    Thu-Fri  Most Frequent Buyer  highest order count
    Sat-Sun  At-Risk VIP          top-quartile spender with no purchase in the
                                  last N days, else the top spender

Spend and order counts are lifetime figures. The dashboard window only decides
whether there is anyone to talk about: no customer sales in the window gives
the placeholder.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

import pandas as pd

from .classify import ClassifiedLog, within
from .customers import CustomerAggregate, aggregate_customers
from .periods import PeriodWindow, to_local

TOP_SPENDER = "Top Spender"
MOST_FREQUENT = "Most Frequent Buyer"
AT_RISK_VIP = "At-Risk VIP"


@dataclass(frozen=True)
class Spotlight:
    title: str
    name: str
    spend: float
    orders: int = 0
    last_purchase: Optional[pd.Timestamp] = None

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "name": self.name,
            "spend": self.spend,
            "orders": self.orders,
            "lastPurchase": self.last_purchase.isoformat() if self.last_purchase is not None else None,
        }


PLACEHOLDER = Spotlight(title="", name="N/A", spend=0)


def _spotlight(title: str, c: CustomerAggregate) -> Spotlight:
    return Spotlight(title=title, name=c.display_name, spend=c.total_spend,
                     orders=c.total_orders, last_purchase=c.last_purchase)


def top_spender(customers: List[CustomerAggregate], now, inactive_days: int) -> Spotlight:
    best = max(customers, key=lambda c: c.total_spend)
    return _spotlight(TOP_SPENDER, best)


def most_frequent(customers: List[CustomerAggregate], now, inactive_days: int) -> Spotlight:
    best = max(customers, key=lambda c: (c.total_orders, c.total_spend))
    return _spotlight(MOST_FREQUENT, best)


def at_risk_vip(customers: List[CustomerAggregate], now, inactive_days: int) -> Spotlight:
    ranked = sorted(customers, key=lambda c: c.total_spend, reverse=True)
    vips = ranked[:max(1, math.ceil(len(ranked) / 4))]
    cutoff = to_local(now) - pd.Timedelta(days=inactive_days)
    at_risk = [c for c in vips if c.last_purchase < cutoff]
    if not at_risk:
        return top_spender(customers, now, inactive_days)
    return _spotlight(AT_RISK_VIP, at_risk[0])


Strategy = Callable[[List[CustomerAggregate], object, int], Spotlight]

# weekday: Monday=0 .. Sunday=6
STRATEGIES: Dict[int, Strategy] = {
    0: top_spender,
    1: top_spender,
    2: top_spender,
    3: most_frequent,
    4: most_frequent,
    5: at_risk_vip,
    6: at_risk_vip,
}


def select_spotlight(customers: List[CustomerAggregate], now,
                     inactive_days: int = 30) -> Spotlight:
    if not customers:
        return PLACEHOLDER
    now = to_local(now)
    return STRATEGIES[now.dayofweek](customers, now, inactive_days)


def window_spotlight(log: ClassifiedLog, window: PeriodWindow, now,
                     inactive_days: int = 30) -> Spotlight:
    if within(log.customer_sales, window.current_start, window.current_end).empty:
        return PLACEHOLDER
    lifetime = aggregate_customers(log, None, now=now, active_days=inactive_days)
    return select_spotlight(lifetime, now, inactive_days)
