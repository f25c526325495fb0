"""
Period-over-period comparison.

A zero baseline reads as +100% when anything happened this period and 0%
otherwise. Small absolute moves off zero are overstated; that is accepted.
"""

from __future__ import annotations

from typing import Optional

from .metrics import KPI_FIELDS, MetricsSnapshot


def percent_change(current: float, previous: float) -> float:
    if previous == 0:
        return 100.0 if current > 0 else 0.0
    return 100 * (current - previous) / previous


def compare_metrics(current: MetricsSnapshot,
                    previous: Optional[MetricsSnapshot]) -> dict:
    """
    {metric: {"value": ..., "changePct": ...}} for every KPI.

    With no previous snapshot (the "all" period) changePct is None, which is
    not the same thing as a 0% change.
    """
    out = {}
    for name, attr in KPI_FIELDS.items():
        value = getattr(current, attr)
        change = None
        if previous is not None:
            change = round(percent_change(value, getattr(previous, attr)), 2)
        out[name] = {"value": value, "changePct": change}
    return out
