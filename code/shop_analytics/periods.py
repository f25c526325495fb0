"""
periods.py

Named period tokens -> half-open comparison windows on the shop-local calendar.

Weeks start on Sunday. Every window is [start, end); for non-"all" periods the
previous window ends exactly where the current one starts. "all" has no bounds
and no comparison.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import pandas as pd

from .config import DEFAULT_TIMEZONE

logger = logging.getLogger(__name__)

TODAY = "today"
YESTERDAY = "yesterday"
WEEK = "week"
MONTH = "month"
ALL = "all"

PERIODS = (TODAY, YESTERDAY, WEEK, MONTH, ALL)
SINGLE_DAY_PERIODS = (TODAY, YESTERDAY)

_ONE_DAY = pd.Timedelta(days=1)


class PeriodError(ValueError):
    """Raised for an unknown period token when resolving strictly."""
    pass


@dataclass(frozen=True)
class PeriodWindow:
    period: str
    current_start: Optional[pd.Timestamp]
    current_end: Optional[pd.Timestamp]
    previous_start: Optional[pd.Timestamp]
    previous_end: Optional[pd.Timestamp]

    @property
    def has_comparison(self) -> bool:
        return self.previous_start is not None and self.previous_end is not None

    @property
    def is_single_day(self) -> bool:
        return self.period in SINGLE_DAY_PERIODS

    def as_dict(self) -> dict:
        def _iso(ts):
            return ts.isoformat() if ts is not None else None
        return {
            "period": self.period,
            "currentStart": _iso(self.current_start),
            "currentEnd": _iso(self.current_end),
            "previousStart": _iso(self.previous_start),
            "previousEnd": _iso(self.previous_end),
        }


def to_local(now=None, tz: str = DEFAULT_TIMEZONE) -> pd.Timestamp:
    """
    Naive shop-local timestamp for `now`.

    Aware inputs are converted to `tz`; naive inputs are taken as already local.
    With no input the wall clock is read, which only entry points should do.
    """
    if now is None:
        return pd.Timestamp.now(tz=tz).tz_localize(None)
    ts = pd.Timestamp(now)
    if ts.tzinfo is not None:
        ts = ts.tz_convert(tz).tz_localize(None)
    return ts


def normalize_period(token, default: str = TODAY, strict: bool = False) -> str:
    period = str(token).strip().lower() if token is not None else ""
    if period in PERIODS:
        return period
    if strict:
        raise PeriodError(f"Unknown period {token!r}; expected one of {', '.join(PERIODS)}")
    fallback = default if default in PERIODS else TODAY
    logger.warning("Unknown period %r, falling back to %r", token, fallback)
    return fallback


def week_start(ts: pd.Timestamp) -> pd.Timestamp:
    midnight = ts.normalize()
    # dayofweek: Monday=0 .. Sunday=6
    return midnight - pd.Timedelta(days=(midnight.dayofweek + 1) % 7)


def month_start(ts: pd.Timestamp) -> pd.Timestamp:
    return ts.normalize().replace(day=1)


def resolve_period(token, now=None, default: str = TODAY, strict: bool = False,
                   tz: str = DEFAULT_TIMEZONE) -> PeriodWindow:
    period = normalize_period(token, default=default, strict=strict)
    now = to_local(now, tz)
    midnight = now.normalize()

    if period == TODAY:
        start, end = midnight, midnight + _ONE_DAY
        prev_start = start - _ONE_DAY
    elif period == YESTERDAY:
        start, end = midnight - _ONE_DAY, midnight
        prev_start = start - _ONE_DAY
    elif period == WEEK:
        start = week_start(now)
        end = start + pd.Timedelta(days=7)
        prev_start = start - pd.Timedelta(days=7)
    elif period == MONTH:
        start = month_start(now)
        end = start + pd.DateOffset(months=1)
        prev_start = start - pd.DateOffset(months=1)
    else:
        return PeriodWindow(ALL, None, None, None, None)

    return PeriodWindow(
        period=period,
        current_start=start,
        current_end=end,
        previous_start=prev_start,
        previous_end=start,
    )
