import os
from typing import Optional

from dotenv import load_dotenv

from .config import build_settings, Settings

_INT_VARS = {
    "ACTIVE_CUSTOMER_DAYS": "active_customer_days",
    "DEAD_STOCK_DAYS": "dead_stock_days",
    "TOP_PRODUCTS_LIMIT": "top_products_limit",
    "RECENT_ORDERS_LIMIT": "recent_orders_limit",
    "GROWTH_MONTHS": "growth_months",
    "LOW_STOCK_DEFAULT_THRESHOLD": "low_stock_default_threshold",
}

_FLOAT_VARS = {
    "TREND_THRESHOLD_PCT": "trend_threshold_pct",
}


def _env_number(name: str, cast):
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    try:
        return cast(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def load_settings(log_json=None, inventory_csv=None, output_dir=None,
                  dotenv_path: Optional[str] = None) -> Settings:
    load_dotenv(dotenv_path=dotenv_path, override=False)

    overrides = {}
    tz = os.getenv("SHOP_TIMEZONE", "").strip()
    if tz:
        overrides["timezone"] = tz
    period = os.getenv("DASHBOARD_DEFAULT_PERIOD", "").strip().lower()
    if period:
        overrides["default_period"] = period

    for var, field_name in _INT_VARS.items():
        value = _env_number(var, int)
        if value is not None:
            overrides[field_name] = value
    for var, field_name in _FLOAT_VARS.items():
        value = _env_number(var, float)
        if value is not None:
            overrides[field_name] = value

    return build_settings(
        log_json=log_json or os.getenv("DASHBOARD_LOG_JSON"),
        inventory_csv=inventory_csv or os.getenv("DASHBOARD_INVENTORY_CSV"),
        output_dir=output_dir or os.getenv("DASHBOARD_OUTPUT_DIR"),
        **overrides,
    )


def ensure_dirs(s: Settings):
    if s.output_dir is None:
        raise ValueError("DASHBOARD_OUTPUT_DIR (or --output-dir) must be provided")
    s.output_dir.mkdir(parents=True, exist_ok=True)
    s.charts_dir.mkdir(parents=True, exist_ok=True)
    s.tables_dir.mkdir(parents=True, exist_ok=True)
