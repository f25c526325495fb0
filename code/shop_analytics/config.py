from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DEFAULT_TIMEZONE = "Asia/Kolkata"


@dataclass(frozen=True)
class Settings:
    timezone: str = DEFAULT_TIMEZONE
    default_period: str = "today"
    active_customer_days: int = 30
    dead_stock_days: int = 30
    top_products_limit: int = 5
    recent_orders_limit: int = 5
    growth_months: int = 6
    trend_threshold_pct: float = 10.0
    low_stock_default_threshold: int = 10
    log_json: Optional[Path] = None
    inventory_csv: Optional[Path] = None
    output_dir: Optional[Path] = None

    @property
    def charts_dir(self) -> Optional[Path]:
        return self.output_dir / "charts" if self.output_dir else None

    @property
    def tables_dir(self) -> Optional[Path]:
        return self.output_dir / "tables" if self.output_dir else None


def build_settings(log_json=None, inventory_csv=None, output_dir=None, **overrides) -> Settings:
    return Settings(
        log_json=Path(log_json) if log_json else None,
        inventory_csv=Path(inventory_csv) if inventory_csv else None,
        output_dir=Path(output_dir) if output_dir else None,
        **overrides,
    )
