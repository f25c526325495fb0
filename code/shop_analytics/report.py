"""
report.py

Write a built dashboard to disk: the payload as JSON, and its tables as one
CSV each plus a single workbook with one sheet per table.
"""

import json
from pathlib import Path
from typing import Dict, List

import pandas as pd

KPI_COLUMNS = ["Metric", "Value", "Change_Pct"]


def save_json(payload, path):
    with open(path, "w", encoding="utf-8") as fh:
        json.dump(payload, fh, indent=2, ensure_ascii=False, default=str)


def kpi_frame(payload: dict) -> pd.DataFrame:
    rows = [
        [name, entry["value"], entry["changePct"]]
        for name, entry in payload.get("kpis", {}).items()
    ]
    return pd.DataFrame(rows, columns=KPI_COLUMNS)


def write_tables(tables: Dict[str, pd.DataFrame], tables_dir: Path, workbook: Path) -> List[Path]:
    written = []
    for name, df in tables.items():
        out = Path(tables_dir) / f"{name}.csv"
        df.to_csv(out, index=False)
        written.append(out)

    # sheet names are capped at 31 characters
    with pd.ExcelWriter(workbook, engine="openpyxl") as writer:
        for name, df in tables.items():
            df.to_excel(writer, sheet_name=name[:31], index=False)
    written.append(Path(workbook))
    return written
