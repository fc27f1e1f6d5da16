from __future__ import annotations

import json
from pathlib import Path
import pandas as pd

REQUIRED_COLUMNS = {"category", "subcategory", "date"}


def _check_columns(columns, source: str) -> None:
    present = {str(c).strip().lower() for c in columns}
    missing = REQUIRED_COLUMNS - present
    if missing:
        raise ValueError(f"{source} missing required columns: {sorted(missing)}")


def load_history_csv(path: str | Path) -> pd.DataFrame:
    # size labels like "040" must stay text
    df = pd.read_csv(path, dtype={"size": str})
    _check_columns(df.columns, "CSV")
    return df


def load_history_json(path: str | Path) -> pd.DataFrame:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    # Expect a list of history records, or {"history": [...]}
    if isinstance(data, dict) and "history" in data:
        data = data["history"]
    if not isinstance(data, list):
        raise ValueError("History JSON must contain a list or {'history': [...]} structure")
    df = pd.DataFrame(data)
    if df.empty:
        return df
    _check_columns(df.columns, "History JSON")
    return df


def load_history(path: str | Path) -> pd.DataFrame:
    suffix = Path(path).suffix.lower()
    if suffix == ".csv":
        return load_history_csv(path)
    if suffix == ".json":
        return load_history_json(path)
    raise ValueError(f"Unsupported file type '{suffix}'; use .csv or .json")
