from __future__ import annotations

import logging
import numbers
from typing import Any, Iterable

import pandas as pd

from utils.config import LEDGER_TIMEZONE

logger = logging.getLogger(__name__)

UNKNOWN_SIZE = "unknown"
HISTORY_COLUMNS = ["category", "subcategory", "size", "stockin", "stockout", "date"]

_ACCEPTABLE_STOCKIN_COLUMNS = ["stockin", "stock_in", "stockinquantity"]
_ACCEPTABLE_STOCKOUT_COLUMNS = ["stockout", "stock_out", "stockoutquantity"]
_ACCEPTABLE_DATE_COLUMNS = ["date", "dates", "createdat", "transaction_date"]


def normalize_size(value: Any) -> str:
    """Canonical string label for a size; missing sizes map to ``UNKNOWN_SIZE``."""
    if value is None or isinstance(value, bool):
        return UNKNOWN_SIZE
    if pd.api.types.is_scalar(value) and pd.isna(value):
        return UNKNOWN_SIZE
    if isinstance(value, numbers.Integral):
        return str(int(value))
    if isinstance(value, numbers.Real):
        value = float(value)
        return str(int(value)) if value.is_integer() else str(value)
    label = str(value).strip()
    return label or UNKNOWN_SIZE


def records_to_dicts(records: Iterable[Any]) -> list[dict]:
    rows = []
    for r in records:
        if hasattr(r, "model_dump"):
            rows.append(r.model_dump(by_alias=False))
        elif isinstance(r, dict):
            rows.append(dict(r))
        else:
            rows.append(dict(vars(r)))
    return rows


def to_local_timestamp(value: Any) -> pd.Timestamp:
    """Naive wall-clock time in ``LEDGER_TIMEZONE``; NaT when ``value`` is not a timestamp.

    Timezone-aware inputs (e.g. ``...Z`` from the backend) are converted, naive
    inputs are taken as already local.
    """
    try:
        ts = pd.Timestamp(value)
    except (TypeError, ValueError):
        return pd.NaT
    if ts is pd.NaT:
        return pd.NaT
    if ts.tzinfo is not None:
        ts = ts.tz_convert(LEDGER_TIMEZONE).tz_localize(None)
    return ts


def to_local_timestamps(values: pd.Series) -> pd.Series:
    return pd.to_datetime(values.map(to_local_timestamp))


def to_local_day(value: Any) -> pd.Timestamp:
    return to_local_timestamp(value).normalize()


def clean_history(events: Any) -> pd.DataFrame:
    """Normalize raw stock history into the canonical event frame.

    Accepts a DataFrame or an iterable of dicts / models. Field names are matched
    case-insensitively (``stockIn``, ``stock_in`` and ``stockin`` are the same
    column). Quantities that are missing or not numeric become 0; rows whose
    date cannot be parsed are dropped. Input order is kept so that later stable
    sorts preserve it for equal timestamps.
    """
    if isinstance(events, pd.DataFrame):
        df = events.copy()
    else:
        df = pd.DataFrame(records_to_dicts(events or []))

    if df.empty:
        return pd.DataFrame({
            "category": pd.Series(dtype=object),
            "subcategory": pd.Series(dtype=object),
            "size": pd.Series(dtype=object),
            "stockin": pd.Series(dtype="int64"),
            "stockout": pd.Series(dtype="int64"),
            "date": pd.Series(dtype="datetime64[ns]"),
        })

    df.rename(columns={c: str(c).strip().lower() for c in df.columns}, inplace=True)

    for target, candidates in (
        ("stockin", _ACCEPTABLE_STOCKIN_COLUMNS),
        ("stockout", _ACCEPTABLE_STOCKOUT_COLUMNS),
        ("date", _ACCEPTABLE_DATE_COLUMNS),
    ):
        found = next((c for c in candidates if c in df.columns), None)
        if found is None:
            df[target] = None
        elif found != target:
            df.rename(columns={found: target}, inplace=True)

    for col in ("category", "subcategory"):
        if col not in df.columns:
            df[col] = ""
        df[col] = df[col].fillna("").astype(str)
    if "size" not in df.columns:
        df["size"] = None

    df["size"] = df["size"].astype(object).map(normalize_size)
    for col in ("stockin", "stockout"):
        df[col] = pd.to_numeric(df[col], errors="coerce").fillna(0).clip(lower=0).astype("int64")

    df["date"] = to_local_timestamps(df["date"])
    invalid = df["date"].isna()
    if invalid.any():
        logger.warning("Dropping %d history record(s) without a valid date", int(invalid.sum()))
        df = df[~invalid]

    return df[HISTORY_COLUMNS].reset_index(drop=True)
