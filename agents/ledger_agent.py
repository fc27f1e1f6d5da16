from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from utils.calculations import running_balance, size_number
from utils.preprocess import UNKNOWN_SIZE, clean_history, normalize_size, to_local_day

logger = logging.getLogger(__name__)

GroupKey = Tuple[str, str, str]


@dataclass
class LedgerEntry:
    category: str
    subcategory: str
    size: str
    stockin: int
    stockout: int
    date: pd.Timestamp
    remaining_stock: int
    # quantity the zero floor absorbed at this entry
    shortfall: int = 0


@dataclass
class LedgerStats:
    total_stock: int
    today_stock_in: int
    today_stock_out: int


class LedgerAgent:
    """
    Rebuilds the stock register from an unordered movement log.

    Every method accepts raw history (DataFrame, dicts or models) and runs it
    through ``clean_history`` first, so callers can hand over backend payloads
    as they arrive.
    """

    def reconstruct(self, events: Any) -> Dict[GroupKey, List[LedgerEntry]]:
        """
        Args:
            events: history records with category, subcategory, size, stockin, stockout, date
        Returns:
            {(category, subcategory, size): [LedgerEntry, ...]} with each list in
            chronological order and ``remaining_stock`` the balance after that entry.
        """
        df = clean_history(events)
        ledger: Dict[GroupKey, List[LedgerEntry]] = {}
        if df.empty:
            return ledger

        df = df.sort_values("date", kind="stable")
        for key, grp in df.groupby(["category", "subcategory", "size"], sort=False):
            balance = 0
            entries = []
            for row in grp.itertuples(index=False):
                balance, shortfall = running_balance(balance, int(row.stockin), int(row.stockout))
                if shortfall:
                    logger.warning(
                        "Stock out on %s exceeds balance for %s/%s size %s by %d",
                        row.date, row.category, row.subcategory, row.size, shortfall,
                    )
                entries.append(
                    LedgerEntry(
                        category=row.category,
                        subcategory=row.subcategory,
                        size=row.size,
                        stockin=int(row.stockin),
                        stockout=int(row.stockout),
                        date=row.date,
                        remaining_stock=balance,
                        shortfall=shortfall,
                    )
                )
            ledger[tuple(key)] = entries
        return ledger

    @staticmethod
    def over_withdrawals(ledger: Dict[GroupKey, List[LedgerEntry]]) -> List[LedgerEntry]:
        return [e for entries in ledger.values() for e in entries if e.shortfall > 0]

    def register(self, events: Any, search: Optional[str] = None) -> List[LedgerEntry]:
        """Flattened ledger for display: newest first, then by the numeric part of the size."""
        df = clean_history(events)
        term = (search or "").strip()
        if term:
            # entries without a size never match a search
            df = df[(df["size"] != UNKNOWN_SIZE) & df["size"].str.contains(term, regex=False)]

        entries = [e for group in self.reconstruct(df).values() for e in group]
        entries.sort(key=lambda e: size_number(e.size))
        entries.sort(key=lambda e: e.date, reverse=True)
        return entries

    def compute_stats(self, events: Any, cutoff_date: Any, today_date: Any) -> LedgerStats:
        """
        total_stock counts every movement up to the end of ``cutoff_date``;
        the today figures count movements on the calendar day of ``today_date``.
        """
        df = clean_history(events)
        if df.empty:
            return LedgerStats(total_stock=0, today_stock_in=0, today_stock_out=0)

        cutoff_end = to_local_day(cutoff_date) + pd.Timedelta(days=1) - pd.Timedelta(milliseconds=1)
        upto = df["date"] <= cutoff_end
        on_day = df["date"].dt.normalize() == to_local_day(today_date)

        return LedgerStats(
            total_stock=int(df.loc[upto, "stockin"].sum() - df.loc[upto, "stockout"].sum()),
            today_stock_in=int(df.loc[on_day, "stockin"].sum()),
            today_stock_out=int(df.loc[on_day, "stockout"].sum()),
        )

    def compute_initial_quantity(self, events: Any, size: Any) -> int:
        """Stock-in of the earliest movement for ``size`` that added stock, or 0."""
        df = clean_history(events)
        label = normalize_size(size)
        stocked = df[(df["size"] == label) & (df["stockin"] > 0)]
        if stocked.empty:
            return 0
        return int(stocked.sort_values("date", kind="stable").iloc[0]["stockin"])

    def compute_initial_total(self, events: Any) -> int:
        # Labels are compared verbatim, so "40" and "RU40" in one line's history count separately
        df = clean_history(events)
        return sum(self.compute_initial_quantity(df, size) for size in df["size"].unique())

    def resolve_initial_quantity(self, stock: Any, events: Any) -> int:
        """Backend supplied initial quantity when present, otherwise derived from history."""
        if isinstance(stock, dict):
            initial = stock.get("initialQuantity", stock.get("initial_quantity"))
        else:
            initial = getattr(stock, "initial_quantity", None)
        if isinstance(initial, (int, float)) and not isinstance(initial, bool):
            return int(initial)
        return self.compute_initial_total(events)

    @staticmethod
    def to_frame(entries: List[LedgerEntry]) -> pd.DataFrame:
        columns = ["date", "category", "subcategory", "size", "stockin", "stockout", "remaining_stock", "shortfall"]
        return pd.DataFrame.from_records([e.__dict__ for e in entries], columns=columns)
