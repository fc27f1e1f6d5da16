"""CLI / programmatic stock register for BeltStock."""
from __future__ import annotations

import logging
import sys
from datetime import date
from typing import Any, Optional

import pandas as pd
from agents import LedgerAgent
from agents.ledger_agent import LedgerStats
from utils.backend_client import InventoryBackendClient
from utils.data_loader import load_history
from utils.errors import BackendError
from utils.logger import setup_logger

logger = logging.getLogger(__name__)


def run_register(events: Any,
                 cutoff: date,
                 search: Optional[str] = None,
                 stock: Optional[dict] = None) -> tuple[pd.DataFrame, LedgerStats, int]:
    ledger_agent = LedgerAgent()

    entries = ledger_agent.register(events, search=search)
    stats = ledger_agent.compute_stats(events, cutoff, cutoff)
    if stock is not None:
        initial = ledger_agent.resolve_initial_quantity(stock, events)
    else:
        initial = ledger_agent.compute_initial_total(events)

    over = ledger_agent.over_withdrawals(ledger_agent.reconstruct(events))
    if over:
        logger.warning("%d movement(s) took out more than the recorded balance", len(over))

    return ledger_agent.to_frame(entries), stats, initial


def fetch_events(category: str, subcategory: Optional[str]) -> tuple[list, Optional[dict]]:
    client = InventoryBackendClient()
    history = client.get_stock_history(category=category, subcategory=subcategory)
    stock = client.find_stock(category, subcategory) if subcategory else None
    return history, stock


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Build a stock register from movement history")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--file", help="Path to a history CSV or JSON file")
    source.add_argument("--category", help="Fetch history for this category from the backend")
    parser.add_argument("--subcategory", help="Narrow backend history to one subcategory")
    parser.add_argument("--date", default=date.today().isoformat(), help="Register date (YYYY-MM-DD)")
    parser.add_argument("--search", help="Only show sizes containing this text")
    parser.add_argument("--out", help="Write the register to this CSV path")
    args = parser.parse_args()

    setup_logger()
    try:
        if args.file:
            events, stock = load_history(args.file), None
        else:
            events, stock = fetch_events(args.category, args.subcategory)
        cutoff = date.fromisoformat(args.date)
    except (ValueError, BackendError) as e:
        logger.error(f"❌ {e}")
        sys.exit(1)

    df, stats, initial = run_register(events, cutoff, search=args.search, stock=stock)

    logger.info(f"Initial quantity: {initial}")
    logger.info(f"Total stock as of {cutoff.isoformat()}: {stats.total_stock}")
    logger.info(f"Stock in on {cutoff.isoformat()}: {stats.today_stock_in}")
    logger.info(f"Stock out on {cutoff.isoformat()}: {stats.today_stock_out}")
    if args.out:
        df.to_csv(args.out, index=False)
        logger.info(f"✅ Register written to {args.out}")
    else:
        logger.info(df.to_string(index=False) if not df.empty else "No history entries.")
