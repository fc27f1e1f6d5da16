"""Top-level agents package for BeltStock.

Exposes size derivation, stock ledger and stock status agents used by the API and CLI.
"""

from .size_agent import SizeSetAgent, ExplicitSizes, RangeSizes
from .ledger_agent import LedgerAgent, LedgerEntry, LedgerStats
from .status_agent import StatusAgent
