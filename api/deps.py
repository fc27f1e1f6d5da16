from __future__ import annotations

from agents.ledger_agent import LedgerAgent
from agents.size_agent import SizeSetAgent
from agents.status_agent import StatusAgent
from utils.config import (
    DEFAULT_STATUS_LOW_BELOW,
    DEFAULT_STATUS_MEDIUM_BELOW,
    SIZE_PREFIX_MAX_LENGTH,
)


def get_size_agent():
    return SizeSetAgent(prefix_max_length=SIZE_PREFIX_MAX_LENGTH)


def get_ledger_agent():
    return LedgerAgent()


def get_status_agent():
    return StatusAgent(low_below=DEFAULT_STATUS_LOW_BELOW, medium_below=DEFAULT_STATUS_MEDIUM_BELOW)
