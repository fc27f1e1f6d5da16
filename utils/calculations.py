from __future__ import annotations

import re

_DIGITS = re.compile(r"(\d+)")


def range_count(start: int, end: int, interval: int) -> int:
    if interval <= 0 or end < start:
        return 0
    return (end - start) // interval + 1


def running_balance(previous: int, stock_in: int, stock_out: int) -> tuple[int, int]:
    """Apply one movement to a balance. Returns (balance clamped at zero, shortfall absorbed by the clamp)."""
    raw = previous + stock_in - stock_out
    if raw < 0:
        return 0, -raw
    return raw, 0


def size_number(label) -> int:
    """Numeric part of a size label ("RU40" -> 40, "A" -> 0)."""
    if isinstance(label, (int, float)) and not isinstance(label, bool):
        return int(label)
    match = _DIGITS.search(str(label or ""))
    return int(match.group(1)) if match else 0
