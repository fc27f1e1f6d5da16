from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from utils.config import DEFAULT_STATUS_LOW_BELOW, DEFAULT_STATUS_MEDIUM_BELOW
from utils.preprocess import records_to_dicts


@dataclass
class DashboardSummary:
    total_stock: int
    categories: List[str] = field(default_factory=list)
    subcategories: List[str] = field(default_factory=list)
    low_stock: int = 0
    medium_stock: int = 0
    high_stock: int = 0


def _threshold(thresholds: Any, name: str) -> float:
    if thresholds is None:
        return 0
    value = thresholds.get(name) if isinstance(thresholds, dict) else getattr(thresholds, name, 0)
    return value or 0


class StatusAgent:
    """Classifies stock lines by quantity for tables and the dashboard."""

    def __init__(self, low_below: int = DEFAULT_STATUS_LOW_BELOW, medium_below: int = DEFAULT_STATUS_MEDIUM_BELOW):
        self.low_below = low_below
        self.medium_below = medium_below

    def _default_band(self, quantity: float) -> str:
        if quantity < self.low_below:
            return "low"
        if quantity < self.medium_below:
            return "medium"
        return "high"

    def classify(self, quantity: float, thresholds: Optional[Any] = None) -> str:
        """
        Without thresholds (or all zero) the default bands apply. With thresholds a
        line is the first of high/medium/low whose non-zero floor it reaches, and
        critical below all of them.
        """
        high, medium, low = (_threshold(thresholds, n) for n in ("high", "medium", "low"))
        if not (high or medium or low):
            return self._default_band(quantity)
        if high > 0 and quantity >= high:
            return "high"
        if medium > 0 and quantity >= medium:
            return "medium"
        if low > 0 and quantity >= low:
            return "low"
        return "critical"

    def annotate(self, stocks: Iterable[Any]) -> List[Dict[str, Any]]:
        rows = []
        for s in records_to_dicts(stocks):
            rows.append({
                "id": s.get("id") or s.get("_id"),
                "category": s.get("category", ""),
                "subcategory": s.get("subcategory", ""),
                "quantity": int(s.get("quantity") or 0),
                "status": self.classify(s.get("quantity") or 0, s.get("status")),
            })
        return rows

    def summarize(self, stocks: Iterable[Any]) -> DashboardSummary:
        rows = records_to_dicts(stocks)
        # dashboard cards always use the default bands, thresholds only drive per-line status
        bands = [self._default_band(r.get("quantity") or 0) for r in rows]
        return DashboardSummary(
            total_stock=int(sum(r.get("quantity") or 0 for r in rows)),
            categories=list(dict.fromkeys(r.get("category", "") for r in rows)),
            subcategories=list(dict.fromkeys(r.get("subcategory", "") for r in rows)),
            low_stock=bands.count("low"),
            medium_stock=bands.count("medium"),
            high_stock=bands.count("high"),
        )
