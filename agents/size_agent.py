from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from utils.calculations import range_count
from utils.config import SIZE_PREFIX_MAX_LENGTH
from utils.errors import ValidationError
from utils.preprocess import normalize_size

logger = logging.getLogger(__name__)

_NUMERIC_TOKEN = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)$")
_INTEGER_TOKEN = re.compile(r"^[+-]?\d+$")


@dataclass(frozen=True)
class ExplicitSizes:
    """Comma separated size tokens as typed by a user, e.g. ``"40, 42, A1"``."""
    raw_sizes: Union[str, Sequence[str]]
    prefix: Optional[str] = None


@dataclass(frozen=True)
class RangeSizes:
    """Inclusive numeric range ``start..end`` stepped by ``interval``."""
    start: Union[int, str]
    end: Union[int, str]
    interval: Union[int, str]
    prefix: Optional[str] = None


SizeSpec = Union[ExplicitSizes, RangeSizes]


def _is_numeric(token: str) -> bool:
    return bool(_NUMERIC_TOKEN.match(token))


def _parse_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ValidationError("invalid range")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and _INTEGER_TOKEN.match(value.strip()):
        return int(value.strip())
    raise ValidationError("invalid range")


def _split_tokens(raw: Union[str, Sequence[str], None]) -> List[str]:
    if raw is None:
        return []
    chunks = [raw] if isinstance(raw, str) else [str(r) for r in raw]
    return [t.strip() for chunk in chunks for t in chunk.split(",") if t.strip()]


def _stock_field(stock: Any, *names: str) -> Any:
    for name in names:
        value = stock.get(name) if isinstance(stock, dict) else getattr(stock, name, None)
        if value is not None:
            return value
    return None


def _as_date_text(value: Union[date, datetime, str]) -> str:
    return value.isoformat() if hasattr(value, "isoformat") else str(value)


def _check_quantity(quantity: Any) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise ValidationError("quantity must be greater than 0")


def _size_mode(spec: SizeSpec) -> str:
    return "multiple" if isinstance(spec, RangeSizes) else "single"


class SizeSetAgent:
    """
    Turns size specifications into concrete size labels and checks them against a stock line.

    A label is ``prefix + token`` when the token is numeric and a prefix is set,
    otherwise the token itself. Explicit lists keep first-seen order; ranges are
    ascending.
    """

    def __init__(self, prefix_max_length: int = SIZE_PREFIX_MAX_LENGTH):
        self.prefix_max_length = prefix_max_length

    def normalize_prefix(self, prefix: Optional[str]) -> str:
        p = (prefix or "").strip().upper()
        if len(p) > self.prefix_max_length:
            raise ValidationError(f"size prefix '{p}' is longer than {self.prefix_max_length} characters")
        return p

    def with_stock_prefix(self, spec: SizeSpec, stock: Any) -> SizeSpec:
        """
        Fill in the stock line's own ``sizePrefix`` when the spec leaves the prefix unset.
        An explicit empty prefix means "no prefix" and is kept.
        """
        if spec.prefix is not None or stock is None or isinstance(stock, (list, tuple, set)):
            return spec
        stock_prefix = _stock_field(stock, "sizePrefix", "size_prefix")
        return replace(spec, prefix=stock_prefix) if stock_prefix else spec

    def derive_sizes(self, spec: SizeSpec) -> List[str]:
        if isinstance(spec, ExplicitSizes):
            return self._derive_explicit(spec)
        if isinstance(spec, RangeSizes):
            return self._derive_range(spec)
        raise TypeError(f"unsupported size specification: {type(spec).__name__}")

    def _derive_explicit(self, spec: ExplicitSizes, numeric_only: bool = False) -> List[str]:
        prefix = self.normalize_prefix(spec.prefix)
        labels: List[str] = []
        seen = set()
        for token in _split_tokens(spec.raw_sizes):
            numeric = _is_numeric(token)
            if numeric_only and not numeric:
                continue
            label = f"{prefix}{token}" if prefix and numeric else token
            if label not in seen:
                seen.add(label)
                labels.append(label)
        if not labels:
            raise ValidationError("no valid sizes")
        return labels

    def _parse_range(self, spec: RangeSizes) -> tuple[int, int, int]:
        start, end, interval = _parse_int(spec.start), _parse_int(spec.end), _parse_int(spec.interval)
        if interval <= 0 or end < start:
            raise ValidationError("invalid range")
        return start, end, interval

    def _derive_range(self, spec: RangeSizes) -> List[str]:
        prefix = self.normalize_prefix(spec.prefix)
        start, end, interval = self._parse_range(spec)
        return [f"{prefix}{value}" for value in range(start, end + 1, interval)]

    def compute_range_count(self, spec: RangeSizes) -> int:
        """Preview of how many labels a range produces; 0 while the inputs are invalid."""
        try:
            start, end, interval = self._parse_range(spec)
        except ValidationError:
            return 0
        return range_count(start, end, interval)

    def compute_explicit_count(self,
                               raw_sizes: Union[str, Sequence[str], None],
                               prefix: Optional[str] = None,
                               numeric_only: bool = False) -> int:
        """
        Preview of how many labels an explicit list produces; 0 while nothing valid is typed.

        ``numeric_only`` counts the way the create-stock form does, where non-numeric
        tokens are dropped from the new stock line.
        """
        try:
            spec = ExplicitSizes(raw_sizes=raw_sizes or [], prefix=prefix)
            return len(self._derive_explicit(spec, numeric_only=numeric_only))
        except ValidationError:
            return 0

    def validate_against_stock(self, requested: Iterable[str], stock: Any) -> None:
        """
        Raise ValidationError naming every requested label the stock does not carry.

        ``stock`` is anything with a ``sizes`` attribute or key, or an iterable of labels.
        """
        if isinstance(stock, dict):
            known = stock.get("sizes") or []
        else:
            known = getattr(stock, "sizes", stock) or []
        available = {normalize_size(s) for s in known}

        missing: List[str] = []
        for label in requested:
            label = normalize_size(label)
            if label not in available and label not in missing:
                missing.append(label)
        if missing:
            logger.debug("Rejected sizes %s; stock carries %s", missing, sorted(available))
            raise ValidationError(f"sizes not found: {', '.join(missing)}")

    def build_adjustment(self,
                         spec: SizeSpec,
                         stock: Any,
                         quantity: int,
                         operation: str = "add",
                         on_date: Union[date, datetime, str, None] = None) -> Dict[str, Any]:
        """
        Sizes without a prefix of their own pick up the stock line's ``sizePrefix``.

        Returns:
            Body for the backend's add-quantity / delete-quantity request:
            {sizes, stockInQuantity | stockOutQuantity, date?, sizePrefix?}
        """
        if operation not in ("add", "remove"):
            raise ValidationError(f"unknown operation '{operation}'; use 'add' or 'remove'")
        _check_quantity(quantity)

        spec = self.with_stock_prefix(spec, stock)
        sizes = self.derive_sizes(spec)
        self.validate_against_stock(sizes, stock)

        key = "stockInQuantity" if operation == "add" else "stockOutQuantity"
        body: Dict[str, Any] = {"sizes": sizes, key: quantity}
        if on_date is not None:
            body["date"] = _as_date_text(on_date)
        prefix = self.normalize_prefix(spec.prefix)
        if prefix:
            body["sizePrefix"] = prefix
        return body

    def build_create_stock(self,
                           category: str,
                           subcategory: str,
                           spec: SizeSpec,
                           quantity: int = 1,
                           stock_in: Union[date, datetime, str, None] = None,
                           status: Optional[Any] = None) -> Dict[str, Any]:
        """
        Body for creating a stock line (``POST /stocks``).

        Explicit lists keep numeric tokens only and are sent unprefixed in
        ``singleSize``; ranges are sent as ``start``/``end``/``interval``. The
        backend applies ``sizePrefix`` when it stores the sizes.
        """
        category = (category or "").strip()
        if not category:
            raise ValidationError("category is required")
        _check_quantity(quantity)
        prefix = self.normalize_prefix(spec.prefix)

        body: Dict[str, Any] = {
            "category": category,
            "subcategory": (subcategory or "").strip(),
            "stockIn": _as_date_text(stock_in if stock_in is not None else date.today()),
            "sizeMode": _size_mode(spec),
        }
        if isinstance(spec, RangeSizes):
            start, end, interval = self._parse_range(spec)
            body.update(start=start, end=end, interval=interval)
        else:
            body["singleSize"] = self._derive_explicit(replace(spec, prefix=None), numeric_only=True)
        body["stockInQuantity"] = quantity
        body["sizePrefix"] = prefix
        body["status"] = {name: _stock_field(status, name) or 0 for name in ("high", "medium", "low")}
        logger.debug("Create-stock body for %s/%s: %s", body["category"], body["subcategory"], body)
        return body

    def build_stock_update(self,
                           stock: Any,
                           spec: SizeSpec,
                           operation: str = "add",
                           quantity: Optional[int] = None,
                           on_date: Union[date, datetime, str, None] = None) -> Dict[str, Any]:
        """
        Body for adding sizes to, or deleting sizes from, an existing stock line
        (``PUT /stocks/{id}``).

        ``spec.prefix`` is the prefix for the sizes being added, which may differ
        from the line's current one. Deleted sizes must already be on the line.
        """
        if operation not in ("add", "delete"):
            raise ValidationError(f"unknown operation '{operation}'; use 'add' or 'delete'")
        if not _stock_field(stock, "id", "_id"):
            raise ValidationError("Stock ID is required")

        sizes = self.derive_sizes(spec)
        if operation == "delete":
            self.validate_against_stock(sizes, stock)

        body: Dict[str, Any] = {
            "operation": operation,
            "sizeMode": _size_mode(spec),
            "sizes": sizes,
            "category": (_stock_field(stock, "category") or "").strip(),
            "subcategory": (_stock_field(stock, "subcategory") or "").strip(),
        }
        when = on_date if on_date is not None else _stock_field(stock, "stockIn", "stock_in")
        if when is not None:
            body["date"] = _as_date_text(when)
        if operation == "add":
            quantity = 1 if quantity is None else quantity
            _check_quantity(quantity)
            body["stockInQuantity"] = quantity
        prefix = self.normalize_prefix(spec.prefix)
        if prefix:
            body["sizePrefix"] = prefix
        return body
