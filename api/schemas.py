from __future__ import annotations

from datetime import date as Date, datetime
from typing import List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator

from agents.size_agent import ExplicitSizes, RangeSizes, SizeSpec
from utils.errors import ValidationError


class StatusThresholds(BaseModel):
    high: float = 0
    medium: float = 0
    low: float = 0


class StockRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(default=None, alias="_id")
    category: str
    subcategory: str
    quantity: float = 0
    stock_in: Optional[str] = Field(default=None, alias="stockIn")
    sizes: List[str] = []
    size_prefix: Optional[str] = Field(default=None, alias="sizePrefix")
    status: Optional[StatusThresholds] = None
    initial_quantity: Optional[int] = Field(default=None, alias="initialQuantity")

    @field_validator("sizes", mode="before")
    @classmethod
    def _sizes_as_labels(cls, v):
        # legacy stocks store numeric sizes
        return [str(s) for s in (v or [])]

    @field_validator("stock_in", mode="before")
    @classmethod
    def _stock_in_as_day(cls, v):
        # backend sends an ISO timestamp, stock updates only carry the day
        if hasattr(v, "isoformat"):
            v = v.isoformat()
        return v.split("T")[0] if isinstance(v, str) else v


class HistoryRecord(BaseModel):
    category: str = ""
    subcategory: str = ""
    size: Optional[Union[int, float, str]] = None
    stockin: Optional[float] = None
    stockout: Optional[float] = None
    date: Union[datetime, str]


class SizeSpecRequest(BaseModel):
    mode: Literal["single", "multiple"] = "single"
    sizes: Optional[Union[str, List[Union[int, str]]]] = None
    start: Optional[Union[int, str]] = None
    end: Optional[Union[int, str]] = None
    interval: Optional[Union[int, str]] = None
    prefix: Optional[str] = None

    def to_spec(self) -> SizeSpec:
        if self.mode == "multiple":
            if self.start is None or self.end is None or self.interval is None:
                raise ValidationError("invalid range")
            return RangeSizes(start=self.start, end=self.end, interval=self.interval, prefix=self.prefix)
        return ExplicitSizes(raw_sizes=self.sizes or [], prefix=self.prefix)


class SizeCountRequest(SizeSpecRequest):
    numeric_only: bool = False


class CreateStockRequest(BaseModel):
    category: str
    subcategory: str = ""
    spec: SizeSpecRequest
    quantity: int = 1
    stock_in: Optional[Date] = None
    status: Optional[StatusThresholds] = None


class StockUpdateRequest(BaseModel):
    stock: StockRecord
    spec: SizeSpecRequest
    operation: Literal["add", "delete"] = "add"
    quantity: Optional[int] = None
    date: Optional[Date] = None


class SizesResponse(BaseModel):
    count: int
    sizes: List[str]


class SizeCountResponse(BaseModel):
    count: int


class ValidateSizesRequest(BaseModel):
    spec: SizeSpecRequest
    stock: StockRecord


class AdjustmentRequest(ValidateSizesRequest):
    quantity: int
    operation: Literal["add", "remove"] = "add"
    date: Optional[Date] = None


class RegisterRequest(BaseModel):
    records: List[HistoryRecord]
    date: Optional[Date] = None
    today: Optional[Date] = None
    search: Optional[str] = None
    stock: Optional[StockRecord] = None


class LedgerEntryRow(BaseModel):
    category: str
    subcategory: str
    size: str
    stockin: int
    stockout: int
    date: datetime
    remaining_stock: int
    shortfall: int = 0


class StatsResponse(BaseModel):
    total_stock: int
    today_stock_in: int
    today_stock_out: int


class RegisterResponse(BaseModel):
    count: int
    entries: List[LedgerEntryRow]
    stats: StatsResponse
    initial_quantity: int
    over_withdrawals: List[LedgerEntryRow]


class InitialQuantityRequest(BaseModel):
    records: List[HistoryRecord]
    size: Optional[Union[int, float, str]] = None
    stock: Optional[StockRecord] = None


class InitialQuantityResponse(BaseModel):
    size: Optional[str] = None
    initial_quantity: int


class StockStatusRow(BaseModel):
    id: Optional[str] = None
    category: str
    subcategory: str
    quantity: int
    status: str


class DashboardResponse(BaseModel):
    total_stock: int
    categories: List[str]
    subcategories: List[str]
    low_stock: int
    medium_stock: int
    high_stock: int
    stocks: List[StockStatusRow]
