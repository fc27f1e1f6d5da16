from __future__ import annotations

from datetime import date
from fastapi import APIRouter, HTTPException, Depends

from .schemas import (
    AdjustmentRequest,
    CreateStockRequest,
    DashboardResponse,
    InitialQuantityRequest,
    InitialQuantityResponse,
    LedgerEntryRow,
    RegisterRequest,
    RegisterResponse,
    SizeCountRequest,
    SizeCountResponse,
    SizeSpecRequest,
    SizesResponse,
    StatsResponse,
    StockRecord,
    StockStatusRow,
    StockUpdateRequest,
    ValidateSizesRequest,
)
from .deps import get_size_agent, get_ledger_agent, get_status_agent
from agents.ledger_agent import LedgerAgent
from agents.size_agent import RangeSizes, SizeSetAgent
from agents.status_agent import StatusAgent
from utils.preprocess import normalize_size

router = APIRouter()


@router.get("/health")
def health():
    return {"status": "ok"}


@router.post("/sizes/derive", response_model=SizesResponse)
def derive_sizes(payload: SizeSpecRequest, size_agent: SizeSetAgent = Depends(get_size_agent)):
    try:
        sizes = size_agent.derive_sizes(payload.to_spec())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return SizesResponse(count=len(sizes), sizes=sizes)


@router.post("/sizes/count", response_model=SizeCountResponse)
def count_sizes(payload: SizeCountRequest, size_agent: SizeSetAgent = Depends(get_size_agent)):
    """Live preview of how many sizes a form would create; never fails, 0 means invalid input."""
    if payload.mode == "multiple":
        spec = RangeSizes(start=payload.start, end=payload.end, interval=payload.interval, prefix=payload.prefix)
        return SizeCountResponse(count=size_agent.compute_range_count(spec))
    return SizeCountResponse(count=size_agent.compute_explicit_count(payload.sizes, payload.prefix, payload.numeric_only))


@router.post("/sizes/validate", response_model=SizesResponse)
def validate_sizes(payload: ValidateSizesRequest, size_agent: SizeSetAgent = Depends(get_size_agent)):
    try:
        spec = size_agent.with_stock_prefix(payload.spec.to_spec(), payload.stock)
        sizes = size_agent.derive_sizes(spec)
        size_agent.validate_against_stock(sizes, payload.stock)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return SizesResponse(count=len(sizes), sizes=sizes)


@router.post("/sizes/adjustment")
def build_adjustment(payload: AdjustmentRequest, size_agent: SizeSetAgent = Depends(get_size_agent)):
    """Returns the body to send to the backend's add-quantity / delete-quantity endpoint."""
    try:
        return size_agent.build_adjustment(
            payload.spec.to_spec(),
            payload.stock,
            payload.quantity,
            operation=payload.operation,
            on_date=payload.date,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/ledger/register", response_model=RegisterResponse)
def stock_register(payload: RegisterRequest, ledger_agent: LedgerAgent = Depends(get_ledger_agent)):
    cutoff = payload.date or date.today()
    today = payload.today or cutoff

    entries = ledger_agent.register(payload.records, search=payload.search)
    # over-withdrawals are reported against the full history, not the searched subset
    ledger = ledger_agent.reconstruct(payload.records)
    stats = ledger_agent.compute_stats(payload.records, cutoff, today)
    if payload.stock is not None:
        initial = ledger_agent.resolve_initial_quantity(payload.stock, payload.records)
    else:
        initial = ledger_agent.compute_initial_total(payload.records)

    return RegisterResponse(
        count=len(entries),
        entries=[LedgerEntryRow(**e.__dict__) for e in entries],
        stats=StatsResponse(**stats.__dict__),
        initial_quantity=initial,
        over_withdrawals=[LedgerEntryRow(**e.__dict__) for e in ledger_agent.over_withdrawals(ledger)],
    )


@router.post("/ledger/stats", response_model=StatsResponse)
def ledger_stats(payload: RegisterRequest, ledger_agent: LedgerAgent = Depends(get_ledger_agent)):
    cutoff = payload.date or date.today()
    stats = ledger_agent.compute_stats(payload.records, cutoff, payload.today or cutoff)
    return StatsResponse(**stats.__dict__)


@router.post("/ledger/initial-quantity", response_model=InitialQuantityResponse)
def initial_quantity(payload: InitialQuantityRequest, ledger_agent: LedgerAgent = Depends(get_ledger_agent)):
    if payload.size is not None:
        size = normalize_size(payload.size)
        return InitialQuantityResponse(size=size, initial_quantity=ledger_agent.compute_initial_quantity(payload.records, size))
    if payload.stock is not None:
        return InitialQuantityResponse(initial_quantity=ledger_agent.resolve_initial_quantity(payload.stock, payload.records))
    return InitialQuantityResponse(initial_quantity=ledger_agent.compute_initial_total(payload.records))


@router.post("/stocks/status", response_model=DashboardResponse)
def stock_status(stocks: list[StockRecord], status_agent: StatusAgent = Depends(get_status_agent)):
    summary = status_agent.summarize(stocks)
    rows = [StockStatusRow(**r) for r in status_agent.annotate(stocks)]
    return DashboardResponse(**summary.__dict__, stocks=rows)


@router.post("/stocks/create-body")
def create_stock_body(payload: CreateStockRequest, size_agent: SizeSetAgent = Depends(get_size_agent)):
    """Returns the body to send to the backend's create-stock endpoint."""
    try:
        return size_agent.build_create_stock(
            payload.category,
            payload.subcategory,
            payload.spec.to_spec(),
            quantity=payload.quantity,
            stock_in=payload.stock_in,
            status=payload.status,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/stocks/update-body")
def stock_update_body(payload: StockUpdateRequest, size_agent: SizeSetAgent = Depends(get_size_agent)):
    """Returns the body to send to the backend's stock update endpoint (add or delete sizes)."""
    try:
        return size_agent.build_stock_update(
            payload.stock,
            payload.spec.to_spec(),
            operation=payload.operation,
            quantity=payload.quantity,
            on_date=payload.date,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
