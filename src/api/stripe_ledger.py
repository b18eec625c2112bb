from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import get_ledger_service
from src.schemas.rents import LedgerListResponse
from src.services.ledger_service import LedgerService
from src.shared.time import clamp_recent_limit


router = APIRouter(prefix="/stripe", tags=["stripe"])

PASSTHROUGH_DEFAULT_LIMIT = 100


@router.get("/charges")
async def list_charges(
    limit: Optional[str] = Query(default=None),
    from_: Optional[str] = Query(default=None, alias="from"),
    to: Optional[str] = Query(default=None),
    service: LedgerService = Depends(get_ledger_service),
) -> LedgerListResponse:
    return await service.list_charges(
        clamp_recent_limit(limit, default=PASSTHROUGH_DEFAULT_LIMIT), from_, to
    )


@router.get("/balance-transactions")
async def list_balance_transactions(
    limit: Optional[str] = Query(default=None),
    from_: Optional[str] = Query(default=None, alias="from"),
    to: Optional[str] = Query(default=None),
    service: LedgerService = Depends(get_ledger_service),
) -> LedgerListResponse:
    return await service.list_balance_transactions(
        clamp_recent_limit(limit, default=PASSTHROUGH_DEFAULT_LIMIT), from_, to
    )
