from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import get_rents_service
from src.schemas.rents import RecentRentsReport, RentsReport, StationRentsReport
from src.services.rents_service import RentsService
from src.shared.time import clamp_recent_limit, parse_civil_date


router = APIRouter(prefix="/rents", tags=["rents"])


@router.get("/mtd", response_model_exclude_none=True)
async def rents_month_to_date(
    service: RentsService = Depends(get_rents_service),
) -> RentsReport:
    return await service.get_mtd_report()


@router.get("/range", response_model_exclude_none=True)
async def rents_range(
    from_: Optional[str] = Query(default=None, alias="from"),
    to: Optional[str] = Query(default=None),
    service: RentsService = Depends(get_rents_service),
) -> RentsReport:
    from_day = parse_civil_date(from_, "from")
    to_day = parse_civil_date(to, "to")
    return await service.get_range_report(from_day, to_day)


@router.get("/from", response_model_exclude_none=True)
async def rents_from(
    from_: Optional[str] = Query(default=None, alias="from"),
    service: RentsService = Depends(get_rents_service),
) -> RentsReport:
    return await service.get_from_report(parse_civil_date(from_, "from"))


@router.get("/recent")
async def rents_recent(
    limit: Optional[str] = Query(default=None),
    service: RentsService = Depends(get_rents_service),
) -> RecentRentsReport:
    return await service.get_recent_report(clamp_recent_limit(limit))


# station_ids may be dot-separated ("a.b"); charges are aggregated across all of them.
@router.get("/mtd/{station_ids}", response_model_exclude_none=True)
async def rents_station_month_to_date(
    station_ids: str,
    service: RentsService = Depends(get_rents_service),
) -> StationRentsReport:
    return await service.get_station_mtd_report(station_ids)
