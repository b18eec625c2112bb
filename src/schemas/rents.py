from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import Field

from src.shared.response import ApiResponse, BaseSchema


class RentDay(BaseSchema):
    date: str
    rents: int = 0
    money: str = "$0"
    prev_rents: int = 0
    prev_money: str = "$0"


class RecentRentDay(BaseSchema):
    date: str
    rents: int = 0
    money: str = "$0"


class RentsReport(ApiResponse):
    mtd: Optional[str] = None
    range: Optional[str] = None
    positive: float
    negative: float
    ppositive: float
    pnegative: float
    data: List[RentDay]


class StationRentsReport(RentsReport):
    station_ids: List[str] = Field(alias="station_ids")


class RecentRentsReport(ApiResponse):
    positive: float
    negative: float
    data: List[RecentRentDay]


class LedgerListResponse(ApiResponse):
    data: List[Dict[str, Any]]
    has_more: bool = Field(alias="has_more")
