from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from src.shared.response import ApiResponse, BaseSchema


class StationSummary(BaseSchema):
    id: str
    title: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    address: Optional[str] = None
    updated_at: Optional[datetime] = None
    stripe_customer_id: Optional[str] = None


class StationListResponse(ApiResponse):
    data: List[StationSummary]
    count: int


class StationResponse(ApiResponse):
    data: StationSummary
