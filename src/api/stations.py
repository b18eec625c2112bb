from __future__ import annotations

from fastapi import APIRouter, Depends

from src.api.dependencies import get_stations_service
from src.schemas.stations import StationListResponse, StationResponse
from src.services.stations_service import StationsService


router = APIRouter(prefix="/stations", tags=["stations"])


@router.get("")
def list_stations(
    service: StationsService = Depends(get_stations_service),
) -> StationListResponse:
    stations = service.list_stations()
    return StationListResponse(data=stations, count=len(stations))


@router.get("/{station_id}")
def get_station(
    station_id: str,
    service: StationsService = Depends(get_stations_service),
) -> StationResponse:
    return StationResponse(data=service.get_station(station_id))
