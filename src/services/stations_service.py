from __future__ import annotations

from typing import List

from src.core.errors import BadRequestError, NotFoundError
from src.models.stations import StationRecord
from src.repositories.stations_repository import StationsRepository
from src.schemas.stations import StationSummary


class StationsService:
    def __init__(self, repository: StationsRepository) -> None:
        self.repository = repository

    def list_stations(self) -> List[StationSummary]:
        return [self._to_summary(record) for record in self.repository.list_stations()]

    def get_station(self, station_id: str) -> StationSummary:
        if not station_id.strip():
            raise BadRequestError("Station ID is required")
        record = self.repository.get_station(station_id.strip())
        if not record:
            raise NotFoundError("Station not found")
        return self._to_summary(record)

    def _to_summary(self, record: StationRecord) -> StationSummary:
        return StationSummary(
            id=record.id,
            title=record.title,
            latitude=record.latitude,
            longitude=record.longitude,
            address=record.address,
            updated_at=record.updated_at,
            stripe_customer_id=record.stripe_customer_id,
        )
