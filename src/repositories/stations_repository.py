from __future__ import annotations

from typing import List, Optional

from src.core.supabase import SupabaseClient
from src.models.stations import StationRecord


STATION_COLUMNS = "id,title,latitude,longitude,address,updated_at,stripe_id"


class StationsRepository:
    def __init__(self, client: Optional[SupabaseClient] = None) -> None:
        self._client = client

    @property
    def client(self) -> SupabaseClient:
        # Built on first use so ledger-only routes work without directory credentials.
        if self._client is None:
            self._client = SupabaseClient()
        return self._client

    def list_stations(self) -> List[StationRecord]:
        rows = self.client.select(
            table="stations",
            select=STATION_COLUMNS,
            order="updated_at.desc",
        )
        return [StationRecord.model_validate(row) for row in rows]

    def get_station(self, station_id: str) -> Optional[StationRecord]:
        rows = self.client.select(
            table="stations",
            select=STATION_COLUMNS,
            filters=[("id", f"eq.{station_id}")],
            limit=1,
        )
        if not rows:
            return None
        return StationRecord.model_validate(rows[0])
