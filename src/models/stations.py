from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class StationRecord(BaseModel):
    id: str
    title: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    address: Optional[str] = None
    updated_at: Optional[datetime] = None
    stripe_id: Optional[str] = None

    @property
    def stripe_customer_id(self) -> Optional[str]:
        if not self.stripe_id or not self.stripe_id.strip():
            return None
        return self.stripe_id.strip()
