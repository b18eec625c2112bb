from __future__ import annotations

from datetime import date
from typing import Optional
from zoneinfo import ZoneInfo

from src.core.config import get_reporting_zone
from src.core.errors import InvalidRangeError
from src.repositories.ledger_repository import LedgerRepository
from src.schemas.rents import LedgerListResponse
from src.shared.time import DateWindow, civil_today, parse_civil_date


class LedgerService:
    """Raw passthrough of one Stripe list page, optionally bounded by civil dates."""

    def __init__(self, repository: LedgerRepository, zone: Optional[ZoneInfo] = None) -> None:
        self.repository = repository
        self.zone = zone or get_reporting_zone()

    def _today(self) -> date:
        return civil_today(self.zone)

    def _window(self, from_param: Optional[str], to_param: Optional[str]) -> Optional[DateWindow]:
        if from_param is None or not from_param.strip():
            if to_param is not None and to_param.strip():
                raise InvalidRangeError("from is required when to is given.")
            return None
        today = self._today()
        if from_param.strip() == "mtd":
            start = today.replace(day=1)
        else:
            start = parse_civil_date(from_param, "from")
        end = parse_civil_date(to_param, "to") if to_param else today
        return DateWindow(start, end)

    async def list_charges(
        self, limit: int, from_param: Optional[str] = None, to_param: Optional[str] = None
    ) -> LedgerListResponse:
        page = await self.repository.list_charges_page(limit, self._window(from_param, to_param))
        return LedgerListResponse(data=page.data, has_more=page.has_more)

    async def list_balance_transactions(
        self, limit: int, from_param: Optional[str] = None, to_param: Optional[str] = None
    ) -> LedgerListResponse:
        page = await self.repository.list_balance_transactions_page(
            limit, self._window(from_param, to_param)
        )
        return LedgerListResponse(data=page.data, has_more=page.has_more)
