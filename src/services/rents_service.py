from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import Any, Awaitable, List, Optional
from zoneinfo import ZoneInfo

from src.analytics.rents import (
    RentAggregate,
    aggregate_balance_transactions,
    aggregate_charges,
    align_comparison_days,
    cents_to_dollars,
    recent_days,
)
from src.core.config import get_reporting_zone, get_settings
from src.core.errors import InvalidStationError, NotFoundError, UpstreamUnavailableError
from src.models.ledger import ChargeRecord
from src.repositories.ledger_repository import LedgerRepository
from src.repositories.stations_repository import StationsRepository
from src.schemas.rents import RecentRentsReport, RentsReport, StationRentsReport
from src.shared.time import (
    DateWindow,
    ReportWindows,
    civil_today,
    resolve_from_windows,
    resolve_mtd_windows,
    resolve_range_windows,
)


logger = logging.getLogger(__name__)


class RentsService:
    def __init__(
        self,
        ledger_repository: LedgerRepository,
        stations_repository: StationsRepository,
        zone: Optional[ZoneInfo] = None,
    ) -> None:
        self.ledger_repository = ledger_repository
        self.stations_repository = stations_repository
        self.settings = get_settings()
        self.zone = zone or get_reporting_zone()

    def _today(self) -> date:
        return civil_today(self.zone)

    async def get_mtd_report(self) -> RentsReport:
        windows = resolve_mtd_windows(self._today())
        report = await self._balance_transaction_report(windows)
        report.mtd = windows.primary.label()
        return report

    async def get_range_report(self, from_day: date, to_day: date) -> RentsReport:
        windows = resolve_range_windows(from_day, to_day)
        report = await self._balance_transaction_report(windows)
        report.range = windows.primary.label()
        return report

    async def get_from_report(self, from_day: date) -> RentsReport:
        windows = resolve_from_windows(from_day, self._today())
        report = await self._balance_transaction_report(windows)
        report.range = windows.primary.label()
        return report

    async def get_recent_report(self, limit: int) -> RecentRentsReport:
        (entries,) = await self._fetch_concurrently(
            self.ledger_repository.fetch_recent_balance_transactions(limit)
        )
        aggregate = aggregate_balance_transactions(entries, self.zone)
        return RecentRentsReport(
            positive=cents_to_dollars(aggregate.positive_cents),
            negative=cents_to_dollars(aggregate.negative_cents),
            data=recent_days(aggregate),
        )

    async def get_station_mtd_report(self, station_ids_param: str) -> StationRentsReport:
        station_ids = list(
            dict.fromkeys(part.strip() for part in station_ids_param.split(".") if part.strip())
        )
        if not station_ids:
            raise InvalidStationError("station_id is required.")
        customers: List[str] = []
        for station_id in station_ids:
            customer = await self._resolve_station_customer(station_id)
            if customer not in customers:
                customers.append(customer)

        windows = resolve_mtd_windows(self._today())
        current, previous = await self._fetch_concurrently(
            self._fetch_station_charges(windows.primary, customers),
            self._fetch_station_charges(windows.comparison, customers),
        )
        current_aggregate = aggregate_charges(current, self.zone, windows.primary.day_keys())
        previous_aggregate = aggregate_charges(previous, self.zone, windows.comparison.day_keys())
        report = self._comparison_report(windows.primary, current_aggregate, previous_aggregate)
        return StationRentsReport(
            **report.model_dump(exclude={"mtd", "range"}),
            mtd=windows.primary.label(),
            station_ids=station_ids,
        )

    async def _balance_transaction_report(self, windows: ReportWindows) -> RentsReport:
        current, previous = await self._fetch_concurrently(
            self.ledger_repository.fetch_balance_transactions(windows.primary),
            self.ledger_repository.fetch_balance_transactions(windows.comparison),
        )
        current_aggregate = aggregate_balance_transactions(
            current, self.zone, windows.primary.day_keys()
        )
        previous_aggregate = aggregate_balance_transactions(
            previous, self.zone, windows.comparison.day_keys()
        )
        return self._comparison_report(windows.primary, current_aggregate, previous_aggregate)

    def _comparison_report(
        self,
        primary: DateWindow,
        current: RentAggregate,
        previous: RentAggregate,
    ) -> RentsReport:
        return RentsReport(
            positive=cents_to_dollars(current.positive_cents),
            negative=cents_to_dollars(current.negative_cents),
            ppositive=cents_to_dollars(previous.positive_cents),
            pnegative=cents_to_dollars(previous.negative_cents),
            data=align_comparison_days(current, previous, primary.day_keys()),
        )

    async def _resolve_station_customer(self, station_id: str) -> str:
        station = await asyncio.to_thread(self.stations_repository.get_station, station_id)
        if station is None:
            raise NotFoundError(f"Station not found: {station_id}")
        customer = station.stripe_customer_id
        if not customer:
            raise InvalidStationError(f"Station {station_id} has no stripe_id configured.")
        return customer

    async def _fetch_station_charges(
        self, window: DateWindow, customers: List[str]
    ) -> List[ChargeRecord]:
        batches = await self._gather_all(
            *(self.ledger_repository.fetch_charges(window, customer) for customer in customers)
        )
        return [charge for batch in batches for charge in batch]

    async def _fetch_concurrently(self, *fetches: Awaitable[Any]) -> List[Any]:
        timeout = self.settings.rents_report_timeout_seconds
        try:
            return await asyncio.wait_for(self._gather_all(*fetches), timeout=timeout)
        except asyncio.TimeoutError as exc:
            logger.warning("Ledger fetch exceeded %.0fs; abandoning report", timeout)
            raise UpstreamUnavailableError(
                "Timed out fetching ledger entries from Stripe", status_code=504
            ) from exc

    @staticmethod
    async def _gather_all(*awaitables: Awaitable[Any]) -> List[Any]:
        tasks = [asyncio.ensure_future(awaitable) for awaitable in awaitables]
        try:
            return list(await asyncio.gather(*tasks))
        finally:
            # A failed or cancelled sibling must not leave the other fetch paging in the background.
            pending = [task for task in tasks if not task.done()]
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)
