from __future__ import annotations

from datetime import date, datetime
from typing import Dict, List, Optional
from zoneinfo import ZoneInfo

from src.models.ledger import BalanceTransactionRecord, ChargeRecord, LedgerPage
from src.models.stations import StationRecord
from src.services.ledger_service import LedgerService
from src.services.rents_service import RentsService
from src.shared.time import DateWindow


CHICAGO = ZoneInfo("America/Chicago")
TODAY = date(2026, 3, 31)


def chicago_ts(year: int, month: int, day: int, hour: int = 12, minute: int = 0) -> int:
    return int(datetime(year, month, day, hour, minute, tzinfo=CHICAGO).timestamp())


def balance_transaction(txn_id: str, created: int, txn_type: str, net: int) -> BalanceTransactionRecord:
    return BalanceTransactionRecord(id=txn_id, created=created, type=txn_type, net=net)


def charge(
    charge_id: str,
    created: int,
    customer: str,
    captured: Optional[int],
    refunded: int = 0,
    amount: Optional[int] = None,
) -> ChargeRecord:
    return ChargeRecord(
        id=charge_id,
        created=created,
        customer=customer,
        amount_captured=captured,
        amount_refunded=refunded,
        amount=amount,
    )


class FakeLedgerRepository:
    def __init__(self) -> None:
        self.balance_transactions: List[BalanceTransactionRecord] = [
            balance_transaction("txn_1", chicago_ts(2026, 3, 1), "charge", 300),
            balance_transaction("txn_2", chicago_ts(2026, 3, 1, 12, 5), "stripe_fee", -9),
            balance_transaction("txn_3", chicago_ts(2026, 3, 2), "charge", 500),
            balance_transaction("txn_4", chicago_ts(2026, 3, 2, 13), "transfer", -1000),
            balance_transaction("txn_5", chicago_ts(2026, 2, 1), "charge", 200),
            balance_transaction("txn_6", chicago_ts(2026, 2, 28), "charge", 700),
            balance_transaction("txn_7", chicago_ts(2026, 2, 28, 15), "refund", -100),
        ]
        self.charges: List[ChargeRecord] = [
            charge("ch_1", chicago_ts(2026, 3, 3), "cus_1", 1000, 200),
            charge("ch_2", chicago_ts(2026, 3, 3, 14), "cus_2", 500),
            charge("ch_3", chicago_ts(2026, 3, 4), "cus_1", 0, 300),
            charge("ch_4", chicago_ts(2026, 2, 3), "cus_1", 400),
        ]
        self.windows: List[DateWindow] = []
        self.customers: List[Optional[str]] = []
        self.recent_limits: List[int] = []
        self.page_calls: List[Dict[str, object]] = []
        self.error: Optional[Exception] = None

    def _raise_if_failing(self) -> None:
        if self.error is not None:
            raise self.error

    async def fetch_balance_transactions(self, window: DateWindow) -> List[BalanceTransactionRecord]:
        self.windows.append(window)
        self._raise_if_failing()
        gte, lte = window.unix_bounds(CHICAGO)
        return [entry for entry in self.balance_transactions if gte <= entry.created <= lte]

    async def fetch_charges(self, window: DateWindow, customer: Optional[str] = None) -> List[ChargeRecord]:
        self.windows.append(window)
        self.customers.append(customer)
        self._raise_if_failing()
        gte, lte = window.unix_bounds(CHICAGO)
        return [
            entry
            for entry in self.charges
            if gte <= entry.created <= lte and (customer is None or entry.customer == customer)
        ]

    async def fetch_recent_balance_transactions(self, limit: int) -> List[BalanceTransactionRecord]:
        self.recent_limits.append(limit)
        self._raise_if_failing()
        newest_first = sorted(self.balance_transactions, key=lambda entry: entry.created, reverse=True)
        return newest_first[:limit]

    async def list_charges_page(self, limit: int, window: Optional[DateWindow] = None) -> LedgerPage:
        self.page_calls.append({"kind": "charges", "limit": limit, "window": window})
        self._raise_if_failing()
        return LedgerPage(data=[row.model_dump() for row in self.charges[:limit]], has_more=False)

    async def list_balance_transactions_page(
        self, limit: int, window: Optional[DateWindow] = None
    ) -> LedgerPage:
        self.page_calls.append({"kind": "balance_transactions", "limit": limit, "window": window})
        self._raise_if_failing()
        rows = [row.model_dump() for row in self.balance_transactions[:limit]]
        return LedgerPage(data=rows, has_more=len(self.balance_transactions) > limit)


class FakeStationsRepository:
    def __init__(self) -> None:
        self.stations: Dict[str, StationRecord] = {
            "st-1": StationRecord(id="st-1", title="Union Station", stripe_id="cus_1"),
            "st-2": StationRecord(id="st-2", title="Navy Pier", stripe_id=" cus_2 "),
            "st-3": StationRecord(id="st-3", title="Wrigley", stripe_id=None),
        }

    def get_station(self, station_id: str) -> Optional[StationRecord]:
        return self.stations.get(station_id)

    def list_stations(self) -> List[StationRecord]:
        return list(self.stations.values())


def build_rents_service(
    ledger_repository: FakeLedgerRepository,
    stations_repository: FakeStationsRepository,
    today: date = TODAY,
) -> RentsService:
    service = RentsService(
        ledger_repository=ledger_repository,
        stations_repository=stations_repository,
        zone=CHICAGO,
    )
    service._today = lambda: today
    return service


def build_ledger_service(ledger_repository: FakeLedgerRepository, today: date = TODAY) -> LedgerService:
    service = LedgerService(repository=ledger_repository, zone=CHICAGO)
    service._today = lambda: today
    return service
