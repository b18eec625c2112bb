from __future__ import annotations

import asyncio
from datetime import date
from types import SimpleNamespace

import pytest

from src.core.errors import (
    InvalidRangeError,
    InvalidStationError,
    NotFoundError,
    UpstreamUnavailableError,
)
from src.shared.time import DateWindow
from tests.fakes import FakeLedgerRepository, FakeStationsRepository, build_rents_service


def test_mtd_report_fetches_primary_and_comparison_windows() -> None:
    ledger = FakeLedgerRepository()
    service = build_rents_service(ledger, FakeStationsRepository())

    report = asyncio.run(service.get_mtd_report())

    assert sorted(ledger.windows, key=lambda window: window.start_day) == [
        DateWindow(date(2026, 2, 1), date(2026, 2, 28)),
        DateWindow(date(2026, 3, 1), date(2026, 3, 31)),
    ]
    assert report.mtd == "Mar 1, 2026 – Mar 31, 2026"
    assert report.positive == 8.0
    assert report.negative == -0.09
    assert report.ppositive == 9.0
    assert report.pnegative == -1.0
    assert len(report.data) == 31
    assert report.data[0].money == "$3"
    assert report.data[0].prev_money == "$2"
    assert report.data[30].prev_rents == 1
    assert report.data[30].prev_money == "$6"


def test_from_report_runs_through_today() -> None:
    service = build_rents_service(FakeLedgerRepository(), FakeStationsRepository())
    report = asyncio.run(service.get_from_report(date(2026, 3, 30)))
    assert report.range == "Mar 30, 2026 – Mar 31, 2026"
    assert len(report.data) == 2


def test_range_report_rejects_reversed_range_before_fetching() -> None:
    ledger = FakeLedgerRepository()
    service = build_rents_service(ledger, FakeStationsRepository())
    with pytest.raises(InvalidRangeError):
        asyncio.run(service.get_range_report(date(2026, 3, 5), date(2026, 3, 1)))
    assert ledger.windows == []


def test_recent_report_has_no_comparison() -> None:
    ledger = FakeLedgerRepository()
    service = build_rents_service(ledger, FakeStationsRepository())

    report = asyncio.run(service.get_recent_report(10))

    assert ledger.recent_limits == [10]
    assert report.positive == 17.0
    assert report.negative == -1.09
    assert [day.date for day in report.data] == [
        "Feb 1, 2026",
        "Feb 28, 2026",
        "Mar 1, 2026",
        "Mar 2, 2026",
    ]
    assert "ppositive" not in report.model_dump()


def test_station_report_uses_signed_negative_totals() -> None:
    ledger = FakeLedgerRepository()
    service = build_rents_service(ledger, FakeStationsRepository())

    report = asyncio.run(service.get_station_mtd_report("st-1"))

    assert report.station_ids == ["st-1"]
    assert set(ledger.customers) == {"cus_1"}
    assert report.positive == 10.0
    assert report.negative == -2.0
    assert report.ppositive == 4.0
    assert report.pnegative == 0.0
    march_3 = report.data[2]
    assert (march_3.rents, march_3.money, march_3.prev_rents, march_3.prev_money) == (1, "$8", 1, "$4")
    assert report.data[3].money == "$0"


def test_station_report_aggregates_dot_separated_stations() -> None:
    ledger = FakeLedgerRepository()
    service = build_rents_service(ledger, FakeStationsRepository())

    report = asyncio.run(service.get_station_mtd_report("st-1.st-2.st-1"))

    assert report.station_ids == ["st-1", "st-2"]
    assert sorted(set(ledger.customers)) == ["cus_1", "cus_2"]
    assert report.positive == 15.0
    assert report.data[2].rents == 2
    assert report.data[2].money == "$13"


def test_station_report_errors() -> None:
    service = build_rents_service(FakeLedgerRepository(), FakeStationsRepository())
    with pytest.raises(NotFoundError):
        asyncio.run(service.get_station_mtd_report("missing"))
    with pytest.raises(InvalidStationError):
        asyncio.run(service.get_station_mtd_report("st-3"))
    with pytest.raises(InvalidStationError):
        asyncio.run(service.get_station_mtd_report(" . "))


class OneSidedFailureLedger(FakeLedgerRepository):
    """Fails the comparison fetch while the primary fetch is still paging."""

    def __init__(self) -> None:
        super().__init__()
        self.primary_cancelled = False

    async def fetch_balance_transactions(self, window: DateWindow):
        if window.start_day.month == 3:
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                self.primary_cancelled = True
                raise
            return []
        raise UpstreamUnavailableError("Invalid API Key provided", status_code=401)


def test_failed_fetch_cancels_sibling_and_surfaces_upstream_status() -> None:
    ledger = OneSidedFailureLedger()
    service = build_rents_service(ledger, FakeStationsRepository())

    with pytest.raises(UpstreamUnavailableError) as exc_info:
        asyncio.run(service.get_mtd_report())

    assert exc_info.value.status_code == 401
    assert ledger.primary_cancelled is True


class StalledLedger(FakeLedgerRepository):
    async def fetch_balance_transactions(self, window: DateWindow):
        await asyncio.sleep(10)
        return []


def test_report_times_out_with_gateway_timeout() -> None:
    service = build_rents_service(StalledLedger(), FakeStationsRepository())
    service.settings = SimpleNamespace(rents_report_timeout_seconds=0.05)

    with pytest.raises(UpstreamUnavailableError) as exc_info:
        asyncio.run(service.get_mtd_report())

    assert exc_info.value.status_code == 504
