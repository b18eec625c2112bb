from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from src.api.dependencies import get_ledger_service, get_rents_service, get_stations_service
from src.main import create_app
from src.services.stations_service import StationsService
from tests.fakes import (
    FakeLedgerRepository,
    FakeStationsRepository,
    build_ledger_service,
    build_rents_service,
)


@pytest.fixture()
def ledger_repository() -> FakeLedgerRepository:
    return FakeLedgerRepository()


@pytest.fixture()
def stations_repository() -> FakeStationsRepository:
    return FakeStationsRepository()


@pytest.fixture()
def client(ledger_repository, stations_repository) -> TestClient:
    app = create_app()
    app.dependency_overrides[get_rents_service] = lambda: build_rents_service(
        ledger_repository, stations_repository
    )
    app.dependency_overrides[get_ledger_service] = lambda: build_ledger_service(ledger_repository)
    app.dependency_overrides[get_stations_service] = lambda: StationsService(
        repository=stations_repository
    )
    return TestClient(app)
