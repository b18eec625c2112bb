from __future__ import annotations

from functools import lru_cache

from src.core.config import get_reporting_zone, get_settings
from src.core.errors import ConfigurationMissingError
from src.repositories.ledger_repository import LedgerRepository
from src.repositories.stations_repository import StationsRepository
from src.services.ledger_service import LedgerService
from src.services.rents_service import RentsService
from src.services.stations_service import StationsService


@lru_cache
def get_stations_repository() -> StationsRepository:
    return StationsRepository()


def get_stations_service() -> StationsService:
    return StationsService(repository=get_stations_repository())


def get_ledger_repository() -> LedgerRepository:
    settings = get_settings()
    if not settings.stripe_secret_key:
        raise ConfigurationMissingError("Stripe is not configured. Set STRIPE_SECRET_KEY.")
    return LedgerRepository(zone=get_reporting_zone(), page_size=settings.stripe_page_size)


def get_rents_service() -> RentsService:
    return RentsService(
        ledger_repository=get_ledger_repository(),
        stations_repository=get_stations_repository(),
    )


def get_ledger_service() -> LedgerService:
    return LedgerService(repository=get_ledger_repository())
