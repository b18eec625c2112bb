from __future__ import annotations

from fastapi import APIRouter

from src.api.health import router as health_router
from src.api.rents import router as rents_router
from src.api.stations import router as stations_router
from src.api.stripe_ledger import router as stripe_ledger_router


api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(rents_router)
api_router.include_router(stripe_ledger_router)
api_router.include_router(stations_router)
