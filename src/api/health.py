from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter

from src.core.config import get_settings


router = APIRouter(tags=["health"])


@router.get("/health")
def health_check() -> dict:
    return {
        "success": True,
        "status": "ok",
        "service": get_settings().app_name,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
