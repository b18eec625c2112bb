from __future__ import annotations

import logging
from threading import Lock
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlencode

import httpx

from src.core.config import get_settings
from src.core.errors import ConfigurationMissingError, UpstreamUnavailableError


logger = logging.getLogger(__name__)


class SupabaseClient:
    _shared_client: httpx.Client | None = None
    _client_lock: Lock = Lock()

    def __init__(self) -> None:
        settings = get_settings()
        if not settings.supabase_url:
            raise ConfigurationMissingError("Station directory is not configured. Set SUPABASE_URL.")
        self.base_url = settings.supabase_url.rstrip("/") + "/rest/v1"
        self.api_key = settings.supabase_service_role_key or settings.supabase_anon_key
        if not self.api_key:
            raise ConfigurationMissingError(
                "Station directory is not configured. Set SUPABASE_SERVICE_ROLE_KEY."
            )
        self._client = self._get_shared_client()

    @classmethod
    def _get_shared_client(cls) -> httpx.Client:
        if cls._shared_client is not None:
            return cls._shared_client
        with cls._client_lock:
            if cls._shared_client is None:
                cls._shared_client = httpx.Client(
                    timeout=30.0,
                    limits=httpx.Limits(max_keepalive_connections=20, max_connections=100),
                )
        return cls._shared_client

    @classmethod
    def close_shared_client(cls) -> None:
        with cls._client_lock:
            if cls._shared_client is not None:
                cls._shared_client.close()
                cls._shared_client = None

    def _headers(self) -> Dict[str, str]:
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
        }

    def select(
        self,
        table: str,
        select: str,
        filters: Optional[List[Tuple[str, str]]] = None,
        limit: Optional[int] = None,
        order: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        params: List[Tuple[str, str]] = [("select", select)]
        if filters:
            params.extend(filters)
        if limit is not None:
            params.append(("limit", str(limit)))
        if order:
            params.append(("order", order))

        url = f"{self.base_url}/{table}?{urlencode(params, doseq=True)}"
        try:
            response = self._client.get(url, headers=self._headers())
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.error("Station directory returned %s for %s", exc.response.status_code, table)
            raise UpstreamUnavailableError(
                f"Station directory request failed ({exc.response.status_code})",
                status_code=503,
            ) from exc
        except httpx.RequestError as exc:
            logger.error("Station directory unreachable: %s", exc)
            raise UpstreamUnavailableError("Station directory is unreachable", status_code=503) from exc
        data = response.json()
        if isinstance(data, list):
            return data
        return []
