from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import httpx

from src.core.config import get_settings
from src.core.errors import ConfigurationMissingError, UpstreamUnavailableError
from src.models.ledger import LedgerPage


logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


class StripeClient:
    """Thin async client for the Stripe list endpoints used by revenue reports.

    One instance owns one ``httpx.AsyncClient`` for the duration of an
    ``async with`` block, so concurrent fetches never share a connection pool
    across event loops.
    """

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = "https://api.stripe.com/v1",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if not api_key:
            raise ConfigurationMissingError("Stripe is not configured. Set STRIPE_SECRET_KEY.")
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_settings(cls, transport: Optional[httpx.AsyncBaseTransport] = None) -> "StripeClient":
        settings = get_settings()
        return cls(
            settings.stripe_secret_key or "",
            base_url=settings.stripe_api_base,
            timeout=settings.stripe_timeout_seconds,
            transport=transport,
        )

    async def __aenter__(self) -> "StripeClient":
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Authorization": f"Bearer {self.api_key}"},
            timeout=self.timeout,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def list_balance_transactions(
        self,
        *,
        created_gte: Optional[int] = None,
        created_lte: Optional[int] = None,
        limit: int = MAX_PAGE_SIZE,
        starting_after: Optional[str] = None,
    ) -> LedgerPage:
        params = self._list_params(created_gte, created_lte, limit, starting_after)
        return await self._get_page("/balance_transactions", params)

    async def list_charges(
        self,
        *,
        created_gte: Optional[int] = None,
        created_lte: Optional[int] = None,
        customer: Optional[str] = None,
        limit: int = MAX_PAGE_SIZE,
        starting_after: Optional[str] = None,
    ) -> LedgerPage:
        params = self._list_params(created_gte, created_lte, limit, starting_after)
        if customer:
            params.append(("customer", customer))
        return await self._get_page("/charges", params)

    @staticmethod
    def _list_params(
        created_gte: Optional[int],
        created_lte: Optional[int],
        limit: int,
        starting_after: Optional[str],
    ) -> List[Tuple[str, str]]:
        params: List[Tuple[str, str]] = [("limit", str(max(1, min(limit, MAX_PAGE_SIZE))))]
        if created_gte is not None:
            params.append(("created[gte]", str(created_gte)))
        if created_lte is not None:
            params.append(("created[lte]", str(created_lte)))
        if starting_after:
            params.append(("starting_after", starting_after))
        return params

    async def _get_page(self, path: str, params: List[Tuple[str, str]]) -> LedgerPage:
        if self._client is None:
            raise RuntimeError("StripeClient must be used inside 'async with'")
        try:
            response = await self._client.get(path, params=params)
        except httpx.TimeoutException as exc:
            logger.error("Stripe request to %s timed out", path)
            raise UpstreamUnavailableError("Stripe request timed out", status_code=504) from exc
        except httpx.RequestError as exc:
            logger.error("Stripe request to %s failed: %s", path, exc)
            raise UpstreamUnavailableError(f"Stripe request failed: {exc}") from exc

        if response.is_error:
            message = self._error_message(response)
            logger.error("Stripe %s returned %s: %s", path, response.status_code, message)
            raise UpstreamUnavailableError(message, status_code=response.status_code)

        payload: Dict[str, Any] = response.json()
        return LedgerPage.model_validate(payload)

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return f"Stripe API error ({response.status_code})"
        error = body.get("error") if isinstance(body, dict) else None
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        return f"Stripe API error ({response.status_code})"
