from __future__ import annotations

import logging
from contextlib import aclosing
from functools import partial
from typing import AsyncIterator, Awaitable, Callable, List, Optional, Type, TypeVar
from zoneinfo import ZoneInfo

from src.core.stripe import MAX_PAGE_SIZE, StripeClient
from src.models.ledger import BalanceTransactionRecord, ChargeRecord, LedgerPage
from src.shared.time import DateWindow


logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", BalanceTransactionRecord, ChargeRecord)


class LedgerRepository:
    """Reads ledger entries from Stripe, one full snapshot per fetch.

    The ``iter_*`` methods page lazily with ``starting_after`` set to the last
    id of the previous page; the ``fetch_*`` methods drain them into a list, so
    an upstream failure on any page fails the whole fetch.
    """

    def __init__(
        self,
        zone: ZoneInfo,
        client_factory: Callable[[], StripeClient] = StripeClient.from_settings,
        page_size: int = MAX_PAGE_SIZE,
    ) -> None:
        self.zone = zone
        self.client_factory = client_factory
        self.page_size = max(1, min(page_size, MAX_PAGE_SIZE))

    async def iter_balance_transactions(
        self, window: DateWindow
    ) -> AsyncIterator[BalanceTransactionRecord]:
        pages = self._iter_pages(
            "balance_transactions",
            window,
            BalanceTransactionRecord,
            lambda stripe: stripe.list_balance_transactions,
        )
        async with aclosing(pages):
            async for entry in pages:
                yield entry

    async def iter_charges(
        self, window: DateWindow, customer: Optional[str] = None
    ) -> AsyncIterator[ChargeRecord]:
        pages = self._iter_pages(
            "charges",
            window,
            ChargeRecord,
            lambda stripe: partial(stripe.list_charges, customer=customer),
        )
        async with aclosing(pages):
            async for entry in pages:
                yield entry

    async def _iter_pages(
        self,
        kind: str,
        window: DateWindow,
        record: Type[RecordT],
        list_call: Callable[[StripeClient], Callable[..., Awaitable[LedgerPage]]],
    ) -> AsyncIterator[RecordT]:
        gte, lte = window.unix_bounds(self.zone)
        async with self.client_factory() as stripe:
            fetch_page = list_call(stripe)
            starting_after: Optional[str] = None
            page_number = 0
            while True:
                page = await fetch_page(
                    created_gte=gte,
                    created_lte=lte,
                    limit=self.page_size,
                    starting_after=starting_after,
                )
                page_number += 1
                logger.debug(
                    "%s page %s: %s entries (has_more=%s)",
                    kind,
                    page_number,
                    len(page.data),
                    page.has_more,
                )
                for row in page.data:
                    yield record.model_validate(row)
                starting_after = page.last_id
                if not page.has_more or not starting_after:
                    break

    async def fetch_balance_transactions(self, window: DateWindow) -> List[BalanceTransactionRecord]:
        async with aclosing(self.iter_balance_transactions(window)) as entries:
            return [entry async for entry in entries]

    async def fetch_charges(
        self, window: DateWindow, customer: Optional[str] = None
    ) -> List[ChargeRecord]:
        async with aclosing(self.iter_charges(window, customer)) as entries:
            return [entry async for entry in entries]

    async def fetch_recent_balance_transactions(self, limit: int) -> List[BalanceTransactionRecord]:
        page = await self.list_balance_transactions_page(limit=limit)
        return [BalanceTransactionRecord.model_validate(row) for row in page.data]

    async def list_balance_transactions_page(
        self, limit: int, window: Optional[DateWindow] = None
    ) -> LedgerPage:
        gte, lte = window.unix_bounds(self.zone) if window else (None, None)
        async with self.client_factory() as stripe:
            return await stripe.list_balance_transactions(
                created_gte=gte, created_lte=lte, limit=limit
            )

    async def list_charges_page(self, limit: int, window: Optional[DateWindow] = None) -> LedgerPage:
        gte, lte = window.unix_bounds(self.zone) if window else (None, None)
        async with self.client_factory() as stripe:
            return await stripe.list_charges(created_gte=gte, created_lte=lte, limit=limit)
