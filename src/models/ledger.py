from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict


class LedgerPage(BaseModel):
    data: List[Dict[str, Any]] = []
    has_more: bool = False

    @property
    def last_id(self) -> Optional[str]:
        if not self.data:
            return None
        return self.data[-1].get("id")


class BalanceTransactionRecord(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str
    created: int
    type: Optional[str] = None
    net: Optional[int] = None
    amount: Optional[int] = None
    fee: Optional[int] = None
    currency: Optional[str] = None


class ChargeRecord(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str
    created: int
    amount: Optional[int] = None
    amount_captured: Optional[int] = None
    amount_refunded: Optional[int] = None
    customer: Optional[str] = None
    currency: Optional[str] = None

    @property
    def captured_cents(self) -> int:
        if self.amount_captured is not None:
            return self.amount_captured
        return self.amount or 0

    @property
    def refunded_cents(self) -> int:
        return self.amount_refunded or 0
