from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Optional, Sequence
from zoneinfo import ZoneInfo

from src.models.ledger import BalanceTransactionRecord, ChargeRecord
from src.schemas.rents import RecentRentDay, RentDay
from src.shared.time import civil_date_from_unix, format_date_label, shift_months


# Customer revenue plus the fee types needed for a true net.
REVENUE_TYPES = frozenset(
    {
        "charge",
        "payment",
        "payment_refund",
        "refund",
        "payment_reversal",
        "payment_failure_refund",
        "stripe_fee",
        "stripe_fx_fee",
        "tax_fee",
    }
)


@dataclass
class DayBucket:
    day: date
    rents: int = 0
    net_cents: int = 0

    @property
    def label(self) -> str:
        return format_date_label(self.day)


@dataclass
class RentAggregate:
    positive_cents: int = 0
    negative_cents: int = 0
    by_day: Dict[date, DayBucket] = field(default_factory=dict)

    def bucket(self, day: date) -> DayBucket:
        existing = self.by_day.get(day)
        if existing is None:
            existing = DayBucket(day=day)
            self.by_day[day] = existing
        return existing

    def sorted_days(self) -> List[DayBucket]:
        return [self.by_day[key] for key in sorted(self.by_day)]


def _seeded(day_keys: Optional[Sequence[date]]) -> RentAggregate:
    aggregate = RentAggregate()
    for key in day_keys or ():
        aggregate.bucket(key)
    return aggregate


def aggregate_balance_transactions(
    entries: Iterable[BalanceTransactionRecord],
    zone: ZoneInfo,
    day_keys: Optional[Sequence[date]] = None,
) -> RentAggregate:
    """Fold balance transactions into signed totals and per-day buckets.

    Only ``REVENUE_TYPES`` count. The global totals split by sign while each
    day's ``net_cents`` keeps the signed sum, so a day nets fees against charges.
    A rent is a ``charge`` with a positive net.
    """
    aggregate = _seeded(day_keys)
    for entry in entries:
        entry_type = entry.type or ""
        if entry_type not in REVENUE_TYPES:
            continue
        net = entry.net or 0
        if net > 0:
            aggregate.positive_cents += net
        elif net < 0:
            aggregate.negative_cents += net
        bucket = aggregate.bucket(civil_date_from_unix(entry.created, zone))
        bucket.net_cents += net
        if entry_type == "charge" and net > 0:
            bucket.rents += 1
    return aggregate


def aggregate_charges(
    charges: Iterable[ChargeRecord],
    zone: ZoneInfo,
    day_keys: Optional[Sequence[date]] = None,
) -> RentAggregate:
    """Fold station charges into totals; refunds are only counted against a capture.

    ``negative_cents`` is kept signed (<= 0) like the balance transaction policy,
    so the per-day nets always sum to ``positive_cents + negative_cents``.
    """
    aggregate = _seeded(day_keys)
    for charge in charges:
        captured = charge.captured_cents
        if captured <= 0:
            continue
        refunded = charge.refunded_cents
        net = captured - refunded
        aggregate.positive_cents += captured
        aggregate.negative_cents -= refunded
        bucket = aggregate.bucket(civil_date_from_unix(charge.created, zone))
        bucket.net_cents += net
        if net > 0:
            bucket.rents += 1
    return aggregate


def align_comparison_days(
    current: RentAggregate,
    previous: RentAggregate,
    day_keys: Sequence[date],
) -> List[RentDay]:
    days: List[RentDay] = []
    for key in day_keys:
        bucket = current.by_day.get(key) or DayBucket(day=key)
        prev_bucket = previous.by_day.get(shift_months(key, -1))
        days.append(
            RentDay(
                date=bucket.label,
                rents=bucket.rents,
                money=format_money(bucket.net_cents),
                prev_rents=prev_bucket.rents if prev_bucket else 0,
                prev_money=format_money(prev_bucket.net_cents) if prev_bucket else "$0",
            )
        )
    return days


def recent_days(aggregate: RentAggregate) -> List[RecentRentDay]:
    return [
        RecentRentDay(date=bucket.label, rents=bucket.rents, money=format_money(bucket.net_cents))
        for bucket in aggregate.sorted_days()
    ]


def format_money(cents: int) -> str:
    dollars = (Decimal(cents) / Decimal(100)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    if dollars.is_zero():
        return "$0"
    return f"${dollars}"


def cents_to_dollars(cents: int) -> float:
    return cents / 100
