from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import List, Optional, Tuple
from zoneinfo import ZoneInfo

from src.core.errors import InvalidRangeError


DEFAULT_RECENT_LIMIT = 10
MAX_RECENT_LIMIT = 100

_MONTH_LABELS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

# Stripe timestamps start at the epoch; the upper bound leaves room for the next-day boundary.
MIN_CIVIL_DATE = date(1970, 1, 1)
MAX_CIVIL_DATE = date(9998, 12, 31)


@dataclass(frozen=True)
class DateWindow:
    """Inclusive range of civil dates in the reporting time zone."""

    start_day: date
    end_day: date

    def __post_init__(self) -> None:
        if self.start_day > self.end_day:
            raise InvalidRangeError("from must be on or before to.")

    def day_keys(self) -> List[date]:
        count = (self.end_day - self.start_day).days + 1
        return [self.start_day + timedelta(days=offset) for offset in range(count)]

    def shifted_months(self, months: int) -> "DateWindow":
        return DateWindow(shift_months(self.start_day, months), shift_months(self.end_day, months))

    def unix_bounds(self, zone: ZoneInfo) -> Tuple[int, int]:
        start = datetime.combine(self.start_day, time.min, tzinfo=zone)
        end = datetime.combine(self.end_day + timedelta(days=1), time.min, tzinfo=zone)
        return int(start.timestamp()), int(end.timestamp()) - 1

    def label(self) -> str:
        return f"{format_date_label(self.start_day)} – {format_date_label(self.end_day)}"


@dataclass(frozen=True)
class ReportWindows:
    primary: Optional[DateWindow]
    comparison: Optional[DateWindow]


def shift_months(value: date, months: int) -> date:
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(value.day, last_day))


def civil_today(zone: ZoneInfo, now: Optional[datetime] = None) -> date:
    current = now or datetime.now(zone)
    return current.astimezone(zone).date()


def civil_date_from_unix(seconds: int, zone: ZoneInfo) -> date:
    return datetime.fromtimestamp(seconds, tz=zone).date()


def format_date_label(value: date) -> str:
    return f"{_MONTH_LABELS[value.month - 1]} {value.day}, {value.year}"


def parse_civil_date(value: Optional[str], param: str) -> date:
    if value is None or not value.strip():
        raise InvalidRangeError(f"Query param {param} (YYYY-MM-DD) is required.")
    try:
        parsed = date.fromisoformat(value.strip())
    except ValueError as exc:
        raise InvalidRangeError(f"Query param {param} must be a date in YYYY-MM-DD format.") from exc
    if not MIN_CIVIL_DATE <= parsed <= MAX_CIVIL_DATE:
        raise InvalidRangeError(
            f"Query param {param} must be between {MIN_CIVIL_DATE.isoformat()} and {MAX_CIVIL_DATE.isoformat()}."
        )
    return parsed


def _with_comparison(primary: DateWindow) -> ReportWindows:
    return ReportWindows(primary=primary, comparison=primary.shifted_months(-1))


def resolve_mtd_windows(today: date) -> ReportWindows:
    return _with_comparison(DateWindow(today.replace(day=1), today))


def resolve_range_windows(from_day: date, to_day: date) -> ReportWindows:
    return _with_comparison(DateWindow(from_day, to_day))


def resolve_from_windows(from_day: date, today: date) -> ReportWindows:
    if from_day > today:
        raise InvalidRangeError("from must be on or before today.")
    return _with_comparison(DateWindow(from_day, today))


def resolve_recent_windows() -> ReportWindows:
    return ReportWindows(primary=None, comparison=None)


def clamp_recent_limit(raw: Optional[str], default: int = DEFAULT_RECENT_LIMIT) -> int:
    try:
        limit = int(str(raw).strip())
    except (TypeError, ValueError):
        return default
    if limit < 1:
        return default
    return min(limit, MAX_RECENT_LIMIT)
