from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Iterator, Optional

from ..core.constants import WORKDAY_ROLLOVER_HOUR
from ..core.exceptions import ValidationError

MINUTES_PER_DAY = 24 * 60


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime((value or "").strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date {value!r} (expected YYYY-MM-DD)")


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO-8601 timestamp into a naive UTC datetime.

    Aware values are converted to UTC; naive values are taken as UTC already.
    """
    raw = (value or "").strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        raise ValidationError(f"Invalid timestamp {value!r}")
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def parse_hhmm(value: str) -> time:
    v = (value or "").strip()
    try:
        return datetime.strptime(v, "%H:%M").time()
    except ValueError:
        raise ValidationError(f"Invalid time {value!r} (expected HH:MM)")


def format_hhmm(value: time) -> str:
    return value.strftime("%H:%M")


def minutes_of_day(value: time | datetime) -> int:
    """Minutes since midnight; seconds are dropped."""
    return value.hour * 60 + value.minute


def now_utc() -> datetime:
    """Current naive UTC time.

    Note: Wrapped so tests can patch/mock easier.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_local(ts: datetime, offset_minutes: int) -> datetime:
    return ts + timedelta(minutes=offset_minutes)


def to_utc(ts: datetime, offset_minutes: int) -> datetime:
    return ts - timedelta(minutes=offset_minutes)


def local_day_bounds_utc(start: date, end: date, offset_minutes: int) -> tuple[datetime, datetime]:
    """UTC window covering local dates ``start`` to ``end``, both inclusive."""
    first = datetime.combine(start, time.min)
    last = datetime.combine(end, time.max)
    return to_utc(first, offset_minutes), to_utc(last, offset_minutes)


def work_day_for(local_ts: datetime) -> date:
    """Local work day a punch belongs to (early-morning punches close the previous day)."""
    if local_ts.hour < WORKDAY_ROLLOVER_HOUR:
        return local_ts.date() - timedelta(days=1)
    return local_ts.date()


def work_day_bounds_local(work_day: date) -> tuple[datetime, datetime]:
    start = datetime.combine(work_day, time.min)
    end = datetime.combine(work_day + timedelta(days=1), time(hour=WORKDAY_ROLLOVER_HOUR))
    return start, end


def week_start(value: date) -> date:
    """Monday of the week containing ``value``."""
    return value - timedelta(days=value.weekday())


def day_of_week_index(value: date) -> int:
    """0 = Sunday ... 6 = Saturday."""
    return (value.weekday() + 1) % 7


def date_for_week_day(monday: date, day_of_week: int) -> date:
    """Inverse of ``day_of_week_index`` inside the week starting at ``monday``."""
    return monday + timedelta(days=(day_of_week - 1) % 7)


def iter_days(start: date, end: date) -> Iterator[date]:
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def shift_span_minutes(start: time, end: time) -> int:
    """Length of a shift, wrapping past midnight when it ends before it starts."""
    span = minutes_of_day(end) - minutes_of_day(start)
    if span <= 0:
        span += MINUTES_PER_DAY
    return span


def minutes_between(start: datetime, end: Optional[datetime]) -> float:
    if end is None or end <= start:
        return 0.0
    return (end - start).total_seconds() / 60
