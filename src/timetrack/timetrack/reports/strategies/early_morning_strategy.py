from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from ...common.datetime_utils import MINUTES_PER_DAY, minutes_of_day
from .base import DayShiftStrategy, ShiftLookup, ShiftMatch


class EarlyMorningStrategy(DayShiftStrategy):
    """Small-hours clock-in: it may belong to an overnight shift that started yesterday."""

    def match(self, *, local_ts: datetime, shifts_for: ShiftLookup) -> Optional[ShiftMatch]:
        previous_day = local_ts.date() - timedelta(days=1)
        minute = minutes_of_day(local_ts)
        for s in shifts_for(previous_day):
            if s.is_overnight and minute <= s.end_minute:
                # Measured on yesterday's clock, across midnight.
                delay = minute + MINUTES_PER_DAY - s.start_minute
                return ShiftMatch(schedule=s, shift_date=previous_day, delay_minutes=delay)
        return super().match(local_ts=local_ts, shifts_for=shifts_for)
