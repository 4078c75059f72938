from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...common.datetime_utils import minutes_of_day
from .base import DayShiftStrategy, ShiftLookup, ShiftMatch


class EveningStrategy(DayShiftStrategy):
    """Late-evening clock-in: try the overnight shifts starting that same day first."""

    def match(self, *, local_ts: datetime, shifts_for: ShiftLookup) -> Optional[ShiftMatch]:
        day = local_ts.date()
        minute = minutes_of_day(local_ts)
        for s in shifts_for(day):
            if s.is_overnight and s.start_minute <= minute:
                return ShiftMatch(schedule=s, shift_date=day, delay_minutes=minute - s.start_minute)
        return super().match(local_ts=local_ts, shifts_for=shifts_for)
