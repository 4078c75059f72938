from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Optional

from ...common.datetime_utils import minutes_of_day
from ...schedules.model import Schedule

ShiftLookup = Callable[[date], list[Schedule]]


@dataclass(frozen=True)
class ShiftMatch:
    """The shift occurrence a clock-in belongs to.

    ``shift_date`` is the local date the shift starts on; ``delay_minutes`` is
    negative for early arrivals.
    """

    schedule: Schedule
    shift_date: date
    delay_minutes: int


class ShiftMatchStrategy(ABC):
    """Strategy Pattern: decide which scheduled shift a local clock-in belongs to."""

    @abstractmethod
    def match(self, *, local_ts: datetime, shifts_for: ShiftLookup) -> Optional[ShiftMatch]:
        raise NotImplementedError


class DayShiftStrategy(ShiftMatchStrategy):
    """Regular shifts of the clock-in's own date.

    The entry belongs to the latest shift that already started; a clock-in
    before every start belongs to the first shift of the day.
    """

    def match(self, *, local_ts: datetime, shifts_for: ShiftLookup) -> Optional[ShiftMatch]:
        day = local_ts.date()
        shifts = [s for s in shifts_for(day) if not s.is_overnight]
        if not shifts:
            return None

        minute = minutes_of_day(local_ts)
        started = [s for s in shifts if s.start_minute <= minute]
        if started:
            chosen = max(started, key=lambda s: (s.start_minute, -s.schedule_id))
        else:
            chosen = min(shifts, key=lambda s: (s.start_minute, s.schedule_id))
        return ShiftMatch(schedule=chosen, shift_date=day, delay_minutes=minute - chosen.start_minute)
