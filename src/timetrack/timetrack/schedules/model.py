from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import Optional

from ..common.datetime_utils import minutes_of_day, shift_span_minutes
from ..core.constants import DEFAULT_SCHEDULE_COLOR


@dataclass(frozen=True)
class Schedule:
    """Named shift of a company, expressed in local wall-clock time."""

    schedule_id: int
    company_id: int
    name: str
    start_time: time
    end_time: time
    break_minutes: int = 0
    is_flexible: bool = False
    color: str = DEFAULT_SCHEDULE_COLOR
    active: bool = True

    @property
    def is_overnight(self) -> bool:
        return self.end_time < self.start_time

    @property
    def start_minute(self) -> int:
        return minutes_of_day(self.start_time)

    @property
    def end_minute(self) -> int:
        return minutes_of_day(self.end_time)

    @property
    def span_minutes(self) -> int:
        return shift_span_minutes(self.start_time, self.end_time)

    @property
    def net_minutes(self) -> int:
        return max(self.span_minutes - int(self.break_minutes or 0), 0)


@dataclass(frozen=True)
class EmployeeSchedule:
    """Default assignment of a schedule, used when a week has no explicit plan."""

    assignment_id: int
    employee_id: int
    schedule_id: int
    start_date: date
    end_date: Optional[date] = None

    def covers(self, day: date) -> bool:
        return self.start_date <= day and (self.end_date is None or day <= self.end_date)
