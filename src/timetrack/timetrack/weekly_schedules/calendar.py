from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Iterable, Mapping

from ..common.datetime_utils import day_of_week_index, week_start
from ..schedules.model import EmployeeSchedule, Schedule
from .model import WeeklyScheduleAssignment


class ScheduleCalendar:
    """Answers "which shifts does this employee work on this date".

    A weekly plan wins whenever the date has at least one row (a rest-day row
    means no shift at all). Otherwise the default assignments active on that
    date apply.
    """

    def __init__(
        self,
        *,
        assignments: Iterable[WeeklyScheduleAssignment],
        defaults: Iterable[EmployeeSchedule],
        schedules: Mapping[int, Schedule] | Iterable[Schedule],
    ):
        if isinstance(schedules, Mapping):
            self._schedules = dict(schedules)
        else:
            self._schedules = {s.schedule_id: s for s in schedules}

        self._weekly: dict[tuple[int, date, int], list[WeeklyScheduleAssignment]] = defaultdict(list)
        for a in assignments:
            self._weekly[(a.employee_id, a.week_start, a.day_of_week)].append(a)

        self._defaults: dict[int, list[EmployeeSchedule]] = defaultdict(list)
        for d in defaults:
            self._defaults[d.employee_id].append(d)

    def shifts_for(self, employee_id: int, day: date) -> list[Schedule]:
        key = (employee_id, week_start(day), day_of_week_index(day))
        if key in self._weekly:
            ids = [a.schedule_id for a in self._weekly[key] if a.schedule_id is not None]
        else:
            ids = [d.schedule_id for d in self._defaults.get(employee_id, []) if d.covers(day)]

        shifts = {i: self._schedules[i] for i in ids if i in self._schedules}
        return sorted(shifts.values(), key=lambda s: (s.start_time, s.schedule_id))
