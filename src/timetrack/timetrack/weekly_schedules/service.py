from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from typing import Iterable, Optional

from ..common.datetime_utils import MINUTES_PER_DAY, day_of_week_index, week_start as monday_of
from ..common.validators import clean_optional_text
from ..core.constants import DAY_NAMES
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from ..schedules.model import Schedule
from ..schedules.repository import ScheduleRepository
from .calendar import ScheduleCalendar
from .model import DailyHours, WeeklyHoursSummary, WeeklyScheduleAssignment
from .repository import WeeklyScheduleRepository

logger = logging.getLogger(__name__)


def _interval(schedule: Schedule) -> tuple[int, int]:
    start = schedule.start_minute
    end = schedule.end_minute
    if schedule.is_overnight:
        end += MINUTES_PER_DAY
    return start, end


def shifts_overlap(a: Schedule, b: Schedule) -> bool:
    """Overlap on a 48h axis so overnight shifts compare correctly."""
    a_start, a_end = _interval(a)
    b_start, b_end = _interval(b)
    return a_start < b_end and b_start < a_end


def _require_monday(value: date, field_name: str) -> date:
    if value.weekday() != 0:
        raise ValidationError(f"{field_name} must be a Monday")
    return value


def _require_day_of_week(value) -> int:
    try:
        day = int(value)
    except (TypeError, ValueError):
        raise ValidationError("day_of_week must be a number between 0 (Sunday) and 6 (Saturday)")
    if not 0 <= day <= 6:
        raise ValidationError("day_of_week must be a number between 0 (Sunday) and 6 (Saturday)")
    return day


class WeeklyScheduleService:
    def __init__(
        self,
        weekly: WeeklyScheduleRepository,
        schedules: ScheduleRepository,
        employees: EmployeeRepository,
    ):
        self._weekly = weekly
        self._schedules = schedules
        self._employees = employees

    def _schedule_map(self, company_id: int) -> dict[int, Schedule]:
        return {s.schedule_id: s for s in self._schedules.list_for_company(int(company_id))}

    def _day_rows(self, company_id: int, employee_id: int, week: date, day_of_week: int) -> list[WeeklyScheduleAssignment]:
        rows = self._weekly.list_range(company_id, first_week=week, last_week=week, employee_ids=[employee_id])
        return [r for r in rows if r.day_of_week == day_of_week]

    def list_week(
        self,
        *,
        company_id: int,
        week_start: date,
        employee_id: Optional[int] = None,
    ) -> list[WeeklyScheduleAssignment]:
        week = _require_monday(week_start, "week_start")
        ids = [int(employee_id)] if employee_id is not None else None
        return list(self._weekly.list_range(int(company_id), first_week=week, last_week=week, employee_ids=ids))

    def upsert(
        self,
        *,
        company_id: int,
        employee_id: int,
        week_start: date,
        day_of_week: int,
        schedule_id: Optional[int],
        notes: Optional[str] = None,
    ) -> WeeklyScheduleAssignment:
        company_id = int(company_id)
        week = _require_monday(week_start, "week_start")
        day = _require_day_of_week(day_of_week)
        if not self._employees.get_for_company(company_id, int(employee_id)):
            raise NotFoundError("Employee not found")

        notes = clean_optional_text(notes)
        existing = self._day_rows(company_id, int(employee_id), week, day)

        if schedule_id is None:
            # A rest day replaces whatever was planned that day.
            self._weekly.delete_for_day(company_id, employee_id=int(employee_id), week_start=week, day_of_week=day)
        else:
            schedules = self._schedule_map(company_id)
            new_shift = schedules.get(int(schedule_id))
            if not new_shift:
                raise NotFoundError("Schedule not found")

            for row in existing:
                if row.is_rest_day:
                    self._weekly.delete(company_id, row.assignment_id)
                    continue
                current = schedules.get(row.schedule_id)
                if current and shifts_overlap(current, new_shift):
                    raise ConflictError(f"Schedule overlaps an existing shift ({current.name}) on that day")

        assignment_id = self._weekly.create(
            company_id=company_id,
            employee_id=int(employee_id),
            week_start=week,
            day_of_week=day,
            schedule_id=int(schedule_id) if schedule_id is not None else None,
            notes=notes,
        )
        logger.info(
            "Weekly schedule %s: employee %s week %s day %s -> %s",
            assignment_id, employee_id, week, day, schedule_id if schedule_id is not None else "rest",
        )
        return self._weekly.get(company_id, assignment_id)

    def delete(self, *, company_id: int, assignment_id: int) -> None:
        if not self._weekly.delete(int(company_id), int(assignment_id)):
            raise NotFoundError("Assignment not found")

    def copy_week(
        self,
        *,
        company_id: int,
        source_week: date,
        target_week: date,
        employee_ids: Optional[Iterable[int]] = None,
    ) -> int:
        """Copy every assignment of a week onto another one; returns the number copied."""
        company_id = int(company_id)
        source = _require_monday(source_week, "source_week")
        target = _require_monday(target_week, "target_week")
        if source == target:
            raise ValidationError("Source and target week must differ")

        ids = sorted({int(e) for e in employee_ids}) if employee_ids else None
        rows = list(self._weekly.list_range(company_id, first_week=source, last_week=source, employee_ids=ids))
        if not rows:
            raise ValidationError("The source week has no assignments")

        affected = ids or sorted({r.employee_id for r in rows})
        self._weekly.delete_for_week(company_id, week_start=target, employee_ids=affected)
        for r in rows:
            self._weekly.create(
                company_id=company_id,
                employee_id=r.employee_id,
                week_start=target,
                day_of_week=r.day_of_week,
                schedule_id=r.schedule_id,
                notes=r.notes,
            )

        logger.info("Copied %d weekly assignments from %s to %s (company %s)", len(rows), source, target, company_id)
        return len(rows)

    def weekly_hours_summary(
        self,
        *,
        company_id: int,
        week_start: date,
        employee_id: Optional[int] = None,
    ) -> WeeklyHoursSummary:
        rows = self.list_week(company_id=company_id, week_start=week_start, employee_id=employee_id)
        schedules = self._schedule_map(int(company_id))

        minutes_by_day: dict[int, int] = defaultdict(int)
        employees_by_day: dict[int, set[int]] = defaultdict(set)
        scheduled_employees: set[int] = set()
        for r in rows:
            shift = schedules.get(r.schedule_id) if r.schedule_id is not None else None
            if not shift:
                continue
            minutes_by_day[r.day_of_week] += shift.net_minutes
            employees_by_day[r.day_of_week].add(r.employee_id)
            scheduled_employees.add(r.employee_id)

        days = [
            DailyHours(
                day_of_week=d,
                day_name=DAY_NAMES[d],
                hours=round(minutes_by_day[d] / 60, 2),
                employee_count=len(employees_by_day[d]),
            )
            for d in range(7)
        ]
        return WeeklyHoursSummary(
            week_start=week_start,
            total_hours=round(sum(minutes_by_day.values()) / 60, 2),
            employees_with_schedule=len(scheduled_employees),
            days=days,
        )

    def calendar(
        self,
        *,
        company_id: int,
        start: date,
        end: date,
        employee_ids: Optional[Iterable[int]] = None,
    ) -> ScheduleCalendar:
        """Calendar covering local dates ``start`` to ``end``."""
        ids = list(employee_ids) if employee_ids is not None else None
        assignments = self._weekly.list_range(
            int(company_id),
            first_week=monday_of(start),
            last_week=monday_of(end),
            employee_ids=ids,
        )
        defaults = self._schedules.list_employee_schedules(int(company_id), employee_ids=ids)
        return ScheduleCalendar(
            assignments=assignments,
            defaults=defaults,
            schedules=self._schedule_map(int(company_id)),
        )

    def schedules_for_date(self, *, company_id: int, employee_id: int, day: date) -> list[Schedule]:
        cal = self.calendar(company_id=company_id, start=day, end=day, employee_ids=[int(employee_id)])
        return cal.shifts_for(int(employee_id), day)

    def for_date_summary(self, *, company_id: int, employee_id: int, day: date) -> dict:
        shifts = self.schedules_for_date(company_id=company_id, employee_id=employee_id, day=day)
        return {
            "date": day,
            "day_of_week": day_of_week_index(day),
            "shifts": shifts,
        }
