from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Iterable, Optional

from ..common.datetime_utils import parse_hhmm
from ..common.validators import require_color, require_min_length, require_non_empty
from ..core.constants import DEFAULT_SCHEDULE_COLOR
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .model import EmployeeSchedule, Schedule
from .repository import ScheduleRepository

logger = logging.getLogger(__name__)


def _break_minutes(value) -> int:
    try:
        minutes = int(value or 0)
    except (TypeError, ValueError):
        raise ValidationError("Break time must be a number of minutes")
    if minutes < 0:
        raise ValidationError("Break time cannot be negative")
    return minutes


class ScheduleService:
    def __init__(self, schedules: ScheduleRepository, employees: EmployeeRepository):
        self._schedules = schedules
        self._employees = employees

    def list(self, *, company_id: int, active_only: bool = False) -> list[Schedule]:
        return list(self._schedules.list_for_company(int(company_id), active_only=active_only))

    def get(self, *, company_id: int, schedule_id: int) -> Schedule:
        schedule = self._schedules.get(int(company_id), int(schedule_id))
        if not schedule:
            raise NotFoundError("Schedule not found")
        return schedule

    def create(
        self,
        *,
        company_id: int,
        name: str,
        start_time: str,
        end_time: str,
        break_minutes: int = 0,
        is_flexible: bool = False,
        color: Optional[str] = None,
    ) -> Schedule:
        name = require_min_length(require_non_empty(name, "Name"), "Name", 2)
        start = parse_hhmm(start_time)
        end = parse_hhmm(end_time)
        if start == end:
            raise ValidationError("Start and end time cannot be equal")

        if self._schedules.get_by_name(int(company_id), name):
            raise ConflictError("A schedule with this name already exists")

        schedule_id = self._schedules.create(
            company_id=int(company_id),
            name=name,
            start_time=start,
            end_time=end,
            break_minutes=_break_minutes(break_minutes),
            is_flexible=bool(is_flexible),
            color=require_color(color, DEFAULT_SCHEDULE_COLOR),
        )
        logger.info("Created schedule %s (%s) in company %s", schedule_id, name, company_id)
        return self.get(company_id=company_id, schedule_id=schedule_id)

    def update(self, *, company_id: int, schedule_id: int, changes: dict) -> Schedule:
        current = self.get(company_id=company_id, schedule_id=schedule_id)
        updated = current

        if "name" in changes:
            name = require_min_length(require_non_empty(changes["name"], "Name"), "Name", 2)
            clash = self._schedules.get_by_name(int(company_id), name)
            if clash and clash.schedule_id != current.schedule_id:
                raise ConflictError("A schedule with this name already exists")
            updated = replace(updated, name=name)
        if "start_time" in changes:
            updated = replace(updated, start_time=parse_hhmm(changes["start_time"]))
        if "end_time" in changes:
            updated = replace(updated, end_time=parse_hhmm(changes["end_time"]))
        if "break_minutes" in changes:
            updated = replace(updated, break_minutes=_break_minutes(changes["break_minutes"]))
        if "is_flexible" in changes:
            updated = replace(updated, is_flexible=bool(changes["is_flexible"]))
        if "color" in changes:
            updated = replace(updated, color=require_color(changes["color"], DEFAULT_SCHEDULE_COLOR))
        if "active" in changes:
            updated = replace(updated, active=bool(changes["active"]))

        if updated.start_time == updated.end_time:
            raise ValidationError("Start and end time cannot be equal")

        self._schedules.update(updated)
        return updated

    def delete(self, *, company_id: int, schedule_id: int, force: bool = False) -> None:
        self.get(company_id=company_id, schedule_id=schedule_id)
        in_use = self._schedules.count_assignments(int(schedule_id))
        if in_use and not force:
            raise ConflictError(f"Schedule is assigned {in_use} time(s); remove the assignments first")

        if not self._schedules.delete(int(company_id), int(schedule_id)):
            raise ValidationError("Deleting the schedule failed")
        logger.info("Deleted schedule %s in company %s", schedule_id, company_id)

    def assign(
        self,
        *,
        company_id: int,
        schedule_id: int,
        employee_ids: Iterable[int],
        start_date: date,
        end_date: Optional[date] = None,
    ) -> list[int]:
        self.get(company_id=company_id, schedule_id=schedule_id)
        ids = sorted({int(e) for e in employee_ids})
        if not ids:
            raise ValidationError("Select at least one employee")
        if end_date and end_date < start_date:
            raise ValidationError("End date cannot be before start date")

        known = {e.employee_id for e in self._employees.list_for_company(int(company_id), employee_ids=ids)}
        missing = [e for e in ids if e not in known]
        if missing:
            raise NotFoundError(f"Unknown employees: {', '.join(str(m) for m in missing)}")

        return [
            self._schedules.assign(employee_id=e, schedule_id=int(schedule_id), start_date=start_date, end_date=end_date)
            for e in ids
        ]

    def unassign(self, *, company_id: int, schedule_id: int, employee_id: int) -> None:
        self.get(company_id=company_id, schedule_id=schedule_id)
        if not self._schedules.remove_assignment(schedule_id=int(schedule_id), employee_id=int(employee_id)):
            raise NotFoundError("Assignment not found")

    def employee_schedules(self, *, company_id: int, employee_id: int) -> list[EmployeeSchedule]:
        return list(self._schedules.list_employee_schedules(int(company_id), employee_ids=[int(employee_id)]))
