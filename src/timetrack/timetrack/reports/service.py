from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Iterable, Optional

from ..break_types.service import BreakTypeService
from ..common.datetime_utils import local_day_bounds_utc
from ..common.validators import require_enum
from ..companies.service import CompanyService
from ..core.constants import DEFAULT_REPORT_MAX_DAYS
from ..core.enums import GroupBy, ReportType, TimeEntryType
from ..core.exceptions import ValidationError
from ..employees.service import EmployeeService
from ..holidays.service import HolidayService
from ..time_entries.model import TimeEntry
from ..time_entries.repository import TimeEntryRepository
from ..weekly_schedules.service import WeeklyScheduleService
from .engine import ReportContext, ReportEngine
from .model import (
    AttendanceReport,
    BreakTypeReport,
    DelayReport,
    EmployeeSummaryReport,
    MonthlyReport,
    ReportFilters,
    TimeReport,
)

logger = logging.getLogger(__name__)


class ReportService:
    """Validates report filters and loads the rows the report engine works on."""

    def __init__(
        self,
        *,
        companies: CompanyService,
        employees: EmployeeService,
        entries: TimeEntryRepository,
        weekly_schedules: WeeklyScheduleService,
        holidays: HolidayService,
        break_types: BreakTypeService,
        engine: Optional[ReportEngine] = None,
        max_days: int = DEFAULT_REPORT_MAX_DAYS,
    ):
        self._companies = companies
        self._employees = employees
        self._entries = entries
        self._weekly = weekly_schedules
        self._holidays = holidays
        self._break_types = break_types
        self._engine = engine or ReportEngine()
        self._max_days = int(max_days)

    def filters(
        self,
        *,
        company_id: int,
        start_date: Optional[date],
        end_date: Optional[date],
        employee_ids: Optional[Iterable[int]] = None,
        group_by=None,
    ) -> ReportFilters:
        if start_date is None or end_date is None:
            raise ValidationError("start_date and end_date are required")
        if start_date > end_date:
            raise ValidationError("start_date cannot be after end_date")
        filters = ReportFilters(
            company_id=int(company_id),
            start_date=start_date,
            end_date=end_date,
            employee_ids=tuple(sorted({int(i) for i in employee_ids})) if employee_ids else None,
            group_by=require_enum(GroupBy, group_by, "group_by") if group_by else GroupBy.DAY,
        )
        if filters.days > self._max_days:
            raise ValidationError(f"The report period cannot exceed {self._max_days} days")
        return filters

    def context(self, filters: ReportFilters) -> ReportContext:
        company = self._companies.get(filters.company_id)
        offset = self._companies.offset_for(company)
        start_utc, end_utc = local_day_bounds_utc(filters.start_date, filters.end_date, offset)

        employees = self._employees.list(company_id=filters.company_id, employee_ids=filters.employee_ids)
        employee_ids = [e.employee_id for e in employees]
        entries = self._entries.list_range(filters.company_id, start=start_utc, end=end_utc, employee_ids=employee_ids)
        # The day before is needed for overnight shifts that spill into the first day.
        calendar = self._weekly.calendar(
            company_id=filters.company_id,
            start=filters.start_date - timedelta(days=1),
            end=filters.end_date,
            employee_ids=employee_ids,
        )
        holidays = self._holidays.dates_between(
            company_id=filters.company_id, start=filters.start_date, end=filters.end_date
        )

        logger.debug(
            "Report context for company %s (%s..%s): %d employees, %d entries",
            filters.company_id,
            filters.start_date,
            filters.end_date,
            len(employees),
            len(entries),
        )
        return ReportContext(
            filters=filters,
            offset_minutes=offset,
            employees=employees,
            entries=list(entries),
            calendar=calendar,
            holidays=frozenset(holidays),
            break_types=self._break_types.list(company_id=filters.company_id),
            late_resumes=self._late_resumes(filters.company_id, entries, end_utc),
        )

    def _late_resumes(self, company_id: int, entries: Iterable[TimeEntry], end_utc) -> dict[int, TimeEntry]:
        """Resumes after the period for breaks that are still open when it ends."""
        last_pause: dict[int, TimeEntry] = {}
        for e in entries:
            if e.entry_type in (TimeEntryType.BREAK, TimeEntryType.RESUME):
                last_pause[e.employee_id] = e
        resumes: dict[int, TimeEntry] = {}
        for employee_id, e in last_pause.items():
            if e.entry_type != TimeEntryType.BREAK:
                continue
            resume = self._entries.first_after(
                company_id, employee_id, after=end_utc, entry_type=TimeEntryType.RESUME
            )
            if resume is not None:
                resumes[employee_id] = resume
        return resumes

    def time_report(self, filters: ReportFilters) -> TimeReport:
        return self._engine.time_report(self.context(filters))

    def attendance_report(self, filters: ReportFilters) -> AttendanceReport:
        return self._engine.attendance_report(self.context(filters))

    def employee_summary_report(self, filters: ReportFilters) -> EmployeeSummaryReport:
        return self._engine.employee_summary_report(self.context(filters))

    def monthly_report(self, filters: ReportFilters) -> MonthlyReport:
        return self._engine.monthly_report(self.context(filters))

    def break_type_report(self, filters: ReportFilters) -> BreakTypeReport:
        return self._engine.break_type_report(self.context(filters))

    def delay_report(self, filters: ReportFilters) -> DelayReport:
        return self._engine.delay_report(self.context(filters))

    def build(self, report_type, filters: ReportFilters):
        report_type = require_enum(ReportType, report_type, "Report type")
        builders = {
            ReportType.HOURS_WORKED: self.time_report,
            ReportType.ATTENDANCE: self.attendance_report,
            ReportType.EMPLOYEE_SUMMARY: self.employee_summary_report,
            ReportType.MONTHLY_CONSOLIDATED: self.monthly_report,
            ReportType.BREAK_TYPES: self.break_type_report,
            ReportType.DELAYS: self.delay_report,
        }
        return builders[report_type](filters)

    @staticmethod
    def options() -> dict:
        return {
            "report_types": [t.value for t in ReportType],
            "group_by": [g.value for g in GroupBy],
        }
