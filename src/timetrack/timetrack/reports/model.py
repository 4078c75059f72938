from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import GroupBy, TrendDirection


@dataclass(frozen=True)
class ReportFilters:
    """Local, inclusive date range of a report."""

    company_id: int
    start_date: date
    end_date: date
    employee_ids: Optional[tuple[int, ...]] = None
    group_by: GroupBy = GroupBy.DAY

    @property
    def days(self) -> int:
        return (self.end_date - self.start_date).days + 1


@dataclass(frozen=True)
class ReportPeriod:
    start_date: date
    end_date: date
    days_in_period: int
    work_days: int


@dataclass(frozen=True)
class Delay:
    entry_id: int
    employee_id: int
    timestamp: datetime
    local_time: datetime
    shift_date: date
    schedule_id: int
    schedule_name: str
    schedule_start: str
    delay_minutes: int
    delay_hours: float


# time report


@dataclass(frozen=True)
class TimeGroup:
    key: str
    entries: int
    total_hours: float
    employees: int


@dataclass(frozen=True)
class TimeSummary:
    total_hours: float
    total_entries: int
    total_employees: int
    start_date: date
    end_date: date


@dataclass(frozen=True)
class TimeReport:
    summary: TimeSummary
    details: list[TimeGroup]


# attendance report


@dataclass(frozen=True)
class AttendanceRow:
    employee_id: int
    employee_name: str
    dni: str
    work_days: int
    worked_days: int
    absences: int
    attendance_rate: float
    late_entries: int
    total_delay_minutes: int
    total_hours: float


@dataclass(frozen=True)
class AttendanceSummary:
    total_employees: int
    total_work_days: int
    total_worked_days: int
    total_absences: int
    total_late_entries: int
    attendance_rate: float


@dataclass(frozen=True)
class AttendanceReport:
    summary: AttendanceSummary
    details: list[AttendanceRow]


# employee summary


@dataclass(frozen=True)
class EmployeeSummaryRow:
    employee_id: int
    employee_name: str
    dni: str
    active: bool
    total_hours: float
    work_days: int
    worked_days: int
    attendance_rate: float
    late_entries: int
    total_delay_minutes: int
    average_hours_per_day: float
    hours_by_schedule: dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class EmployeeSummaryTotals:
    total_employees: int
    total_hours: float
    average_attendance_rate: float


@dataclass(frozen=True)
class EmployeeSummaryReport:
    summary: EmployeeSummaryTotals
    details: list[EmployeeSummaryRow]


# monthly consolidated


@dataclass(frozen=True)
class DayOfWeekStat:
    day_index: int
    day: str
    hours: float
    entries: int


@dataclass(frozen=True)
class PeakDay:
    date: date
    hours: float
    employees: int


@dataclass(frozen=True)
class Trend:
    direction: TrendDirection
    change_percent: float


@dataclass(frozen=True)
class MonthlyAnalytics:
    day_of_week: list[DayOfWeekStat]
    hours_by_schedule: dict[str, float]
    peak_days: list[PeakDay]
    trend: Trend


@dataclass(frozen=True)
class MonthlyReport:
    period: ReportPeriod
    time: TimeSummary
    attendance: AttendanceSummary
    employees: EmployeeSummaryTotals
    analytics: MonthlyAnalytics
    time_details: list[TimeGroup]
    attendance_details: list[AttendanceRow]
    employee_details: list[EmployeeSummaryRow]


# break types


@dataclass(frozen=True)
class BreakEntry:
    entry_id: int
    employee_id: int
    employee_name: str
    timestamp: datetime
    resumed_at: Optional[datetime]
    duration_minutes: Optional[int]
    reason: Optional[str] = None


@dataclass(frozen=True)
class BreakTypeRow:
    break_type_id: int
    name: str
    color: str
    total_minutes: int
    total_hours: float
    total_entries: int
    employees: int
    entries: list[BreakEntry]


@dataclass(frozen=True)
class BreakTypeSummary:
    total_breaks: int
    total_minutes: int
    total_hours: float
    average_minutes: int
    most_used: Optional[str]


@dataclass(frozen=True)
class BreakTypeReport:
    summary: BreakTypeSummary
    details: list[BreakTypeRow]


# delays


@dataclass(frozen=True)
class EmployeeDelays:
    employee_id: int
    employee_name: str
    delays: list[Delay]
    total_delays: int
    total_minutes: int
    total_hours: float
    average_minutes: float


@dataclass(frozen=True)
class DelaySummary:
    total_delays: int
    total_minutes: int
    total_hours: float
    average_minutes: float
    employees_with_delays: int
    most_delayed_employee: Optional[str]


@dataclass(frozen=True)
class DelayReport:
    summary: DelaySummary
    details: list[EmployeeDelays]
