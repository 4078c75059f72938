"""Report engine.

Pure computation over already-loaded rows: every report is a pass over the
entries of the period, folded into sessions with the work-time calculator and
matched against the schedule calendar for delay detection.
"""
from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Mapping, Optional, Sequence

from ..break_types.model import BreakType
from ..common.datetime_utils import day_of_week_index, format_hhmm, iter_days, to_local, week_start
from ..core.constants import DAY_NAMES, PEAK_DAYS_LIMIT, TREND_THRESHOLD_PERCENT, UNSCHEDULED_LABEL
from ..core.enums import GroupBy, TimeEntryType, TrendDirection
from ..employees.model import Employee
from ..time_entries.calculator.base import WorkTimeCalculator
from ..time_entries.calculator.standard_calculator import StandardWorkTimeCalculator
from ..time_entries.model import TimeEntry, WorkSession
from ..weekly_schedules.calendar import ScheduleCalendar
from .factory import ShiftMatchStrategyFactory
from .model import (
    AttendanceReport,
    AttendanceRow,
    AttendanceSummary,
    BreakEntry,
    BreakTypeReport,
    BreakTypeRow,
    BreakTypeSummary,
    DayOfWeekStat,
    Delay,
    DelayReport,
    DelaySummary,
    EmployeeDelays,
    EmployeeSummaryReport,
    EmployeeSummaryRow,
    EmployeeSummaryTotals,
    MonthlyAnalytics,
    MonthlyReport,
    PeakDay,
    ReportFilters,
    ReportPeriod,
    TimeGroup,
    TimeReport,
    TimeSummary,
    Trend,
)
from .strategies.base import ShiftMatch

logger = logging.getLogger(__name__)


def _hours(minutes: float) -> float:
    return round(minutes / 60, 2)


def _rate(worked_days: int, work_days: int) -> float:
    if not work_days:
        return 0.0
    return round(worked_days / work_days * 100, 2)


def group_key(day: date, group_by: GroupBy) -> str:
    if group_by == GroupBy.WEEK:
        return week_start(day).isoformat()
    if group_by == GroupBy.MONTH:
        return day.strftime("%Y-%m")
    return day.isoformat()


def trend_of(daily_hours: Sequence[float]) -> Trend:
    """Compare the average of the first half of a daily series with the second half."""
    if len(daily_hours) < 2:
        return Trend(direction=TrendDirection.INSUFFICIENT_DATA, change_percent=0.0)

    middle = len(daily_hours) // 2
    first = sum(daily_hours[:middle]) / middle
    second = sum(daily_hours[middle:]) / (len(daily_hours) - middle)
    if first == 0:
        if second > 0:
            return Trend(direction=TrendDirection.INCREASING, change_percent=100.0)
        return Trend(direction=TrendDirection.STABLE, change_percent=0.0)

    change = round((second - first) / first * 100, 2)
    if change > TREND_THRESHOLD_PERCENT:
        direction = TrendDirection.INCREASING
    elif change < -TREND_THRESHOLD_PERCENT:
        direction = TrendDirection.DECREASING
    else:
        direction = TrendDirection.STABLE
    return Trend(direction=direction, change_percent=change)


@dataclass(frozen=True)
class ReportContext:
    """Everything a report needs, loaded once by the report service."""

    filters: ReportFilters
    offset_minutes: int
    employees: Sequence[Employee]
    entries: Sequence[TimeEntry]
    calendar: ScheduleCalendar
    holidays: frozenset[date] = frozenset()
    break_types: Sequence[BreakType] = ()
    # First RESUME after the period for employees whose last break is still open at its end
    late_resumes: Mapping[int, TimeEntry] = field(default_factory=dict)


@dataclass(frozen=True)
class _EmployeeFigures:
    total_minutes: float
    worked_days: int
    delays: list[Delay]
    hours_by_schedule: dict[str, float]


class ReportEngine:
    def __init__(
        self,
        *,
        calculator: Optional[WorkTimeCalculator] = None,
        strategy_factory: Optional[ShiftMatchStrategyFactory] = None,
    ):
        self._calculator = calculator or StandardWorkTimeCalculator()
        self._strategies = strategy_factory or ShiftMatchStrategyFactory()

    # Shared building blocks

    def _local(self, ctx: ReportContext, ts: datetime) -> datetime:
        return to_local(ts, ctx.offset_minutes)

    def _entries_by_employee(self, ctx: ReportContext) -> dict[int, list[TimeEntry]]:
        grouped: dict[int, list[TimeEntry]] = defaultdict(list)
        for e in sorted(ctx.entries, key=lambda e: (e.timestamp, e.entry_id)):
            grouped[e.employee_id].append(e)
        return grouped

    def work_days(self, ctx: ReportContext) -> int:
        """Monday to Friday dates of the period that are not company holidays."""
        return sum(
            1
            for day in iter_days(ctx.filters.start_date, ctx.filters.end_date)
            if day.weekday() < 5 and day not in ctx.holidays
        )

    def worked_days(self, ctx: ReportContext, entries: Sequence[TimeEntry]) -> int:
        return len({self._local(ctx, e.timestamp).date() for e in entries if e.entry_type == TimeEntryType.IN})

    def sessions(self, entries: Sequence[TimeEntry]) -> list[WorkSession]:
        by_employee: dict[int, list[TimeEntry]] = defaultdict(list)
        for e in entries:
            by_employee[e.employee_id].append(e)
        out: list[WorkSession] = []
        for employee_entries in by_employee.values():
            out.extend(self._calculator.sessions(employee_entries))
        return out

    def match_shifts(self, ctx: ReportContext, employee_id: int, entries: Sequence[TimeEntry]) -> dict[int, ShiftMatch]:
        """Shift match of every clock-in that has one, keyed by entry id."""

        def shifts_for(day: date):
            return ctx.calendar.shifts_for(employee_id, day)

        matches: dict[int, ShiftMatch] = {}
        for e in entries:
            if e.entry_type != TimeEntryType.IN:
                continue
            local_ts = self._local(ctx, e.timestamp)
            match = self._strategies.for_entry(local_ts=local_ts).match(local_ts=local_ts, shifts_for=shifts_for)
            if match:
                matches[e.entry_id] = match
        return matches

    def delays(
        self,
        ctx: ReportContext,
        employee_id: int,
        entries: Sequence[TimeEntry],
        *,
        matches: Optional[dict[int, ShiftMatch]] = None,
    ) -> list[Delay]:
        """Late clock-ins; only the first clock-in of each shift occurrence can be late."""
        if matches is None:
            matches = self.match_shifts(ctx, employee_id, entries)

        seen: set[tuple[date, int]] = set()
        delays: list[Delay] = []
        for e in entries:
            match = matches.get(e.entry_id)
            if not match:
                continue
            occurrence = (match.shift_date, match.schedule.schedule_id)
            if occurrence in seen:
                continue
            seen.add(occurrence)
            if match.delay_minutes <= 0:
                continue
            delays.append(
                Delay(
                    entry_id=e.entry_id,
                    employee_id=employee_id,
                    timestamp=e.timestamp,
                    local_time=self._local(ctx, e.timestamp),
                    shift_date=match.shift_date,
                    schedule_id=match.schedule.schedule_id,
                    schedule_name=match.schedule.name,
                    schedule_start=format_hhmm(match.schedule.start_time),
                    delay_minutes=match.delay_minutes,
                    delay_hours=_hours(match.delay_minutes),
                )
            )
        return delays

    def _figures(self, ctx: ReportContext, employee_id: int, entries: Sequence[TimeEntry]) -> _EmployeeFigures:
        matches = self.match_shifts(ctx, employee_id, entries)
        sessions = self._calculator.sessions(entries)

        by_schedule: dict[str, float] = defaultdict(float)
        for s in sessions:
            match = matches.get(s.opening_entry.entry_id)
            by_schedule[match.schedule.name if match else UNSCHEDULED_LABEL] += s.worked_minutes

        return _EmployeeFigures(
            total_minutes=sum(s.worked_minutes for s in sessions),
            worked_days=self.worked_days(ctx, entries),
            delays=self.delays(ctx, employee_id, entries, matches=matches),
            hours_by_schedule={name: _hours(minutes) for name, minutes in sorted(by_schedule.items())},
        )

    # Reports

    def time_report(self, ctx: ReportContext) -> TimeReport:
        group_by = ctx.filters.group_by
        entry_counts: dict[str, int] = defaultdict(int)
        employees: dict[str, set[int]] = defaultdict(set)
        minutes: dict[str, float] = defaultdict(float)

        for e in ctx.entries:
            key = group_key(self._local(ctx, e.timestamp).date(), group_by)
            entry_counts[key] += 1
            employees[key].add(e.employee_id)

        for s in self.sessions(ctx.entries):
            minutes[group_key(self._local(ctx, s.start).date(), group_by)] += s.worked_minutes

        details = [
            TimeGroup(key=key, entries=entry_counts[key], total_hours=_hours(minutes[key]), employees=len(employees[key]))
            for key in sorted(set(entry_counts) | set(minutes))
        ]
        summary = TimeSummary(
            total_hours=_hours(sum(minutes.values())),
            total_entries=len(ctx.entries),
            total_employees=len({e.employee_id for e in ctx.entries}),
            start_date=ctx.filters.start_date,
            end_date=ctx.filters.end_date,
        )
        logger.debug("Time report: %d entries in %d groups", summary.total_entries, len(details))
        return TimeReport(summary=summary, details=details)

    def attendance_report(self, ctx: ReportContext) -> AttendanceReport:
        work_days = self.work_days(ctx)
        by_employee = self._entries_by_employee(ctx)

        rows: list[AttendanceRow] = []
        for employee in ctx.employees:
            if not employee.active:
                continue
            figures = self._figures(ctx, employee.employee_id, by_employee.get(employee.employee_id, []))
            rows.append(
                AttendanceRow(
                    employee_id=employee.employee_id,
                    employee_name=employee.full_name,
                    dni=employee.dni,
                    work_days=work_days,
                    worked_days=figures.worked_days,
                    absences=max(work_days - figures.worked_days, 0),
                    attendance_rate=_rate(figures.worked_days, work_days),
                    late_entries=len(figures.delays),
                    total_delay_minutes=sum(d.delay_minutes for d in figures.delays),
                    total_hours=_hours(figures.total_minutes),
                )
            )

        total_work_days = sum(r.work_days for r in rows)
        total_worked_days = sum(r.worked_days for r in rows)
        summary = AttendanceSummary(
            total_employees=len(rows),
            total_work_days=total_work_days,
            total_worked_days=total_worked_days,
            total_absences=sum(r.absences for r in rows),
            total_late_entries=sum(r.late_entries for r in rows),
            attendance_rate=_rate(total_worked_days, total_work_days),
        )
        logger.debug("Attendance report: %d employees", len(rows))
        return AttendanceReport(summary=summary, details=rows)

    def employee_summary_report(self, ctx: ReportContext) -> EmployeeSummaryReport:
        work_days = self.work_days(ctx)
        by_employee = self._entries_by_employee(ctx)

        rows: list[EmployeeSummaryRow] = []
        for employee in sorted(ctx.employees, key=lambda e: (e.full_name.casefold(), e.employee_id)):
            figures = self._figures(ctx, employee.employee_id, by_employee.get(employee.employee_id, []))
            total_hours = _hours(figures.total_minutes)
            rows.append(
                EmployeeSummaryRow(
                    employee_id=employee.employee_id,
                    employee_name=employee.full_name,
                    dni=employee.dni,
                    active=employee.active,
                    total_hours=total_hours,
                    work_days=work_days,
                    worked_days=figures.worked_days,
                    attendance_rate=_rate(figures.worked_days, work_days),
                    late_entries=len(figures.delays),
                    total_delay_minutes=sum(d.delay_minutes for d in figures.delays),
                    average_hours_per_day=round(total_hours / figures.worked_days, 2) if figures.worked_days else 0.0,
                    hours_by_schedule=figures.hours_by_schedule,
                )
            )

        average_rate = round(sum(r.attendance_rate for r in rows) / len(rows), 2) if rows else 0.0
        summary = EmployeeSummaryTotals(
            total_employees=len(rows),
            total_hours=round(sum(r.total_hours for r in rows), 2),
            average_attendance_rate=average_rate,
        )
        return EmployeeSummaryReport(summary=summary, details=rows)

    def monthly_report(self, ctx: ReportContext) -> MonthlyReport:
        daily_ctx = replace(ctx, filters=replace(ctx.filters, group_by=GroupBy.DAY))
        time = self.time_report(daily_ctx)
        attendance = self.attendance_report(ctx)
        employees = self.employee_summary_report(ctx)

        day_of_week = [DayOfWeekStat(day_index=i, day=name, hours=0.0, entries=0) for i, name in enumerate(DAY_NAMES)]
        for group in time.details:
            i = day_of_week_index(date.fromisoformat(group.key))
            current = day_of_week[i]
            day_of_week[i] = replace(
                current,
                hours=round(current.hours + group.total_hours, 2),
                entries=current.entries + group.entries,
            )

        by_schedule: dict[str, float] = defaultdict(float)
        for row in employees.details:
            for name, hours in row.hours_by_schedule.items():
                by_schedule[name] += hours

        peaks = sorted(time.details, key=lambda g: (-g.total_hours, g.key))[:PEAK_DAYS_LIMIT]
        analytics = MonthlyAnalytics(
            day_of_week=day_of_week,
            hours_by_schedule={name: round(hours, 2) for name, hours in sorted(by_schedule.items())},
            peak_days=[PeakDay(date=date.fromisoformat(g.key), hours=g.total_hours, employees=g.employees) for g in peaks],
            trend=trend_of([g.total_hours for g in time.details]),
        )

        return MonthlyReport(
            period=ReportPeriod(
                start_date=ctx.filters.start_date,
                end_date=ctx.filters.end_date,
                days_in_period=ctx.filters.days,
                work_days=self.work_days(ctx),
            ),
            time=time.summary,
            attendance=attendance.summary,
            employees=employees.summary,
            analytics=analytics,
            time_details=time.details,
            attendance_details=attendance.details,
            employee_details=employees.details,
        )

    def break_type_report(self, ctx: ReportContext) -> BreakTypeReport:
        names = {e.employee_id: e.full_name for e in ctx.employees}
        break_entries: dict[int, list[BreakEntry]] = defaultdict(list)

        for employee_id, entries in self._entries_by_employee(ctx).items():
            # Walk backwards so every BREAK sees the employee's next RESUME
            next_resume = ctx.late_resumes.get(employee_id)
            for e in reversed(entries):
                if e.entry_type == TimeEntryType.RESUME:
                    next_resume = e
                    continue
                if e.entry_type != TimeEntryType.BREAK or e.break_type_id is None:
                    continue
                resumed_at = next_resume.timestamp if next_resume else None
                duration = round((resumed_at - e.timestamp).total_seconds() / 60) if resumed_at else None
                break_entries[e.break_type_id].append(
                    BreakEntry(
                        entry_id=e.entry_id,
                        employee_id=employee_id,
                        employee_name=names.get(employee_id, ""),
                        timestamp=e.timestamp,
                        resumed_at=resumed_at,
                        duration_minutes=duration,
                        reason=e.break_reason,
                    )
                )

        rows: list[BreakTypeRow] = []
        for bt in ctx.break_types:
            items = sorted(break_entries.get(bt.break_type_id, []), key=lambda b: (b.timestamp, b.entry_id))
            if not items:
                continue
            total_minutes = sum(b.duration_minutes or 0 for b in items)
            rows.append(
                BreakTypeRow(
                    break_type_id=bt.break_type_id,
                    name=bt.name,
                    color=bt.color,
                    total_minutes=total_minutes,
                    total_hours=_hours(total_minutes),
                    total_entries=len(items),
                    employees=len({b.employee_id for b in items}),
                    entries=items,
                )
            )

        total_breaks = sum(r.total_entries for r in rows)
        total_minutes = sum(r.total_minutes for r in rows)
        most_used = max(rows, key=lambda r: (r.total_minutes, -r.break_type_id)) if rows else None
        summary = BreakTypeSummary(
            total_breaks=total_breaks,
            total_minutes=total_minutes,
            total_hours=_hours(total_minutes),
            average_minutes=round(total_minutes / total_breaks) if total_breaks else 0,
            most_used=most_used.name if most_used else None,
        )
        logger.debug("Break type report: %d breaks across %d types", total_breaks, len(rows))
        return BreakTypeReport(summary=summary, details=rows)

    def delay_report(self, ctx: ReportContext) -> DelayReport:
        by_employee = self._entries_by_employee(ctx)

        rows: list[EmployeeDelays] = []
        for employee in sorted(ctx.employees, key=lambda e: (e.full_name.casefold(), e.employee_id)):
            delays = self.delays(ctx, employee.employee_id, by_employee.get(employee.employee_id, []))
            if not delays:
                continue
            total = sum(d.delay_minutes for d in delays)
            rows.append(
                EmployeeDelays(
                    employee_id=employee.employee_id,
                    employee_name=employee.full_name,
                    delays=delays,
                    total_delays=len(delays),
                    total_minutes=total,
                    total_hours=_hours(total),
                    average_minutes=round(total / len(delays), 2),
                )
            )

        total_delays = sum(r.total_delays for r in rows)
        total_minutes = sum(r.total_minutes for r in rows)
        worst = max(rows, key=lambda r: (r.total_minutes, -r.employee_id)) if rows else None
        summary = DelaySummary(
            total_delays=total_delays,
            total_minutes=total_minutes,
            total_hours=_hours(total_minutes),
            average_minutes=round(total_minutes / total_delays, 2) if total_delays else 0.0,
            employees_with_delays=len(rows),
            most_delayed_employee=worst.employee_name if worst else None,
        )
        logger.debug("Delay report: %d delays for %d employees", total_delays, len(rows))
        return DelayReport(summary=summary, details=rows)
