from __future__ import annotations

from enum import Enum


class TimeEntryType(str, Enum):
    """Kind of punch recorded by an employee."""

    IN = "IN"
    OUT = "OUT"
    BREAK = "BREAK"
    RESUME = "RESUME"


class TimeEntrySource(str, Enum):
    """Where a punch came from."""

    WEB = "WEB"
    MOBILE = "MOBILE"
    KIOSK = "KIOSK"
    ADMIN = "ADMIN"
    AUTO = "AUTO"


class EditAction(str, Enum):
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class AbsenceType(str, Enum):
    VACATION = "VACATION"
    SICK_LEAVE = "SICK_LEAVE"
    PERSONAL = "PERSONAL"
    MATERNITY = "MATERNITY"
    PATERNITY = "PATERNITY"
    OTHER = "OTHER"


class AbsenceStatus(str, Enum):
    """Approval workflow of an absence."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"


class HalfDayPart(str, Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"


class BalanceField(str, Enum):
    """Vacation balance counters that can be moved by an adjustment."""

    USED = "used"
    PENDING = "pending"
    ADJUSTED = "adjusted"


class GroupBy(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class ReportType(str, Enum):
    HOURS_WORKED = "hours-worked"
    ATTENDANCE = "attendance"
    EMPLOYEE_SUMMARY = "employee-summary"
    MONTHLY_CONSOLIDATED = "monthly-consolidated"
    BREAK_TYPES = "break-types"
    DELAYS = "delays"


class TrendDirection(str, Enum):
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"
    INSUFFICIENT_DATA = "insufficient_data"
