from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Generic, Optional, Sequence, TypeVar

from ..core.enums import EditAction, TimeEntrySource, TimeEntryType

T = TypeVar("T")


@dataclass(frozen=True)
class TimeEntry:
    """One punch. ``timestamp`` is naive UTC."""

    entry_id: int
    employee_id: int
    company_id: int
    entry_type: TimeEntryType
    timestamp: datetime
    source: TimeEntrySource = TimeEntrySource.WEB
    location: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    is_remote_work: bool = False
    device_info: Optional[str] = None
    notes: Optional[str] = None
    break_type_id: Optional[int] = None
    break_reason: Optional[str] = None


@dataclass(frozen=True)
class NewTimeEntry:
    employee_id: int
    company_id: int
    entry_type: TimeEntryType
    timestamp: datetime
    source: TimeEntrySource = TimeEntrySource.WEB
    location: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    is_remote_work: bool = False
    device_info: Optional[str] = None
    notes: Optional[str] = None
    break_type_id: Optional[int] = None
    break_reason: Optional[str] = None


@dataclass(frozen=True)
class WorkSession:
    """An IN ... OUT span of one employee with the breaks taken inside it."""

    employee_id: int
    start: datetime
    end: datetime
    break_minutes: float
    opening_entry: TimeEntry

    @property
    def gross_minutes(self) -> float:
        return max((self.end - self.start).total_seconds() / 60, 0.0)

    @property
    def worked_minutes(self) -> float:
        return max(self.gross_minutes - self.break_minutes, 0.0)


@dataclass(frozen=True)
class PunchState:
    employee_id: int
    work_day: date
    last_entry: Optional[TimeEntry]
    can_clock_in: bool
    can_clock_out: bool
    can_start_break: bool
    can_end_break: bool

    @property
    def is_working(self) -> bool:
        return self.can_clock_out

    @property
    def on_break(self) -> bool:
        return self.can_end_break


@dataclass(frozen=True)
class DailySummaryRow:
    employee_id: int
    employee_name: str
    work_day: date
    first_in: Optional[datetime]
    last_out: Optional[datetime]
    entry_count: int
    worked_minutes: int
    break_minutes: int
    overtime_minutes: int
    is_open: bool


@dataclass(frozen=True)
class EditLog:
    entry_id: int
    company_id: int
    employee_id: int
    action: EditAction
    old_values: dict
    new_values: Optional[dict]
    reason: str
    edited_by: Optional[str] = None


@dataclass(frozen=True)
class Page(Generic[T]):
    items: Sequence[T]
    total: int
    page: int
    limit: int
    pages: int = field(init=False)

    def __post_init__(self):
        pages = (self.total + self.limit - 1) // self.limit if self.limit else 0
        object.__setattr__(self, "pages", pages)
