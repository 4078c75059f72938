from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import TimeEntrySource, TimeEntryType
from .model import EditLog, NewTimeEntry, TimeEntry


class TimeEntryRepository(Protocol):
    def create(self, entry: NewTimeEntry) -> int:
        raise NotImplementedError

    def get(self, company_id: int, entry_id: int) -> Optional[TimeEntry]:
        raise NotImplementedError

    def last_for_employee(
        self,
        company_id: int,
        employee_id: int,
        *,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
    ) -> Optional[TimeEntry]:
        """Most recent entry of the employee, optionally inside [since, until]."""

        raise NotImplementedError

    def list_range(
        self,
        company_id: int,
        *,
        start: datetime,
        end: datetime,
        employee_ids: Optional[Iterable[int]] = None,
        entry_type: Optional[TimeEntryType] = None,
    ) -> Sequence[TimeEntry]:
        """Entries with start <= timestamp <= end ordered by timestamp."""

        raise NotImplementedError

    def first_after(
        self, company_id: int, employee_id: int, *, after: datetime, entry_type: TimeEntryType
    ) -> Optional[TimeEntry]:
        """Earliest entry of the given type strictly after ``after``."""

        raise NotImplementedError

    def search(
        self,
        company_id: int,
        *,
        employee_id: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        entry_type: Optional[TimeEntryType] = None,
        source: Optional[TimeEntrySource] = None,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[Sequence[TimeEntry], int]:
        """Newest first page of entries plus the total count."""

        raise NotImplementedError

    def update(self, entry: TimeEntry) -> bool:
        raise NotImplementedError

    def delete(self, company_id: int, entry_id: int) -> bool:
        raise NotImplementedError

    def add_edit_log(self, log: EditLog) -> int:
        raise NotImplementedError
