from __future__ import annotations

import json
from datetime import datetime
from typing import Iterable, Optional, Sequence

from ..common.serialization import to_jsonable
from ..core.enums import TimeEntrySource, TimeEntryType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, as_float, db_cursor, fetchall, fetchone, in_clause
from .model import EditLog, NewTimeEntry, TimeEntry
from .repository import TimeEntryRepository

_COLUMNS = """
    entry_id, employee_id, company_id, entry_type, timestamp, source, location,
    latitude, longitude, is_remote_work, device_info, notes, break_type_id, break_reason
"""


def _to_entry(r: dict) -> TimeEntry:
    return TimeEntry(
        entry_id=int(r["entry_id"]),
        employee_id=int(r["employee_id"]),
        company_id=int(r["company_id"]),
        entry_type=TimeEntryType(r["entry_type"]),
        timestamp=r["timestamp"],
        source=TimeEntrySource(r["source"]),
        location=r.get("location"),
        latitude=as_float(r.get("latitude")),
        longitude=as_float(r.get("longitude")),
        is_remote_work=as_bool(r.get("is_remote_work")),
        device_info=r.get("device_info"),
        notes=r.get("notes"),
        break_type_id=int(r["break_type_id"]) if r.get("break_type_id") is not None else None,
        break_reason=r.get("break_reason"),
    )


class MySQLTimeEntryRepository(TimeEntryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, entry: NewTimeEntry) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO time_entries(
                    employee_id, company_id, entry_type, timestamp, source, location, latitude, longitude,
                    is_remote_work, device_info, notes, break_type_id, break_reason
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    entry.employee_id,
                    entry.company_id,
                    entry.entry_type.value,
                    entry.timestamp,
                    entry.source.value,
                    entry.location,
                    entry.latitude,
                    entry.longitude,
                    1 if entry.is_remote_work else 0,
                    entry.device_info,
                    entry.notes,
                    entry.break_type_id,
                    entry.break_reason,
                ),
            )
            return int(cur.lastrowid)

    def get(self, company_id: int, entry_id: int) -> Optional[TimeEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM time_entries WHERE company_id=%s AND entry_id=%s",
                (int(company_id), int(entry_id)),
            )
            r = fetchone(cur)
            return _to_entry(r) if r else None

    def last_for_employee(
        self,
        company_id: int,
        employee_id: int,
        *,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
    ) -> Optional[TimeEntry]:
        clauses = ["company_id=%s", "employee_id=%s"]
        params: list[object] = [int(company_id), int(employee_id)]
        if since is not None:
            clauses.append("timestamp >= %s")
            params.append(since)
        if until is not None:
            clauses.append("timestamp <= %s")
            params.append(until)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM time_entries
                WHERE {' AND '.join(clauses)}
                ORDER BY timestamp DESC, entry_id DESC
                LIMIT 1
                """,
                tuple(params),
            )
            r = fetchone(cur)
            return _to_entry(r) if r else None

    def list_range(
        self,
        company_id: int,
        *,
        start: datetime,
        end: datetime,
        employee_ids: Optional[Iterable[int]] = None,
        entry_type: Optional[TimeEntryType] = None,
    ) -> Sequence[TimeEntry]:
        clauses = ["company_id=%s", "timestamp BETWEEN %s AND %s"]
        params: list[object] = [int(company_id), start, end]
        if employee_ids is not None:
            sql, values = in_clause("employee_id", employee_ids)
            clauses.append(sql)
            params.extend(values)
        if entry_type is not None:
            clauses.append("entry_type=%s")
            params.append(entry_type.value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM time_entries WHERE {' AND '.join(clauses)} ORDER BY timestamp, entry_id",
                tuple(params),
            )
            return [_to_entry(r) for r in fetchall(cur)]

    def first_after(
        self, company_id: int, employee_id: int, *, after: datetime, entry_type: TimeEntryType
    ) -> Optional[TimeEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM time_entries
                WHERE company_id=%s AND employee_id=%s AND entry_type=%s AND timestamp > %s
                ORDER BY timestamp, entry_id
                LIMIT 1
                """,
                (int(company_id), int(employee_id), entry_type.value, after),
            )
            r = fetchone(cur)
            return _to_entry(r) if r else None

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
        clauses = ["company_id=%s"]
        params: list[object] = [int(company_id)]
        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(int(employee_id))
        if start is not None:
            clauses.append("timestamp >= %s")
            params.append(start)
        if end is not None:
            clauses.append("timestamp <= %s")
            params.append(end)
        if entry_type is not None:
            clauses.append("entry_type=%s")
            params.append(entry_type.value)
        if source is not None:
            clauses.append("source=%s")
            params.append(source.value)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM time_entries WHERE {where}", tuple(params))
            total = int(fetchone(cur)["total"])
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM time_entries
                WHERE {where}
                ORDER BY timestamp DESC, entry_id DESC
                LIMIT %s OFFSET %s
                """,
                (*params, int(limit), int(offset)),
            )
            return [_to_entry(r) for r in fetchall(cur)], total

    def update(self, entry: TimeEntry) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE time_entries
                SET entry_type=%s, timestamp=%s, location=%s, notes=%s, break_type_id=%s, break_reason=%s,
                    is_remote_work=%s
                WHERE company_id=%s AND entry_id=%s
                """,
                (
                    entry.entry_type.value,
                    entry.timestamp,
                    entry.location,
                    entry.notes,
                    entry.break_type_id,
                    entry.break_reason,
                    1 if entry.is_remote_work else 0,
                    entry.company_id,
                    entry.entry_id,
                ),
            )
            return cur.rowcount >= 0

    def delete(self, company_id: int, entry_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM time_entries WHERE company_id=%s AND entry_id=%s",
                (int(company_id), int(entry_id)),
            )
            return cur.rowcount > 0

    def add_edit_log(self, log: EditLog) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO time_entry_edit_logs(
                    entry_id, company_id, employee_id, action, old_values, new_values, reason, edited_by
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    log.entry_id,
                    log.company_id,
                    log.employee_id,
                    log.action.value,
                    json.dumps(to_jsonable(log.old_values)),
                    json.dumps(to_jsonable(log.new_values)) if log.new_values is not None else None,
                    log.reason,
                    log.edited_by,
                ),
            )
            return int(cur.lastrowid)
