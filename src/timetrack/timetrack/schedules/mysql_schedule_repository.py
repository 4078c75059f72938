from __future__ import annotations

from datetime import date, time
from typing import Iterable, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall, fetchone, in_clause, normalize_mysql_time
from .model import EmployeeSchedule, Schedule
from .repository import ScheduleRepository

_COLUMNS = "schedule_id, company_id, name, start_time, end_time, break_minutes, is_flexible, color, active"


def _to_schedule(r: dict) -> Schedule:
    return Schedule(
        schedule_id=int(r["schedule_id"]),
        company_id=int(r["company_id"]),
        name=r["name"],
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r["end_time"]),
        break_minutes=int(r.get("break_minutes") or 0),
        is_flexible=as_bool(r.get("is_flexible")),
        color=r.get("color") or "",
        active=as_bool(r.get("active")),
    )


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_company(self, company_id: int, *, active_only: bool = False) -> Sequence[Schedule]:
        where = "company_id=%s AND active=1" if active_only else "company_id=%s"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM schedules WHERE {where} ORDER BY start_time, name", (int(company_id),))
            return [_to_schedule(r) for r in fetchall(cur)]

    def get(self, company_id: int, schedule_id: int) -> Optional[Schedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM schedules WHERE company_id=%s AND schedule_id=%s",
                (int(company_id), int(schedule_id)),
            )
            r = fetchone(cur)
            return _to_schedule(r) if r else None

    def get_by_name(self, company_id: int, name: str) -> Optional[Schedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM schedules WHERE company_id=%s AND name=%s", (int(company_id), name))
            r = fetchone(cur)
            return _to_schedule(r) if r else None

    def create(
        self,
        *,
        company_id: int,
        name: str,
        start_time: time,
        end_time: time,
        break_minutes: int,
        is_flexible: bool,
        color: str,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO schedules(company_id, name, start_time, end_time, break_minutes, is_flexible, color)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (int(company_id), name, start_time, end_time, int(break_minutes), 1 if is_flexible else 0, color),
            )
            return int(cur.lastrowid)

    def update(self, schedule: Schedule) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE schedules
                SET name=%s, start_time=%s, end_time=%s, break_minutes=%s, is_flexible=%s, color=%s, active=%s
                WHERE company_id=%s AND schedule_id=%s
                """,
                (
                    schedule.name,
                    schedule.start_time,
                    schedule.end_time,
                    int(schedule.break_minutes),
                    1 if schedule.is_flexible else 0,
                    schedule.color,
                    1 if schedule.active else 0,
                    schedule.company_id,
                    schedule.schedule_id,
                ),
            )
            # rowcount is 0 when nothing changed; treat that as success.
            return cur.rowcount >= 0

    def delete(self, company_id: int, schedule_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM schedules WHERE company_id=%s AND schedule_id=%s",
                (int(company_id), int(schedule_id)),
            )
            return cur.rowcount > 0

    def count_assignments(self, schedule_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT
                    (SELECT COUNT(*) FROM employee_schedules WHERE schedule_id=%s)
                    + (SELECT COUNT(*) FROM weekly_schedules WHERE schedule_id=%s) AS total
                """,
                (int(schedule_id), int(schedule_id)),
            )
            r = fetchone(cur)
            return int(r["total"]) if r else 0

    def assign(self, *, employee_id: int, schedule_id: int, start_date: date, end_date: Optional[date]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employee_schedules(employee_id, schedule_id, start_date, end_date)
                VALUES(%s,%s,%s,%s)
                """,
                (int(employee_id), int(schedule_id), start_date, end_date),
            )
            return int(cur.lastrowid)

    def remove_assignment(self, *, schedule_id: int, employee_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM employee_schedules WHERE schedule_id=%s AND employee_id=%s",
                (int(schedule_id), int(employee_id)),
            )
            return cur.rowcount > 0

    def list_employee_schedules(
        self,
        company_id: int,
        *,
        employee_ids: Optional[Iterable[int]] = None,
    ) -> Sequence[EmployeeSchedule]:
        clauses = ["s.company_id=%s"]
        params: list[object] = [int(company_id)]
        if employee_ids is not None:
            sql, values = in_clause("es.employee_id", employee_ids)
            clauses.append(sql)
            params.extend(values)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT es.assignment_id, es.employee_id, es.schedule_id, es.start_date, es.end_date
                FROM employee_schedules es
                JOIN schedules s ON s.schedule_id = es.schedule_id
                WHERE {' AND '.join(clauses)}
                ORDER BY es.employee_id, es.start_date
                """,
                tuple(params),
            )
            return [
                EmployeeSchedule(
                    assignment_id=int(r["assignment_id"]),
                    employee_id=int(r["employee_id"]),
                    schedule_id=int(r["schedule_id"]),
                    start_date=r["start_date"],
                    end_date=r.get("end_date"),
                )
                for r in fetchall(cur)
            ]
